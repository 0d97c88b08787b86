"""
Utility helpers shared across the enquiry application.
"""

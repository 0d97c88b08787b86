"""
Enquiry tracker application package.
"""

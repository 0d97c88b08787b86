# enquiry_app/models/enquiry/__init__.py
"""
Enquiry models package.
"""

from .enums import ActivityType, DepartmentStatus, EnquiryStatus, ManufacturingType, MarketType, ProductType
from .models import Enquiry

__all__ = [
    # Models
    "Enquiry",
    # Enums
    "ActivityType",
    "DepartmentStatus",
    "EnquiryStatus",
    "ManufacturingType",
    "MarketType",
    "ProductType",
]

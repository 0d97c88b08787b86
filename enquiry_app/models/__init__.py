# enquiry_app/models/__init__.py
"""
Database models package
"""

from .base import BaseModel, db
from .enquiry import (
    ActivityType,
    DepartmentStatus,
    Enquiry,
    EnquiryStatus,
    ManufacturingType,
    MarketType,
    ProductType,
)
from .field_definition import FIELD_NAME_PATTERN, FieldDefinition, FieldType
from .system_field import DEFAULT_SYSTEM_FIELDS, SystemFieldLabel

__all__ = [
    "db",
    "BaseModel",
    "Enquiry",
    "ActivityType",
    "DepartmentStatus",
    "EnquiryStatus",
    "ManufacturingType",
    "MarketType",
    "ProductType",
    "FieldDefinition",
    "FieldType",
    "FIELD_NAME_PATTERN",
    "SystemFieldLabel",
    "DEFAULT_SYSTEM_FIELDS",
]

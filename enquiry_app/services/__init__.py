# enquiry_app/services/__init__.py
"""
Service layer entry points.
"""

from .dynamic_columns_service import DynamicColumn, DynamicColumnService
from .enquiry_import_service import EnquiryImportService
from .field_schema_service import DeleteOutcome, FieldSchemaService
from .system_field_service import SystemFieldService

__all__ = [
    "DeleteOutcome",
    "DynamicColumn",
    "DynamicColumnService",
    "EnquiryImportService",
    "FieldSchemaService",
    "SystemFieldService",
]

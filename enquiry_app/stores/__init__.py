"""
Record and field definition stores.
"""

from .base import EnquiryPatch, FieldDefinitionStore, FieldPresent, RecordStore
from .sqlalchemy_store import SQLAlchemyFieldDefinitionStore, SQLAlchemyRecordStore

__all__ = [
    "EnquiryPatch",
    "FieldDefinitionStore",
    "FieldPresent",
    "RecordStore",
    "SQLAlchemyFieldDefinitionStore",
    "SQLAlchemyRecordStore",
]

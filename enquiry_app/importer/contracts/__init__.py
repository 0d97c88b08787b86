"""Canonical column contracts for importer adapters."""

from .enquiry import (
    ENQUIRY_CANONICAL_COLUMNS,
    NATURAL_KEY_FIELD,
    ColumnSpec,
    get_enquiry_alias_map,
    get_enquiry_column_specs,
)

__all__ = [
    "ENQUIRY_CANONICAL_COLUMNS",
    "NATURAL_KEY_FIELD",
    "ColumnSpec",
    "get_enquiry_alias_map",
    "get_enquiry_column_specs",
]

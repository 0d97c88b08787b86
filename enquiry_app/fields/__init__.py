"""
Dynamic field schema engine: definitions, tagged values and safe type changes.
"""

from .exceptions import (
    ConfirmationRequiredError,
    DuplicateFieldError,
    FieldNotFoundError,
    FieldSchemaError,
    ImmutableIdentityError,
    InvalidDefinitionError,
    UnsafeTypeChangeError,
)
from .values import BooleanValue, DateValue, FieldValue, NumberValue, TextValue, decode_value, encode_value

__all__ = [
    "BooleanValue",
    "ConfirmationRequiredError",
    "DateValue",
    "DuplicateFieldError",
    "FieldNotFoundError",
    "FieldSchemaError",
    "FieldValue",
    "ImmutableIdentityError",
    "InvalidDefinitionError",
    "NumberValue",
    "TextValue",
    "UnsafeTypeChangeError",
    "decode_value",
    "encode_value",
]

"""
Strict representability checks used before a field's type is changed, and the
matching coercions applied when a value lands on an existing definition.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, Optional

from enquiry_app.models.field_definition import FieldType
from enquiry_app.utils.normalizers import normalize_date

from .values import BooleanValue, DateValue, FieldValue, NumberValue, TextValue

BOOLEAN_TOKENS = frozenset({"true", "false", "yes", "no", "y", "n", "1", "0"})
TRUE_TOKENS = frozenset({"true", "yes", "y", "1"})


def _parse_number(text: str) -> Optional[float]:
    text = text.strip()
    # float() accepts "1_000", "nan" and "inf"; none of those are numeric cells.
    if not text or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def is_number_like(value: FieldValue) -> bool:
    if isinstance(value, NumberValue):
        return not isinstance(value.value, bool) and math.isfinite(value.value)
    if isinstance(value, TextValue):
        return _parse_number(value.value) is not None
    return False


def is_boolean_like(value: FieldValue) -> bool:
    if isinstance(value, BooleanValue):
        return True
    if isinstance(value, DateValue):
        return False
    return value.as_text().strip().lower() in BOOLEAN_TOKENS


def is_date_like(value: FieldValue) -> bool:
    if isinstance(value, DateValue):
        return True
    if isinstance(value, BooleanValue):
        return False
    return normalize_date(value.value) is not None


def is_select_like(value: FieldValue, options: Iterable[str]) -> bool:
    allowed = {str(option).strip() for option in options or ()}
    if not allowed:
        return False
    return value.as_text().strip() in allowed


_CHECKS: Dict[FieldType, Callable[[FieldValue], bool]] = {
    FieldType.TEXT: lambda value: True,
    FieldType.NUMBER: is_number_like,
    FieldType.BOOLEAN: is_boolean_like,
    FieldType.DATE: is_date_like,
}


def is_compatible(value: FieldValue, field_type: FieldType, options: Iterable[str] = ()) -> bool:
    if field_type is FieldType.SELECT:
        return is_select_like(value, options)
    return _CHECKS[field_type](value)


def coerce_value(value: FieldValue, field_type: FieldType, options: Iterable[str] = ()) -> FieldValue:
    """Convert ``value`` to ``field_type`` when it is compatible; otherwise return it unchanged."""
    if not is_compatible(value, field_type, options):
        return value
    if field_type is FieldType.NUMBER and isinstance(value, TextValue):
        number = _parse_number(value.value)
        return NumberValue(int(number) if number.is_integer() else number)
    if field_type is FieldType.BOOLEAN and not isinstance(value, BooleanValue):
        return BooleanValue(value.as_text().strip().lower() in TRUE_TOKENS)
    if field_type is FieldType.DATE and not isinstance(value, DateValue):
        return DateValue(normalize_date(value.value))
    if field_type in (FieldType.TEXT, FieldType.SELECT) and not isinstance(value, TextValue):
        return TextValue(value.as_text())
    return value

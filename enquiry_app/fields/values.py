"""
Tagged values stored under ``Enquiry.dynamic_fields``.

Each entry is persisted as ``{"kind": ..., "value": ...}`` so the declared
kind survives a round-trip through JSON. Bare scalars written before the
envelope existed are decoded leniently.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, ClassVar, Dict, Mapping, Optional, Union


@dataclass(frozen=True)
class TextValue:
    value: str
    kind: ClassVar[str] = "text"

    def as_text(self) -> str:
        return self.value

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class NumberValue:
    value: Union[int, float]
    kind: ClassVar[str] = "number"

    def as_text(self) -> str:
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class BooleanValue:
    value: bool
    kind: ClassVar[str] = "boolean"

    def as_text(self) -> str:
        return "true" if self.value else "false"

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class DateValue:
    value: date
    kind: ClassVar[str] = "date"

    def as_text(self) -> str:
        return self.value.isoformat()

    def to_json(self) -> Any:
        return self.value.isoformat()


FieldValue = Union[TextValue, NumberValue, BooleanValue, DateValue]

VALUE_KINDS = {cls.kind: cls for cls in (TextValue, NumberValue, BooleanValue, DateValue)}


def is_empty_value(value: Optional[FieldValue]) -> bool:
    """Null or whitespace-only text carries nothing worth checking."""
    if value is None:
        return True
    return isinstance(value, TextValue) and not value.value.strip()


def from_cell(raw: Any) -> Optional[FieldValue]:
    """Wrap a raw spreadsheet cell without altering its content."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and not math.isfinite(raw):
            return TextValue(str(raw))
        return NumberValue(raw)
    if isinstance(raw, datetime):
        return DateValue(raw.date())
    if isinstance(raw, date):
        return DateValue(raw)
    if isinstance(raw, str):
        return TextValue(raw)
    return TextValue(str(raw))


def encode_value(value: FieldValue) -> Dict[str, Any]:
    return {"kind": value.kind, "value": value.to_json()}


def _decode_tagged(kind: str, raw: Any) -> Optional[FieldValue]:
    if raw is None:
        return None
    if kind == "date":
        try:
            return DateValue(date.fromisoformat(str(raw)))
        except ValueError:
            return TextValue(str(raw))
    if kind == "boolean" and isinstance(raw, bool):
        return BooleanValue(raw)
    if kind == "number" and isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return NumberValue(raw)
    if kind == "text" and isinstance(raw, str):
        return TextValue(raw)
    # Envelope kind disagrees with the payload; fall back to the payload's own shape.
    return from_cell(raw)


def decode_value(payload: Any) -> Optional[FieldValue]:
    """Decode one stored entry, tolerating legacy bare scalars."""
    if payload is None:
        return None
    if isinstance(payload, Mapping) and payload.get("kind") in VALUE_KINDS and "value" in payload:
        return _decode_tagged(payload["kind"], payload["value"])
    if isinstance(payload, (Mapping, list)):
        return TextValue(str(payload))
    return from_cell(payload)


def encode_fields(values: Mapping[str, Optional[FieldValue]]) -> Dict[str, Any]:
    return {name: encode_value(value) for name, value in values.items() if value is not None}


def decode_fields(payload: Optional[Mapping[str, Any]]) -> Dict[str, FieldValue]:
    decoded: Dict[str, FieldValue] = {}
    for name, raw in (payload or {}).items():
        value = decode_value(raw)
        if value is not None:
            decoded[name] = value
    return decoded

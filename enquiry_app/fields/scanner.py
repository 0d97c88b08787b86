"""
Type-safety scanner.

Before a field's type changes, every stored value must be representable under
the new type. Records are streamed page by page and the scan stops at the first
value that does not fit.
"""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass
from typing import Iterable, Optional

from enquiry_app.models.field_definition import FieldType
from enquiry_app.stores.base import FieldPresent, RecordStore
from enquiry_app.utils.logging_config import get_logger
from enquiry_app.utils.metrics import record_type_scan

from .compatibility import is_compatible
from .values import decode_value, is_empty_value


@dataclass(frozen=True)
class ScanResult:
    safe: bool
    records_examined: int
    reason: Optional[str] = None


class TypeSafetyScanner:
    """Check existing dynamic field values against a proposed type."""

    def __init__(self, records: RecordStore, *, batch_size: int = 200) -> None:
        self.records = records
        self.batch_size = max(1, batch_size)

    def scan(self, field_name: str, proposed_type, proposed_options: Iterable[str] = ()) -> ScanResult:
        field_type = FieldType.coerce(proposed_type)
        options = tuple(proposed_options or ())

        if field_type is FieldType.SELECT and not options:
            result = ScanResult(False, 0, "Select type requires at least one option")
            record_type_scan("unsafe")
            return result

        examined = 0
        stream = self.records.stream_where(FieldPresent(field_name), batch_size=self.batch_size)
        with closing(stream):
            for record in stream:
                value = decode_value((record.dynamic_fields or {}).get(field_name))
                if is_empty_value(value):
                    continue
                examined += 1
                if not is_compatible(value, field_type, options):
                    reason = (
                        f"Value {value.as_text()!r} on enquiry {record.enquiry_number} "
                        f"cannot be represented as {field_type.value}"
                    )
                    get_logger(__name__).info(
                        "Type change of '%s' to %s rejected after %s records: %s",
                        field_name,
                        field_type.value,
                        examined,
                        reason,
                    )
                    record_type_scan("unsafe")
                    return ScanResult(False, examined, reason)

        record_type_scan("safe")
        return ScanResult(True, examined)

"""
Row-by-row enquiry import with upsert by natural key.

Every row runs in its own transaction: a failing row is rolled back, recorded
in the result, and the batch carries on. Columns that no canonical alias
consumes are merged into the enquiry's dynamic fields.
"""

from __future__ import annotations

import enum
import re
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from enquiry_app.fields.compatibility import coerce_value
from enquiry_app.fields.exceptions import FieldSchemaError
from enquiry_app.fields.registry import FieldDefinitionRegistry
from enquiry_app.fields.values import FieldValue, from_cell
from enquiry_app.importer.contracts import NATURAL_KEY_FIELD, get_enquiry_alias_map
from enquiry_app.models.field_definition import FieldType
from enquiry_app.stores.base import EnquiryPatch, RecordStore
from enquiry_app.utils.logging_config import get_logger
from enquiry_app.utils.metrics import record_import_batch, record_import_row
from enquiry_app.utils.normalizers import is_blank_cell

from .canonical import build_canonical_attributes, clean_string
from .resolver import ColumnResolver

DEFAULT_FIELD_NAME_MAX_LENGTH = 50

_WHITESPACE = re.compile(r"\s+")
_CONJUNCTIONS = re.compile(r"[&/]+")
_DISALLOWED = re.compile(r"[^a-z0-9_]")
_UNDERSCORES = re.compile(r"_+")


def derive_field_name(header: str, max_length: int = DEFAULT_FIELD_NAME_MAX_LENGTH) -> str:
    """Slug a spreadsheet header into a field name ("Cost / Unit" -> "cost_and_unit")."""
    name = str(header).strip().lower()
    name = _WHITESPACE.sub("_", name)
    name = _CONJUNCTIONS.sub("and", name)
    name = _DISALLOWED.sub("", name)
    name = _UNDERSCORES.sub("_", name)
    return name[:max_length]


class ImportPhase(str, enum.Enum):
    READING = "reading"
    ROW_LOOP = "row_loop"
    FINALIZING = "finalizing"


@dataclass(frozen=True)
class ImportRowError:
    """A row that could not be imported (row numbers are 1-based)."""

    row: int
    message: str
    natural_key: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"row": self.row, "message": self.message}
        if self.natural_key:
            payload["enquiryNumber"] = self.natural_key
        return payload


@dataclass
class ImportResult:
    total: int
    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: bool = False
    errors: List[ImportRowError] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "created": self.created,
            "updated": self.updated,
            "failed": self.failed,
            "skipped": self.skipped,
            "cancelled": self.cancelled,
            "errors": [error.as_dict() for error in self.errors],
        }


@dataclass(frozen=True)
class ImportBatch:
    rows: Sequence[Mapping[Any, Any]]
    privileged: bool = False
    natural_key_column: Optional[str] = None


@dataclass(frozen=True)
class _FieldSnapshot:
    name: str
    field_type: FieldType
    options: tuple


class ImportOrchestrator:
    """Drive one import batch through Reading, RowLoop and Finalizing."""

    def __init__(
        self,
        records: RecordStore,
        registry: FieldDefinitionRegistry,
        *,
        resolver: Optional[ColumnResolver] = None,
        field_name_max_length: int = DEFAULT_FIELD_NAME_MAX_LENGTH,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.records = records
        self.registry = registry
        self.resolver = resolver or ColumnResolver(get_enquiry_alias_map())
        self.field_name_max_length = field_name_max_length
        self.today = today
        self.phase: Optional[ImportPhase] = None

    def run(self, batch: ImportBatch, *, cancel_event: Optional[threading.Event] = None) -> ImportResult:
        logger = get_logger(__name__)

        self.phase = ImportPhase.READING
        rows = list(batch.rows)
        result = ImportResult(total=len(rows))
        resolver = self.resolver
        if batch.natural_key_column:
            resolver = resolver.with_extra_aliases(NATURAL_KEY_FIELD, batch.natural_key_column)
        definitions: Dict[str, Optional[_FieldSnapshot]] = {}
        logger.info("Enquiry import started: %s rows (privileged=%s)", result.total, batch.privileged)

        self.phase = ImportPhase.ROW_LOOP
        for position, row in enumerate(rows, start=1):
            if cancel_event is not None and cancel_event.is_set():
                result.cancelled = True
                logger.warning("Enquiry import cancelled before row %s of %s", position, result.total)
                break
            self._import_row(position, row, batch, resolver, definitions, result)

        self.phase = ImportPhase.FINALIZING
        record_import_batch("cancelled" if result.cancelled else "completed")
        logger.info(
            "Enquiry import finished: total=%s created=%s updated=%s failed=%s skipped=%s cancelled=%s",
            result.total,
            result.created,
            result.updated,
            result.failed,
            result.skipped,
            result.cancelled,
        )
        return result

    def _import_row(
        self,
        position: int,
        row: Mapping[Any, Any],
        batch: ImportBatch,
        resolver: ColumnResolver,
        definitions: Dict[str, Optional[_FieldSnapshot]],
        result: ImportResult,
    ) -> None:
        natural_key: Optional[str] = None
        try:
            with self.records.transaction():
                natural_key = clean_string(resolver.resolve(row, NATURAL_KEY_FIELD))
                if natural_key is None:
                    outcome = "skipped"
                else:
                    canonical = build_canonical_attributes(row, resolver, natural_key, today=self.today)
                    dynamic = self._collect_dynamic_fields(row, resolver, batch.privileged, definitions)
                    patch = EnquiryPatch(
                        canonical=canonical.values,
                        dynamic_fields=dynamic,
                        create_defaults=canonical.create_defaults,
                    )
                    outcome = "created" if self.records.upsert(natural_key, patch) else "updated"
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            result.failed += 1
            result.errors.append(ImportRowError(row=position, message=message, natural_key=natural_key))
            record_import_row("failed")
            get_logger(__name__).warning(
                "Row %s failed to import: %s",
                position,
                message,
                extra={"import_row": position, "enquiry_number": natural_key},
            )
            return

        if outcome == "skipped":
            result.skipped += 1
        elif outcome == "created":
            result.created += 1
        else:
            result.updated += 1
        record_import_row(outcome)

    def _collect_dynamic_fields(
        self,
        row: Mapping[Any, Any],
        resolver: ColumnResolver,
        privileged: bool,
        definitions: Dict[str, Optional[_FieldSnapshot]],
    ) -> Dict[str, FieldValue]:
        collected: Dict[str, FieldValue] = {}
        for header, raw in row.items():
            if not isinstance(header, str) or is_blank_cell(raw) or resolver.consumes(header):
                continue
            name = derive_field_name(header, self.field_name_max_length)
            if not name:
                get_logger(__name__).debug("Dropping column %r: no usable field name", header)
                continue
            value = from_cell(raw)
            snapshot = self._resolve_definition(name, header, privileged, definitions)
            if snapshot is not None:
                value = coerce_value(value, snapshot.field_type, snapshot.options)
            collected[name] = value
        return collected

    def _resolve_definition(
        self,
        name: str,
        header: str,
        privileged: bool,
        definitions: Dict[str, Optional[_FieldSnapshot]],
    ) -> Optional[_FieldSnapshot]:
        if name in definitions and (definitions[name] is not None or not privileged):
            return definitions[name]

        definition = self.registry.find(name)
        if definition is None and privileged:
            try:
                definition, created = self.registry.get_or_create(name, header.strip() or name)
            except FieldSchemaError as exc:
                get_logger(__name__).warning("Could not create field '%s' from column %r: %s", name, header, exc)
                definition = None
            else:
                if created:
                    get_logger(__name__).info("Auto-created field '%s' from column %r", name, header)

        snapshot = None
        if definition is not None:
            snapshot = _FieldSnapshot(definition.name, definition.field_type, definition.option_values)
        definitions[name] = snapshot
        return snapshot

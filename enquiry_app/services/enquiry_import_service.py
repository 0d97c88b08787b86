# enquiry_app/services/enquiry_import_service.py
"""
Enquiry Import Service - bulk upsert of enquiries from spreadsheet rows
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from flask import current_app

from enquiry_app.importer.adapters import read_rows
from enquiry_app.importer.mapping import get_active_alias_map
from enquiry_app.importer.pipeline import ColumnResolver, ImportBatch, ImportOrchestrator, ImportResult
from enquiry_app.models import db
from enquiry_app.stores import SQLAlchemyRecordStore

from .field_schema_service import FieldSchemaService


class EnquiryImportService:
    """Service wiring the import orchestrator to the application's stores and config"""

    @classmethod
    def build_orchestrator(cls) -> ImportOrchestrator:
        config = current_app.config
        records = SQLAlchemyRecordStore(db.session, batch_size=int(config.get("IMPORTER_SCAN_BATCH_SIZE", 200)))
        return ImportOrchestrator(
            records,
            FieldSchemaService.registry(),
            resolver=ColumnResolver(get_active_alias_map()),
            field_name_max_length=int(config.get("IMPORTER_FIELD_NAME_MAX_LENGTH", 50)),
        )

    @classmethod
    def import_batch(
        cls,
        rows: Iterable[Mapping[Any, Any]],
        privileged: bool = False,
        natural_key_column: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImportResult:
        batch = ImportBatch(
            rows=list(rows),
            privileged=bool(privileged),
            natural_key_column=natural_key_column or None,
        )
        return cls.build_orchestrator().run(batch, cancel_event=cancel_event)

    @classmethod
    def import_file(
        cls,
        path: Path | str,
        privileged: bool = False,
        natural_key_column: Optional[str] = None,
        sheet: Optional[str] = None,
        header_row: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImportResult:
        """Read a .csv/.xlsx file and import its rows."""
        if header_row is None:
            header_row = int(current_app.config.get("IMPORTER_HEADER_ROW", 1))
        rows = read_rows(path, header_row=header_row, sheet=sheet)
        current_app.logger.info("Read %s rows from %s", len(rows), Path(path).name)
        return cls.import_batch(
            rows,
            privileged=privileged,
            natural_key_column=natural_key_column,
            cancel_event=cancel_event,
        )

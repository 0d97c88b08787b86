"""
Helpers for storing uploaded spreadsheets while they are imported.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
from uuid import uuid4

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from .adapters.spreadsheet import SPREADSHEET_EXTENSIONS

DEFAULT_UPLOAD_SUBDIR = "import_uploads"


def _normalize_upload_dir(configured_path: str | None, instance_path: str) -> Path:
    if not configured_path:
        return Path(instance_path) / DEFAULT_UPLOAD_SUBDIR

    candidate = Path(configured_path)
    if candidate.is_absolute():
        return candidate

    return Path(instance_path) / candidate


def resolve_upload_directory(app) -> Path:
    """
    Determine and create (if necessary) the upload directory.
    """

    upload_dir = _normalize_upload_dir(app.config.get("IMPORTER_UPLOAD_DIR"), app.instance_path)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def allowed_file(filename: str, allowed_extensions: Iterable[str] = SPREADSHEET_EXTENSIONS) -> bool:
    """
    Validate the uploaded filename extension against the allowed set.
    """

    if not filename or "." not in filename:
        return False
    extension = filename.rsplit(".", 1)[1].lower()
    return extension in {ext.lower() for ext in allowed_extensions}


def persist_upload(file_storage: FileStorage, app) -> Path:
    """
    Save the upload under a UUID name, keeping its original extension.
    """

    upload_dir = resolve_upload_directory(app)
    original_name = secure_filename(file_storage.filename or "")
    extension = Path(original_name).suffix.lower() if original_name else ""
    target_path = upload_dir / f"{uuid4().hex}{extension or '.csv'}"
    file_storage.save(target_path)
    current_app.logger.debug("Enquiry upload persisted to %s", target_path)
    return target_path


def cleanup_upload(path: Path) -> None:
    """
    Remove a stored upload, logging filesystem errors instead of raising.
    """

    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        current_app.logger.warning("Failed to remove enquiry upload %s: %s", path, exc)

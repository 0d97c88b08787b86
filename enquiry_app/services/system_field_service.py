# enquiry_app/services/system_field_service.py
"""
System Field Service - labels and visibility of the built-in enquiry columns
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from flask import current_app

from enquiry_app.fields.exceptions import FieldNotFoundError, InvalidDefinitionError
from enquiry_app.models import DEFAULT_SYSTEM_FIELDS, FieldType, SystemFieldLabel, db

_DEFAULTS: Dict[str, Tuple[str, FieldType]] = {
    name: (label, field_type) for name, label, field_type in DEFAULT_SYSTEM_FIELDS
}


class SystemFieldService:
    """Service for relabelling, hiding and resetting built-in columns"""

    @classmethod
    def ensure_defaults(cls) -> None:
        """Insert a row for every built-in column that has none yet; existing labels are kept."""
        existing = {name for (name,) in db.session.query(SystemFieldLabel.name).all()}
        missing = [name for name in _DEFAULTS if name not in existing]
        for name in missing:
            label, field_type = _DEFAULTS[name]
            db.session.add(SystemFieldLabel(name=name, label=label, field_type=field_type, is_active=True))
        if missing:
            db.session.commit()
            current_app.logger.info("Seeded %s system field labels", len(missing))

    @classmethod
    def list_fields(cls) -> List[SystemFieldLabel]:
        cls.ensure_defaults()
        return db.session.query(SystemFieldLabel).order_by(SystemFieldLabel.name).all()

    @classmethod
    def _require(cls, name: str) -> SystemFieldLabel:
        if name not in _DEFAULTS:
            raise FieldNotFoundError(name)
        cls.ensure_defaults()
        return db.session.query(SystemFieldLabel).filter_by(name=name).one()

    @classmethod
    def update_field(cls, name: str, label: Optional[str] = None, active: Optional[bool] = None) -> SystemFieldLabel:
        """
        Change a built-in column's label and/or visibility.

        Raises:
            FieldNotFoundError, InvalidDefinitionError
        """
        if label is None and active is None:
            raise InvalidDefinitionError("Label is required")
        clean_label = None
        if label is not None:
            clean_label = str(label).strip()
            if not clean_label:
                raise InvalidDefinitionError("Label is required")

        field = cls._require(name)
        try:
            if clean_label is not None:
                field.label = clean_label
            if active is not None:
                field.is_active = bool(active)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info("Updated system field '%s' (label=%r, active=%s)", name, field.label, field.is_active)
        return field

    @classmethod
    def reset_field(cls, name: str) -> SystemFieldLabel:
        """Restore the default label and make the column visible again."""
        field = cls._require(name)
        label, _ = _DEFAULTS[name]
        try:
            field.label = label
            field.is_active = True
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info("Reset system field '%s' to its default label", name)
        return field

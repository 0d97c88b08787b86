# enquiry_app/services/field_schema_service.py
"""
Field Schema Service - manage dynamic field definitions
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

from flask import current_app

from enquiry_app.fields.exceptions import ConfirmationRequiredError
from enquiry_app.fields.registry import FieldDefinitionRegistry
from enquiry_app.models import FieldDefinition, db
from enquiry_app.stores import SQLAlchemyFieldDefinitionStore, SQLAlchemyRecordStore


@dataclass(frozen=True)
class DeleteOutcome:
    """Result of a delete request; ``requires_force`` means nothing was removed."""

    deleted: bool
    requires_force: bool
    affected_count: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "deleted": self.deleted,
            "requiresForce": self.requires_force,
            "affectedCount": self.affected_count,
        }


class FieldSchemaService:
    """Service for creating, editing and deleting dynamic field definitions"""

    @classmethod
    def registry(cls) -> FieldDefinitionRegistry:
        batch_size = int(current_app.config.get("IMPORTER_SCAN_BATCH_SIZE", 200))
        records = SQLAlchemyRecordStore(db.session, batch_size=batch_size)
        return FieldDefinitionRegistry(
            SQLAlchemyFieldDefinitionStore(db.session),
            records,
            scan_batch_size=batch_size,
        )

    @classmethod
    def list_fields(cls, include_inactive: bool = False) -> Sequence[FieldDefinition]:
        return cls.registry().list(include_inactive=include_inactive)

    @classmethod
    def get_field(cls, name: str) -> FieldDefinition:
        return cls.registry().get(name)

    @classmethod
    def create_field(
        cls,
        name: str,
        label: str,
        field_type: Any = "text",
        options: Optional[Iterable[Any]] = None,
        required: bool = False,
        description: Optional[str] = None,
    ) -> FieldDefinition:
        return cls.registry().create(
            name,
            label,
            field_type=field_type,
            options=options,
            required=required,
            description=description,
        )

    @classmethod
    def update_field(cls, field_name: str, /, **changes: Any) -> FieldDefinition:
        """
        Apply attribute changes; type changes are checked against stored data first.

        Raises:
            FieldNotFoundError, ImmutableIdentityError, InvalidDefinitionError,
            UnsafeTypeChangeError
        """
        return cls.registry().update(field_name, **changes)

    @classmethod
    def delete_field(cls, name: str, force: bool = False) -> DeleteOutcome:
        """
        Two-phase delete: without ``force`` a populated field is reported, not removed.
        """
        try:
            affected = cls.registry().delete(name, force=force)
        except ConfirmationRequiredError as exc:
            current_app.logger.info(
                "Delete of field '%s' needs confirmation (%s enquiries affected)", exc.name, exc.affected_count
            )
            return DeleteOutcome(deleted=False, requires_force=True, affected_count=exc.affected_count)
        return DeleteOutcome(deleted=True, requires_force=False, affected_count=affected)

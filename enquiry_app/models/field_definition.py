# enquiry_app/models/field_definition.py
"""
Administrator-managed definitions for dynamic enquiry attributes.
"""

from __future__ import annotations

import enum
import re

from sqlalchemy import Enum
from sqlalchemy.orm import Mapped, mapped_column, validates

from .base import BaseModel, db

FIELD_NAME_PATTERN = re.compile(r"^[a-z0-9_]+$")


class FieldType(str, enum.Enum):
    """Declared type of a dynamic field."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"

    @classmethod
    def coerce(cls, value) -> "FieldType":
        """Accept either a member or its string value ("Number" and "number" both work)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        raise ValueError(f"Unknown field type: {value!r}")


class FieldDefinition(BaseModel):
    """Metadata describing one key stored under ``Enquiry.dynamic_fields``."""

    __tablename__ = "field_definitions"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(100), nullable=False, unique=True, index=True)
    label: Mapped[str] = mapped_column(db.String(255), nullable=False)
    field_type: Mapped[FieldType] = mapped_column(
        Enum(FieldType, name="field_type_enum"),
        nullable=False,
        default=FieldType.TEXT,
    )
    options: Mapped[list] = mapped_column(db.JSON, nullable=False, default=list)
    is_required: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)
    description: Mapped[str | None] = mapped_column(db.Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=True, index=True)

    @validates("name")
    def _validate_name(self, key, value):
        if value is None or not FIELD_NAME_PATTERN.match(value):
            raise ValueError("Field name may only contain lowercase letters, numbers, and underscores")
        return value

    @property
    def option_values(self) -> tuple[str, ...]:
        return tuple(self.options or ())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "type": self.field_type.value if self.field_type else None,
            "options": list(self.options or []),
            "isRequired": bool(self.is_required),
            "description": self.description,
            "isActive": bool(self.is_active),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<FieldDefinition {self.name} ({self.field_type.value if self.field_type else '?'})>"

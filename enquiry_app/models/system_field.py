# enquiry_app/models/system_field.py
"""
Display labels for the built-in enquiry columns.
"""

from __future__ import annotations

from sqlalchemy import Enum
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, db
from .field_definition import FieldType

# Built-in enquiry attributes, their default labels and display types.
DEFAULT_SYSTEM_FIELDS: tuple[tuple[str, str, FieldType], ...] = (
    ("enquiry_number", "Enquiry #", FieldType.TEXT),
    ("customer_name", "Customer", FieldType.TEXT),
    ("po_number", "PO Number", FieldType.TEXT),
    ("enquiry_date", "Enquiry Date", FieldType.DATE),
    ("date_received", "Date Received", FieldType.DATE),
    ("date_submitted", "Date Submitted", FieldType.DATE),
    ("market_type", "Market", FieldType.TEXT),
    ("product_type", "Product", FieldType.TEXT),
    ("supply_scope", "Supply Scope", FieldType.TEXT),
    ("manufacturing_type", "Manufacturing", FieldType.TEXT),
    ("drawing_status", "Drawing", FieldType.TEXT),
    ("costing_status", "Costing", FieldType.TEXT),
    ("rnd_status", "R&D", FieldType.TEXT),
    ("sales_status", "Sales", FieldType.TEXT),
    ("activity", "Activity", FieldType.TEXT),
    ("status", "Status", FieldType.TEXT),
    ("sales_rep_name", "Sales Rep", FieldType.TEXT),
    ("rnd_handler_name", "R&D Handler", FieldType.TEXT),
    ("days_required_for_fulfillment", "Days Required", FieldType.NUMBER),
    ("quotation_date", "Quotation Date", FieldType.DATE),
    ("closure_date", "Closure Date", FieldType.DATE),
    ("remarks", "Remarks", FieldType.TEXT),
)


class SystemFieldLabel(BaseModel):
    """Administrator override of a built-in column's label and visibility."""

    __tablename__ = "system_field_labels"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(100), nullable=False, unique=True, index=True)
    label: Mapped[str] = mapped_column(db.String(255), nullable=False)
    field_type: Mapped[FieldType] = mapped_column(
        Enum(FieldType, name="system_field_type_enum"),
        nullable=False,
        default=FieldType.TEXT,
    )
    is_active: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=True)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "type": self.field_type.value if self.field_type else None,
            "isActive": bool(self.is_active),
            "isSystem": True,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<SystemFieldLabel {self.name}: {self.label}>"

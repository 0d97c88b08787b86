# enquiry_app/services/dynamic_columns_service.py
"""
Dynamic Column Service - surface dynamic fields for listings and exports
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from enquiry_app.fields.values import decode_fields
from enquiry_app.models import Enquiry, FieldDefinition, db


@dataclass(frozen=True)
class DynamicColumn:
    name: str
    label: str
    field_type: Optional[str]
    is_defined: bool
    is_active: bool

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "type": self.field_type,
            "isDefined": self.is_defined,
            "isActive": self.is_active,
        }


class DynamicColumnService:
    """Active definitions first, then any other keys found on enquiries."""

    @staticmethod
    def collect_columns(
        definitions: Sequence[FieldDefinition],
        enquiries: Iterable[Enquiry],
    ) -> List[DynamicColumn]:
        by_name = {definition.name: definition for definition in definitions}
        columns: List[DynamicColumn] = [
            DynamicColumn(
                name=definition.name,
                label=definition.label,
                field_type=definition.field_type.value,
                is_defined=True,
                is_active=True,
            )
            for definition in definitions
            if definition.is_active
        ]
        listed = {column.name for column in columns}

        stored_keys = set()
        for enquiry in enquiries:
            stored_keys.update(decode_fields(enquiry.dynamic_fields))

        for name in sorted(stored_keys - listed):
            definition = by_name.get(name)
            columns.append(
                DynamicColumn(
                    name=name,
                    label=definition.label if definition is not None else name,
                    field_type=definition.field_type.value if definition is not None else None,
                    is_defined=definition is not None,
                    is_active=False,
                )
            )
        return columns

    @classmethod
    def list_columns(cls) -> List[DynamicColumn]:
        definitions = db.session.query(FieldDefinition).order_by(FieldDefinition.created_at, FieldDefinition.id).all()
        enquiries = db.session.query(Enquiry).yield_per(500)
        return cls.collect_columns(definitions, enquiries)

    @staticmethod
    def serialize_enquiry(enquiry: Enquiry) -> Dict[str, Any]:
        """Canonical attributes plus every decoded dynamic value, orphans included."""
        payload = enquiry.to_dict()
        payload["dynamicFields"] = {
            name: {"kind": value.kind, "value": value.to_json(), "display": value.as_text()}
            for name, value in decode_fields(enquiry.dynamic_fields).items()
        }
        return payload

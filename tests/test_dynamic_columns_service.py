from types import SimpleNamespace

from enquiry_app.fields.values import BooleanValue, TextValue, encode_value
from enquiry_app.models import FieldType
from enquiry_app.services import DynamicColumnService


def _definition(name, label, field_type=FieldType.TEXT, is_active=True):
    return SimpleNamespace(name=name, label=label, field_type=field_type, is_active=is_active)


def test_active_definitions_come_first_then_stored_keys():
    definitions = [
        _definition("priority", "Priority", FieldType.SELECT),
        _definition("legacy", "Legacy Code", is_active=False),
        _definition("unused", "Unused"),
    ]
    enquiries = [
        SimpleNamespace(dynamic_fields={"priority": encode_value(TextValue("High")), "zeta": "x"}),
        SimpleNamespace(dynamic_fields={"legacy": encode_value(TextValue("L1")), "alpha": None}),
        SimpleNamespace(dynamic_fields=None),
    ]

    columns = DynamicColumnService.collect_columns(definitions, enquiries)

    assert [column.as_dict() for column in columns] == [
        {"name": "priority", "label": "Priority", "type": "select", "isDefined": True, "isActive": True},
        {"name": "unused", "label": "Unused", "type": "text", "isDefined": True, "isActive": True},
        {"name": "legacy", "label": "Legacy Code", "type": "text", "isDefined": True, "isActive": False},
        {"name": "zeta", "label": "zeta", "type": None, "isDefined": False, "isActive": False},
    ]


def test_serialize_enquiry(make_enquiry):
    enquiry = make_enquiry(
        "E-1",
        {"urgent": encode_value(BooleanValue(True)), "note": "legacy text"},
        po_number="PO-1",
    )

    payload = DynamicColumnService.serialize_enquiry(enquiry)

    assert payload["enquiryNumber"] == "E-1"
    assert payload["poNumber"] == "PO-1"
    assert payload["dynamicFields"] == {
        "urgent": {"kind": "boolean", "value": True, "display": "true"},
        "note": {"kind": "text", "value": "legacy text", "display": "legacy text"},
    }

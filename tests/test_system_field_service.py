import pytest

from enquiry_app.fields.exceptions import FieldNotFoundError, InvalidDefinitionError
from enquiry_app.models import DEFAULT_SYSTEM_FIELDS, FieldType, SystemFieldLabel, db
from enquiry_app.services import SystemFieldService


def test_list_seeds_every_built_in_column():
    fields = SystemFieldService.list_fields()

    assert len(fields) == len(DEFAULT_SYSTEM_FIELDS)
    assert [field.name for field in fields] == sorted(name for name, _, _ in DEFAULT_SYSTEM_FIELDS)
    by_name = {field.name: field for field in fields}
    assert by_name["enquiry_number"].label == "Enquiry #"
    assert by_name["date_received"].field_type is FieldType.DATE
    assert all(field.is_active for field in fields)


def test_seeding_keeps_existing_labels():
    SystemFieldService.update_field("customer_name", label="Client")

    SystemFieldService.list_fields()

    assert db.session.query(SystemFieldLabel).count() == len(DEFAULT_SYSTEM_FIELDS)
    assert db.session.query(SystemFieldLabel).filter_by(name="customer_name").one().label == "Client"


def test_update_label_and_visibility():
    field = SystemFieldService.update_field("po_number", label="  Purchase Order  ", active=False)

    assert field.label == "Purchase Order"
    assert field.is_active is False


@pytest.mark.parametrize("label", ["", "   "])
def test_update_requires_a_label(label):
    with pytest.raises(InvalidDefinitionError):
        SystemFieldService.update_field("po_number", label=label)


def test_unknown_column_is_not_found():
    with pytest.raises(FieldNotFoundError):
        SystemFieldService.update_field("favourite_colour", label="Colour")
    with pytest.raises(FieldNotFoundError):
        SystemFieldService.reset_field("favourite_colour")


def test_reset_restores_default_label_and_visibility():
    SystemFieldService.update_field("remarks", label="Notes", active=False)

    field = SystemFieldService.reset_field("remarks")

    assert field.label == "Remarks"
    assert field.is_active is True

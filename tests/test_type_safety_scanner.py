from enquiry_app.fields.scanner import TypeSafetyScanner
from enquiry_app.fields.values import BooleanValue, NumberValue, TextValue, encode_value
from enquiry_app.models import FieldType


def _text(value):
    return encode_value(TextValue(value))


def test_numeric_text_is_safe_for_number(record_store, make_enquiry):
    for index, raw in enumerate(["1", " 2.5 ", "-3", "4e2"], start=1):
        make_enquiry(f"E-{index}", {"qty": _text(raw)})
    make_enquiry("E-other", {"colour": _text("red")})

    result = TypeSafetyScanner(record_store, batch_size=2).scan("qty", FieldType.NUMBER)

    assert result.safe
    assert result.records_examined == 4
    assert result.reason is None


def test_first_incompatible_value_stops_the_scan(record_store, make_enquiry):
    values = ["1", "2", "3", "4", "abc", "6", "seven"]
    for index, raw in enumerate(values, start=1):
        make_enquiry(f"E-{index}", {"qty": _text(raw)})

    result = TypeSafetyScanner(record_store, batch_size=2).scan("qty", "number")

    assert not result.safe
    assert result.records_examined == 5
    assert "'abc'" in result.reason
    assert "E-5" in result.reason


def test_empty_values_are_not_counted(record_store, make_enquiry):
    make_enquiry("E-1", {"flag": _text("   ")})
    make_enquiry("E-2", {"flag": encode_value(BooleanValue(True))})
    make_enquiry("E-3", {"flag": _text("no")})
    make_enquiry("E-4", {"flag": None})

    result = TypeSafetyScanner(record_store).scan("flag", FieldType.BOOLEAN)

    assert result.safe
    assert result.records_examined == 2


def test_select_without_options_is_unsafe_before_reading(record_store, make_enquiry):
    make_enquiry("E-1", {"tier": _text("Gold")})

    result = TypeSafetyScanner(record_store).scan("tier", FieldType.SELECT, ())

    assert not result.safe
    assert result.records_examined == 0


def test_select_matching_is_exact_after_trimming(record_store, make_enquiry):
    make_enquiry("E-1", {"tier": _text(" Gold ")})
    make_enquiry("E-2", {"tier": _text("Silver")})
    scanner = TypeSafetyScanner(record_store)

    assert scanner.scan("tier", FieldType.SELECT, ("Gold", "Silver")).safe
    assert not scanner.scan("tier", FieldType.SELECT, ("gold", "silver")).safe


def test_legacy_bare_values_are_checked(record_store, make_enquiry):
    make_enquiry("E-1", {"qty": 7})
    make_enquiry("E-2", {"qty": "8"})
    make_enquiry("E-3", {"qty": encode_value(NumberValue(9.5))})

    assert TypeSafetyScanner(record_store).scan("qty", FieldType.NUMBER).safe
    assert not TypeSafetyScanner(record_store).scan("qty", FieldType.BOOLEAN).safe

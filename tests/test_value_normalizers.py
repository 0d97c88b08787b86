from datetime import date, datetime

import pytest

from enquiry_app.models.enquiry.enums import ActivityType, EnquiryStatus, ManufacturingType, MarketType, ProductType
from enquiry_app.utils.normalizers import (
    date_to_serial,
    is_blank_cell,
    normalize_activity,
    normalize_boolean,
    normalize_date,
    normalize_enum,
    normalize_integer,
    normalize_market_segment,
    normalize_product_type,
    normalize_status,
    normalize_supply_scope,
    serial_to_date,
)


@pytest.mark.parametrize("value", [None, "", "-", "   ", " - "])
def test_blank_cells(value):
    assert is_blank_cell(value) is True


@pytest.mark.parametrize("value", ["0", 0, "--", "n/a", False])
def test_non_blank_cells(value):
    assert is_blank_cell(value) is False


@pytest.mark.parametrize("value", ["Y", "yes", "TRUE", " 1 ", 1, True])
def test_normalize_boolean_truthy(value):
    assert normalize_boolean(value) is True


@pytest.mark.parametrize("value", ["no", "", None, 0, "2", "maybe", False])
def test_normalize_boolean_falsy(value):
    assert normalize_boolean(value) is False


def test_serial_numbers_follow_spreadsheet_calendar():
    assert serial_to_date(1) == date(1900, 1, 1)
    assert serial_to_date(59) == date(1900, 2, 28)
    assert serial_to_date(60) == date(1900, 3, 1)
    assert serial_to_date(61) == date(1900, 3, 1)
    assert serial_to_date(45292) == date(2024, 1, 1)
    assert serial_to_date(45292.75) == date(2024, 1, 1)


def test_non_positive_serials_are_not_dates():
    assert serial_to_date(0) is None
    assert serial_to_date(-5) is None
    assert serial_to_date(float("nan")) is None


@pytest.mark.parametrize(
    "known",
    [date(1900, 3, 1), date(1999, 12, 31), date(2000, 2, 29), date(2024, 3, 15), date(2031, 7, 4)],
)
def test_serial_round_trip_restores_the_date(known):
    serial = date_to_serial(known)
    assert normalize_date(serial) == known
    assert normalize_date(str(serial)) == known
    assert normalize_date(float(serial)) == known


def test_normalize_date_accepts_common_shapes():
    assert normalize_date("15-03-2024") == date(2024, 3, 15)
    assert normalize_date("2024-03-15") == date(2024, 3, 15)
    assert normalize_date(datetime(2024, 3, 15, 10, 30)) == date(2024, 3, 15)
    assert normalize_date(date(2024, 3, 15)) == date(2024, 3, 15)
    assert normalize_date(" 45366 ") == date(2024, 3, 15)


@pytest.mark.parametrize("value", [None, "", "-", "not a date", "31-02-2024", True])
def test_normalize_date_returns_none_for_unparseable(value):
    assert normalize_date(value) is None


def test_normalize_integer():
    assert normalize_integer("12 days") == 12
    assert normalize_integer(12.7) == 12
    assert normalize_integer(" -3 ") == -3
    assert normalize_integer(7) == 7
    assert normalize_integer("abc") is None
    assert normalize_integer(None) is None
    assert normalize_integer(True) is None


def test_market_segment():
    assert normalize_market_segment("Export") is MarketType.EXPORT
    assert normalize_market_segment("EXPORT ORDER") is MarketType.EXPORT
    assert normalize_market_segment("domestic") is MarketType.DOMESTIC
    assert normalize_market_segment(None) is MarketType.DOMESTIC


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Quoted", ActivityType.QUOTED),
        ("quote sent", ActivityType.QUOTED),
        ("Regret", ActivityType.REGRETTED),
        ("In-House", ActivityType.IN_PROGRESS),
        ("On hold", ActivityType.ON_HOLD),
        ("", ActivityType.IN_PROGRESS),
        (None, ActivityType.IN_PROGRESS),
    ],
)
def test_activity(raw, expected):
    assert normalize_activity(raw) is expected


def test_status_prefers_explicit_text_then_activity():
    assert normalize_status("Closed") is EnquiryStatus.CLOSED
    assert normalize_status("open", ActivityType.QUOTED) is EnquiryStatus.OPEN
    assert normalize_status(None, ActivityType.QUOTED) is EnquiryStatus.CLOSED
    assert normalize_status("", ActivityType.REGRETTED) is EnquiryStatus.CLOSED
    assert normalize_status(None, ActivityType.ON_HOLD) is EnquiryStatus.OPEN


def test_supply_scope():
    assert normalize_supply_scope("Inhouse") is ManufacturingType.INHOUSE
    assert normalize_supply_scope("in-house") is ManufacturingType.INHOUSE
    assert normalize_supply_scope("BO") is ManufacturingType.BROUGHTOUT
    assert normalize_supply_scope("Brought Out") is ManufacturingType.BROUGHTOUT
    assert normalize_supply_scope("Inhouse & BO") is ManufacturingType.BOTH
    assert normalize_supply_scope("-") is None
    assert normalize_supply_scope("misc") is None


def test_product_type():
    assert normalize_product_type("SP") is ProductType.SP
    assert normalize_product_type("nsp") is ProductType.NSP
    assert normalize_product_type("SP & NSP") is ProductType.SP_NSP
    assert normalize_product_type("whatever") is ProductType.SP


def test_normalize_enum_dispatch():
    assert normalize_enum("market_segment", "export") is MarketType.EXPORT
    assert normalize_enum("status", None, activity=ActivityType.REGRETTED) is EnquiryStatus.CLOSED
    with pytest.raises(ValueError):
        normalize_enum("colour", "red")


@pytest.mark.parametrize("value", ["10:30", "Monday", "may", "-5", "March 2024"])
def test_normalize_date_rejects_partial_dates(value):
    assert normalize_date(value) is None


def test_normalize_date_accepts_full_text_dates():
    assert normalize_date("15 March 2024") == date(2024, 3, 15)
    assert normalize_date("March 15, 2024 10:30") == date(2024, 3, 15)

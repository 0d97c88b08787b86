"""
Pure, total normalizers that turn messy spreadsheet cells into canonical values.

None of these raise on bad input: unparseable cells fall back to the documented
default (or ``None``) so a single odd cell never aborts an import row.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict

from dateutil import parser as dateparser

from enquiry_app.models.enquiry.enums import ActivityType, EnquiryStatus, ManufacturingType, MarketType, ProductType

BLANK_SENTINELS = frozenset({"", "-"})
TRUTHY_TOKENS = frozenset({"y", "yes", "true", "1"})

_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_SERIAL_TEXT = re.compile(r"^\d{1,6}(\.\d+)?$")
_LEADING_INTEGER = re.compile(r"^[+-]?\d+")
# Serials >= 61 count from 1899-12-30 because day 60 is the fictitious 1900-02-29.
_SERIAL_EPOCH = date(1899, 12, 30)
_SERIAL_LEAP_BUG_DAY = 60
# Two fill-in dates that differ in every part; a text date must parse the same against both.
_FILL_DATES = (datetime(2000, 1, 1), datetime(2001, 12, 28))


def is_blank_cell(value: Any) -> bool:
    """Return True for cells that carry no information (None, "", "-", whitespace)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in BLANK_SENTINELS
    return False


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_boolean(value: Any) -> bool:
    """Interpret Y/YES/TRUE/1 (any case) as True; everything else is False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return _text(value).lower() in TRUTHY_TOKENS


def serial_to_date(serial: float) -> date | None:
    """Convert a spreadsheet day serial to a calendar date."""
    if isinstance(serial, bool) or not math.isfinite(serial):
        return None
    days = int(serial)
    if days <= 0:
        return None
    if days < _SERIAL_LEAP_BUG_DAY:
        return date(1899, 12, 31) + timedelta(days=days)
    if days == _SERIAL_LEAP_BUG_DAY:
        return date(1900, 3, 1)
    try:
        return _SERIAL_EPOCH + timedelta(days=days)
    except OverflowError:
        return None


def date_to_serial(value: date) -> int:
    """Inverse of :func:`serial_to_date` for dates on or after 1900-03-01."""
    if isinstance(value, datetime):
        value = value.date()
    return (value - _SERIAL_EPOCH).days


def normalize_date(value: Any) -> date | None:
    """Best-effort date parsing for spreadsheet cells.

    Accepts native dates, spreadsheet serial numbers (numeric or numeric text),
    ``DD-MM-YYYY`` text, and anything ``dateutil`` can parse.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        return serial_to_date(value)

    text = _text(value)
    if not text or text in BLANK_SENTINELS:
        return None
    if _SERIAL_TEXT.match(text):
        return serial_to_date(float(text))

    match = _DAY_MONTH_YEAR.match(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    try:
        first, second = (dateparser.parse(text, default=fill).date() for fill in _FILL_DATES)
    except (ValueError, OverflowError, TypeError):
        return None
    # Times, weekdays and bare month names leave parts to the fill-in date.
    return first if first == second else None


def normalize_integer(value: Any) -> int | None:
    """Read the leading integer of a cell ("12", 12.0, "12 days" all give 12)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INTEGER.match(_text(value))
    if not match:
        return None
    return int(match.group(0))


def normalize_market_segment(value: Any) -> MarketType:
    text = _text(value).upper()
    if "EXPORT" in text:
        return MarketType.EXPORT
    return MarketType.DOMESTIC


def normalize_activity(value: Any) -> ActivityType:
    text = _text(value).upper()
    if "QUOTE" in text:
        return ActivityType.QUOTED
    if "REGRET" in text:
        return ActivityType.REGRETTED
    if "IN-HOUSE" in text or "INHOUSE" in text:
        return ActivityType.IN_PROGRESS
    if "HOLD" in text:
        return ActivityType.ON_HOLD
    return ActivityType.IN_PROGRESS


def normalize_status(value: Any, activity: ActivityType | None = None) -> EnquiryStatus:
    """Explicit CLOSED/OPEN wins; otherwise quoted or regretted enquiries count as closed."""
    text = _text(value).upper()
    if "CLOSE" in text:
        return EnquiryStatus.CLOSED
    if "OPEN" in text:
        return EnquiryStatus.OPEN
    if activity in (ActivityType.QUOTED, ActivityType.REGRETTED):
        return EnquiryStatus.CLOSED
    return EnquiryStatus.OPEN


_IN_HOUSE_TOKENS = ("IN-HOUSE", "INHOUSE", "IN HOUSE")
_BROUGHT_OUT_TOKENS = frozenset({"BO", "BROUGHTOUT", "BROUGHT OUT", "BROUGHT-OUT"})


def normalize_supply_scope(value: Any) -> ManufacturingType | None:
    text = _text(value).upper()
    if not text or text in BLANK_SENTINELS:
        return None
    if text in _IN_HOUSE_TOKENS:
        return ManufacturingType.INHOUSE
    if text in _BROUGHT_OUT_TOKENS:
        return ManufacturingType.BROUGHTOUT
    if any(token in text for token in _IN_HOUSE_TOKENS) and "BO" in text:
        return ManufacturingType.BOTH
    if "&" in text or "AND" in text:
        return ManufacturingType.BOTH
    return None


def normalize_product_type(value: Any) -> ProductType:
    text = _text(value).upper()
    if text == "SP":
        return ProductType.SP
    if text == "NSP":
        return ProductType.NSP
    if ("SP" in text and "NSP" in text) or "&" in text:
        return ProductType.SP_NSP
    return ProductType.SP


_ENUM_NORMALIZERS: Dict[str, Callable[..., Any]] = {
    "market_segment": normalize_market_segment,
    "activity": normalize_activity,
    "status": normalize_status,
    "supply_scope": normalize_supply_scope,
    "product_type": normalize_product_type,
}


def normalize_enum(kind: str, value: Any, *, activity: ActivityType | None = None):
    """Dispatch to the enum normalizer registered for ``kind``."""
    try:
        normalizer = _ENUM_NORMALIZERS[kind]
    except KeyError:
        raise ValueError(f"No enum normalizer registered for '{kind}'") from None
    if kind == "status":
        return normalizer(value, activity)
    return normalizer(value)

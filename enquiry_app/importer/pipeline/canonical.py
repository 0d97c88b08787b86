"""
Build canonical enquiry attributes from one resolved spreadsheet row.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional

from enquiry_app.models.enquiry.enums import DepartmentStatus, EnquiryStatus
from enquiry_app.utils.normalizers import (
    is_blank_cell,
    normalize_activity,
    normalize_boolean,
    normalize_date,
    normalize_integer,
    normalize_market_segment,
    normalize_product_type,
    normalize_status,
    normalize_supply_scope,
)

from .resolver import ColumnResolver

DEFAULT_SALES_REP = "Default Sales Rep"
DEFAULT_REMARKS = "No remarks"
DEFAULT_SUPPLY_SCOPE = "Not specified"


def clean_string(value: Any) -> Optional[str]:
    """Trim a cell to text; integral floats lose their ``.0`` (101.0 -> "101")."""
    if is_blank_cell(value):
        return None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


@dataclass
class CanonicalAttributes:
    values: Dict[str, Any] = field(default_factory=dict)
    create_defaults: Dict[str, Any] = field(default_factory=dict)


def build_canonical_attributes(
    row: Mapping[Any, Any],
    resolver: ColumnResolver,
    natural_key: str,
    *,
    today: Callable[[], date] = date.today,
) -> CanonicalAttributes:
    """Resolve and normalize every canonical column of ``row``.

    ``values`` always overwrite an existing enquiry; ``create_defaults`` only
    fill a brand new one.
    """

    def resolve(name: str) -> Any:
        return resolver.resolve(row, name)

    date_received = normalize_date(resolve("date_received"))
    date_submitted = normalize_date(resolve("date_submitted"))
    activity = normalize_activity(resolve("activity"))
    status = normalize_status(resolve("status"), activity)
    supply_scope = normalize_supply_scope(resolve("supply_scope"))
    rnd_name = clean_string(resolve("rnd_handler"))
    sales_name = clean_string(resolve("sales_rep"))

    values: Dict[str, Any] = {
        "market_type": normalize_market_segment(resolve("market_type")),
        "product_type": normalize_product_type(resolve("product_type")),
        "activity": activity,
        "status": status,
        "drawing_status": (
            DepartmentStatus.COMPLETED if normalize_boolean(resolve("drawing_required")) else DepartmentStatus.NOT_REQUIRED
        ),
        "costing_status": (
            DepartmentStatus.COMPLETED if normalize_boolean(resolve("costing_completed")) else DepartmentStatus.NOT_REQUIRED
        ),
        "rnd_status": DepartmentStatus.COMPLETED if rnd_name else DepartmentStatus.NOT_REQUIRED,
        "sales_status": DepartmentStatus.COMPLETED,
    }

    if rnd_name:
        values["rnd_handler_name"] = rnd_name
    if sales_name:
        values["sales_rep_name"] = sales_name

    for attribute, column in (("customer_name", "customer_name"), ("po_number", "po_number"), ("remarks", "remarks")):
        text = clean_string(resolve(column))
        if text:
            values[attribute] = text

    if date_received:
        values["date_received"] = date_received
        values["enquiry_date"] = date_received
    if date_submitted:
        values["date_submitted"] = date_submitted
        values["quotation_date"] = date_submitted
        if status is EnquiryStatus.CLOSED:
            values["closure_date"] = date_submitted
    if supply_scope is not None:
        values["supply_scope"] = supply_scope.value
        values["manufacturing_type"] = supply_scope

    days = normalize_integer(resolve("days_required"))
    if days is not None and days >= 0:
        values["days_required_for_fulfillment"] = days

    create_defaults = {
        "customer_name": f"Customer-{natural_key}",
        "remarks": DEFAULT_REMARKS,
        "supply_scope": DEFAULT_SUPPLY_SCOPE,
        "sales_rep_name": DEFAULT_SALES_REP,
        "enquiry_date": today(),
        "days_required_for_fulfillment": 0,
    }
    return CanonicalAttributes(values=values, create_defaults=create_defaults)

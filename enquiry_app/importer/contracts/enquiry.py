"""Canonical enquiry column contract.

Each canonical field lists the spreadsheet headers it has been seen under over
the years. Order matters: earlier aliases win within a matching tier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

NATURAL_KEY_FIELD = "enquiry_number"


@dataclass(frozen=True)
class ColumnSpec:
    """Metadata describing a canonical enquiry column."""

    name: str
    description: str
    aliases: Tuple[str, ...] = ()


ENQUIRY_CANONICAL_COLUMNS: Tuple[ColumnSpec, ...] = (
    ColumnSpec(
        name="sr_no",
        description="Row serial number from the source sheet; consumed, never stored.",
        aliases=("SR. No.", "SR NO", "SR.No.", "S.No", "Serial No", "Sr No", "Sr.No.", "S. No."),
    ),
    ColumnSpec(
        name="enquiry_number",
        description="Natural key used to upsert enquiries.",
        aliases=(
            "Enq No.",
            "Enq No",
            "ENQ NO",
            "Enquiry No",
            "Enquiry Number",
            "EnqNo",
            "Enq.No.",
            "Enq. No.",
            "ENQ. NO.",
            "Enquiry No.",
        ),
    ),
    ColumnSpec(
        name="customer_name",
        description="Customer the enquiry came from.",
        aliases=("Customer Name", "CUSTOMER NAME", "Customer", "Client", "Client Name"),
    ),
    ColumnSpec(
        name="market_type",
        description="Export or domestic market.",
        aliases=(
            "EXPORT / DOMESTIC",
            "EXPORT/DOMESTIC",
            "Export / Domestic",
            "Export/Domestic",
            "Market",
            "Market Type",
            "MARKET TYPE",
            "Export Domestic",
            "Market Segment",
        ),
    ),
    ColumnSpec(
        name="po_number",
        description="Customer purchase order number.",
        aliases=(
            "PO No.",
            "PO No",
            "PONo",
            "PO NO",
            "PO Number",
            "Purchase Order",
            "PO. No.",
            "P.O. No.",
            "PO. Number",
        ),
    ),
    ColumnSpec(
        name="date_received",
        description="Date the enquiry arrived; also the enquiry date.",
        aliases=(
            "DATE RECEIVED",
            "Date Received",
            "Received Date",
            "DateReceived",
            "Date. Received",
            "DATE. RECEIVED",
            "Enquiry Date",
            "Date",
        ),
    ),
    ColumnSpec(
        name="date_submitted",
        description="Date the quotation was submitted.",
        aliases=(
            "DATE SUBMITTED",
            "Date Submitted",
            "Submitted Date",
            "DateSubmitted",
            "Quotation Date",
            "Quote Date",
            "Date. Submitted",
            "DATE. SUBMITTED",
            "Submission Date",
        ),
    ),
    ColumnSpec(
        name="drawing_required",
        description="Y/N flag: drawing work done.",
        aliases=("DRAWING", "Drawing", "Drawing Status", "Drawing Required", "DrawingRequired", "Drawing."),
    ),
    ColumnSpec(
        name="costing_completed",
        description="Y/N flag: costing work done.",
        aliases=("COSTING", "Costing", "Costing Status", "Costing Completed", "CostingCompleted", "Costing."),
    ),
    ColumnSpec(
        name="rnd_handler",
        description="Name of the R&D person handling the enquiry.",
        aliases=(
            "R&D",
            "R & D",
            "RND",
            "R&D Handler",
            "RND Handler",
            "R&D Person",
            "Research",
            "R&D.",
            "R & D.",
            "RnD",
        ),
    ),
    ColumnSpec(
        name="sales_rep",
        description="Name of the sales representative.",
        aliases=(
            "SALES",
            "Sales",
            "Sales Representative",
            "Sales Rep",
            "SALES REP",
            "Representative",
            "SALES.",
            "Sales.",
            "SALES REPRESENTATIVE",
            "Sales Person",
        ),
    ),
    ColumnSpec(
        name="status",
        description="Open/closed state.",
        aliases=(
            "OPEN / CLOSED",
            "OPEN/CLOSED",
            "Open / Closed",
            "Open/Closed",
            "STATUS",
            "Enquiry Status",
            "Status",
            "OPEN CLOSED",
        ),
    ),
    ColumnSpec(
        name="activity",
        description="Current commercial activity.",
        aliases=("ACTIVITY", "Activity", "Current Activity", "ActivityStatus", "Activity.", "Activity Type"),
    ),
    ColumnSpec(
        name="supply_scope",
        description="Scope of supply (in-house, brought out, or both).",
        aliases=(
            "SCOPE OF SUPPLY",
            "Scope Of Supply",
            "Supply Scope",
            "Scope",
            "SUPPLY SCOPE",
            "ScopeOfSupply",
            "SCOPE. OF SUPPLY",
            "Scope of Supply",
            "Supply",
        ),
    ),
    ColumnSpec(
        name="product_type",
        description="SP / NSP product classification.",
        aliases=(
            "PRODUCT TYPE",
            "Product Type",
            "ProductType",
            "Product",
            "PRODUCT. TYPE",
            "Product. Type",
            "Product Category",
        ),
    ),
    ColumnSpec(
        name="days_required",
        description="Days needed to complete the enquiry.",
        aliases=(
            "DAYS TO COMPLETE ENQUIRY",
            "Days To Complete Enquiry",
            "DAYS TO COMPLETE",
            "Days To Complete",
            "Days Required",
            "Fulfillment Days",
            "DaysToComplete",
            "Days to Complete Enquiry",
            "Days",
            "DAYS. TO COMPLETE",
            "Days required for fulfillment",
        ),
    ),
    ColumnSpec(
        name="remarks",
        description="Free-text remarks.",
        aliases=("REMARK", "Remarks", "REMARKS", "Comments", "Notes", "Remark", "Closure Reason", "Inquiry Notes"),
    ),
)


def get_enquiry_column_specs() -> Tuple[ColumnSpec, ...]:
    return ENQUIRY_CANONICAL_COLUMNS


def get_enquiry_alias_map() -> Dict[str, Tuple[str, ...]]:
    """Return ``{canonical field: aliases}`` in contract order."""

    return {spec.name: spec.aliases for spec in ENQUIRY_CANONICAL_COLUMNS}

# enquiry_app/models/enquiry/models.py
"""
Enquiry record model.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Enum
from sqlalchemy.orm import Mapped, mapped_column

from ..base import BaseModel, db
from .enums import ActivityType, DepartmentStatus, EnquiryStatus, ManufacturingType, MarketType, ProductType


class Enquiry(BaseModel):
    """A customer enquiry keyed by its enquiry number.

    Canonical attributes live in columns; administrator-defined attributes live
    in ``dynamic_fields`` as tagged JSON values keyed by field name.
    """

    __tablename__ = "enquiries"

    id: Mapped[int] = mapped_column(primary_key=True)
    enquiry_number: Mapped[str] = mapped_column(db.String(100), nullable=False, unique=True, index=True)
    customer_name: Mapped[str | None] = mapped_column(db.String(255), nullable=True)
    po_number: Mapped[str | None] = mapped_column(db.String(100), nullable=True)
    market_type: Mapped[MarketType] = mapped_column(
        Enum(MarketType, name="market_type_enum"),
        nullable=False,
        default=MarketType.DOMESTIC,
    )
    product_type: Mapped[ProductType] = mapped_column(
        Enum(ProductType, name="product_type_enum"),
        nullable=False,
        default=ProductType.SP,
    )
    supply_scope: Mapped[str | None] = mapped_column(db.String(100), nullable=True)
    manufacturing_type: Mapped[ManufacturingType | None] = mapped_column(
        Enum(ManufacturingType, name="manufacturing_type_enum"),
        nullable=True,
    )

    enquiry_date: Mapped[date | None] = mapped_column(db.Date, nullable=True)
    date_received: Mapped[date | None] = mapped_column(db.Date, nullable=True)
    date_submitted: Mapped[date | None] = mapped_column(db.Date, nullable=True)
    quotation_date: Mapped[date | None] = mapped_column(db.Date, nullable=True)
    closure_date: Mapped[date | None] = mapped_column(db.Date, nullable=True)

    drawing_status: Mapped[DepartmentStatus] = mapped_column(
        Enum(DepartmentStatus, name="department_status_enum"),
        nullable=False,
        default=DepartmentStatus.PENDING,
    )
    costing_status: Mapped[DepartmentStatus] = mapped_column(
        Enum(DepartmentStatus, name="department_status_enum"),
        nullable=False,
        default=DepartmentStatus.PENDING,
    )
    rnd_status: Mapped[DepartmentStatus] = mapped_column(
        Enum(DepartmentStatus, name="department_status_enum"),
        nullable=False,
        default=DepartmentStatus.PENDING,
    )
    sales_status: Mapped[DepartmentStatus] = mapped_column(
        Enum(DepartmentStatus, name="department_status_enum"),
        nullable=False,
        default=DepartmentStatus.PENDING,
    )
    rnd_handler_name: Mapped[str | None] = mapped_column(db.String(255), nullable=True)
    sales_rep_name: Mapped[str | None] = mapped_column(db.String(255), nullable=True)

    status: Mapped[EnquiryStatus] = mapped_column(
        Enum(EnquiryStatus, name="enquiry_status_enum"),
        nullable=False,
        default=EnquiryStatus.OPEN,
        index=True,
    )
    activity: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType, name="activity_type_enum"),
        nullable=False,
        default=ActivityType.IN_PROGRESS,
    )
    days_required_for_fulfillment: Mapped[int | None] = mapped_column(db.Integer, nullable=True)
    fulfillment_time: Mapped[int | None] = mapped_column(db.Integer, nullable=True)
    remarks: Mapped[str | None] = mapped_column(db.Text, nullable=True)

    dynamic_fields: Mapped[dict] = mapped_column(db.JSON, nullable=False, default=dict)

    def recompute_fulfillment_time(self) -> int | None:
        """Days between enquiry and quotation, when both are known."""
        if self.enquiry_date and self.quotation_date:
            self.fulfillment_time = abs((self.quotation_date - self.enquiry_date).days)
        else:
            self.fulfillment_time = None
        return self.fulfillment_time

    def to_dict(self) -> dict:
        def _iso(value):
            return value.isoformat() if value else None

        def _enum(value):
            return value.value if value is not None else None

        return {
            "id": self.id,
            "enquiryNumber": self.enquiry_number,
            "customerName": self.customer_name,
            "poNumber": self.po_number,
            "marketType": _enum(self.market_type),
            "productType": _enum(self.product_type),
            "supplyScope": self.supply_scope,
            "manufacturingType": _enum(self.manufacturing_type),
            "enquiryDate": _iso(self.enquiry_date),
            "dateReceived": _iso(self.date_received),
            "dateSubmitted": _iso(self.date_submitted),
            "quotationDate": _iso(self.quotation_date),
            "closureDate": _iso(self.closure_date),
            "drawingStatus": _enum(self.drawing_status),
            "costingStatus": _enum(self.costing_status),
            "rndStatus": _enum(self.rnd_status),
            "salesStatus": _enum(self.sales_status),
            "rndHandler": self.rnd_handler_name,
            "salesRepresentative": self.sales_rep_name,
            "status": _enum(self.status),
            "activity": _enum(self.activity),
            "daysRequiredForFulfillment": self.days_required_for_fulfillment,
            "fulfillmentTime": self.fulfillment_time,
            "remarks": self.remarks,
        }

    def __repr__(self):
        return f"<Enquiry {self.enquiry_number}>"

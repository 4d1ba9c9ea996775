"""
Wash job and line item models.

A wash job is one car going through the wash. Its line items record each
service performed, the washer credited for it and the price actually
charged. Jobs and their line items are written once, in a single
transaction, and never modified afterwards.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Integer, Numeric, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship

from backend.fastapi.dependencies.database import Base


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"


# Washers credited anywhere on a job (derived from its line items)
wash_job_washers = Table(
    "wash_job_washers",
    Base.metadata,
    Column("wash_job_id", Uuid(as_uuid=True), ForeignKey("wash_jobs.id", ondelete="CASCADE"), primary_key=True),
    Column("washer_id", Uuid(as_uuid=True), ForeignKey("washers.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class WashJob(Base):
    """
    Wash job recorded at a branch.

    Attributes:
        id: Unique identifier
        branch_id: Branch where the car was washed
        car_number, car_model, customer_name, customer_phone: Optional descriptive fields
        payment_method: 'cash', 'transfer' or None
        total_amount: Sum of the effective prices of the line items
        washed_at: Wall-clock time of the wash in the business timezone
        created_at: Insert timestamp (UTC)
    """

    __tablename__ = "wash_jobs"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique wash job identifier"
    )

    branch_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("branches.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="Branch where the job was recorded"
    )

    car_number = Column(String(50), nullable=True, index=True, doc="Plate number")
    car_model = Column(String(100), nullable=True, doc="Car make/model")
    customer_name = Column(String(100), nullable=True, doc="Customer name")
    customer_phone = Column(String(30), nullable=True, doc="Customer phone")

    payment_method = Column(
        String(20),
        nullable=True,
        index=True,
        doc="Payment method: cash or transfer"
    )

    total_amount = Column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Sum of line item prices"
    )

    washed_at = Column(
        DateTime,
        nullable=False,
        index=True,
        doc="When the car was washed (business timezone, naive)"
    )

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
        doc="When the record was created"
    )

    # Relationships
    branch = relationship("Branch", back_populates="wash_jobs")
    line_items = relationship(
        "LineItem",
        back_populates="wash_job",
        cascade="all, delete-orphan",
        order_by="LineItem.position"
    )
    washers = relationship("Washer", secondary=wash_job_washers, back_populates="wash_jobs")

    # Not stored; set by create_wash_job for the response
    is_repeat_visit = False

    def __repr__(self) -> str:
        return (
            f"<WashJob(id='{self.id}', "
            f"branch_id='{self.branch_id}', "
            f"washed_at='{self.washed_at}', "
            f"total_amount={self.total_amount})>"
        )


class LineItem(Base):
    """
    One service performed on a wash job.

    Attributes:
        id: Unique identifier
        wash_job_id: Parent job
        washer_id: Washer credited for the service (may differ from the one submitted)
        service_item_id: Service performed
        price: Effective price charged
    """

    __tablename__ = "line_items"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique line item identifier"
    )

    wash_job_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("wash_jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    washer_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("washers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    service_item_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("service_items.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    price = Column(
        Numeric(precision=12, scale=2),
        nullable=False,
        doc="Effective price charged for this line"
    )

    position = Column(Integer, nullable=False, default=0, doc="Line number within the job")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    wash_job = relationship("WashJob", back_populates="line_items")
    washer = relationship("Washer", back_populates="line_items")
    service_item = relationship("ServiceItem", back_populates="line_items")

    def __repr__(self) -> str:
        return f"<LineItem(id={self.id}, washer_id={self.washer_id}, service_item_id={self.service_item_id}, price={self.price})>"

"""
Service item model.

Service items are the priced services on the menu (Full Wash, Engine Wash,
Car Rug...). They are shared by all branches. A price of zero marks a
variable-priced item whose price is entered with every job.
"""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Boolean, Numeric, Text, Uuid
from sqlalchemy.orm import relationship, validates

from backend.fastapi.dependencies.database import Base


class ServiceItem(Base):
    """
    Global service item.

    Attributes:
        id: Unique identifier
        name: Globally unique item name
        description: Optional description
        price: List price; 0 means the price is supplied per job
        is_active: Inactive items cannot be used on new jobs
    """

    __tablename__ = "service_items"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique service item identifier"
    )

    name = Column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        doc="Globally unique item name"
    )

    description = Column(
        Text,
        nullable=True,
        doc="Optional description of the service"
    )

    price = Column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
        doc="List price (0 = variable pricing)"
    )

    is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        doc="Whether the item can be used on new jobs"
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    line_items = relationship("LineItem", back_populates="service_item")

    @validates("price")
    def validate_price(self, key, value):
        """Validate that the list price is non-negative."""
        if value is not None and Decimal(value) < 0:
            raise ValueError("price must be non-negative")
        return value

    @property
    def has_variable_price(self) -> bool:
        return Decimal(self.price or 0) == 0

    def __repr__(self) -> str:
        return f"<ServiceItem(id={self.id}, name='{self.name}', price={self.price})>"

"""
Service item Pydantic schemas for request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict


class ServiceItemBase(BaseModel):
    """Base service item schema with common fields."""

    name: str = Field(
        ...,
        min_length=2,
        max_length=50,
        description="Globally unique item name",
        examples=["Full Wash", "Engine Wash", "Car Rug"]
    )

    description: Optional[str] = Field(
        None,
        max_length=200,
        description="Optional description"
    )

    price: Decimal = Field(
        Decimal("0.00"),
        ge=0,
        decimal_places=2,
        max_digits=12,
        description="List price; 0 means the price is entered with every job"
    )


class ServiceItemCreate(ServiceItemBase):
    """Schema for creating a service item."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Full Wash",
                "description": "Exterior and interior",
                "price": "50.00"
            }
        }
    )


class ServiceItemUpdate(BaseModel):
    """Schema for updating a service item."""

    name: Optional[str] = Field(None, min_length=2, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2, max_digits=12)
    is_active: Optional[bool] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class ServiceItemBrief(BaseModel):
    """Compact service item reference embedded in job responses."""

    id: UUID
    name: str
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class ServiceItemRead(ServiceItemBase):
    """Schema for reading service item information."""

    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ServiceItemWithStats(ServiceItemRead):
    line_items_count: int = Field(..., description="Line items ever recorded for the item")


class ServiceItemListResponse(BaseModel):
    service_items: List[ServiceItemRead]
    total: int

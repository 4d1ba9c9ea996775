"""
Wash job Pydantic schemas for request/response validation.

A job submission names washers and service items by their display names;
the server resolves them and decides which washer is credited per line.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict

from backend.fastapi.schemas.branch import BranchBrief
from backend.fastapi.schemas.washer import WasherBrief
from backend.fastapi.schemas.service_item import ServiceItemBrief


class LineItemRequest(BaseModel):
    """One service performed, as submitted by the operator."""

    washer_name: str = Field(
        ...,
        min_length=1,
        description="Name of the washer who did the work"
    )

    service_item_name: str = Field(
        ...,
        min_length=1,
        description="Name of the service item"
    )

    custom_price: Optional[Decimal] = Field(
        None,
        max_digits=12,
        decimal_places=2,
        description="Price for variable-priced items (required when the list price is 0)"
    )

    model_config = ConfigDict(str_strip_whitespace=True)


class WashJobCreate(BaseModel):
    """Schema for recording a wash job."""

    car_number: Optional[str] = Field(None, max_length=50, description="Plate number")
    car_model: Optional[str] = Field(None, max_length=100, description="Car make/model")
    customer_name: Optional[str] = Field(None, max_length=100, description="Customer name")
    customer_phone: Optional[str] = Field(None, max_length=30, description="Customer phone")

    payment_method: Optional[str] = Field(
        None,
        description="Payment method: 'cash' or 'transfer'"
    )

    items: List[LineItemRequest] = Field(
        ...,
        description="Services performed (at least one)"
    )

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "car_number": "LAG-123-XY",
                "car_model": "Toyota Corolla",
                "payment_method": "cash",
                "items": [
                    {"washer_name": "Sam", "service_item_name": "Full Wash"},
                    {"washer_name": "Sam", "service_item_name": "Engine Wash"},
                    {"washer_name": "Tunde", "service_item_name": "Car Rug", "custom_price": "100.00"}
                ]
            }
        }
    )


class LineItemRead(BaseModel):
    """A recorded line item with its credited washer."""

    id: UUID
    price: Decimal
    washer: WasherBrief
    service_item: ServiceItemBrief

    model_config = ConfigDict(from_attributes=True)


class WashJobRead(BaseModel):
    """Schema for reading a wash job with its line items expanded."""

    id: UUID
    branch: BranchBrief
    car_number: Optional[str] = None
    car_model: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    payment_method: Optional[str] = None
    total_amount: Decimal
    washed_at: datetime
    created_at: datetime
    line_items: List[LineItemRead]
    washers: List[WasherBrief]

    model_config = ConfigDict(from_attributes=True)


class WashJobCreated(WashJobRead):
    """Response for a newly recorded job."""

    is_repeat_visit: bool = Field(
        False,
        description="True when the same car was already recorded at this branch today"
    )


class WashJobListResponse(BaseModel):
    records: List[WashJobRead]
    count: int

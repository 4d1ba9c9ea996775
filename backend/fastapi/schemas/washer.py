"""
Washer Pydantic schemas for request/response validation.
"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict

PHONE_PATTERN = r"^[0-9+\-\s()]+$"


class WasherBase(BaseModel):
    """Base washer schema with common fields."""

    name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        description="Washer name, unique within the branch",
        examples=["Sam", "Idowu"]
    )

    phone: Optional[str] = Field(
        None,
        max_length=30,
        pattern=PHONE_PATTERN,
        description="Phone number"
    )


class WasherCreate(WasherBase):
    """Schema for creating a washer in the caller's branch."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Sam",
                "phone": "+234 801 234 5678"
            }
        }
    )


class WasherUpdate(BaseModel):
    """Schema for updating a washer."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=30, pattern=PHONE_PATTERN)
    is_active: Optional[bool] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class WasherBrief(BaseModel):
    """Compact washer reference embedded in job responses."""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class WasherRead(WasherBase):
    """Schema for reading washer information."""

    id: UUID
    is_active: bool
    branch_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WasherWithStats(WasherRead):
    """Washer with lifetime counters."""

    line_items_count: int = Field(..., description="Line items ever credited to the washer")
    wash_jobs_count: int = Field(..., description="Jobs the washer was credited on")


class WasherListResponse(BaseModel):
    washers: List[WasherRead]
    total: int

"""
Branch Pydantic schemas for request/response validation.

This module defines the data validation schemas for Branch-related
API operations using Pydantic models.
"""

from uuid import UUID
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class BranchBase(BaseModel):
    """Base Branch schema with common fields."""

    name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        description="Name of the branch",
        examples=["Branch A", "Branch B"]
    )

    code: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Short unique branch code",
        examples=["A", "B"]
    )

    location: Optional[str] = Field(
        None,
        max_length=255,
        description="Address or description of the site"
    )


class BranchCreate(BranchBase):
    """Schema for creating a new branch."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Branch A",
                "code": "A",
                "location": "Back Carwash Location"
            }
        }
    )


class BranchUpdate(BaseModel):
    """Schema for updating an existing branch."""

    name: Optional[str] = Field(None, min_length=2, max_length=100, description="Updated branch name")
    code: Optional[str] = Field(None, min_length=1, max_length=20, description="Updated branch code")
    location: Optional[str] = Field(None, max_length=255, description="Updated location")
    is_active: Optional[bool] = Field(None, description="Activate or deactivate the branch")


class BranchBrief(BaseModel):
    """Compact branch reference embedded in other responses."""

    id: UUID
    name: str
    code: str

    model_config = ConfigDict(from_attributes=True)


class BranchRead(BranchBase):
    """Schema for reading branch information."""

    id: UUID = Field(
        ...,
        description="Unique identifier of the branch"
    )

    is_active: bool = Field(
        ...,
        description="Whether the branch is operating"
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Branch A",
                "code": "A",
                "location": "Back Carwash Location",
                "is_active": True
            }
        }
    )


class BranchListResponse(BaseModel):
    """Schema for branch listing."""

    branches: List[BranchRead] = Field(
        ...,
        description="List of branches"
    )

    total: int = Field(
        ...,
        description="Total number of branches"
    )


class BranchWithStats(BranchRead):
    """Branch with user and washer counts."""

    user_count: int = Field(..., description="Users assigned to the branch")
    active_washer_count: int = Field(..., description="Active washers in the branch")

"""
User Pydantic schemas for authentication and account management.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict, validator

from backend.fastapi.models.user import UserRole
from backend.fastapi.schemas.branch import BranchBrief


class UserBase(BaseModel):
    """Base user schema with common fields."""

    email: str = Field(
        ...,
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Login email",
        examples=["manager@example.com"]
    )

    name: str = Field(
        ...,
        min_length=2,
        max_length=100,
        description="Display name"
    )


class UserCreate(UserBase):
    """Schema for registering a new user."""

    password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="Plain text password (hashed before storage)"
    )

    branch_id: UUID = Field(
        ...,
        description="Branch the user works for"
    )

    role: UserRole = Field(
        UserRole.ADMIN,
        description="User role"
    )

    @validator("email")
    def lower_email(cls, v: str) -> str:
        return v.lower()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "manager@example.com",
                "name": "Branch Manager",
                "password": "strongpassword",
                "branch_id": "123e4567-e89b-12d3-a456-426614174000",
                "role": "admin"
            }
        }
    )


class UserLogin(BaseModel):
    """Schema for login requests."""

    email: str = Field(..., min_length=3, max_length=255, description="Login email")
    password: str = Field(..., min_length=1, description="Password")


class PasswordChange(BaseModel):
    """Schema for changing the current user's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=100)


class UserRead(UserBase):
    """Schema for reading user information (never includes the password)."""

    id: UUID
    role: UserRole
    is_active: bool
    branch_id: UUID
    branch: Optional[BranchBrief] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserTokenResponse(BaseModel):
    """Schema for login responses."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserRead

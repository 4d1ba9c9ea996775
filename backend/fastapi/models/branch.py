"""
Branch model for organizing washers, jobs and users by location.

A branch is the tenancy boundary of the system: users log in to exactly one
branch, washers belong to one branch, and every wash job and daily summary
is recorded against a branch.
"""

from uuid import uuid4
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, Uuid
from sqlalchemy.orm import relationship
from backend.fastapi.dependencies.database import Base


class Branch(Base):
    """
    Branch model representing a car-wash location.

    Attributes:
        id: Unique identifier for the branch
        name: Human-readable name of the branch
        code: Short unique code (e.g. 'A')
        location: Optional address or description of the site
        is_active: Inactive branches cannot log in or record jobs
        users: Users assigned to this branch
        washers: Washers working at this branch
        wash_jobs: Wash jobs recorded at this branch
    """
    __tablename__ = "branches"

    # Primary key
    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique identifier for the branch"
    )

    # Branch information
    name = Column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        doc="Name of the branch (e.g., 'Branch A')"
    )

    code = Column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
        doc="Short branch code (e.g., 'A')"
    )

    location = Column(
        String(255),
        nullable=True,
        doc="Address or description of the branch site"
    )

    is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        doc="Whether the branch is operating"
    )

    # Timestamps
    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        doc="Branch creation timestamp"
    )

    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
        doc="Last branch update timestamp"
    )

    # Relationships
    users = relationship(
        "User",
        back_populates="branch",
        doc="List of users assigned to this branch"
    )

    washers = relationship(
        "Washer",
        back_populates="branch",
        doc="List of washers working at this branch"
    )

    wash_jobs = relationship(
        "WashJob",
        back_populates="branch",
        doc="Wash jobs recorded at this branch"
    )

    def __repr__(self) -> str:
        return f"<Branch(id='{self.id}', name='{self.name}', code='{self.code}')>"

    def __str__(self) -> str:
        return self.name

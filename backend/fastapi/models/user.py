"""
User model for branch operators.

Users are the people who log in to record wash jobs and read reports.
Each user belongs to one branch and only sees that branch's data.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from backend.fastapi.dependencies.database import Base


class UserRole(str, Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class User(Base):
    """
    User model for branch operators.

    Attributes:
        id: Unique identifier (UUID)
        email: Unique login email (stored lower-case)
        name: Display name
        password_hash: Bcrypt hashed password
        role: 'admin' (branch operator) or 'super_admin' (manages branches and users)
        branch_id: Branch the user works for
        is_active: Whether the user account is active
        created_at: Account creation timestamp
        updated_at: Last account update timestamp
    """

    __tablename__ = "users"

    # Primary key
    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique user identifier"
    )

    # Authentication fields
    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique login email"
    )

    password_hash = Column(
        String(255),
        nullable=False,
        doc="Bcrypt hashed password"
    )

    name = Column(
        String(100),
        nullable=False,
        doc="Display name"
    )

    role = Column(
        String(20),
        nullable=False,
        default=UserRole.ADMIN.value,
        index=True,
        doc="User role: admin or super_admin"
    )

    branch_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("branches.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="Foreign key to the branch where this user works"
    )

    # Account status
    is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        doc="Whether the user account is active"
    )

    # Timestamps
    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        doc="Account creation timestamp"
    )

    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
        doc="Last account update timestamp"
    )

    # Relationships
    branch = relationship("Branch", back_populates="users", doc="Branch where this user works")

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN.value

    def __repr__(self) -> str:
        """String representation of User."""
        branch_name = self.branch.name if self.branch else f"Branch ID: {self.branch_id}"
        return f"<User(id={self.id}, email='{self.email}', branch='{branch_name}', active={self.is_active})>"

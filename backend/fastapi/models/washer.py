"""
Washer model.

Washers are the staff credited with service items. They are not users of
the system; operators record jobs on their behalf by name. Names are unique
within a branch, so the same name may exist at two branches.
"""

from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from backend.fastapi.dependencies.database import Base


class Washer(Base):
    """
    Washer working at one branch.

    Attributes:
        id: Unique identifier
        name: Display name, unique within the branch
        phone: Optional phone number
        is_active: Inactive washers cannot be credited on new jobs
        branch_id: Branch the washer works at
    """

    __tablename__ = "washers"
    __table_args__ = (
        UniqueConstraint("name", "branch_id", name="uq_washers_name_branch"),
    )

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
        doc="Unique washer identifier"
    )

    name = Column(
        String(100),
        nullable=False,
        index=True,
        doc="Washer name, unique within the branch"
    )

    phone = Column(
        String(30),
        nullable=True,
        doc="Washer phone number"
    )

    is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        doc="Whether the washer can be credited on new jobs"
    )

    branch_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("branches.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="Branch the washer works at"
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    branch = relationship("Branch", back_populates="washers")
    line_items = relationship("LineItem", back_populates="washer")
    wash_jobs = relationship("WashJob", secondary="wash_job_washers", back_populates="washers")
    daily_summaries = relationship("WasherDailySummary", back_populates="washer")

    def __repr__(self) -> str:
        return f"<Washer(id={self.id}, name='{self.name}', branch_id={self.branch_id}, active={self.is_active})>"

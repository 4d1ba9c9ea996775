"""
Pre-aggregated daily counters.

Both tables are maintained incrementally while jobs are recorded and can be
rebuilt from line items at any time. They only hold counts; money is always
recomputed from line items by the report layer.
"""

from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from backend.fastapi.dependencies.database import Base


class WasherDailySummary(Base):
    """
    Jobs and items credited to one washer at one branch on one day.

    Attributes:
        washer_id: Credited washer
        branch_id: Branch of the jobs
        date: Business day
        total_jobs: Distinct jobs the washer was credited on
        total_items: Line items credited to the washer
    """

    __tablename__ = "washer_daily_summaries"
    __table_args__ = (
        UniqueConstraint("washer_id", "date", "branch_id", name="uq_washer_daily_summary"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    washer_id = Column(Uuid(as_uuid=True), ForeignKey("washers.id", ondelete="RESTRICT"), nullable=False, index=True)
    branch_id = Column(Uuid(as_uuid=True), ForeignKey("branches.id", ondelete="RESTRICT"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    total_jobs = Column(Integer, nullable=False, default=0)
    total_items = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    washer = relationship("Washer", back_populates="daily_summaries")
    branch = relationship("Branch")

    def __repr__(self) -> str:
        return (
            f"<WasherDailySummary(washer_id={self.washer_id}, date={self.date}, "
            f"jobs={self.total_jobs}, items={self.total_items})>"
        )


class BranchDailySummary(Base):
    """Jobs and items recorded at one branch on one day."""

    __tablename__ = "branch_daily_summaries"
    __table_args__ = (
        UniqueConstraint("branch_id", "date", name="uq_branch_daily_summary"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    branch_id = Column(Uuid(as_uuid=True), ForeignKey("branches.id", ondelete="RESTRICT"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    total_jobs = Column(Integer, nullable=False, default=0)
    total_items = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    branch = relationship("Branch")

    def __repr__(self) -> str:
        return (
            f"<BranchDailySummary(branch_id={self.branch_id}, date={self.date}, "
            f"jobs={self.total_jobs}, items={self.total_items})>"
        )

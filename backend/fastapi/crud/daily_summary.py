"""
Daily summary (aggregate) operations.

Per-washer and per-branch daily counters are incremented while a job is
recorded, inside the job's transaction. Every increment is a single
``INSERT ... ON CONFLICT DO UPDATE SET col = col + excluded.col`` so two
jobs committed at the same time both land, however they interleave.

The counters can always be recomputed from line items; ``reconcile_day``
compares both and ``rebuild_day`` rewrites the counters from line items.
"""

import logging
from collections import Counter
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4
from sqlalchemy import func, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from backend.fastapi.core.dates import day_bounds
from backend.fastapi.models.daily_summary import BranchDailySummary, WasherDailySummary
from backend.fastapi.models.wash_job import LineItem, WashJob
from backend.fastapi.models.washer import Washer

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _increment(db: Session, model, key: Dict, jobs: int, items: int) -> None:
    """
    Atomically add to a summary row's counters, creating the row if needed.

    Args:
        db: Database session (inside the caller's transaction)
        model: WasherDailySummary or BranchDailySummary
        key: Values of the row's unique key columns
        jobs: Amount to add to total_jobs
        items: Amount to add to total_items
    """
    table = model.__table__
    now = datetime.utcnow()
    insert = _DIALECT_INSERTS.get(db.get_bind().dialect.name)

    if insert is not None:
        stmt = insert(table).values(
            id=uuid4(), total_jobs=jobs, total_items=items,
            created_at=now, updated_at=now, **key
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=list(key),
            set_={
                "total_jobs": table.c.total_jobs + stmt.excluded.total_jobs,
                "total_items": table.c.total_items + stmt.excluded.total_items,
                "updated_at": stmt.excluded.updated_at,
            }
        )
        db.execute(stmt)
        return

    # Other backends: in-place increment, insert when absent
    conditions = [table.c[column] == value for column, value in key.items()]
    increment = (
        update(table)
        .where(*conditions)
        .values(
            total_jobs=table.c.total_jobs + jobs,
            total_items=table.c.total_items + items,
            updated_at=now
        )
    )
    if db.execute(increment).rowcount:
        return
    try:
        with db.begin_nested():
            db.execute(table.insert().values(
                id=uuid4(), total_jobs=jobs, total_items=items,
                created_at=now, updated_at=now, **key
            ))
    except IntegrityError:
        # Row was created concurrently
        db.execute(increment)


def record_job_in_summaries(db: Session, job: WashJob, day: date) -> None:
    """
    Add a newly created job to the daily counters.

    Each credited washer gets +1 job (however many of the job's lines
    are credited to them) and +1 item per credited line. The branch gets
    +1 job and +1 item per line. Does not commit.

    Args:
        db: Database session holding the job's transaction
        job: The job just flushed, with its line items
        day: Business day the job belongs to
    """
    items_per_washer = Counter(line.washer_id for line in job.line_items)

    for washer_id, items in items_per_washer.items():
        _increment(
            db, WasherDailySummary,
            {"washer_id": washer_id, "date": day, "branch_id": job.branch_id},
            jobs=1, items=items
        )

    _increment(
        db, BranchDailySummary,
        {"branch_id": job.branch_id, "date": day},
        jobs=1, items=len(job.line_items)
    )

    logger.debug(
        "Summaries for %s updated with job %s (%d washers, %d items)",
        day, job.id, len(items_per_washer), len(job.line_items)
    )


def get_washer_summary(db: Session, branch_id: UUID, washer_id: UUID,
                       day: date) -> Optional[WasherDailySummary]:
    return (
        db.query(WasherDailySummary)
        .options(joinedload(WasherDailySummary.washer))
        .filter(
            WasherDailySummary.washer_id == washer_id,
            WasherDailySummary.branch_id == branch_id,
            WasherDailySummary.date == day
        )
        .populate_existing()
        .first()
    )


def get_washer_summaries(db: Session, branch_id: UUID, day: date) -> List[WasherDailySummary]:
    """All per-washer rows of a branch day, most items first."""
    return (
        db.query(WasherDailySummary)
        .options(joinedload(WasherDailySummary.washer))
        .filter(
            WasherDailySummary.branch_id == branch_id,
            WasherDailySummary.date == day
        )
        .order_by(WasherDailySummary.total_items.desc())
        .populate_existing()
        .all()
    )


def get_branch_summary(db: Session, branch_id: UUID, day: date) -> Optional[BranchDailySummary]:
    return (
        db.query(BranchDailySummary)
        .filter(
            BranchDailySummary.branch_id == branch_id,
            BranchDailySummary.date == day
        )
        .populate_existing()
        .first()
    )


def compute_expected_counts(db: Session, branch_id: UUID,
                            day: date) -> Tuple[Dict[UUID, Tuple[int, int]], Tuple[int, int]]:
    """
    Recompute the day's counters from line items.

    Returns:
        ``({washer_id: (jobs, items)}, (branch_jobs, branch_items))``
    """
    start, end = day_bounds(day)

    washer_rows = (
        db.query(
            LineItem.washer_id,
            func.count(func.distinct(LineItem.wash_job_id)),
            func.count(LineItem.id)
        )
        .join(WashJob, LineItem.wash_job_id == WashJob.id)
        .filter(
            WashJob.branch_id == branch_id,
            WashJob.washed_at >= start,
            WashJob.washed_at <= end
        )
        .group_by(LineItem.washer_id)
        .all()
    )

    branch_jobs, branch_items = (
        db.query(
            func.count(func.distinct(WashJob.id)),
            func.count(LineItem.id)
        )
        .select_from(WashJob)
        .join(LineItem, LineItem.wash_job_id == WashJob.id)
        .filter(
            WashJob.branch_id == branch_id,
            WashJob.washed_at >= start,
            WashJob.washed_at <= end
        )
        .one()
    )

    expected = {washer_id: (jobs, items) for washer_id, jobs, items in washer_rows}
    return expected, (branch_jobs or 0, branch_items or 0)


def reconcile_day(db: Session, branch_id: UUID, day: date) -> List[dict]:
    """
    Compare the stored counters of a branch day with line items.

    Returns:
        One dict per disagreeing row with keys ``scope``, ``washer``,
        ``stored_jobs``, ``stored_items``, ``expected_jobs`` and
        ``expected_items``. Empty when everything agrees.
    """
    expected, (branch_jobs, branch_items) = compute_expected_counts(db, branch_id, day)
    stored = {row.washer_id: row for row in get_washer_summaries(db, branch_id, day)}

    washer_ids = set(expected) | set(stored)
    washers = {
        washer.id: washer
        for washer in db.query(Washer).filter(Washer.id.in_(washer_ids)).all()
    } if washer_ids else {}

    mismatches = []
    for washer_id in washer_ids:
        row = stored.get(washer_id)
        stored_counts = (row.total_jobs, row.total_items) if row else (0, 0)
        expected_counts = expected.get(washer_id, (0, 0))
        if stored_counts != expected_counts:
            mismatches.append({
                "scope": "washer",
                "washer": washers.get(washer_id),
                "stored_jobs": stored_counts[0],
                "stored_items": stored_counts[1],
                "expected_jobs": expected_counts[0],
                "expected_items": expected_counts[1],
            })

    branch_row = get_branch_summary(db, branch_id, day)
    stored_branch = (branch_row.total_jobs, branch_row.total_items) if branch_row else (0, 0)
    if stored_branch != (branch_jobs, branch_items):
        mismatches.append({
            "scope": "branch",
            "washer": None,
            "stored_jobs": stored_branch[0],
            "stored_items": stored_branch[1],
            "expected_jobs": branch_jobs,
            "expected_items": branch_items,
        })

    if mismatches:
        logger.warning("Branch %s has %d summary mismatches on %s", branch_id, len(mismatches), day)
    return mismatches


def rebuild_day(db: Session, branch_id: UUID, day: date, dry_run: bool = False) -> Tuple[int, int]:
    """
    Rewrite a branch day's counters from line items.

    Existing rows of the day are replaced in one transaction. Jobs
    recorded while the rebuild runs are not seen by it, so run it when
    the branch is closed.

    Args:
        db: Database session
        branch_id: Branch to rebuild
        day: Business day
        dry_run: Compute but roll back instead of committing

    Returns:
        Tuple of (washer rows written, branch rows written)
    """
    expected, (branch_jobs, branch_items) = compute_expected_counts(db, branch_id, day)

    db.query(WasherDailySummary).filter(
        WasherDailySummary.branch_id == branch_id,
        WasherDailySummary.date == day
    ).delete(synchronize_session=False)
    db.query(BranchDailySummary).filter(
        BranchDailySummary.branch_id == branch_id,
        BranchDailySummary.date == day
    ).delete(synchronize_session=False)

    for washer_id, (jobs, items) in expected.items():
        db.add(WasherDailySummary(
            washer_id=washer_id, branch_id=branch_id, date=day,
            total_jobs=jobs, total_items=items
        ))

    branch_rows = 0
    if branch_jobs:
        db.add(BranchDailySummary(
            branch_id=branch_id, date=day,
            total_jobs=branch_jobs, total_items=branch_items
        ))
        branch_rows = 1

    if dry_run:
        db.rollback()
        logger.info("Dry run: would write %d washer rows for branch %s on %s",
                    len(expected), branch_id, day)
    else:
        db.commit()
        logger.info("Rebuilt %d washer rows for branch %s on %s", len(expected), branch_id, day)

    return len(expected), branch_rows

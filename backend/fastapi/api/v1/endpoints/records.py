"""
Wash record API endpoints.

Recording jobs, reading them back, the daily counters and the revenue
summaries. Everything is scoped to the caller's branch except the
all-branches summary. Dates are ``YYYY-MM-DD`` and default to today in
the business timezone.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.fastapi.core.dates import resolve_day
from backend.fastapi.core.exceptions import NotFoundError, StoreError
from backend.fastapi.crud.branch import get_branch
from backend.fastapi.crud.daily_summary import (
    get_washer_summary, get_washer_summaries, get_branch_summary,
    reconcile_day, rebuild_day
)
from backend.fastapi.crud.reports import build_branch_summary, build_all_branches_summary
from backend.fastapi.crud.wash_job import create_wash_job, get_wash_job, get_wash_jobs
from backend.fastapi.crud.washer import get_washer
from backend.fastapi.dependencies.database import get_sync_db
from backend.fastapi.models.branch import Branch
from backend.fastapi.models.user import User
from backend.fastapi.schemas.reports import (
    WasherDailySummaryRead, WasherDailySummaryList, BranchDailySummaryRead,
    BranchSummary, AllBranchesSummary, ReconciliationReport, RebuildResult
)
from backend.fastapi.schemas.wash_job import (
    WashJobCreate, WashJobRead, WashJobCreated, WashJobListResponse
)
from backend.security.dependencies import RequireBranch, RequireUser, RequireSuperAdmin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["records"])


@router.post("/car-wash", response_model=WashJobCreated, status_code=status.HTTP_201_CREATED,
             summary="Record Wash Job")
async def record_wash_job(
    job_in: WashJobCreate,
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Record a wash job in the caller's branch.

    Engine, radiator and condenser items are credited to the branch's
    designated washer whoever is named on the line. The day's per-washer
    and per-branch counters are updated in the same transaction.

    **Errors:**
    - **400**: Empty item list, bad payment method, unknown washers or
      items, missing custom price, no active designated washer
    - **401**: Not authenticated or branch inactive
    - **500**: The job could not be saved (nothing was written)
    """
    try:
        job = create_wash_job(db, branch, job_in)
        return WashJobCreated.model_validate(job)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to record wash job: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record wash job"
        )


@router.get("/car-wash", response_model=WashJobListResponse, summary="List Wash Jobs")
async def list_wash_jobs(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    washer_id: Optional[UUID] = Query(None, description="Only jobs crediting this washer"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Get the branch's jobs of a day, newest first.

    **Errors:**
    - **400**: Washer not in the caller's branch
    """
    jobs = get_wash_jobs(db, branch.id, resolve_day(day), washer_id=washer_id)
    return WashJobListResponse(
        records=[WashJobRead.model_validate(job) for job in jobs],
        count=len(jobs)
    )


@router.get("/car-wash/{job_id}", response_model=WashJobRead, summary="Get Wash Job")
async def get_wash_job_by_id(
    job_id: UUID,
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Get one job of the branch.

    **Errors:**
    - **404**: Job not found in the branch
    """
    job = get_wash_job(db, branch.id, job_id)
    if job is None:
        raise NotFoundError("Car wash record not found")
    return WashJobRead.model_validate(job)


@router.get("/washer/{washer_id}/daily-summary", response_model=WasherDailySummaryRead,
            summary="Washer Daily Counters")
async def read_washer_daily_summary(
    washer_id: UUID,
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Get a washer's job and item counters for a day.

    **Errors:**
    - **404**: Washer not in the branch, or no jobs that day
    """
    if get_washer(db, branch.id, washer_id) is None:
        raise NotFoundError("Washer not found in your branch")

    summary = get_washer_summary(db, branch.id, washer_id, resolve_day(day))
    if summary is None:
        raise NotFoundError("No summary found for this date")
    return WasherDailySummaryRead.model_validate(summary)


@router.get("/washers/daily-summary", response_model=WasherDailySummaryList,
            summary="All Washers Daily Counters")
async def read_washers_daily_summary(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """Get every washer's counters for a day, most items first."""
    day = resolve_day(day)
    summaries = get_washer_summaries(db, branch.id, day)
    return WasherDailySummaryList(
        date=day,
        summaries=[WasherDailySummaryRead.model_validate(row) for row in summaries],
        count=len(summaries)
    )


@router.get("/branch/daily-summary", response_model=BranchDailySummaryRead,
            summary="Branch Daily Counters")
async def read_branch_daily_summary(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """Get the branch's job and item counters for a day (zeros when none)."""
    day = resolve_day(day)
    summary = get_branch_summary(db, branch.id, day)
    if summary is None:
        return BranchDailySummaryRead(branch_id=branch.id, date=day)
    return BranchDailySummaryRead.model_validate(summary)


@router.get("/company-summary", response_model=BranchSummary, summary="Branch Revenue Summary")
async def read_company_summary(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Revenue of the branch for a day, recomputed from the recorded line items.

    Includes company and washer earnings, the per-item breakdown and
    cash/transfer totals.
    """
    return build_branch_summary(db, branch, resolve_day(day))


@router.get("/company-summary-all", response_model=AllBranchesSummary,
            summary="All Branches Revenue Summary")
async def read_company_summary_all(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    current_user: User = RequireUser
):
    """Revenue of every active branch for a day plus the overall totals."""
    return build_all_branches_summary(db, resolve_day(day))


@router.get("/reconcile", response_model=ReconciliationReport, summary="Check Daily Counters")
async def reconcile_daily_summaries(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """Compare the stored counters of a day with the recorded line items."""
    day = resolve_day(day)
    mismatches = reconcile_day(db, branch.id, day)
    return ReconciliationReport(
        date=day,
        branch_id=branch.id,
        is_consistent=not mismatches,
        mismatches=mismatches
    )


@router.post("/reconcile/rebuild", response_model=RebuildResult, summary="Rebuild Daily Counters")
async def rebuild_daily_summaries(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    branch_id: Optional[UUID] = Query(None, description="Branch to rebuild, defaults to your own"),
    db: Session = Depends(get_sync_db),
    current_user: User = RequireSuperAdmin
):
    """
    Rewrite a day's counters from the recorded line items.

    **Permissions:** Requires super admin authentication

    **Errors:**
    - **404**: Branch not found
    - **500**: The counters could not be saved
    """
    day = resolve_day(day)
    target_id = branch_id or current_user.branch_id
    if get_branch(db, target_id) is None:
        raise NotFoundError("Branch not found")

    try:
        washer_rows, branch_rows = rebuild_day(db, target_id, day)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to rebuild summaries for branch %s on %s: %s", target_id, day, e)
        raise StoreError()

    return RebuildResult(
        date=day,
        branch_id=target_id,
        washer_rows=washer_rows,
        branch_rows=branch_rows
    )

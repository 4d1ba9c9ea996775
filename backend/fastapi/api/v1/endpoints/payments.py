"""
Payment API endpoints.

What each washer earned on a day and what the company kept, computed
from the recorded line items of the caller's branch.
"""

from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.fastapi.core.dates import resolve_day
from backend.fastapi.core.exceptions import NotFoundError
from backend.fastapi.crud.reports import (
    build_daily_payment_summary, build_washer_payment_summary, build_company_payment_summary
)
from backend.fastapi.crud.washer import get_washer
from backend.fastapi.dependencies.database import get_sync_db
from backend.fastapi.models.branch import Branch
from backend.fastapi.schemas.reports import (
    DailyPaymentSummary, WasherPaymentSummary, CompanyPaymentSummary
)
from backend.security.dependencies import RequireBranch

router = APIRouter(tags=["payments"])


@router.get("/daily-summary", response_model=DailyPaymentSummary, summary="Daily Washer Payments")
async def read_daily_payments(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Earnings of every washer credited on a day, highest earner first.

    Each washer entry lists the credited lines with their company and
    washer shares.
    """
    return build_daily_payment_summary(db, branch, resolve_day(day))


@router.get("/washer/{washer_id}", response_model=WasherPaymentSummary, summary="Washer Payment")
async def read_washer_payment(
    washer_id: UUID,
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """
    Earnings of one washer on a day.

    **Errors:**
    - **404**: Washer not in the caller's branch
    """
    washer = get_washer(db, branch.id, washer_id)
    if washer is None:
        raise NotFoundError("Washer not found in your branch")
    return build_washer_payment_summary(db, branch, washer, resolve_day(day))


@router.get("/company-summary", response_model=CompanyPaymentSummary, summary="Company Payments")
async def read_company_payments(
    day: Optional[date] = Query(None, alias="date", description="Business day (YYYY-MM-DD), defaults to today"),
    db: Session = Depends(get_sync_db),
    branch: Branch = RequireBranch
):
    """Revenue, company and washer earnings and payment method totals of a day."""
    return build_company_payment_summary(db, branch, resolve_day(day))

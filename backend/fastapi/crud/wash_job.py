"""
Wash job CRUD operations.

A job, its line items, its washer links and the daily counters it adds
to are written in one transaction; any failure leaves none of them.
Jobs are never updated or deleted afterwards.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, joinedload

from backend.fastapi.core.dates import business_now, day_bounds
from backend.fastapi.core.exceptions import StoreError, ValidationError
from backend.fastapi.crud.credit import resolve_credits
from backend.fastapi.crud.daily_summary import record_job_in_summaries
from backend.fastapi.crud.washer import get_washer
from backend.fastapi.models.branch import Branch
from backend.fastapi.models.wash_job import LineItem, PaymentMethod, WashJob
from backend.fastapi.models.washer import Washer
from backend.fastapi.schemas.wash_job import WashJobCreate

logger = logging.getLogger(__name__)

PAYMENT_METHODS = {method.value for method in PaymentMethod}


def _job_loader_options():
    return (
        joinedload(WashJob.branch),
        selectinload(WashJob.line_items).joinedload(LineItem.washer),
        selectinload(WashJob.line_items).joinedload(LineItem.service_item),
        selectinload(WashJob.washers),
    )


def normalize_payment_method(payment_method: Optional[str]) -> Optional[str]:
    """
    Lower-case a payment method and check it is supported.

    Raises:
        ValidationError: If the method is neither cash nor transfer
    """
    if payment_method is None or not payment_method.strip():
        return None
    method = payment_method.strip().lower()
    if method not in PAYMENT_METHODS:
        raise ValidationError('Payment method must be either "cash" or "transfer"')
    return method


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def is_repeat_visit(db: Session, branch_id: UUID, car_number: Optional[str], day: date) -> bool:
    """Whether the car was already recorded at the branch on that day."""
    if not car_number:
        return False
    start, end = day_bounds(day)
    return db.query(
        db.query(WashJob)
        .filter(
            WashJob.branch_id == branch_id,
            func.upper(func.trim(WashJob.car_number)) == car_number.upper(),
            WashJob.washed_at >= start,
            WashJob.washed_at <= end
        )
        .exists()
    ).scalar()


def create_wash_job(db: Session, branch: Branch, job_in: WashJobCreate,
                    now: Optional[datetime] = None) -> WashJob:
    """
    Record a wash job for a branch.

    Lines are resolved to their credited washers and effective prices,
    then the job, its lines, its washer links and the day's counters are
    written and committed together.

    Args:
        db: Database session
        branch: The caller's (active) branch
        job_in: Submitted job
        now: Wash time in the business timezone (defaults to the current time)

    Returns:
        The created job with line items, washers, service items and
        branch loaded; ``is_repeat_visit`` is set on it

    Raises:
        ValidationError: No line items or a bad payment method
        UnresolvedReferenceError: Unknown washer or service item names
        PolicyViolationError: Missing designated washer or custom price
        StoreError: The database rejected the write
    """
    if not job_in.items:
        raise ValidationError("At least one service item must be provided")

    payment_method = normalize_payment_method(job_in.payment_method)
    washed_at = now or business_now()
    day = washed_at.date()
    car_number = _clean(job_in.car_number)

    try:
        resolved = resolve_credits(db, branch.id, job_in.items)
        repeat = is_repeat_visit(db, branch.id, car_number, day)

        job = WashJob(
            branch_id=branch.id,
            car_number=car_number,
            car_model=_clean(job_in.car_model),
            customer_name=_clean(job_in.customer_name),
            customer_phone=_clean(job_in.customer_phone),
            payment_method=payment_method,
            total_amount=sum((line.price for line in resolved), Decimal("0")),
            washed_at=washed_at
        )

        washers = []
        for position, line in enumerate(resolved):
            job.line_items.append(LineItem(
                washer=line.washer,
                service_item=line.service_item,
                price=line.price,
                position=position
            ))
            if line.washer not in washers:
                washers.append(line.washer)
        job.washers = washers

        db.add(job)
        db.flush()

        record_job_in_summaries(db, job, day)
        db.commit()

    except HTTPException:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to record wash job for branch %s: %s", branch.id, e)
        raise StoreError()

    reassigned = [line.service_item.name for line in resolved if line.is_reassigned]
    logger.info(
        "Recorded job %s in branch %s: %d items, total %s%s",
        job.id, branch.code, len(resolved), job.total_amount,
        f", credited to designated washer: {reassigned}" if reassigned else ""
    )
    if repeat:
        logger.warning("Car %s already washed today at branch %s", car_number, branch.code)

    created = get_wash_job(db, branch.id, job.id)
    created.is_repeat_visit = repeat
    return created


def get_wash_job(db: Session, branch_id: UUID, job_id: UUID) -> Optional[WashJob]:
    """Get a job of the branch with its lines expanded, None if not in the branch."""
    return (
        db.query(WashJob)
        .options(*_job_loader_options())
        .filter(WashJob.id == job_id, WashJob.branch_id == branch_id)
        .populate_existing()
        .first()
    )


def get_wash_jobs(db: Session, branch_id: UUID, day: date,
                  washer_id: Optional[UUID] = None) -> List[WashJob]:
    """
    Get the jobs of a branch day, newest first.

    Args:
        db: Database session
        branch_id: Caller's branch
        day: Business day
        washer_id: Only jobs crediting this washer

    Raises:
        ValidationError: If the washer does not belong to the branch
    """
    start, end = day_bounds(day)
    query = (
        db.query(WashJob)
        .options(*_job_loader_options())
        .filter(
            WashJob.branch_id == branch_id,
            WashJob.washed_at >= start,
            WashJob.washed_at <= end
        )
    )

    if washer_id is not None:
        if get_washer(db, branch_id, washer_id) is None:
            raise ValidationError("Washer not found in your branch")
        query = query.filter(WashJob.washers.any(Washer.id == washer_id))

    return query.order_by(WashJob.washed_at.desc()).all()

"""
Revenue reports rebuilt from line items.

Nothing here reads the daily counters: every figure is recomputed from
the line items and jobs of the requested day, so a report is correct
even when the counters are not. Sums are kept exact and rounded to
cents only when the result dict is built.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload

from backend.fastapi.core.dates import day_bounds
from backend.fastapi.core.payment_split import round_money, split_payment
from backend.fastapi.crud.branch import get_active_branches
from backend.fastapi.models.branch import Branch
from backend.fastapi.models.wash_job import LineItem, PaymentMethod, WashJob
from backend.fastapi.models.washer import Washer

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _branch_brief(branch: Branch) -> dict:
    return {"id": branch.id, "name": branch.name, "code": branch.code}


def _washer_brief(washer: Washer) -> dict:
    return {"id": washer.id, "name": washer.name}


def get_day_line_items(db: Session, branch_id: UUID, day: date,
                       washer_id: Optional[UUID] = None) -> List[LineItem]:
    """
    Line items whose job falls within a branch day.

    Args:
        db: Database session
        branch_id: Branch
        day: Business day (midnight to 23:59:59.999999)
        washer_id: Only lines credited to this washer

    Returns:
        Line items with job, washer and service item loaded, oldest first
    """
    start, end = day_bounds(day)
    query = (
        db.query(LineItem)
        .join(WashJob, LineItem.wash_job_id == WashJob.id)
        .options(
            joinedload(LineItem.wash_job),
            joinedload(LineItem.washer),
            joinedload(LineItem.service_item)
        )
        .filter(
            WashJob.branch_id == branch_id,
            WashJob.washed_at >= start,
            WashJob.washed_at <= end
        )
    )
    if washer_id is not None:
        query = query.filter(LineItem.washer_id == washer_id)
    return query.order_by(WashJob.washed_at.asc(), LineItem.position.asc()).all()


def get_day_jobs(db: Session, branch_id: UUID, day: date) -> List[WashJob]:
    start, end = day_bounds(day)
    return db.query(WashJob).filter(
        WashJob.branch_id == branch_id,
        WashJob.washed_at >= start,
        WashJob.washed_at <= end
    ).all()


def _empty_totals() -> dict:
    return {
        "total_sales": ZERO,
        "company_earnings": ZERO,
        "washer_earnings": ZERO,
        "total_jobs": 0,
        "total_items": 0,
        "cash": ZERO,
        "transfer": ZERO,
    }


def _raw_branch_totals(db: Session, branch_id: UUID, day: date) -> dict:
    """Exact (unrounded) totals and item breakdown of a branch day."""
    totals = _empty_totals()
    breakdown: Dict[str, dict] = defaultdict(
        lambda: {"quantity": 0, "total_earnings": ZERO, "company_share": ZERO, "washer_share": ZERO}
    )

    for line in get_day_line_items(db, branch_id, day):
        price = Decimal(line.price)
        split = split_payment(line.service_item.name, price)

        totals["total_sales"] += price
        totals["company_earnings"] += split.company_share
        totals["washer_earnings"] += split.washer_share
        totals["total_items"] += 1

        entry = breakdown[line.service_item.name]
        entry["quantity"] += 1
        entry["total_earnings"] += price
        entry["company_share"] += split.company_share
        entry["washer_share"] += split.washer_share

    # Payment buckets come from the jobs' stored totals, not from the lines
    for job in get_day_jobs(db, branch_id, day):
        totals["total_jobs"] += 1
        if job.payment_method == PaymentMethod.CASH.value:
            totals["cash"] += Decimal(job.total_amount)
        elif job.payment_method == PaymentMethod.TRANSFER.value:
            totals["transfer"] += Decimal(job.total_amount)

    totals["breakdown"] = breakdown
    return totals


def _present_totals(raw: dict) -> dict:
    return {
        "total_sales": round_money(raw["total_sales"]),
        "company_earnings": round_money(raw["company_earnings"]),
        "washer_earnings": round_money(raw["washer_earnings"]),
        "total_jobs": raw["total_jobs"],
        "total_items": raw["total_items"],
        "payment_methods": {
            "cash": round_money(raw["cash"]),
            "transfer": round_money(raw["transfer"]),
        },
    }


def _present_branch(branch: Branch, day: date, raw: dict) -> dict:
    items = sorted(raw["breakdown"].items(), key=lambda kv: kv[1]["total_earnings"], reverse=True)
    summary = _present_totals(raw)
    summary.update({
        "branch": _branch_brief(branch),
        "date": day,
        "items_breakdown": [
            {
                "service_item": name,
                "quantity": entry["quantity"],
                "total_earnings": round_money(entry["total_earnings"]),
                "company_share": round_money(entry["company_share"]),
                "washer_share": round_money(entry["washer_share"]),
            }
            for name, entry in items
        ],
    })
    return summary


def build_branch_summary(db: Session, branch: Branch, day: date) -> dict:
    """
    Revenue summary of a branch day, recomputed from line items.

    Args:
        db: Database session
        branch: Branch to report on
        day: Business day

    Returns:
        Dict shaped like ``BranchSummary``: total sales, company and
        washer earnings, job and item counts, payment method buckets and
        the per-item breakdown (highest earnings first)
    """
    return _present_branch(branch, day, _raw_branch_totals(db, branch.id, day))


def build_all_branches_summary(db: Session, day: date) -> dict:
    """
    Revenue summary of every active branch (by name) plus overall totals.

    Overall totals are summed from the exact per-branch values and rounded
    once, so they can differ by a cent from the sum of the rounded branch
    figures.
    """
    overall = _empty_totals()
    branches = []

    for branch in get_active_branches(db):
        raw = _raw_branch_totals(db, branch.id, day)
        for key in overall:
            overall[key] += raw[key]
        branches.append(_present_branch(branch, day, raw))

    logger.debug("Built all-branches summary for %s over %d branches", day, len(branches))
    return {
        "date": day,
        "branches": branches,
        "overall_totals": _present_totals(overall),
    }


def _washer_payment(washer: Washer, lines: List[LineItem]) -> dict:
    """Exact earnings of one washer over the given lines (rounded on output)."""
    total = washer_total = company_total = ZERO
    entries = []

    for line in lines:
        price = Decimal(line.price)
        split = split_payment(line.service_item.name, price)
        total += price
        washer_total += split.washer_share
        company_total += split.company_share
        entries.append({
            "line_item_id": line.id,
            "wash_job_id": line.wash_job_id,
            "car_number": line.wash_job.car_number,
            "service_item": line.service_item.name,
            "price": round_money(price),
            "company_share": round_money(split.company_share),
            "washer_share": round_money(split.washer_share),
            "washed_at": line.wash_job.washed_at,
        })

    return {
        "washer": _washer_brief(washer),
        "total_amount": total,
        "washer_earnings": washer_total,
        "company_earnings": company_total,
        "items_washed": len(lines),
        "jobs_count": len({line.wash_job_id for line in lines}),
        "items": entries,
    }


def _round_payment(payment: dict) -> dict:
    for key in ("total_amount", "washer_earnings", "company_earnings"):
        payment[key] = round_money(payment[key])
    return payment


def build_daily_payment_summary(db: Session, branch: Branch, day: date) -> dict:
    """
    Earnings of every washer credited on a branch day, highest earner first.

    Returns:
        Dict shaped like ``DailyPaymentSummary``
    """
    lines_by_washer: Dict[UUID, List[LineItem]] = defaultdict(list)
    washers: Dict[UUID, Washer] = {}
    for line in get_day_line_items(db, branch.id, day):
        lines_by_washer[line.washer_id].append(line)
        washers[line.washer_id] = line.washer

    payments = [
        _washer_payment(washers[washer_id], lines)
        for washer_id, lines in lines_by_washer.items()
    ]
    payments.sort(key=lambda payment: payment["washer_earnings"], reverse=True)

    totals = {
        "total_amount": sum((p["total_amount"] for p in payments), ZERO),
        "washer_earnings": sum((p["washer_earnings"] for p in payments), ZERO),
        "company_earnings": sum((p["company_earnings"] for p in payments), ZERO),
        "items_washed": sum(p["items_washed"] for p in payments),
    }

    return {
        "date": day,
        "branch": _branch_brief(branch),
        "washers": [_round_payment(payment) for payment in payments],
        "totals": _round_payment(totals),
    }


def build_washer_payment_summary(db: Session, branch: Branch, washer: Washer, day: date) -> dict:
    """Earnings of one washer of the branch on a day, with each credited line."""
    lines = get_day_line_items(db, branch.id, day, washer_id=washer.id)
    return _round_payment(_washer_payment(washer, lines))


def build_company_payment_summary(db: Session, branch: Branch, day: date) -> dict:
    """Company-side totals of a branch day with payment method buckets."""
    summary = build_branch_summary(db, branch, day)
    return {
        "date": day,
        "branch": summary["branch"],
        "total_revenue": summary["total_sales"],
        "company_earnings": summary["company_earnings"],
        "washer_earnings": summary["washer_earnings"],
        "total_jobs": summary["total_jobs"],
        "total_items": summary["total_items"],
        "payment_methods": summary["payment_methods"],
    }

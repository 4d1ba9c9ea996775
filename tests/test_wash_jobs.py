from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from backend.fastapi.core.exceptions import (
    PolicyViolationError, StoreError, UnresolvedReferenceError, ValidationError
)
from backend.fastapi.crud.daily_summary import get_branch_summary, get_washer_summary
from backend.fastapi.crud.wash_job import create_wash_job, get_wash_job, get_wash_jobs
from backend.fastapi.models import (
    BranchDailySummary, LineItem, WashJob, WasherDailySummary, wash_job_washers
)
from backend.fastapi.schemas.wash_job import WashJobCreate

WASH_TIME = datetime(2026, 10, 18, 10, 30)
DAY = WASH_TIME.date()


def job(*lines, **fields):
    return WashJobCreate(
        items=[
            {"washer_name": washer, "service_item_name": item, "custom_price": price}
            for washer, item, price in (l if len(l) == 3 else (*l, None) for l in lines)
        ],
        **fields
    )


def counts(db):
    return (
        db.query(WashJob).count(),
        db.query(LineItem).count(),
        db.query(wash_job_washers).count(),
        db.query(WasherDailySummary).count(),
        db.query(BranchDailySummary).count(),
    )


def test_sam_and_idowu_example(db, branch_a, washers, service_items):
    created = create_wash_job(
        db, branch_a, job(("Sam", "Engine Wash"), ("Sam", "Full Wash")), now=WASH_TIME
    )

    assert created.total_amount == Decimal("350.00")
    assert [(li.service_item.name, li.washer.name) for li in created.line_items] == [
        ("Engine Wash", "Idowu"),
        ("Full Wash", "Sam"),
    ]
    assert {w.name for w in created.washers} == {"Idowu", "Sam"}
    assert created.washed_at == WASH_TIME
    assert created.is_repeat_visit is False

    for name in ("Idowu", "Sam"):
        summary = get_washer_summary(db, branch_a.id, washers[name].id, DAY)
        assert (summary.total_jobs, summary.total_items) == (1, 1)

    branch_summary = get_branch_summary(db, branch_a.id, DAY)
    assert (branch_summary.total_jobs, branch_summary.total_items) == (1, 2)


def test_two_lines_for_one_washer_count_as_one_job(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, job(("Sam", "Full Wash"), ("Sam", "Interior Vacuum")), now=WASH_TIME)

    summary = get_washer_summary(db, branch_a.id, washers["Sam"].id, DAY)
    assert (summary.total_jobs, summary.total_items) == (1, 2)


def test_second_job_of_the_day_increments_counters(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, job(("Sam", "Full Wash")), now=WASH_TIME)
    create_wash_job(
        db, branch_a, job(("Sam", "Full Wash"), ("Tunde", "Interior Vacuum")),
        now=WASH_TIME.replace(hour=15)
    )

    sam = get_washer_summary(db, branch_a.id, washers["Sam"].id, DAY)
    tunde = get_washer_summary(db, branch_a.id, washers["Tunde"].id, DAY)
    branch = get_branch_summary(db, branch_a.id, DAY)

    assert (sam.total_jobs, sam.total_items) == (2, 2)
    assert (tunde.total_jobs, tunde.total_items) == (1, 1)
    assert (branch.total_jobs, branch.total_items) == (2, 3)


def test_jobs_on_different_days_use_different_rows(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, job(("Sam", "Full Wash")), now=datetime(2026, 10, 17, 23, 59, 59))
    create_wash_job(db, branch_a, job(("Sam", "Full Wash")), now=datetime(2026, 10, 18, 0, 0, 0))

    for day in (date(2026, 10, 17), date(2026, 10, 18)):
        summary = get_washer_summary(db, branch_a.id, washers["Sam"].id, day)
        assert summary.total_jobs == 1


def test_payment_method_is_normalised(db, branch_a, washers, service_items):
    created = create_wash_job(
        db, branch_a, job(("Sam", "Full Wash"), payment_method=" Cash "), now=WASH_TIME
    )

    assert created.payment_method == "cash"


def test_optional_fields_are_trimmed(db, branch_a, washers, service_items):
    created = create_wash_job(
        db, branch_a,
        job(("Sam", "Full Wash"), car_number="  LAG-123 ", car_model="", customer_name="Ada"),
        now=WASH_TIME
    )

    assert created.car_number == "LAG-123"
    assert created.car_model is None
    assert created.customer_name == "Ada"
    assert created.payment_method is None


def test_repeat_visit_is_flagged_but_recorded(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, job(("Sam", "Full Wash"), car_number="LAG-123"), now=WASH_TIME)
    repeat = create_wash_job(
        db, branch_a, job(("Tunde", "Full Wash"), car_number="lag-123"),
        now=WASH_TIME.replace(hour=12)
    )

    assert repeat.is_repeat_visit is True
    assert db.query(WashJob).count() == 2


def test_same_car_on_another_day_is_not_a_repeat(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, job(("Sam", "Full Wash"), car_number="LAG-123"),
                    now=datetime(2026, 10, 17, 9, 0))
    created = create_wash_job(db, branch_a, job(("Sam", "Full Wash"), car_number="LAG-123"),
                              now=WASH_TIME)

    assert created.is_repeat_visit is False


@pytest.mark.parametrize("submission,error", [
    (WashJobCreate(items=[]), ValidationError),
    (job(("Sam", "Full Wash"), payment_method="card"), ValidationError),
    (job(("Sam", "Full Wash"), ("Ghost", "Full Wash")), UnresolvedReferenceError),
    (job(("Sam", "Full Wash"), ("Sam", "Car Rug")), PolicyViolationError),
])
def test_rejected_submissions_write_nothing(db, branch_a, washers, service_items, submission, error):
    with pytest.raises(error):
        create_wash_job(db, branch_a, submission, now=WASH_TIME)

    assert counts(db) == (0, 0, 0, 0, 0)


def test_special_item_without_designated_washer_writes_nothing(db, branch_b, washers_b, service_items):
    with pytest.raises(PolicyViolationError):
        create_wash_job(db, branch_b, job(("Sam", "Full Wash"), ("Sam", "Engine Wash")), now=WASH_TIME)

    assert counts(db) == (0, 0, 0, 0, 0)


def test_store_failure_rolls_back_job(db, branch_a, washers, service_items):
    failure = OperationalError("INSERT", {}, Exception("disk I/O error"))
    with patch("backend.fastapi.crud.wash_job.record_job_in_summaries", side_effect=failure):
        with pytest.raises(StoreError) as exc:
            create_wash_job(db, branch_a, job(("Sam", "Full Wash")), now=WASH_TIME)

    assert exc.value.status_code == 500
    assert "disk" not in exc.value.message
    assert counts(db) == (0, 0, 0, 0, 0)


def test_jobs_are_scoped_to_their_branch(db, branch_a, branch_b, washers, washers_b, service_items):
    created = create_wash_job(db, branch_a, job(("Sam", "Full Wash")), now=WASH_TIME)

    assert get_wash_job(db, branch_a.id, created.id) is not None
    assert get_wash_job(db, branch_b.id, created.id) is None
    assert get_wash_jobs(db, branch_b.id, DAY) == []


def test_list_jobs_by_washer(db, branch_a, washers, service_items):
    first = create_wash_job(db, branch_a, job(("Sam", "Full Wash")), now=WASH_TIME)
    second = create_wash_job(db, branch_a, job(("Tunde", "Engine Wash")), now=WASH_TIME.replace(hour=11))

    assert [j.id for j in get_wash_jobs(db, branch_a.id, DAY)] == [second.id, first.id]
    assert [j.id for j in get_wash_jobs(db, branch_a.id, DAY, washers["Idowu"].id)] == [second.id]
    assert get_wash_jobs(db, branch_a.id, DAY, washers["Tunde"].id) == []


def test_list_jobs_rejects_washer_of_another_branch(db, branch_a, washers, washers_b, service_items):
    with pytest.raises(ValidationError):
        get_wash_jobs(db, branch_a.id, DAY, washers_b["Sam"].id)

from datetime import date, datetime
from decimal import Decimal

import pytest

from backend.fastapi.crud.daily_summary import get_branch_summary
from backend.fastapi.crud.reports import (
    build_all_branches_summary, build_branch_summary, build_company_payment_summary,
    build_daily_payment_summary, build_washer_payment_summary
)
from backend.fastapi.crud.wash_job import create_wash_job
from backend.fastapi.models import Branch, BranchDailySummary, ServiceItem, Washer, WasherDailySummary
from backend.fastapi.schemas.wash_job import WashJobCreate

WASH_TIME = datetime(2026, 10, 18, 8, 0)
DAY = WASH_TIME.date()


def submit(db, branch, items, hour, payment_method=None):
    return create_wash_job(
        db, branch,
        WashJobCreate(items=items, payment_method=payment_method),
        now=WASH_TIME.replace(hour=hour)
    )


@pytest.fixture
def day_of_jobs(db, branch_a, washers, service_items):
    submit(db, branch_a, [
        {"washer_name": "Sam", "service_item_name": "Engine Wash"},
        {"washer_name": "Sam", "service_item_name": "Full Wash"},
    ], hour=8, payment_method="cash")
    submit(db, branch_a, [
        {"washer_name": "Tunde", "service_item_name": "Car Rug", "custom_price": "100.00"},
    ], hour=9, payment_method="transfer")
    submit(db, branch_a, [
        {"washer_name": "Tunde", "service_item_name": "Full Wash"},
    ], hour=10)


def test_branch_summary_totals(db, branch_a, day_of_jobs):
    summary = build_branch_summary(db, branch_a, DAY)

    assert summary["total_sales"] == Decimal("500.00")
    assert summary["company_earnings"] == Decimal("310.00")
    assert summary["washer_earnings"] == Decimal("190.00")
    assert summary["total_jobs"] == 3
    assert summary["total_items"] == 4
    assert summary["payment_methods"] == {"cash": Decimal("350.00"), "transfer": Decimal("100.00")}
    assert summary["branch"]["code"] == "A"


def test_item_breakdown_is_sorted_by_earnings(db, branch_a, day_of_jobs):
    breakdown = build_branch_summary(db, branch_a, DAY)["items_breakdown"]

    assert breakdown[0] == {
        "service_item": "Engine Wash",
        "quantity": 1,
        "total_earnings": Decimal("300.00"),
        "company_share": Decimal("200.00"),
        "washer_share": Decimal("100.00"),
    }
    rest = {entry["service_item"]: entry for entry in breakdown[1:]}
    assert rest["Full Wash"]["quantity"] == 2
    assert rest["Full Wash"]["company_share"] == Decimal("60.00")
    assert rest["Car Rug"]["washer_share"] == Decimal("50.00")


def test_summary_agrees_with_counters_and_ignores_them(db, branch_a, day_of_jobs):
    counters = get_branch_summary(db, branch_a.id, DAY)
    first = build_branch_summary(db, branch_a, DAY)
    assert (first["total_jobs"], first["total_items"]) == (counters.total_jobs, counters.total_items)

    db.query(WasherDailySummary).delete()
    db.query(BranchDailySummary).delete()
    db.commit()

    assert build_branch_summary(db, branch_a, DAY) == first


def test_summary_is_idempotent(db, branch_a, day_of_jobs):
    assert build_branch_summary(db, branch_a, DAY) == build_branch_summary(db, branch_a, DAY)


def test_empty_day(db, branch_a, day_of_jobs):
    summary = build_branch_summary(db, branch_a, date(2026, 10, 19))

    assert summary["total_sales"] == Decimal("0.00")
    assert summary["total_jobs"] == 0
    assert summary["items_breakdown"] == []


def test_rounding_happens_once_on_output(db, branch_a, washers):
    db.add(ServiceItem(name="Condenser Clean", price=Decimal("100.00")))
    db.commit()
    for hour in (8, 9, 10):
        submit(db, branch_a, [{"washer_name": "Sam", "service_item_name": "Condenser Clean"}], hour=hour)

    summary = build_branch_summary(db, branch_a, DAY)

    # 3 x 33.333... is 100.00; rounding each line first would give 99.99
    assert summary["washer_earnings"] == Decimal("100.00")
    assert summary["company_earnings"] == Decimal("200.00")


def test_all_branches_summary(db, branch_a, branch_b, washers_b, day_of_jobs):
    closed = Branch(name="Branch C", code="C")
    db.add(closed)
    db.commit()
    db.add(Washer(name="Ola", branch_id=closed.id))
    db.commit()
    submit(db, closed, [{"washer_name": "Ola", "service_item_name": "Full Wash"}], hour=9)
    closed.is_active = False
    db.commit()

    submit(db, branch_b, [{"washer_name": "Sam", "service_item_name": "Full Wash"}], hour=11,
           payment_method="cash")

    summary = build_all_branches_summary(db, DAY)

    assert [b["branch"]["code"] for b in summary["branches"]] == ["A", "B"]
    overall = summary["overall_totals"]
    assert overall["total_sales"] == Decimal("550.00")
    assert overall["company_earnings"] == Decimal("340.00")
    assert overall["washer_earnings"] == Decimal("210.00")
    assert overall["total_jobs"] == 4
    assert overall["payment_methods"]["cash"] == Decimal("400.00")


def test_daily_payment_summary(db, branch_a, day_of_jobs):
    payments = build_daily_payment_summary(db, branch_a, DAY)

    assert [(w["washer"]["name"], w["washer_earnings"]) for w in payments["washers"]] == [
        ("Idowu", Decimal("100.00")),
        ("Tunde", Decimal("70.00")),
        ("Sam", Decimal("20.00")),
    ]
    tunde = payments["washers"][1]
    assert tunde["items_washed"] == 2
    assert tunde["jobs_count"] == 2
    assert [item["service_item"] for item in tunde["items"]] == ["Car Rug", "Full Wash"]
    assert payments["totals"] == {
        "total_amount": Decimal("500.00"),
        "washer_earnings": Decimal("190.00"),
        "company_earnings": Decimal("310.00"),
        "items_washed": 4,
    }


def test_washer_payment_summary(db, branch_a, washers, day_of_jobs):
    payment = build_washer_payment_summary(db, branch_a, washers["Idowu"], DAY)

    assert payment["total_amount"] == Decimal("300.00")
    assert payment["washer_earnings"] == Decimal("100.00")
    assert payment["items"][0]["service_item"] == "Engine Wash"


def test_company_payment_summary(db, branch_a, day_of_jobs):
    summary = build_company_payment_summary(db, branch_a, DAY)

    assert summary["total_revenue"] == Decimal("500.00")
    assert summary["company_earnings"] == Decimal("310.00")
    assert summary["payment_methods"]["transfer"] == Decimal("100.00")

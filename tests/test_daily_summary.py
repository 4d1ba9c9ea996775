from datetime import datetime

from backend.fastapi.crud.daily_summary import (
    compute_expected_counts, get_branch_summary, get_washer_summaries, get_washer_summary,
    reconcile_day, rebuild_day
)
from backend.fastapi.crud.wash_job import create_wash_job
from backend.fastapi.models import BranchDailySummary, WasherDailySummary
from backend.fastapi.schemas.wash_job import WashJobCreate

WASH_TIME = datetime(2026, 10, 18, 9, 0)
DAY = WASH_TIME.date()


def full_wash(*washer_names):
    return WashJobCreate(items=[
        {"washer_name": name, "service_item_name": "Full Wash"} for name in washer_names
    ])


def test_increments_from_separate_sessions_add_up(db, session_factory, branch_a, washers, service_items):
    create_wash_job(db, branch_a, full_wash("Sam"), now=WASH_TIME)
    stale = get_washer_summary(db, branch_a.id, washers["Sam"].id, DAY)
    assert stale.total_jobs == 1

    other = session_factory()
    try:
        other_branch = other.merge(branch_a)
        create_wash_job(other, other_branch, full_wash("Sam", "Sam"), now=WASH_TIME.replace(hour=10))
    finally:
        other.close()

    # db still holds the row as it was after the first job
    create_wash_job(db, branch_a, full_wash("Sam"), now=WASH_TIME.replace(hour=11))

    summary = get_washer_summary(db, branch_a.id, washers["Sam"].id, DAY)
    assert (summary.total_jobs, summary.total_items) == (3, 4)
    assert db.query(WasherDailySummary).count() == 1
    assert get_branch_summary(db, branch_a.id, DAY).total_jobs == 3


def test_washer_summaries_are_ordered_by_items(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, full_wash("Sam", "Tunde", "Tunde"), now=WASH_TIME)

    rows = get_washer_summaries(db, branch_a.id, DAY)

    assert [row.washer.name for row in rows] == ["Tunde", "Sam"]


def test_expected_counts_match_incremental_counts(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, full_wash("Sam", "Sam"), now=WASH_TIME)
    create_wash_job(db, branch_a, full_wash("Sam", "Tunde"), now=WASH_TIME.replace(hour=14))

    expected, branch_counts = compute_expected_counts(db, branch_a.id, DAY)

    assert expected[washers["Sam"].id] == (2, 3)
    assert expected[washers["Tunde"].id] == (1, 1)
    assert branch_counts == (2, 4)
    assert reconcile_day(db, branch_a.id, DAY) == []


def test_reconcile_reports_and_rebuild_repairs(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, full_wash("Sam"), now=WASH_TIME)
    db.query(WasherDailySummary).update({"total_jobs": 7})
    db.query(BranchDailySummary).delete()
    db.commit()

    mismatches = reconcile_day(db, branch_a.id, DAY)

    by_scope = {m["scope"]: m for m in mismatches}
    assert by_scope["washer"]["washer"].name == "Sam"
    assert (by_scope["washer"]["stored_jobs"], by_scope["washer"]["expected_jobs"]) == (7, 1)
    assert (by_scope["branch"]["stored_jobs"], by_scope["branch"]["expected_items"]) == (0, 1)

    assert rebuild_day(db, branch_a.id, DAY) == (1, 1)
    assert reconcile_day(db, branch_a.id, DAY) == []
    assert get_washer_summary(db, branch_a.id, washers["Sam"].id, DAY).total_jobs == 1


def test_rebuild_dry_run_changes_nothing(db, branch_a, washers, service_items):
    create_wash_job(db, branch_a, full_wash("Sam"), now=WASH_TIME)
    db.query(WasherDailySummary).update({"total_items": 9})
    db.commit()

    assert rebuild_day(db, branch_a.id, DAY, dry_run=True) == (1, 1)

    assert get_washer_summary(db, branch_a.id, washers["Sam"].id, DAY).total_items == 9


def test_rebuild_of_empty_day_clears_rows(db, branch_a, washers):
    db.add(WasherDailySummary(washer_id=washers["Sam"].id, branch_id=branch_a.id, date=DAY,
                              total_jobs=2, total_items=2))
    db.commit()

    assert rebuild_day(db, branch_a.id, DAY) == (0, 0)
    assert get_washer_summaries(db, branch_a.id, DAY) == []

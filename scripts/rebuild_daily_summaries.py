"""
Rebuild the per-washer and per-branch daily counters from line items.

The counters are normally maintained when jobs are recorded. Use this
script to repair a day after manual database edits, or to check it:
with --dry-run the counters are compared and nothing is written.

Run with: python scripts/rebuild_daily_summaries.py [--date YYYY-MM-DD] [--branch CODE] [--dry-run]
"""

import argparse
import os
import sys
from datetime import datetime

# Add parent directory to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from backend.fastapi.core.dates import business_today
from backend.fastapi.crud.branch import get_active_branches, get_branch_by_code
from backend.fastapi.crud.daily_summary import reconcile_day, rebuild_day
from backend.fastapi.dependencies.database import SessionLocal


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--date", help="Business day (YYYY-MM-DD), defaults to today")
    parser.add_argument("--branch", help="Branch code, defaults to every active branch")
    parser.add_argument("--dry-run", action="store_true", help="Report mismatches without writing")
    return parser.parse_args(argv)


def rebuild(day, branch_code=None, dry_run=False):
    """
    Rebuild (or check) the counters of one day.

    Args:
        day: Business day
        branch_code: Only this branch
        dry_run: If True, only show what would be changed without committing

    Returns:
        Number of branches whose counters disagreed with line items
    """
    db = SessionLocal()
    try:
        if branch_code:
            branch = get_branch_by_code(db, branch_code)
            if branch is None:
                raise SystemExit(f"Unknown branch code: {branch_code}")
            branches = [branch]
        else:
            branches = get_active_branches(db)

        print(f"\n{'='*80}")
        print("Daily Summary Rebuild")
        print(f"{'='*80}")
        print(f"Mode: {'DRY RUN' if dry_run else 'LIVE UPDATE'}")
        print(f"Date: {day.isoformat()}")
        print(f"Branches: {', '.join(branch.code for branch in branches)}")
        print(f"{'='*80}\n")

        inconsistent = 0
        for branch in branches:
            mismatches = reconcile_day(db, branch.id, day)
            if not mismatches:
                print(f"[{branch.code}] counters agree with line items")
                continue

            inconsistent += 1
            print(f"[{branch.code}] {len(mismatches)} mismatched rows")
            for mismatch in mismatches:
                label = mismatch["washer"].name if mismatch["washer"] else "branch total"
                print(f"  {label}: jobs {mismatch['stored_jobs']} -> {mismatch['expected_jobs']}, "
                      f"items {mismatch['stored_items']} -> {mismatch['expected_items']}")

            if not dry_run:
                washer_rows, branch_rows = rebuild_day(db, branch.id, day)
                print(f"  rewrote {washer_rows} washer rows and {branch_rows} branch row")

        print(f"\n{'='*80}")
        print(f"Branches with mismatches: {inconsistent}/{len(branches)}")
        if dry_run and inconsistent:
            print("DRY RUN MODE - No changes were made to the database")
        print(f"{'='*80}\n")
        return inconsistent
    finally:
        db.close()


if __name__ == "__main__":
    args = parse_args()
    day = datetime.strptime(args.date, "%Y-%m-%d").date() if args.date else business_today()
    rebuild(day, branch_code=args.branch, dry_run=args.dry_run)

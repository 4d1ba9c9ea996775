"""
Business-day helpers.

Wash timestamps are stored as naive wall-clock datetimes in the configured
business timezone, so a calendar day is simply midnight through
23:59:59.999999 on those naive values.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from backend.fastapi.core.init_settings import global_settings


def business_now() -> datetime:
    """Current wall-clock time in the business timezone (naive)."""
    tz = ZoneInfo(global_settings.BUSINESS_TIMEZONE)
    return datetime.now(tz).replace(tzinfo=None)


def business_today() -> date:
    return business_now().date()


def resolve_day(day: Optional[date]) -> date:
    """Return ``day`` or today's business date when it is not given."""
    return day if day is not None else business_today()


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """
    Get the first and last instant of a business day.

    Args:
        day: Calendar date

    Returns:
        Tuple of (midnight, 23:59:59.999999) as naive datetimes
    """
    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start, end

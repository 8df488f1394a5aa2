"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple


def utcnow() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def days_ago(days: int, now: Optional[datetime] = None) -> datetime:
    """Start of a trailing window of `days` days ending now"""
    return (now or utcnow()) - timedelta(days=days)


def generate_month_range(start: date, end: date) -> List[Tuple[int, int]]:
    """Generate (year, month) pairs from start to end (inclusive)"""
    months = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((year, month))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months

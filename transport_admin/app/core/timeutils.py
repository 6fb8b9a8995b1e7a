"""
Time helpers.

All timestamps written by the application are timezone-aware UTC.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def month_bounds(moment: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return [start of month, start of next month) for the given UTC moment."""
    moment = moment or utcnow()
    start = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end

"""Calendar helpers for UTC month windows."""

from datetime import datetime, timezone
from typing import Tuple


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by ``delta`` months.
    
    Example:
        >>> shift_month(2024, 1, -1)
        (2023, 12)
    """
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Return the half-open UTC window [month_start, next_month_start)."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    next_year, next_month = shift_month(year, month, 1)
    end = datetime(next_year, next_month, 1, tzinfo=timezone.utc)
    return start, end


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """Floor of the elapsed days from ``earlier`` to ``later``, never negative."""
    elapsed = ensure_utc(later) - ensure_utc(earlier)
    return max(0, int(elapsed.total_seconds() // 86400))

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional


def span_days(start: Optional[date], end: Optional[date]) -> int:
    """
    Exclusive day count used by the critical path calculator:
    end - start in calendar days, never negative. Missing dates count as 0.
    """
    if start is None or end is None:
        return 0
    return max(0, (end - start).days)


def inclusive_duration_days(start: Optional[date], end: Optional[date]) -> Optional[int]:
    """Display duration: a task starting and ending on the same day lasts 1 day."""
    if start is None or end is None:
        return None
    return (end - start).days + 1


def working_days_inclusive(start: Optional[date], end: Optional[date]) -> Optional[int]:
    """Mon-Fri days between start and end, both ends included."""
    if start is None or end is None:
        return None
    count = 0
    cur = start
    while cur <= end:
        if cur.weekday() < 5:
            count += 1
        cur += timedelta(days=1)
    return count


def shift_preserving_span(
    start: date,
    end: Optional[date],
    new_start: date,
) -> Optional[date]:
    """
    End date for a task moved from `start` to `new_start` keeping its
    inclusive span; a task without an end keeps none.
    """
    if end is None:
        return None
    return new_start + (end - start)


__all__ = [
    "span_days",
    "inclusive_duration_days",
    "working_days_inclusive",
    "shift_preserving_span",
]

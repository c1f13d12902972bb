"""
Time calculator - Half-open interval math and slot enumeration

All ranges are [start, end): touching endpoints never overlap.
Times of day are handled as minutes since midnight internally so adding a
service duration never wraps past midnight silently.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """True iff [a_start, a_end) and [b_start, b_end) share at least one instant"""
    return a_start < b_end and b_start < a_end


def contains(point, start, end) -> bool:
    """True iff start <= point < end"""
    return start <= point < end


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    """Convert minutes since midnight back to a time; 1440 and beyond are not representable"""
    if minutes < 0 or minutes >= 24 * 60:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return time(minutes // 60, minutes % 60)


def end_minutes(start: time, duration_minutes: int) -> int:
    """Minutes since midnight at which a duration starting at ``start`` ends (may exceed 1440)"""
    return to_minutes(start) + duration_minutes


def add_minutes(start: time, duration_minutes: int) -> time:
    return from_minutes(end_minutes(start, duration_minutes))


def enumerate_slots(start: time, end: time, step_minutes: int, include_closing: bool = True) -> list[time]:
    """
    Candidate start times from ``start`` spaced by ``step_minutes``.

    With ``include_closing`` the closing instant itself is listed when it falls on the grid
    (09:00-18:00 every 30 min gives 19 slots). Without it the last slot is ``end - step``.
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")

    first = to_minutes(start)
    last = to_minutes(end) if include_closing else to_minutes(end) - step_minutes

    slots = []
    current = first
    while current <= last:
        slots.append(from_minutes(current))
        current += step_minutes
    return slots


def split_datetime(value: datetime) -> tuple[date, time]:
    return value.date(), value.time().replace(microsecond=0)


def window(now: datetime, lookahead: timedelta) -> tuple[tuple[date, time], tuple[date, time]]:
    """(date, time) pairs bounding the inclusive window [now, now + lookahead]"""
    return split_datetime(now), split_datetime(now + lookahead)


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """Parse "HH:MM" (or "HH:MM:SS"); returns None for empty input"""
    if not value:
        return None
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time format: {value}. Expected HH:MM")

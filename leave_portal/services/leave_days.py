"""
Working-day arithmetic for leave ranges
"""
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def count_working_days(start: DateLike, end: DateLike) -> int:
    """Count Monday-Friday days in the inclusive range [start, end]"""
    start_day = _as_date(start)
    end_day = _as_date(end)
    if end_day < start_day:
        raise ValueError("end date must not be before start date")

    total = (end_day - start_day).days + 1
    full_weeks, remainder = divmod(total, 7)
    working = full_weeks * 5

    # weekday(): Monday=0 ... Sunday=6
    for offset in range(remainder):
        if (start_day + timedelta(days=full_weeks * 7 + offset)).weekday() < 5:
            working += 1
    return working


def to_datetime(value: DateLike) -> datetime:
    """Normalise a calendar date to midnight for storage"""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, datetime.min.time())

from datetime import date, datetime

import pytest

from leave_portal.services.leave_days import count_working_days, to_datetime


def test_full_working_week():
    assert count_working_days(date(2024, 6, 3), date(2024, 6, 7)) == 5


def test_weekend_is_excluded():
    # Friday to Monday
    assert count_working_days(date(2024, 6, 7), date(2024, 6, 10)) == 2


def test_single_day():
    assert count_working_days(date(2024, 6, 5), date(2024, 6, 5)) == 1


def test_weekend_only_range_is_zero():
    assert count_working_days(date(2024, 6, 8), date(2024, 6, 9)) == 0


def test_multiple_weeks():
    # Monday 3 June to Wednesday 19 June
    assert count_working_days(date(2024, 6, 3), date(2024, 6, 19)) == 13


def test_accepts_datetimes():
    assert count_working_days(datetime(2024, 6, 7, 9), datetime(2024, 6, 10, 18)) == 2


def test_inverted_range_rejected():
    with pytest.raises(ValueError):
        count_working_days(date(2024, 6, 10), date(2024, 6, 7))


def test_to_datetime_is_midnight():
    assert to_datetime(date(2024, 6, 7)) == datetime(2024, 6, 7, 0, 0)

from datetime import date, datetime, timezone

import pytest
import pytz

from app.services.day_boundary import (
    days_between,
    is_previous_day,
    previous_day,
    to_date_key,
    today_key,
    utc_naive,
)


def test_aware_datetime_is_converted_to_reference_zone():
    # 02:00 in India is still the previous evening in UTC
    kolkata = pytz.timezone("Asia/Kolkata").localize(datetime(2025, 1, 6, 2, 0))
    assert to_date_key(kolkata) == date(2025, 1, 5)
    assert to_date_key(kolkata, "Asia/Kolkata") == date(2025, 1, 6)


def test_naive_datetime_is_wall_clock_in_reference_zone():
    assert to_date_key(datetime(2025, 1, 5, 23, 59)) == date(2025, 1, 5)
    assert to_date_key(datetime(2025, 1, 5, 0, 0)) == date(2025, 1, 5)


def test_date_is_returned_as_is():
    assert to_date_key(date(2024, 2, 29)) == date(2024, 2, 29)


def test_instants_in_same_reference_day_share_a_key():
    morning = datetime(2025, 3, 1, 0, 1, tzinfo=timezone.utc)
    night = datetime(2025, 3, 1, 23, 59, tzinfo=timezone.utc)
    assert to_date_key(morning) == to_date_key(night)


@pytest.mark.parametrize("bad", [None, "2025-01-01", 1736467200])
def test_invalid_timestamps_are_rejected(bad):
    with pytest.raises(ValueError):
        to_date_key(bad)


def test_today_key_uses_given_now():
    now = datetime(2025, 1, 10, 23, 30, tzinfo=timezone.utc)
    assert today_key(now) == date(2025, 1, 10)
    assert today_key(now, "Asia/Kolkata") == date(2025, 1, 11)


@pytest.mark.parametrize(
    "earlier,later",
    [
        (date(2024, 12, 31), date(2025, 1, 1)),
        (date(2024, 2, 28), date(2024, 2, 29)),
        (date(2024, 2, 29), date(2024, 3, 1)),
        (date(2025, 1, 31), date(2025, 2, 1)),
    ],
)
def test_previous_day_across_boundaries(earlier, later):
    assert is_previous_day(earlier, later)
    assert previous_day(later) == earlier


def test_days_between_is_signed():
    assert days_between(date(2025, 1, 1), date(2025, 1, 4)) == 3
    assert days_between(date(2025, 1, 4), date(2025, 1, 1)) == -3
    assert not is_previous_day(date(2025, 1, 2), date(2025, 1, 1))
    assert not is_previous_day(date(2025, 1, 1), date(2025, 1, 1))


def test_utc_naive():
    aware = pytz.timezone("Asia/Kolkata").localize(datetime(2025, 1, 6, 5, 30))
    assert utc_naive(aware) == datetime(2025, 1, 6, 0, 0)
    naive = datetime(2025, 1, 6, 5, 30)
    assert utc_naive(naive) is naive

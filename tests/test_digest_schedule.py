"""Tests for the digest scheduling rule."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from blog_notifications.domain.digest_schedule import (
    next_daily_run,
    next_digest_run,
    next_weekly_run,
    sunday_based_weekday,
)
from blog_notifications.domain.entities import DigestTime, DigestType

# 2024-01-14 is a Sunday, 2024-01-15 a Monday.
SUNDAY = datetime(2024, 1, 14, 10, 0)
MONDAY = datetime(2024, 1, 15, 10, 0)


def test_sunday_is_day_zero():
    assert sunday_based_weekday(SUNDAY) == 0
    assert sunday_based_weekday(MONDAY) == 1
    assert sunday_based_weekday(datetime(2024, 1, 20)) == 6


def test_daily_after_target_moves_to_tomorrow():
    assert next_daily_run(MONDAY, "09:00") == datetime(2024, 1, 16, 9, 0)


def test_daily_before_target_stays_today():
    assert next_daily_run(MONDAY.replace(hour=8), "09:00") == datetime(2024, 1, 15, 9, 0)


def test_daily_exactly_at_target_is_not_due_now():
    assert next_daily_run(MONDAY.replace(hour=9), "09:00") == datetime(2024, 1, 16, 9, 0)


def test_weekly_same_day_after_target_moves_a_week():
    assert next_weekly_run(MONDAY, 1, "09:00") == datetime(2024, 1, 22, 9, 0)


def test_weekly_same_day_before_target_stays_today():
    assert next_weekly_run(MONDAY.replace(hour=8), 1, "09:00") == datetime(2024, 1, 15, 9, 0)


def test_weekly_from_sunday_to_monday():
    assert next_weekly_run(SUNDAY, 1, "09:00") == datetime(2024, 1, 15, 9, 0)


def test_weekly_to_sunday():
    assert next_weekly_run(MONDAY, 0, "18:30") == datetime(2024, 1, 21, 18, 30)


def test_weekly_rejects_invalid_weekday():
    with pytest.raises(ValueError):
        next_weekly_run(MONDAY, 7, "09:00")


@pytest.mark.parametrize("digest_type", list(DigestType))
def test_next_digest_run_is_strictly_in_the_future(digest_type):
    digest_time = DigestTime(daily="10:00", weekly_day=1, weekly_time="10:00")

    assert next_digest_run(MONDAY, digest_type, digest_time) > MONDAY


def test_next_digest_run_keeps_timezone():
    now = datetime(2024, 1, 15, 10, 0, tzinfo=ZoneInfo("Europe/Paris"))
    scheduled = next_digest_run(now, "daily", DigestTime())

    assert scheduled.tzinfo == now.tzinfo
    assert (scheduled.hour, scheduled.day) == (9, 16)

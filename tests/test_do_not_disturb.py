"""Tests for the do-not-disturb window evaluator."""

from datetime import datetime

import pytest

from blog_notifications.domain.do_not_disturb import (
    describe_status,
    format_time,
    is_in_window,
    is_valid_time,
    minutes_until_end,
    next_available_time,
    parse_time,
    should_send_now,
)
from blog_notifications.domain.entities import DoNotDisturbWindow, NotificationChannel


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 15, hour, minute)


def window(start: str | None = "22:00", end: str | None = "08:00", enabled: bool = True):
    return DoNotDisturbWindow(enabled=enabled, start=start, end=end)


@pytest.mark.parametrize(
    ("hour", "minute", "expected"),
    [(23, 0, True), (8, 0, True), (8, 1, False), (21, 59, False), (22, 0, True), (0, 0, True)],
)
def test_wrapping_window(hour, minute, expected):
    assert is_in_window(window(), at(hour, minute)) is expected


@pytest.mark.parametrize(
    ("hour", "minute", "expected"),
    [(12, 0, True), (13, 30, True), (14, 0, True), (11, 59, False), (14, 1, False)],
)
def test_same_day_window_is_inclusive(hour, minute, expected):
    assert is_in_window(window("12:00", "14:00"), at(hour, minute)) is expected


def test_disabled_or_incomplete_window_never_matches():
    assert is_in_window(window(enabled=False), at(23)) is False
    assert is_in_window(window(start=None), at(23)) is False
    assert is_in_window(window(end=None), at(3)) is False
    assert minutes_until_end(window(enabled=False), at(23)) == 0


@pytest.mark.parametrize("hour", [0, 9, 12, 23])
def test_equal_bounds_cover_the_whole_day(hour):
    assert is_in_window(window("09:00", "09:00"), at(hour)) is True


def test_equal_bounds_countdown_reaches_next_boundary():
    same = window("09:00", "09:00")

    assert minutes_until_end(same, at(9, 0)) == 1440
    assert minutes_until_end(same, at(9, 1)) == 1439
    assert minutes_until_end(same, at(8, 59)) == 1


def test_minutes_until_end_handles_wrap():
    assert minutes_until_end(window(), at(23, 0)) == 9 * 60
    assert minutes_until_end(window(), at(7, 30)) == 30
    assert minutes_until_end(window(), at(8, 0)) == 0
    assert minutes_until_end(window(), at(12, 0)) == 0


def test_minutes_until_end_strictly_decreases_inside_window():
    readings = [minutes_until_end(window(), at(hour)) for hour in (22, 23, 0, 1, 5, 7)]

    assert readings == sorted(readings, reverse=True)
    assert len(set(readings)) == len(readings)


def test_should_send_now_only_silences_email():
    quiet = window()

    assert should_send_now(quiet, NotificationChannel.IN_APP, at(23)) is True
    assert should_send_now(quiet, NotificationChannel.EMAIL, at(23)) is False
    assert should_send_now(quiet, "email", at(12)) is True


def test_should_send_now_rejects_unknown_channel():
    with pytest.raises(ValueError):
        should_send_now(window(), "push", at(12))


def test_next_available_time():
    assert next_available_time(window(), at(23)) == datetime(2024, 1, 16, 8, 0)
    assert next_available_time(window(), at(12)) == at(12)


def test_describe_status():
    assert describe_status(window(enabled=False), at(23)).description == "Do not disturb is off"

    idle = describe_status(window(), at(12))
    assert idle.is_active is False
    assert idle.description == "Do not disturb window: 22:00 - 08:00"

    active = describe_status(window(), at(6, 55))
    assert active.is_active is True
    assert active.description == "Do not disturb active, ends in 1h 5m"


def test_time_helpers():
    assert is_valid_time("00:00")
    assert is_valid_time("23:59")
    assert not is_valid_time("24:00")
    assert not is_valid_time("9:00")
    assert not is_valid_time(None)
    assert parse_time("07:05") == (7, 5)
    assert parse_time("7:5") is None
    assert format_time(at(7, 5)) == "07:05"

"""Scheduling rule for digest queue entries.

The returned instant is always strictly after ``now`` so a freshly queued
entry is never immediately due. Weekdays follow the stored convention of
0 = Sunday through 6 = Saturday.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from blog_notifications.domain.do_not_disturb import parse_time
from blog_notifications.domain.entities import DigestTime, DigestType


def _at_time_of_day(day: datetime, value: str) -> datetime:
    parsed = parse_time(value)
    if parsed is None:
        raise ValueError(f"Invalid digest time: {value!r}")
    hour, minute = parsed
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)


def sunday_based_weekday(value: datetime) -> int:
    """Return the weekday of ``value`` counting Sunday as 0."""

    return (value.weekday() + 1) % 7


def next_daily_run(now: datetime, time_of_day: str) -> datetime:
    """Return the next occurrence of ``time_of_day`` after ``now``."""

    candidate = _at_time_of_day(now, time_of_day)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def next_weekly_run(now: datetime, weekday: int, time_of_day: str) -> datetime:
    """Return the next ``weekday`` at ``time_of_day`` strictly after ``now``."""

    if not 0 <= weekday <= 6:
        raise ValueError(f"Weekday must be between 0 and 6, got {weekday}")

    days_until_target = (weekday - sunday_based_weekday(now)) % 7
    candidate = _at_time_of_day(now, time_of_day) + timedelta(days=days_until_target)
    if candidate <= now:
        candidate += timedelta(days=7)
    return candidate


def next_digest_run(now: datetime, digest_type: DigestType | str, digest_time: DigestTime) -> datetime:
    """Return when a notification queued at ``now`` should be sent."""

    digest_type = DigestType(digest_type)
    if digest_type is DigestType.DAILY:
        return next_daily_run(now, digest_time.daily)
    if digest_type is DigestType.WEEKLY:
        return next_weekly_run(now, digest_time.weekly_day, digest_time.weekly_time)
    raise ValueError(f"Unsupported digest type: {digest_type!r}")


__all__ = [
    "next_daily_run",
    "next_digest_run",
    "next_weekly_run",
    "sunday_based_weekday",
]

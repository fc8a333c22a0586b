"""Do-not-disturb window evaluation.

All helpers are pure: they receive the wall-clock instant to evaluate and
compare it against ``HH:MM`` bounds that are already expressed in the same
local time. Converting the clock reading into the user's timezone is the
caller's job.

A window whose start is after its end wraps midnight (``22:00``-``08:00``).
Both bounds are inclusive. A window whose start equals its end covers the
whole day.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Final

from blog_notifications.domain.entities import DoNotDisturbWindow, NotificationChannel

TIME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
MINUTES_PER_DAY: Final[int] = 24 * 60


@dataclass(frozen=True)
class WindowStatus:
    """Human readable state of a do-not-disturb window."""

    is_active: bool
    description: str


def is_valid_time(value: str | None) -> bool:
    """Return ``True`` when ``value`` is a valid ``HH:MM`` string."""

    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def parse_time(value: str) -> tuple[int, int] | None:
    """Split an ``HH:MM`` string into ``(hour, minute)``."""

    match = TIME_PATTERN.match(value or "")
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def format_time(value: datetime) -> str:
    """Return ``value`` formatted as ``HH:MM``."""

    return f"{value.hour:02d}:{value.minute:02d}"


def _to_minutes(value: str) -> int:
    parsed = parse_time(value)
    if parsed is None:
        raise ValueError(f"Invalid time of day: {value!r}")
    hour, minute = parsed
    return hour * 60 + minute


def _bounds(window: DoNotDisturbWindow) -> tuple[int, int] | None:
    if not window.enabled or not window.start or not window.end:
        return None
    return _to_minutes(window.start), _to_minutes(window.end)


def is_in_window(window: DoNotDisturbWindow, now: datetime) -> bool:
    """Return ``True`` when ``now`` falls inside ``window``."""

    bounds = _bounds(window)
    if bounds is None:
        return False

    start, end = bounds
    current = now.hour * 60 + now.minute
    if start == end:
        return True
    if start < end:
        return start <= current <= end
    return current >= start or current <= end


def minutes_until_end(window: DoNotDisturbWindow, now: datetime) -> int:
    """Return how many minutes remain until ``window`` ends, 0 when outside."""

    if not is_in_window(window, now):
        return 0

    start, end = _bounds(window)  # type: ignore[misc]
    current = now.hour * 60 + now.minute
    if start == end:
        return (end - current - 1) % MINUTES_PER_DAY + 1
    if start > end and current > end:
        return (MINUTES_PER_DAY - current) + end
    return end - current


def should_send_now(
    window: DoNotDisturbWindow, channel: NotificationChannel | str, now: datetime
) -> bool:
    """Return ``True`` when ``channel`` may be used at ``now``.

    The in-app channel is never silenced; email is silenced inside the window.
    """

    channel = NotificationChannel(channel)
    if channel is NotificationChannel.IN_APP:
        return True
    if channel is NotificationChannel.EMAIL:
        return not is_in_window(window, now)
    raise ValueError(f"Unsupported notification channel: {channel!r}")


def next_available_time(window: DoNotDisturbWindow, now: datetime) -> datetime:
    """Return the first instant, from ``now`` on, outside the window."""

    remaining = minutes_until_end(window, now)
    if remaining == 0:
        return now
    return now + timedelta(minutes=remaining)


def describe_status(window: DoNotDisturbWindow, now: datetime) -> WindowStatus:
    """Summarise the state of ``window`` for display."""

    if not window.enabled:
        return WindowStatus(is_active=False, description="Do not disturb is off")

    if not is_in_window(window, now):
        return WindowStatus(
            is_active=False,
            description=f"Do not disturb window: {window.start} - {window.end}",
        )

    hours, minutes = divmod(minutes_until_end(window, now), 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    remaining = " ".join(parts) or "0m"
    return WindowStatus(
        is_active=True,
        description=f"Do not disturb active, ends in {remaining}",
    )


__all__ = [
    "MINUTES_PER_DAY",
    "TIME_PATTERN",
    "WindowStatus",
    "describe_status",
    "format_time",
    "is_in_window",
    "is_valid_time",
    "minutes_until_end",
    "next_available_time",
    "parse_time",
    "should_send_now",
]

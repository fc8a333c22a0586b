"""Tests for the preference TTL cache."""

import pytest

from blog_notifications.domain.entities import NotificationPreference
from blog_notifications.infrastructure.cache import PreferenceCache


class ManualTimer:
    def __init__(self) -> None:
        self.value = 100.0

    def __call__(self) -> float:
        return self.value


def test_zero_ttl_disables_cache():
    cache = PreferenceCache(0)
    cache.set(NotificationPreference(user_id=1))

    assert cache.enabled is False
    assert cache.get(1) is None


def test_entries_expire_after_ttl():
    timer = ManualTimer()
    cache = PreferenceCache(30, timer=timer)
    cache.set(NotificationPreference(user_id=1))

    timer.value += 29
    assert cache.get(1) is not None

    timer.value += 1
    assert cache.get(1) is None


def test_cached_values_are_copies():
    cache = PreferenceCache(30)
    preference = NotificationPreference(user_id=1)
    cache.set(preference)

    preference.system.in_app = False
    cached = cache.get(1)
    cached.system.email = False

    assert cache.get(1).system.in_app is True
    assert cache.get(1).system.email is True


def test_invalidate_and_clear():
    cache = PreferenceCache(30)
    cache.set(NotificationPreference(user_id=1))
    cache.set(NotificationPreference(user_id=2))

    cache.invalidate(1)
    assert cache.get(1) is None
    assert cache.get(2) is not None

    cache.clear()
    assert cache.get(2) is None


def test_negative_ttl_is_rejected():
    with pytest.raises(ValueError):
        PreferenceCache(-1)


def test_size_stays_bounded():
    cache = PreferenceCache(60, max_entries=100)

    for user_id in range(1, 1001):
        cache.set(NotificationPreference(user_id=user_id))

    assert len(cache) == 100
    assert cache.get(1) is None
    assert cache.get(1000) is not None


def test_expired_entries_do_not_count_towards_size():
    timer = ManualTimer()
    cache = PreferenceCache(30, max_entries=10, timer=timer)
    for user_id in range(1, 6):
        cache.set(NotificationPreference(user_id=user_id))

    timer.value += 30

    assert len(cache) == 0


def test_max_entries_must_be_positive():
    with pytest.raises(ValueError):
        PreferenceCache(30, max_entries=0)

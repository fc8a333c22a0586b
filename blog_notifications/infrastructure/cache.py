"""In-process TTL cache for notification preferences."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from copy import deepcopy

from cachetools import TTLCache

from blog_notifications.domain.entities import NotificationPreference

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 10_000


class PreferenceCache:
    """Keep recently read preferences for ``ttl_seconds``.

    A TTL of ``0`` disables the cache: ``get`` always misses and ``set`` is a
    no-op. At most ``max_entries`` users are kept; expired entries go first,
    then the least recently used. Entries are copied in and out so callers
    cannot mutate cached state.
    """

    def __init__(
        self,
        ttl_seconds: float = 0,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._entries: TTLCache[int, NotificationPreference] = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=timer
        )
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def __len__(self) -> int:
        with self._lock:
            self._entries.expire()
            return len(self._entries)

    def get(self, user_id: int) -> NotificationPreference | None:
        if not self.enabled:
            return None
        with self._lock:
            preference = self._entries.get(user_id)
        return deepcopy(preference) if preference is not None else None

    def set(self, preference: NotificationPreference) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._entries[preference.user_id] = deepcopy(preference)

    def invalidate(self, user_id: int) -> None:
        with self._lock:
            if self._entries.pop(user_id, None) is not None:
                logger.debug("Invalidated cached preferences of user %s", user_id)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


__all__ = ["DEFAULT_MAX_ENTRIES", "PreferenceCache"]

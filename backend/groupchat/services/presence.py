from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PresenceTracker:
    """In-memory map of user id to last heartbeat.

    A user is online while their last heartbeat is younger than the timeout.
    Users that never sent a heartbeat are offline. The map is per-process and
    not persisted; the users table keeps a copy of the timestamp for display.
    """

    def __init__(
        self,
        timeout_seconds: int = 300,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._timeout = timedelta(seconds=timeout_seconds)
        self._clock = clock
        self._last_seen: Dict[int, datetime] = {}
        self._lock = threading.Lock()

    def touch(self, user_id: int) -> datetime:
        """Record a heartbeat for user_id and return its timestamp."""
        seen_at = self._clock()
        with self._lock:
            self._last_seen[user_id] = seen_at
        return seen_at

    def last_seen(self, user_id: int) -> Optional[datetime]:
        with self._lock:
            return self._last_seen.get(user_id)

    def is_active(self, user_id: int) -> bool:
        seen_at = self.last_seen(user_id)
        if seen_at is None:
            return False
        return self._clock() - seen_at < self._timeout

    def count_active(self, user_ids: Iterable[int]) -> int:
        return sum(1 for user_id in user_ids if self.is_active(user_id))

    def prune(self) -> int:
        """Drop heartbeats older than the timeout. Returns how many were removed."""
        cutoff = self._clock() - self._timeout
        with self._lock:
            stale = [user_id for user_id, seen_at in self._last_seen.items() if seen_at <= cutoff]
            for user_id in stale:
                self._last_seen.pop(user_id, None)
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_seen)

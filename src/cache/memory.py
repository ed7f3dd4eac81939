"""In-process snapshot cache with TTL eviction."""

import time
from datetime import date
from typing import Callable, NamedTuple, Optional

from structlog import get_logger

from src.cache.base import SnapshotCache, window_key
from src.models.calendar import CalendarSnapshot

logger = get_logger(__name__)


class _Entry(NamedTuple):
    snapshot: CalendarSnapshot
    expires_at: float


class InMemorySnapshotCache(SnapshotCache):
    """Read-mostly dict of snapshots.

    Entries are replaced whole, never mutated, so concurrent readers in one
    event loop always see a complete snapshot.
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        """Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry
            clock: Monotonic seconds source, injectable for tests
        """
        super().__init__(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, start_date: date, end_date: date) -> Optional[CalendarSnapshot]:
        key = window_key(start_date, end_date)
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None

        if entry.expires_at <= self._clock():
            self._entries.pop(key, None)
            self.misses += 1
            logger.debug("Evicted expired snapshot", window=key)
            return None

        self.hits += 1
        return entry.snapshot

    async def put(self, snapshot: CalendarSnapshot) -> None:
        key = window_key(snapshot.start_date, snapshot.end_date)
        self._entries[key] = _Entry(snapshot, self._clock() + self.ttl_seconds)
        logger.debug("Cached snapshot", window=key, ttl_seconds=self.ttl_seconds)

    async def sweep(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            self._entries.pop(key, None)
        if expired:
            logger.info("Swept expired snapshots", evicted=len(expired), remaining=len(self._entries))
        return len(expired)

"""Snapshot cache contract."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from src.models.calendar import CalendarSnapshot


def window_key(start_date: date, end_date: date) -> str:
    """Deterministic string key of a calendar window."""
    return f"{start_date.isoformat()}:{end_date.isoformat()}"


class SnapshotCache(ABC):
    """Passive store of calendar snapshots keyed by window.

    Expired entries behave as a miss. Callers deduplicate concurrent
    fetches of the same window themselves.
    """

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds

    @abstractmethod
    async def get(self, start_date: date, end_date: date) -> Optional[CalendarSnapshot]:
        """Return the cached snapshot for the window, or None on a miss."""

    @abstractmethod
    async def put(self, snapshot: CalendarSnapshot) -> None:
        """Store a snapshot under its own window; last write wins."""

    @abstractmethod
    async def sweep(self) -> int:
        """Evict every expired entry and return how many were removed."""

    async def close(self) -> None:
        return None

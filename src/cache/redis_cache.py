"""Redis-backed snapshot cache shared across processes."""

from datetime import date
from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError as PydanticValidationError
from redis.exceptions import RedisError
from structlog import get_logger

from src.cache.base import SnapshotCache, window_key
from src.config import settings
from src.models.calendar import CalendarSnapshot

logger = get_logger(__name__)


class RedisSnapshotCache(SnapshotCache):
    """Stores snapshots as JSON with SETEX, so Redis expires them itself.

    Redis failures degrade to a cache miss; the snapshot is then fetched
    from the availability service as if nothing had been cached.
    """

    def __init__(self, ttl_seconds: int, redis_client: Optional[redis.Redis] = None):
        super().__init__(ttl_seconds)
        self.key_prefix = settings.redis.key_prefix
        self.redis_client = redis_client or redis.Redis(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
            password=settings.redis.password,
            ssl=settings.redis.ssl,
            decode_responses=True,
            socket_timeout=settings.redis.socket_timeout,
            socket_connect_timeout=settings.redis.socket_connect_timeout,
        )

    def _key(self, start_date: date, end_date: date) -> str:
        return f"{self.key_prefix}{window_key(start_date, end_date)}"

    async def get(self, start_date: date, end_date: date) -> Optional[CalendarSnapshot]:
        key = self._key(start_date, end_date)
        try:
            payload = await self.redis_client.get(key)
        except RedisError as e:
            logger.warning("Redis get operation failed", key=key, error=str(e))
            return None

        if not payload:
            return None

        try:
            return CalendarSnapshot.model_validate_json(payload)
        except PydanticValidationError as e:
            logger.warning("Ignoring unreadable cached snapshot", key=key, error=str(e))
            return None

    async def put(self, snapshot: CalendarSnapshot) -> None:
        key = self._key(snapshot.start_date, snapshot.end_date)
        try:
            await self.redis_client.setex(
                key, self.ttl_seconds, snapshot.model_dump_json(by_alias=True)
            )
            logger.debug("Stored snapshot in Redis", key=key, ttl_seconds=self.ttl_seconds)
        except RedisError as e:
            logger.warning("Failed to store snapshot in Redis", key=key, error=str(e))

    async def sweep(self) -> int:
        # SETEX entries expire server-side
        return 0

    async def close(self) -> None:
        try:
            await self.redis_client.aclose()
            logger.debug("Closed Redis connection")
        except RedisError as e:
            logger.warning("Error closing Redis connection", error=str(e))

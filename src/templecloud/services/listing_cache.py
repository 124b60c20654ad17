"""Redis-fronted cache of each user's temple listing.

Mutating operations call :meth:`TempleListingCache.invalidate` so the admin
dashboard never shows a deleted temple or misses a new one. When Redis is not
configured every method is a no-op and reads fall through to the database.
"""

import json
import logging

from templecloud.config import settings

logger = logging.getLogger(__name__)


class TempleListingCache:
    def __init__(self, redis=None, ttl_seconds: int | None = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds or settings.listing_cache_ttl_seconds

    @staticmethod
    def key(user_id: str) -> str:
        return f"templecloud:temples:user:{user_id}"

    async def get(self, user_id: str) -> list[dict] | None:
        if self.redis is None:
            return None
        try:
            raw = await self.redis.get(self.key(user_id))
        except Exception as exc:
            logger.warning("Listing cache read failed for %s: %s", user_id, exc)
            return None
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, user_id: str, temples: list[dict]) -> None:
        if self.redis is None:
            return
        try:
            await self.redis.set(self.key(user_id), json.dumps(temples), ex=self.ttl_seconds)
        except Exception as exc:
            logger.warning("Listing cache write failed for %s: %s", user_id, exc)

    async def invalidate(self, user_id: str) -> None:
        if self.redis is None:
            return
        try:
            await self.redis.delete(self.key(user_id))
            logger.debug("Invalidated temple listing for %s", user_id)
        except Exception as exc:
            logger.warning("Listing cache invalidation failed for %s: %s", user_id, exc)

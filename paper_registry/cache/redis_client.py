"""Redis cache client for metadata response caching."""
import json
from typing import Optional, Any

import redis

from paper_registry.utils.config import settings
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)


class RedisCache:
    """Redis cache for raw metadata-source payloads.

    A cache that cannot reach Redis disables itself; every call then behaves
    like a miss so the caller falls through to the live source.
    """

    def __init__(self, client: Optional[redis.Redis] = None, ttl: Optional[int] = None):
        """
        Initialize Redis connection.

        Args:
            client: Pre-built redis client (built from settings when omitted)
            ttl: Default TTL in seconds, defaults to settings.redis_ttl
        """
        self.ttl = ttl or settings.redis_ttl
        try:
            self.client = client or redis.Redis(
                host=settings.redis_host,
                port=settings.redis_port,
                db=settings.redis_db,
                password=settings.redis_password or None,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            self.client.ping()
            logger.info("Redis cache connected")
        except redis.RedisError as e:
            logger.warning(f"Redis connection failed: {e}. Cache disabled.")
            self.client = None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def get(self, key: str) -> Optional[Any]:
        """Get a JSON value, or None on miss or error."""
        if not self.client:
            return None

        try:
            value = self.client.get(key)
            return json.loads(value) if value else None
        except (redis.RedisError, ValueError) as e:
            logger.error(f"Cache get error for key {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a JSON-serializable value with TTL."""
        if not self.client:
            return False

        try:
            self.client.setex(key, ttl or self.ttl, json.dumps(value))
            return True
        except (redis.RedisError, TypeError) as e:
            logger.error(f"Cache set error for key {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete key from cache."""
        if not self.client:
            return False

        try:
            self.client.delete(key)
            return True
        except redis.RedisError as e:
            logger.error(f"Cache delete error for key {key}: {e}")
            return False

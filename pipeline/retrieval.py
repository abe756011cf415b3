"""Cache-aside retrieval of raw event payloads."""
import logging
from typing import Optional, Protocol

from storage.cache_store import (
    CACHE_NAMESPACE,
    CACHE_TTL_SECONDS,
    CacheMiss,
    CacheStore,
    cache_key,
)

logger = logging.getLogger(__name__)


class EventsOrigin(Protocol):
    def fetch_events(self, username: str) -> bytes:
        ...


class RetrievalCoordinator:
    """Decides whether a payload comes from the cache store or the origin."""

    def __init__(
        self,
        origin: EventsOrigin,
        cache_store: Optional[CacheStore] = None,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        namespace: str = CACHE_NAMESPACE
    ):
        """
        Initialize the coordinator.

        Args:
            origin: Client fetching payloads from the events API
            cache_store: Optional cache store; caching is disabled without one
            ttl_seconds: Expiry applied to cache writes (default: 300)
            namespace: Cache key prefix
        """
        self.origin = origin
        self.cache_store = cache_store
        self.ttl_seconds = ttl_seconds
        self.namespace = namespace

    def retrieve(self, username: str) -> bytes:
        """
        Return the raw events payload for a user.

        A cached payload is returned as-is until it expires. On a miss the
        origin is fetched once and the payload written back. Cache errors
        other than a miss are raised without consulting the origin, and a
        failed write-back is raised even though the fetch succeeded.

        Args:
            username: GitHub username

        Returns:
            Raw payload bytes
        """
        if self.cache_store is None:
            return self.origin.fetch_events(username)

        key = cache_key(username, self.namespace)

        try:
            data = self.cache_store.get(key)
        except CacheMiss:
            logger.info(f"Cache miss for {key}, fetching from origin")
            data = self.origin.fetch_events(username)
            self.cache_store.set(key, data, self.ttl_seconds)
            logger.info(f"Cached {len(data)} bytes under {key} for {self.ttl_seconds}s")
            return data

        logger.info(f"Cache hit for {key}")
        return data

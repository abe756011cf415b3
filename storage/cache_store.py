"""Cache store contract and Redis-backed implementation."""
import logging
from typing import Optional, Protocol

import redis
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, TimeoutError as RedisTimeoutError
from redis.retry import Retry

from pipeline.errors import CacheInconsistencyError, TransportError

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = 'github_activity'
CACHE_TTL_SECONDS = 300


class CacheMiss(Exception):
    """Raised by a cache store when the key is not present."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"cache miss: {key}")


class CacheStore(Protocol):
    """Time-bounded key-value store holding raw payloads."""

    def get(self, key: str) -> bytes:
        ...

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        ...

    def close(self) -> None:
        ...


def cache_key(username: str, namespace: str = CACHE_NAMESPACE) -> str:
    """
    Derive the cache key for a user's events payload.

    Args:
        username: GitHub username
        namespace: Key prefix

    Returns:
        Key of the form "<namespace>:<username>"
    """
    return f"{namespace}:{username}"


class RedisCacheStore:
    """Cache store backed by a single Redis connection."""

    def __init__(
        self,
        host: str,
        port: int = 6379,
        client: Optional[redis.Redis] = None
    ):
        """
        Initialize the Redis client.

        Args:
            host: Redis host
            port: Redis port (default: 6379)
            client: Optional pre-built client
        """
        self.host = host
        self.port = port
        self.client = client or redis.Redis(
            host=host,
            port=port,
            retry=Retry(NoBackoff(), 0)
        )
        logger.info(f"Initialized RedisCacheStore for {host}:{port}")

    def get(self, key: str) -> bytes:
        """
        Read a cached payload.

        Args:
            key: Cache key

        Returns:
            Cached bytes

        Raises:
            CacheMiss: If the key is absent or expired
            TransportError: If Redis cannot be reached
            CacheInconsistencyError: On any other Redis failure
        """
        try:
            value = self.client.get(key)
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.error(f"Redis unreachable reading {key}: {e}")
            raise TransportError(f"failed on get key from redis: {e}") from e
        except RedisError as e:
            logger.error(f"Redis read failed for {key}: {e}")
            raise CacheInconsistencyError(
                f"failed on get key from redis: {e}"
            ) from e

        if value is None:
            raise CacheMiss(key)

        return value

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """
        Store a payload with a fixed expiry.

        Args:
            key: Cache key
            value: Raw payload bytes
            ttl_seconds: Expiry in seconds

        Raises:
            CacheInconsistencyError: If the write fails for any reason
        """
        try:
            self.client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            logger.error(f"Redis write failed for {key}: {e}")
            raise CacheInconsistencyError(
                f"failed on set key on redis: {e}"
            ) from e

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> 'RedisCacheStore':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

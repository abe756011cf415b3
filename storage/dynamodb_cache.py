"""DynamoDB-backed cache store for raw event payloads."""
import logging
import time
from typing import Callable, Optional

import boto3
from boto3.dynamodb.types import Binary
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, HTTPClientError
from botocore.exceptions import ConnectionError as BotoConnectionError

from pipeline.errors import CacheInconsistencyError, TransportError
from storage.cache_store import CacheMiss

logger = logging.getLogger(__name__)

# One attempt per call
NO_RETRY_CONFIG = Config(retries={'max_attempts': 1, 'mode': 'standard'})


class DynamoDBCacheStore:
    """
    Cache store keeping payloads in a DynamoDB table.

    Items have the shape {cache_key (S), payload (B), ttl (N)}. DynamoDB
    reaps expired items lazily, so reads compare ttl against the clock.
    """

    def __init__(
        self,
        table_name: str,
        clock: Callable[[], float] = time.time,
        endpoint_url: Optional[str] = None
    ):
        """
        Initialize DynamoDB client and table reference.

        Args:
            table_name: Name of the DynamoDB table
            clock: Source of the current epoch time in seconds
            endpoint_url: Optional DynamoDB endpoint, e.g. DynamoDB Local
        """
        self.table_name = table_name
        self.clock = clock
        self.dynamodb = boto3.resource(
            'dynamodb',
            endpoint_url=endpoint_url,
            config=NO_RETRY_CONFIG
        )
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized DynamoDBCacheStore for table: {table_name}")

    def get(self, key: str) -> bytes:
        """
        Read a cached payload.

        Args:
            key: Cache key

        Returns:
            Cached bytes

        Raises:
            CacheMiss: If the item is absent or its ttl has passed
            TransportError: If DynamoDB cannot be reached
            CacheInconsistencyError: On any other DynamoDB failure
        """
        try:
            response = self.table.get_item(Key={'cache_key': key})
        except (HTTPClientError, BotoConnectionError) as e:
            logger.error(f"DynamoDB unreachable reading {key}: {e}")
            raise TransportError(f"failed on get key from dynamodb: {e}") from e
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB read failed for {key}: {e}")
            raise CacheInconsistencyError(
                f"failed on get key from dynamodb: {e}"
            ) from e

        item = response.get('Item')
        if not item:
            raise CacheMiss(key)

        try:
            expires_at = int(item.get('ttl', 0))
        except (TypeError, ValueError) as e:
            raise CacheInconsistencyError(
                f"cached item {key} has an invalid ttl: {e}"
            ) from e

        if expires_at <= self.clock():
            logger.info(f"Cached item {key} has expired")
            raise CacheMiss(key)

        return self._payload_bytes(item.get('payload'))

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
        item = {
            'cache_key': key,
            'payload': Binary(value),
            'ttl': int(self.clock()) + ttl_seconds
        }

        try:
            self.table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB write failed for {key}: {e}")
            raise CacheInconsistencyError(
                f"failed on set key on dynamodb: {e}"
            ) from e

    def close(self) -> None:
        self.dynamodb.meta.client.close()

    def __enter__(self) -> 'DynamoDBCacheStore':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _payload_bytes(self, payload: Optional[object]) -> bytes:
        if isinstance(payload, Binary):
            return payload.value
        if isinstance(payload, (bytes, bytearray)):
            return bytes(payload)
        raise CacheInconsistencyError("cached item has no binary payload")

"""
Redis Repository Base Class

Provides JSON document storage and atomic script execution on top of a
pooled Redis client. Connection and serialization errors propagate to the
caller so that store failures are never mistaken for missing data.
"""

import json
import logging
from typing import Any, Dict, Optional

import redis
from redis.exceptions import ConnectionError as RedisConnectionError

logger = logging.getLogger(__name__)


class RedisRepository:
    """Base Redis repository with JSON helpers and Lua script execution."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def set_json(self, key: str, data: Dict[str, Any], only_if_absent: bool = False) -> bool:
        """
        Store a JSON document.

        Args:
            key: Redis key (unprefixed)
            data: Dictionary to store as JSON
            only_if_absent: Use SET NX so an existing key is never overwritten

        Returns:
            True if the value was written, False if NX blocked the write
        """
        redis_key = self._make_key(key)
        result = self.redis.set(redis_key, json.dumps(data), nx=only_if_absent)
        return bool(result)

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get a JSON document.

        Args:
            key: Redis key (unprefixed)

        Returns:
            Dictionary if the key exists, None otherwise
        """
        data = self.redis.get(self._make_key(key))
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)

    def eval_script(self, script: str, key: str, *args: Any) -> Any:
        """
        Run a Lua script against one key.

        Redis executes scripts atomically, so a read-modify-write done
        inside the script cannot interleave with other writers.

        Args:
            script: Lua source
            key: Redis key (unprefixed), passed as KEYS[1]
            *args: Script arguments (ARGV)

        Returns:
            Raw script result
        """
        return self.redis.eval(script, 1, self._make_key(key), *args)


class RedisConnectionManager:
    """Manages Redis connection with connection pooling."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 max_connections: int = 20, password: Optional[str] = None,
                 ssl: bool = False):
        pool_kwargs = {}
        if ssl:
            pool_kwargs["connection_class"] = redis.SSLConnection

        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            decode_responses=False,
            retry_on_timeout=True,
            socket_keepalive=True,
            **pool_kwargs,
        )
        self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance with connection pooling."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return bool(self.client.ping())
        except RedisConnectionError as e:
            logger.warning(f"Redis health check failed: {e}")
            return False

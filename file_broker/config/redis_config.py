"""
Redis Configuration

Reads connection settings for the file record store and owns the shared
connection manager the store and the health check use.
"""

import os
from typing import Optional
from urllib.parse import urlparse

import redis

from file_broker.infrastructure.redis_repository import RedisConnectionManager, RedisRepository


class RedisConfig:
    """Redis configuration settings."""

    def __init__(self):
        self.host = os.getenv("REDIS_HOST", "localhost")
        self.port = int(os.getenv("REDIS_PORT", 6379))
        self.db = int(os.getenv("REDIS_DB", 0))
        self.password = os.getenv("REDIS_PASSWORD")
        self.ssl = os.getenv("REDIS_SSL", "false").lower() == "true"
        self.max_connections = int(os.getenv("REDIS_MAX_CONNECTIONS", 20))
        self.key_prefix = os.getenv("FILE_RECORD_KEY_PREFIX", "file_broker")

        # REDIS_URL wins over the discrete settings; rediss:// turns on TLS
        self.url = os.getenv("REDIS_URL")
        if self.url:
            params = redis.connection.parse_url(self.url)
            self.host = params.get("host", self.host)
            self.port = params.get("port", self.port)
            self.db = params.get("db", self.db)
            self.password = params.get("password", self.password)
            self.ssl = urlparse(self.url).scheme == "rediss"


_redis_manager: Optional[RedisConnectionManager] = None


def init_redis(config: Optional[RedisConfig] = None) -> RedisConnectionManager:
    """
    Initialize the shared Redis connection manager.

    Connections are opened lazily, so this never touches the network.

    Args:
        config: Redis configuration, uses default if None

    Returns:
        RedisConnectionManager instance
    """
    global _redis_manager

    if config is None:
        config = RedisConfig()

    _redis_manager = RedisConnectionManager(
        host=config.host,
        port=config.port,
        db=config.db,
        password=config.password,
        ssl=config.ssl,
        max_connections=config.max_connections,
    )
    return _redis_manager


def get_redis_repository(key_prefix: str) -> RedisRepository:
    """
    Get a key-prefixed repository over the shared connection pool.

    Raises:
        RuntimeError: If Redis is not initialized
    """
    if _redis_manager is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")

    return RedisRepository(_redis_manager.client, key_prefix)


def redis_health_check() -> bool:
    """True if Redis answers a ping."""
    if _redis_manager is None:
        return False

    return _redis_manager.health_check()

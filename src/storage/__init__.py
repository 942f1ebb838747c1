"""
Storage clients for adapter state.

Components:
    redis_client: Async Redis client holding the shared nonce counter
"""

from src.storage.redis_client import (
    RedisClient,
    RedisClientError,
    RedisConnectionException,
    RedisOperationError,
)

__all__: list[str] = [
    "RedisClient",
    "RedisClientError",
    "RedisConnectionException",
    "RedisOperationError",
]

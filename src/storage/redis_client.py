"""
Async Redis client for durable adapter state.

The only state the adapter keeps between runs is the request nonce. This
client stores it as a plain integer counter and advances it atomically
with a server-side script, so concurrent processes sharing one API key can
never read the same value.

Key Patterns:
    - Nonce counters: `{prefix}:{key_fingerprint}` (string holding an integer)

Note:
    Durability across Redis restarts depends on the server's persistence
    settings (AOF with ``appendfsync always`` is recommended).

Example:
    >>> from src.config.models import RedisConnectionConfig
    >>> from src.storage.redis_client import RedisClient
    >>>
    >>> client = RedisClient(RedisConnectionConfig(url="redis://localhost:6379"))
    >>> await client.connect()
    >>> value = await client.advance_counter("nonce:yobit:ab12cd34", ceiling=2**31 - 1)
"""

from __future__ import annotations

from typing import Optional

import structlog
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, TimeoutError as RedisTimeoutError

from src.config.models import RedisConnectionConfig

logger = structlog.get_logger(__name__)

# Returns the new value, or -1 when the counter already sits at the ceiling.
_ADVANCE_SCRIPT = """
local current = tonumber(redis.call('GET', KEYS[1]) or '0')
if current == nil then
    return redis.error_reply('counter is not an integer')
end
local ceiling = tonumber(ARGV[1])
if current >= ceiling then
    return -1
end
current = current + 1
redis.call('SET', KEYS[1], current)
return current
"""


class RedisClientError(Exception):
    """Base exception for Redis client errors."""

    pass


class RedisConnectionException(RedisClientError):
    """Raised when Redis connection fails."""

    pass


class RedisOperationError(RedisClientError):
    """Raised when a Redis operation fails."""

    pass


class RedisClient:
    """
    Async Redis client for adapter state.

    Attributes:
        config: Redis connection configuration.
        _pool: Connection pool for efficient connection reuse.
        _client: Redis client instance.
        _connected: Whether the client is connected.

    Example:
        >>> client = RedisClient(RedisConnectionConfig())
        >>> await client.connect()
        >>> try:
        ...     await client.get_counter("nonce:yobit:ab12cd34")
        ... finally:
        ...     await client.disconnect()
    """

    def __init__(self, config: RedisConnectionConfig) -> None:
        """
        Initialize the Redis client.

        Args:
            config: Redis connection configuration containing URL, db, and pool settings.
        """
        self.config = config
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None  # type: ignore[type-arg]
        self._connected: bool = False

        logger.info(
            "redis_client_initialized",
            url=config.url,
            db=config.db,
            max_connections=config.max_connections,
        )

    @property
    def is_connected(self) -> bool:
        """
        Check if the client is connected to Redis.

        Returns:
            bool: True if connected, False otherwise.
        """
        return self._connected and self._client is not None

    async def connect(self) -> None:
        """
        Establish connection to Redis.

        Creates a connection pool and verifies it with PING.

        Raises:
            RedisConnectionException: If connection fails.
        """
        if self._connected:
            logger.warning("redis_already_connected")
            return

        try:
            self._pool = ConnectionPool.from_url(
                self.config.url,
                db=self.config.db,
                max_connections=self.config.max_connections,
                socket_timeout=self.config.socket_timeout,
                socket_connect_timeout=self.config.socket_timeout,
                decode_responses=True,
            )
            self._client = Redis(connection_pool=self._pool)

            await self._client.ping()
            self._connected = True

            logger.info(
                "redis_connected",
                url=self.config.url,
                db=self.config.db,
            )

        except (RedisConnectionError, RedisTimeoutError, OSError) as e:
            self._connected = False
            logger.error(
                "redis_connection_failed",
                url=self.config.url,
                error=str(e),
            )
            raise RedisConnectionException(
                f"Failed to connect to Redis at {self.config.url}: {e}"
            ) from e

    async def disconnect(self) -> None:
        """
        Close Redis connection and release resources.

        Safe to call multiple times.
        """
        if self._client is not None:
            try:
                await self._client.aclose()
            except RedisError as e:
                logger.warning("redis_close_error", error=str(e))
            finally:
                self._client = None

        if self._pool is not None:
            try:
                await self._pool.aclose()
            except RedisError as e:
                logger.warning("redis_pool_close_error", error=str(e))
            finally:
                self._pool = None

        self._connected = False
        logger.info("redis_disconnected")

    def _require_connection(self) -> Redis:  # type: ignore[type-arg]
        """
        Ensure client is connected and return the Redis instance.

        Raises:
            RedisConnectionException: If not connected.
        """
        if not self._connected or self._client is None:
            raise RedisConnectionException("Redis client is not connected")
        return self._client

    # =========================================================================
    # COUNTERS
    # =========================================================================

    async def get_counter(self, key: str) -> Optional[str]:
        """
        Read the raw counter value.

        Args:
            key: Counter key.

        Returns:
            Optional[str]: Stored value, or None if the key does not exist.

        Raises:
            RedisConnectionException: If not connected.
            RedisOperationError: If the operation fails.
        """
        client = self._require_connection()
        try:
            return await client.get(key)
        except RedisError as e:
            logger.error("redis_get_counter_failed", key=key, error=str(e))
            raise RedisOperationError(f"Failed to read counter {key}: {e}") from e

    async def advance_counter(self, key: str, ceiling: int) -> Optional[int]:
        """
        Atomically increment a counter by one unless it reached ``ceiling``.

        Args:
            key: Counter key. A missing key counts as 0.
            ceiling: Largest value the counter may hold.

        Returns:
            Optional[int]: The new value, or None if the counter already
                holds ``ceiling`` (the stored value is left unchanged).

        Raises:
            RedisConnectionException: If not connected.
            RedisOperationError: If the script fails, including when the
                stored value is not an integer.
        """
        client = self._require_connection()
        try:
            result = await client.eval(_ADVANCE_SCRIPT, 1, key, ceiling)
        except RedisError as e:
            logger.error("redis_advance_counter_failed", key=key, error=str(e))
            raise RedisOperationError(f"Failed to advance counter {key}: {e}") from e

        value = int(result)
        if value < 0:
            return None
        return value

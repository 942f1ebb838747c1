"""
Durable request nonce storage.

The exchange authenticates private calls with an integer nonce that must
grow by exactly one per request for the lifetime of an API key, across
process restarts. A reused or smaller value makes the exchange reject the
key permanently, so the new value is committed to durable storage before
``next()`` returns it.

Backends:
    FileNonceStore: One file per API key, fsync'd and atomically replaced.
    RedisNonceStore: Shared counter advanced by a server-side script.

Example:
    >>> store = FileNonceStore(Path("~/.yobit/nonce").expanduser(), public_key)
    >>> nonce = await store.next()
"""

import asyncio
import hashlib
import os
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from src.interfaces.exceptions import NonceExhaustedError, NonceStoreCorruptedError
from src.storage.redis_client import RedisClient

logger = structlog.get_logger(__name__)

MAX_NONCE = 2_147_483_647


def key_fingerprint(public_key: str) -> str:
    """
    Derive a stable, non-reversible identifier for an API key.

    Used to key persisted state without writing the key itself to disk
    or to logs.

    Args:
        public_key: Public API key.

    Returns:
        str: First 16 hex characters of the key's SHA-256 digest.
    """
    return hashlib.sha256(public_key.encode("utf-8")).hexdigest()[:16]


class NonceStore(ABC):
    """
    Strictly increasing, persisted 32-bit nonce for one API key.

    Implementations must commit the new value before returning it and must
    never reset or wrap around.
    """

    max_nonce: int = MAX_NONCE

    @abstractmethod
    async def next(self) -> int:
        """
        Reserve and persist the next nonce.

        Returns:
            int: A value exactly one above the last committed value.

        Raises:
            NonceExhaustedError: If the last committed value is the maximum.
            NonceStoreCorruptedError: If stored state is not an integer.
        """
        pass

    @abstractmethod
    async def current(self) -> int:
        """Return the last committed value, 0 if none was ever used."""
        pass

    async def close(self) -> None:
        """Release resources. Override if needed."""


class FileNonceStore(NonceStore):
    """
    Nonce persisted in a small text file.

    Every ``next()`` re-reads the file, increments, writes a temp file,
    fsyncs it and renames it over the old one. A crash at any point leaves
    either the old or the new value on disk, never a partial write.

    Attributes:
        path: File holding the last committed nonce.
    """

    def __init__(self, directory: Path, public_key: str):
        """
        Initialize file store.

        Args:
            directory: Directory holding nonce files. Created on first write.
            public_key: Public API key the nonce belongs to.
        """
        self._fingerprint = key_fingerprint(public_key)
        self.path = Path(directory) / f"{self._fingerprint}.nonce"
        self._lock = asyncio.Lock()

    async def next(self) -> int:
        async with self._lock:
            current = await asyncio.to_thread(self._read)
            if current >= self.max_nonce:
                logger.error(
                    "nonce_exhausted",
                    backend="file",
                    key=self._fingerprint,
                    value=current,
                )
                raise NonceExhaustedError(
                    f"Nonce reached {self.max_nonce}; create a new API key"
                )
            value = current + 1
            await asyncio.to_thread(self._write, value)
            logger.debug("nonce_committed", backend="file", key=self._fingerprint, value=value)
            return value

    async def current(self) -> int:
        async with self._lock:
            return await asyncio.to_thread(self._read)

    def _read(self) -> int:
        """Read the stored value; a missing file means no nonce was used."""
        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return 0

        try:
            value = int(raw)
        except ValueError as e:
            raise NonceStoreCorruptedError(
                f"Nonce file {self.path} does not hold an integer"
            ) from e
        if value < 0 or value > self.max_nonce:
            raise NonceStoreCorruptedError(
                f"Nonce file {self.path} holds out-of-range value {value}"
            )
        return value

    def _write(self, value: int) -> None:
        """Durably replace the stored value."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(str(value))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.path)

        # Persist the rename itself
        if os.name == "posix":
            dir_fd = os.open(self.path.parent, os.O_RDONLY)
            try:
                os.fsync(dir_fd)
            finally:
                os.close(dir_fd)

    def __repr__(self) -> str:
        return f"FileNonceStore(path={self.path})"


class RedisNonceStore(NonceStore):
    """
    Nonce held in a Redis counter.

    Suitable when several processes share one API key. The increment and
    the overflow check run in one script, so two callers never receive the
    same value.
    """

    def __init__(
        self,
        client: RedisClient,
        public_key: str,
        key_prefix: str = "nonce:yobit",
    ):
        """
        Initialize Redis store.

        Args:
            client: Redis client; connected lazily on first use.
            public_key: Public API key the nonce belongs to.
            key_prefix: Prefix of the counter key.
        """
        self._client = client
        self._fingerprint = key_fingerprint(public_key)
        self.key = f"{key_prefix}:{self._fingerprint}"

    async def _ensure_connected(self) -> None:
        if not self._client.is_connected:
            await self._client.connect()

    async def next(self) -> int:
        await self._ensure_connected()
        value = await self._client.advance_counter(self.key, ceiling=self.max_nonce)
        if value is None:
            logger.error("nonce_exhausted", backend="redis", key=self._fingerprint)
            raise NonceExhaustedError(
                f"Nonce reached {self.max_nonce}; create a new API key"
            )
        logger.debug("nonce_committed", backend="redis", key=self._fingerprint, value=value)
        return value

    async def current(self) -> int:
        await self._ensure_connected()
        raw = await self._client.get_counter(self.key)
        if raw is None:
            return 0
        try:
            return int(raw)
        except ValueError as e:
            raise NonceStoreCorruptedError(
                f"Redis key {self.key} does not hold an integer"
            ) from e

    async def close(self) -> None:
        await self._client.disconnect()

    def __repr__(self) -> str:
        return f"RedisNonceStore(key={self.key})"

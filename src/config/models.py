"""
Pydantic models for configuration validation.

All configuration values are validated on load so that errors surface at
startup instead of on the first authenticated call.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator

# =============================================================================
# ENUMS
# =============================================================================


class LogFormat(str, Enum):
    """Logging format options."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class NonceBackend(str, Enum):
    """Where the request nonce is persisted."""

    FILE = "file"
    REDIS = "redis"


# =============================================================================
# EXCHANGE CONFIGURATION
# =============================================================================


class RestEndpoints(BaseModel):
    """REST API endpoint URLs for the exchange."""

    model_config = {"frozen": True, "extra": "forbid"}

    public: str = Field(
        default="https://yobit.net/api/3",
        description="Base URL of the unauthenticated API",
    )
    private: str = Field(
        default="https://yobit.net/tapi",
        description="URL of the authenticated (trade) API",
    )


class ConnectionSettings(BaseModel):
    """HTTP connection settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    timeout_seconds: int = Field(
        default=30,
        description="Total request timeout",
        ge=1,
        le=300,
    )
    user_agent: str = Field(
        default="yobit-adapter/0.1",
        description="User-Agent header sent with every request",
    )


class ExchangeConfig(BaseModel):
    """Configuration for the exchange connection."""

    model_config = {"frozen": True, "extra": "forbid"}

    rest: RestEndpoints = Field(
        default_factory=RestEndpoints,
        description="REST API endpoint configuration",
    )
    connection: ConnectionSettings = Field(
        default_factory=ConnectionSettings,
        description="Connection settings",
    )


# =============================================================================
# CREDENTIALS AND NONCE STORAGE
# =============================================================================


class CredentialsConfig(BaseModel):
    """
    API key pair.

    Both values are held as SecretStr so they never appear in reprs,
    validation errors or log output.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    public_key: SecretStr
    private_key: SecretStr


class NonceStorageConfig(BaseModel):
    """Nonce persistence settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    backend: NonceBackend = Field(
        default=NonceBackend.FILE,
        description="Persistence backend for the request nonce",
    )
    directory: Path = Field(
        default=Path("~/.yobit/nonce"),
        description="Directory holding one nonce file per API key (file backend)",
    )
    redis_key_prefix: str = Field(
        default="nonce:yobit",
        description="Key prefix for the nonce counter (redis backend)",
        min_length=1,
    )

    @field_validator("directory")
    @classmethod
    def expand_directory(cls, v: Path) -> Path:
        """Expand ``~`` in the configured directory."""
        return v.expanduser()


class RedisConnectionConfig(BaseModel):
    """Redis connection configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL",
    )
    db: int = Field(
        default=0,
        description="Redis database number",
        ge=0,
    )
    max_connections: int = Field(
        default=10,
        description="Maximum connection pool size",
        ge=1,
    )
    socket_timeout: int = Field(
        default=5,
        description="Socket timeout in seconds",
        ge=1,
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Default log level",
    )


# =============================================================================
# ROOT CONFIGURATION
# =============================================================================


class AppConfig(BaseModel):
    """
    Root application configuration.

    Example:
        >>> config = AppConfig()
        >>> config.exchange.rest.public
        'https://yobit.net/api/3'
    """

    model_config = {"frozen": True, "extra": "forbid"}

    exchange: ExchangeConfig = Field(
        default_factory=ExchangeConfig,
        description="Exchange connection settings",
    )
    nonce: NonceStorageConfig = Field(
        default_factory=NonceStorageConfig,
        description="Nonce persistence settings",
    )
    redis: RedisConnectionConfig = Field(
        default_factory=RedisConnectionConfig,
        description="Redis connection config",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings",
    )
    credentials: Optional[CredentialsConfig] = Field(
        default=None,
        description="API credentials; public endpoints work without them",
    )

    @property
    def has_credentials(self) -> bool:
        """True when an API key pair is configured."""
        return self.credentials is not None

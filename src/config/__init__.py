"""
Configuration management for the exchange adapter.

Configuration is loaded from ``config/exchange.yaml`` and validated with
Pydantic models. Credentials and connection URLs come from the environment:
    - YOBIT_API_KEY / YOBIT_API_SECRET: API key pair
    - REDIS_URL: Redis connection URL
    - NONCE_DIR: Directory for the file-backed nonce store
    - LOG_LEVEL: Application log level

Example:
    >>> from src.config import load_config
    >>> config = load_config()
    >>> config.nonce.backend
    <NonceBackend.FILE: 'file'>

Modules:
    loader: Configuration file loading utilities
    models: Pydantic models for configuration validation
"""

from src.config.loader import ConfigLoadError, ConfigLoader, load_config
from src.config.models import (
    # Enums
    LogFormat,
    LogLevel,
    NonceBackend,
    # Exchange config
    ConnectionSettings,
    ExchangeConfig,
    RestEndpoints,
    # Credentials and nonce
    CredentialsConfig,
    NonceStorageConfig,
    # Connection and logging
    LoggingConfig,
    RedisConnectionConfig,
    # Root config
    AppConfig,
)

__all__: list[str] = [
    # Loader
    "load_config",
    "ConfigLoader",
    "ConfigLoadError",
    # Enums
    "LogFormat",
    "LogLevel",
    "NonceBackend",
    # Exchange config
    "RestEndpoints",
    "ConnectionSettings",
    "ExchangeConfig",
    # Credentials and nonce
    "CredentialsConfig",
    "NonceStorageConfig",
    # Connection and logging
    "LoggingConfig",
    "RedisConnectionConfig",
    # Root config
    "AppConfig",
]

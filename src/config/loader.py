"""
Configuration loader for YAML-based application configuration.

This module loads and validates configuration from a YAML file and the
environment. All configuration is validated using Pydantic models.

Configuration file expected:
    - config/exchange.yaml: exchange endpoints, nonce storage, logging

Environment variables override:
    - YOBIT_API_KEY: Public API key
    - YOBIT_API_SECRET: Private signing key
    - REDIS_URL: Redis connection URL
    - NONCE_DIR: Directory for file-backed nonce storage
    - LOG_LEVEL: Application log level

API credentials are only read from the environment, never from YAML.

Example:
    >>> from src.config.loader import load_config
    >>> config = load_config("config")
    >>> print(config.exchange.rest.private)
    https://yobit.net/tapi
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import SecretStr, ValidationError

from src.config.models import (
    AppConfig,
    ConnectionSettings,
    CredentialsConfig,
    ExchangeConfig,
    LoggingConfig,
    LogLevel,
    NonceStorageConfig,
    RedisConnectionConfig,
    RestEndpoints,
)

CONFIG_FILENAME = "exchange.yaml"


class ConfigLoadError(Exception):
    """
    Raised when configuration loading fails.

    Attributes:
        message: Error message describing what went wrong.
        file_path: Path to the file that caused the error, if applicable.
        cause: Original exception that caused the error, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


class ConfigLoader:
    """
    Loads and validates application configuration.

    Expects the following directory structure:
        config/
        └── exchange.yaml    - Exchange, nonce storage and logging settings

    Example:
        >>> loader = ConfigLoader("config")
        >>> config = loader.load()
        >>> config.nonce.backend
        <NonceBackend.FILE: 'file'>
    """

    def __init__(self, config_dir: Path | str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Path to configuration directory (default: 'config').

        Raises:
            ConfigLoadError: If config directory does not exist.
        """
        self.config_dir = Path(config_dir)
        if not self.config_dir.exists():
            raise ConfigLoadError(
                f"Configuration directory not found: {self.config_dir}",
                file_path=self.config_dir,
            )
        if not self.config_dir.is_dir():
            raise ConfigLoadError(
                f"Configuration path is not a directory: {self.config_dir}",
                file_path=self.config_dir,
            )

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        """
        Load a YAML file from the config directory.

        Args:
            filename: Name of YAML file (e.g., 'exchange.yaml').

        Returns:
            Dict containing parsed YAML content.

        Raises:
            ConfigLoadError: If file not found, empty, or invalid YAML.
        """
        file_path = self.config_dir / filename
        if not file_path.exists():
            raise ConfigLoadError(
                f"Configuration file not found: {file_path}",
                file_path=file_path,
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
                if data is None:
                    raise ConfigLoadError(
                        f"Configuration file is empty: {file_path}",
                        file_path=file_path,
                    )
                if not isinstance(data, dict):
                    raise ConfigLoadError(
                        f"Configuration file must contain a mapping: {file_path}",
                        file_path=file_path,
                    )
                return data
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                f"Invalid YAML syntax in {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Error reading {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e

    def _load_exchange(self, data: Dict[str, Any]) -> ExchangeConfig:
        """Build exchange settings from the ``exchange`` section."""
        exchange_data = data.get("exchange") or {}
        return ExchangeConfig(
            rest=RestEndpoints(**(exchange_data.get("rest") or {})),
            connection=ConnectionSettings(**(exchange_data.get("connection") or {})),
        )

    def _load_nonce(self, data: Dict[str, Any]) -> NonceStorageConfig:
        """
        Build nonce storage settings from the ``nonce`` section.

        Environment variables:
            - NONCE_DIR: overrides ``nonce.directory``
        """
        nonce_data = dict(data.get("nonce") or {})
        nonce_dir = os.getenv("NONCE_DIR")
        if nonce_dir:
            nonce_data["directory"] = nonce_dir
        return NonceStorageConfig(**nonce_data)

    def _load_logging(self, data: Dict[str, Any]) -> LoggingConfig:
        """Build logging settings; LOG_LEVEL overrides ``logging.level``."""
        logging_data = dict(data.get("logging") or {})
        level = self._get_log_level()
        if level is not None:
            logging_data["level"] = level
        return LoggingConfig(**logging_data)

    def _load_redis_connection(self) -> RedisConnectionConfig:
        """
        Load Redis connection configuration from environment.

        Environment variables:
            - REDIS_URL: Redis connection URL (default: redis://localhost:6379)

        Returns:
            RedisConnectionConfig object.
        """
        redis_url = os.getenv("REDIS_URL", "redis://localhost:6379")
        return RedisConnectionConfig(url=redis_url)

    def _load_credentials(self) -> Optional[CredentialsConfig]:
        """
        Load API credentials from environment.

        Environment variables:
            - YOBIT_API_KEY: Public key
            - YOBIT_API_SECRET: Private key

        Returns:
            CredentialsConfig, or None when neither variable is set.

        Raises:
            ConfigLoadError: If only one of the two variables is set.
        """
        public_key = os.getenv("YOBIT_API_KEY")
        private_key = os.getenv("YOBIT_API_SECRET")
        if not public_key and not private_key:
            return None
        if not public_key or not private_key:
            raise ConfigLoadError(
                "YOBIT_API_KEY and YOBIT_API_SECRET must be set together"
            )
        return CredentialsConfig(
            public_key=SecretStr(public_key),
            private_key=SecretStr(private_key),
        )

    def _get_log_level(self) -> Optional[LogLevel]:
        """
        Get log level from environment.

        Environment variables:
            - LOG_LEVEL: Log level

        Returns:
            LogLevel enum value, or None if unset or unrecognised.
        """
        level_str = os.getenv("LOG_LEVEL")
        if not level_str:
            return None
        try:
            return LogLevel(level_str.upper())
        except ValueError:
            return None

    def load(self) -> AppConfig:
        """
        Load and validate configuration.

        Returns:
            AppConfig: Validated application configuration.

        Raises:
            ConfigLoadError: If any configuration is invalid or missing.
        """
        try:
            data = self._load_yaml(CONFIG_FILENAME)

            return AppConfig(
                exchange=self._load_exchange(data),
                nonce=self._load_nonce(data),
                redis=self._load_redis_connection(),
                logging=self._load_logging(data),
                credentials=self._load_credentials(),
            )

        except ConfigLoadError:
            raise
        except ValidationError as e:
            raise ConfigLoadError(
                f"Configuration validation failed: {e}",
                cause=e,
            ) from e
        except (TypeError, ValueError) as e:
            raise ConfigLoadError(
                f"Unexpected error loading configuration: {e}",
                cause=e,
            ) from e


def load_config(config_dir: Path | str = "config") -> AppConfig:
    """
    Convenience function to load application configuration.

    Args:
        config_dir: Path to configuration directory (default: 'config').

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigLoadError: If configuration loading fails.
    """
    loader = ConfigLoader(config_dir)
    return loader.load()

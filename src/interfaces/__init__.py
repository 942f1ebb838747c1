"""
Abstract interfaces for exchange integrations.

This module defines the contract every exchange adapter satisfies and the
typed errors adapters raise.

Example:
    >>> from src.interfaces import ExchangeAdapter, NotSupportedError
    >>> class MyAdapter(ExchangeAdapter):
    ...     @property
    ...     def exchange_name(self) -> str:
    ...         return "myexchange"
    ...     # ... implement other abstract methods

Modules:
    exchange_adapter: ExchangeAdapter ABC for exchange integrations
    exceptions: ExchangeError hierarchy
"""

from src.interfaces.exceptions import (
    ExchangeError,
    InvalidArgumentError,
    MalformedResponseError,
    NonceExhaustedError,
    NonceStoreCorruptedError,
    NotSupportedError,
    RemoteRejectedError,
)
from src.interfaces.exchange_adapter import ExchangeAdapter, TradeCallback

__all__: list[str] = [
    "ExchangeAdapter",
    "TradeCallback",
    # Errors
    "ExchangeError",
    "InvalidArgumentError",
    "MalformedResponseError",
    "NonceExhaustedError",
    "NonceStoreCorruptedError",
    "NotSupportedError",
    "RemoteRejectedError",
]

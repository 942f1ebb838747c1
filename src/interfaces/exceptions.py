"""
Typed errors raised by exchange adapters.

Every failure an adapter surfaces to its caller is one of these classes.
None of them is retried locally and none is downgraded to a default value.

Hierarchy:
    ExchangeError
    ├── NotSupportedError        - operation has no exchange equivalent
    ├── InvalidArgumentError     - required argument missing or invalid
    ├── NonceExhaustedError      - nonce would overflow, rotate the API key
    ├── NonceStoreCorruptedError - persisted nonce state is unreadable
    ├── MalformedResponseError   - response missing fields or mistyped
    └── RemoteRejectedError      - HTTP error or exchange error payload
"""

from typing import Optional


class ExchangeError(Exception):
    """
    Base class for all adapter errors.

    Attributes:
        message: Human readable description.
        operation: Name of the adapter operation or remote method that failed.
        raw_error: Error text returned by the exchange, if any.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        raw_error: Optional[str] = None,
    ):
        self.message = message
        self.operation = operation
        self.raw_error = raw_error
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.insert(0, f"[{self.operation}]")
        if self.raw_error and self.raw_error not in self.message:
            parts.append(f"(exchange said: {self.raw_error})")
        return " ".join(parts)


class NotSupportedError(ExchangeError):
    """Raised for operations the exchange provides no endpoint for."""

    pass


class InvalidArgumentError(ExchangeError):
    """Raised when a required argument is missing or unusable."""

    pass


class NonceExhaustedError(ExchangeError):
    """
    Raised when the next nonce would exceed the 32-bit maximum.

    The API key cannot be used for authenticated calls any more. The only
    recovery is to create a new key on the exchange.
    """

    pass


class NonceStoreCorruptedError(ExchangeError):
    """Raised when persisted nonce state cannot be read back as an integer."""

    pass


class MalformedResponseError(ExchangeError):
    """Raised when a response lacks an expected field or has the wrong type."""

    pass


class RemoteRejectedError(ExchangeError):
    """
    Raised for non-2xx responses and exchange-level error payloads.

    Attributes:
        status: HTTP status code, or None for an error payload in a 200 reply.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        raw_error: Optional[str] = None,
        status: Optional[int] = None,
    ):
        self.status = status
        super().__init__(message, operation=operation, raw_error=raw_error)

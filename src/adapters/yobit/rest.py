"""
Yobit REST API client.

Public market data and the signed private API share one aiohttp session.

Endpoints:
    Public Base URL: https://yobit.net/api/3
    Info: GET /info
    Ticker: GET /ticker/{pair}
    Order Book: GET /depth/{pair}?limit={n}
    Trades: GET /trades/{pair}?limit={n}

    Private URL: https://yobit.net/tapi
    All calls: POST, form body "nonce=..&method=..&<fields>",
    headers Key (public key) and Sign (HMAC-SHA512 of the body)

Response Format (Private):
    {"success": 1, "return": {...}}
    {"success": 0, "error": "invalid nonce"}

Nonce Ordering:
    Private calls are serialized per client. The nonce is reserved, the
    request signed and sent, and the response awaited before the next
    private call reserves its nonce, so requests reach the exchange in
    nonce order.
"""

import asyncio
import json
from typing import Any, Dict, Mapping, Optional

import aiohttp
import structlog

from src.auth.nonce import NonceStore
from src.auth.signer import Credentials, RequestSigner
from src.interfaces.exceptions import (
    InvalidArgumentError,
    MalformedResponseError,
    RemoteRejectedError,
)

logger = structlog.get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class YobitRestClient:
    """
    Async REST client for Yobit.

    Attributes:
        public_url: Public API base URL.
        private_url: Authenticated API URL.
        timeout_seconds: Total request timeout.

    Example:
        >>> client = YobitRestClient(
        ...     public_url="https://yobit.net/api/3",
        ...     private_url="https://yobit.net/tapi",
        ...     nonce_store=store,
        ...     credentials=credentials,
        ... )
        >>> info = await client.get_public("/info")
        >>> funds = await client.post_private("getInfo")
    """

    def __init__(
        self,
        public_url: str,
        private_url: str,
        nonce_store: Optional[NonceStore] = None,
        credentials: Optional[Credentials] = None,
        signer: Optional[RequestSigner] = None,
        timeout_seconds: int = 30,
        user_agent: str = "yobit-adapter/0.1",
    ):
        """
        Initialize REST client.

        Args:
            public_url: Public API base URL.
            private_url: Authenticated API URL.
            nonce_store: Nonce source for private calls.
            credentials: API key pair; private calls fail without it.
            signer: Request signer (default RequestSigner()).
            timeout_seconds: Request timeout in seconds.
            user_agent: User-Agent header value.
        """
        self.public_url = public_url.rstrip("/")
        self.private_url = private_url
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent

        self._nonce_store = nonce_store
        self._credentials = credentials
        self._signer = signer or RequestSigner()
        self._session: Optional[aiohttp.ClientSession] = None
        self._private_lock = asyncio.Lock()

        logger.info(
            "rest_client_initialized",
            exchange="yobit",
            public_url=self.public_url,
            authenticated=self.has_credentials,
        )

    @property
    def has_credentials(self) -> bool:
        """True when private calls can be signed."""
        return self._credentials is not None and self._nonce_store is not None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session and the nonce store."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("rest_client_session_closed", exchange="yobit")
        if self._nonce_store is not None:
            await self._nonce_store.close()

    async def _request(
        self,
        method: str,
        url: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make HTTP request and decode the JSON reply.

        Args:
            method: HTTP method (GET, POST).
            url: Full request URL.
            operation: Endpoint or remote method name, for errors and logs.
            params: Query parameters.
            data: Request body.
            headers: Extra headers.

        Returns:
            Any: Decoded JSON.

        Raises:
            ConnectionError: If the request fails or times out.
            RemoteRejectedError: On HTTP >= 400 or a "success": 0 payload.
            MalformedResponseError: If the body is not valid JSON.
        """
        session = await self._ensure_session()

        try:
            async with session.request(
                method, url, params=params, data=data, headers=headers
            ) as response:
                text = await response.text()

                if response.status >= 400:
                    logger.error(
                        "rest_request_failed",
                        exchange="yobit",
                        operation=operation,
                        status=response.status,
                        error=text[:500],
                    )
                    raise RemoteRejectedError(
                        f"Request failed with status {response.status}",
                        operation=operation,
                        raw_error=text,
                        status=response.status,
                    )

        except aiohttp.ClientError as e:
            logger.error("rest_client_error", exchange="yobit", operation=operation, error=str(e))
            raise ConnectionError(f"REST request failed: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error(
                "rest_timeout",
                exchange="yobit",
                operation=operation,
                timeout=self.timeout_seconds,
            )
            raise ConnectionError(
                f"REST request timeout after {self.timeout_seconds}s"
            ) from e

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("rest_invalid_json", exchange="yobit", operation=operation)
            raise MalformedResponseError(
                "Response is not valid JSON", operation=operation
            ) from e

        # Yobit reports most failures as {"success": 0, "error": "..."} with HTTP 200
        if isinstance(payload, Mapping) and payload.get("success") == 0:
            error_msg = str(payload.get("error", "Unknown error"))
            logger.error(
                "rest_yobit_error",
                exchange="yobit",
                operation=operation,
                message=error_msg,
            )
            raise RemoteRejectedError(
                f"Yobit API error: {error_msg}",
                operation=operation,
                raw_error=error_msg,
            )

        return payload

    async def get_public(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Call a public endpoint.

        Args:
            path: Path below the public base URL (e.g., "/ticker/ltc_btc").
            params: Query parameters.

        Returns:
            Any: Decoded JSON.
        """
        url = f"{self.public_url}{path}"
        logger.debug("rest_public_request", exchange="yobit", path=path)
        return await self._request("GET", url, operation=path, params=params)

    async def post_private(
        self, method: str, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """
        Call an authenticated method.

        Args:
            method: Remote method name (e.g., "getInfo", "Trade").
            params: Method fields, sent in the given order after ``method``.
                None values are left out.

        Returns:
            Any: The unwrapped ``return`` value; an empty dict when the
                success envelope has no ``return``.

        Raises:
            InvalidArgumentError: If the client has no credentials. No nonce
                is consumed.
            NonceExhaustedError: If the nonce cannot be advanced.
        """
        if not self.has_credentials:
            raise InvalidArgumentError(
                "Authenticated call requires API credentials", operation=method
            )

        payload: Dict[str, Any] = {"method": method}
        for key, value in (params or {}).items():
            if value is not None:
                payload[key] = value

        async with self._private_lock:
            nonce = await self._nonce_store.next()
            signed = self._signer.sign(payload, nonce, self._credentials)
            headers = dict(signed.headers)
            headers["Content-Type"] = FORM_CONTENT_TYPE

            logger.debug("rest_private_request", exchange="yobit", operation=method)
            response = await self._request(
                "POST",
                self.private_url,
                operation=method,
                data=signed.body,
                headers=headers,
            )

        if isinstance(response, Mapping):
            result = response.get("return")
            return {} if result is None else result
        return response

    def __repr__(self) -> str:
        return f"YobitRestClient(public_url={self.public_url}, authenticated={self.has_credentials})"

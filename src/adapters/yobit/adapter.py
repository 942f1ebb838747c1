"""
Yobit exchange adapter.

Main adapter implementation that implements the ExchangeAdapter interface.
Coordinates the REST client, data normalization and order fill-state
inference.

This adapter:
    - Serves market data from the public API, unsigned
    - Signs private calls with a durable, strictly increasing nonce
    - Normalizes Yobit data to the canonical models
    - Raises NotSupportedError for candles, currencies and deposit history

Yobit-Specific Details:
    - Pairs are lowercase and "_"-separated ("ltc_btc")
    - No bulk ticker call; all tickers cost one request per pair
    - No server-side date filter on public trades
    - Order and trade history calls require a pair

Example:
    >>> from src.adapters.yobit import YobitAdapter
    >>> from src.config.loader import load_config
    >>>
    >>> config = load_config()
    >>> adapter = YobitAdapter.from_config(config)
    >>> ticker = await adapter.get_ticker("ltc_btc")
    >>> balances = await adapter.get_balances()
    >>> await adapter.close()
"""

import inspect
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import structlog

from src.adapters.yobit.normalizer import YobitNormalizer
from src.adapters.yobit.rest import YobitRestClient
from src.auth.nonce import FileNonceStore, NonceStore, RedisNonceStore
from src.auth.signer import Credentials, RequestSigner
from src.config.models import AppConfig, NonceBackend
from src.interfaces.exceptions import (
    InvalidArgumentError,
    MalformedResponseError,
    NotSupportedError,
)
from src.interfaces.exchange_adapter import ExchangeAdapter, TradeCallback
from src.models.funding import DepositDetails, WithdrawalRequest, WithdrawalResponse
from src.models.market import Market
from src.models.order import Order, OrderRequest
from src.models.orderbook import OrderBook
from src.models.ticker import Ticker, Trade
from src.storage.redis_client import RedisClient

logger = structlog.get_logger(__name__)

RECENT_TRADES_LIMIT = 10
HISTORICAL_TRADES_LIMIT = 2000


def _as_utc(value: datetime) -> datetime:
    """Read a naive datetime as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class YobitAdapter(ExchangeAdapter):
    """
    Yobit exchange adapter implementing ExchangeAdapter interface.

    Attributes:
        exchange_name: Always returns "yobit".

    Example:
        >>> rest = YobitRestClient(
        ...     public_url="https://yobit.net/api/3",
        ...     private_url="https://yobit.net/tapi",
        ...     nonce_store=FileNonceStore(Path("/var/lib/yobit"), public_key),
        ...     credentials=credentials,
        ... )
        >>> adapter = YobitAdapter(rest)
        >>> order = await adapter.place_order(
        ...     OrderRequest(symbol="ltc_btc", amount=Decimal("1"), price=Decimal("0.01"))
        ... )
        >>> print(order.result)
    """

    def __init__(self, rest: YobitRestClient):
        """
        Initialize Yobit adapter.

        Args:
            rest: REST client; carries the credentials and nonce store used
                for private calls.
        """
        self._rest = rest
        logger.info("yobit_adapter_initialized", authenticated=rest.has_credentials)

    @classmethod
    def from_config(cls, config: AppConfig) -> "YobitAdapter":
        """
        Build an adapter from application configuration.

        The nonce store is only created when credentials are configured.

        Args:
            config: Loaded application configuration.

        Returns:
            YobitAdapter: Adapter wired to the configured nonce backend.
        """
        credentials: Optional[Credentials] = None
        nonce_store: Optional[NonceStore] = None

        if config.credentials is not None:
            credentials = Credentials(
                public_key=config.credentials.public_key,
                private_key=config.credentials.private_key,
            )
            public_key = credentials.public_key.get_secret_value()
            if config.nonce.backend == NonceBackend.REDIS:
                nonce_store = RedisNonceStore(
                    RedisClient(config.redis),
                    public_key,
                    key_prefix=config.nonce.redis_key_prefix,
                )
            else:
                nonce_store = FileNonceStore(config.nonce.directory, public_key)

        rest = YobitRestClient(
            public_url=config.exchange.rest.public,
            private_url=config.exchange.rest.private,
            nonce_store=nonce_store,
            credentials=credentials,
            signer=RequestSigner(),
            timeout_seconds=config.exchange.connection.timeout_seconds,
            user_agent=config.exchange.connection.user_agent,
        )
        return cls(rest)

    @property
    def exchange_name(self) -> str:
        """Return exchange identifier."""
        return "yobit"

    async def close(self) -> None:
        """Close the HTTP session and nonce store."""
        await self._rest.close()
        logger.info("yobit_adapter_closed")

    @staticmethod
    def _require_symbol(symbol: Optional[str], operation: str) -> str:
        if symbol is None or not symbol.strip():
            raise InvalidArgumentError(
                "Yobit requires a symbol for this call", operation=operation
            )
        return YobitNormalizer.normalize_symbol(symbol)

    # =========================================================================
    # MARKET DATA
    # =========================================================================

    async def get_symbols(self) -> List[str]:
        info = await self._rest.get_public("/info")
        return YobitNormalizer.parse_symbols(info)

    async def get_markets(self) -> List[Market]:
        info = await self._rest.get_public("/info")
        return YobitNormalizer.parse_markets(info)

    async def get_ticker(self, symbol: str) -> Optional[Ticker]:
        pair = self._require_symbol(symbol, "get_ticker")
        response = await self._rest.get_public(f"/ticker/{pair}")
        if not response:
            return None

        entry = YobitNormalizer.pair_entry(response, pair)
        if entry is None:
            return None
        key, raw = entry
        return YobitNormalizer.parse_ticker(key, raw)

    async def get_tickers(self) -> List[Tuple[str, Ticker]]:
        """
        Fetch tickers for all symbols, one request per symbol.

        Yobit cannot return every ticker in one call within URL length
        limits, so this issues one request per listed pair and can take
        around an hour for the full pair universe.
        """
        symbols = await self.get_symbols()
        logger.warning(
            "yobit_get_tickers_sequential",
            symbol_count=len(symbols),
            message="One request per symbol; this may take a long time",
        )

        tickers: List[Tuple[str, Ticker]] = []
        for symbol in symbols:
            ticker = await self.get_ticker(symbol)
            if ticker is not None:
                tickers.append((symbol, ticker))
        return tickers

    async def get_order_book(self, symbol: str, max_count: int = 100) -> OrderBook:
        pair = self._require_symbol(symbol, "get_order_book")
        response = await self._rest.get_public(f"/depth/{pair}", params={"limit": max_count})
        return YobitNormalizer.parse_order_book(response, pair)

    async def get_recent_trades(self, symbol: str) -> List[Trade]:
        pair = self._require_symbol(symbol, "get_recent_trades")
        response = await self._rest.get_public(
            f"/trades/{pair}", params={"limit": RECENT_TRADES_LIMIT}
        )
        return YobitNormalizer.parse_trades(response, pair)

    async def get_historical_trades(
        self,
        callback: TradeCallback,
        symbol: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> None:
        """
        Fetch the largest trade window Yobit serves and pass it to ``callback``.

        Yobit has no server-side date filter, so the last 2000 trades are
        fetched and filtered locally by ``start_date``. ``end_date`` is
        accepted but not applied. Naive dates are read as UTC.

        The callback is invoked exactly once; it may be a coroutine function.
        """
        pair = self._require_symbol(symbol, "get_historical_trades")
        response = await self._rest.get_public(
            f"/trades/{pair}", params={"limit": HISTORICAL_TRADES_LIMIT}
        )
        trades = YobitNormalizer.parse_trades(response, pair)
        if start_date is not None:
            start_date = _as_utc(start_date)
            trades = [t for t in trades if t.timestamp >= start_date]

        logger.debug(
            "yobit_historical_trades_fetched",
            pair=pair,
            count=len(trades),
            end_date_applied=False,
        )

        result = callback(trades)
        if inspect.isawaitable(result):
            await result

    async def get_candles(
        self,
        symbol: str,
        period_seconds: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Any]:
        raise NotSupportedError("Yobit has no candle endpoint", operation="get_candles")

    async def get_currencies(self) -> Dict[str, Any]:
        raise NotSupportedError(
            "Yobit has no currency metadata endpoint", operation="get_currencies"
        )

    # =========================================================================
    # ACCOUNT AND TRADING
    # =========================================================================

    async def _get_funds(self, field: str) -> Dict[str, Decimal]:
        info = await self._rest.post_private("getInfo")
        if not isinstance(info, dict):
            raise MalformedResponseError("getInfo result is not an object", operation="getInfo")
        if info.get(field) is None:
            logger.error("yobit_funds_missing", field=field)
            raise MalformedResponseError(
                f"getInfo result has no '{field}' object", operation="getInfo"
            )
        return YobitNormalizer.parse_balances(info[field])

    async def get_balances(self) -> Dict[str, Decimal]:
        return await self._get_funds("funds")

    async def get_tradable_balances(self) -> Dict[str, Decimal]:
        return await self._get_funds("funds_incl_orders")

    async def get_order_details(self, order_id: str, symbol: Optional[str] = None) -> Order:
        """
        Fetch one order by id.

        Yobit returns the order keyed by its id; the fill state is derived
        from the requested and remaining amounts.
        """
        if not str(order_id).strip():
            raise InvalidArgumentError("order_id cannot be empty", operation="get_order_details")

        response = await self._rest.post_private("OrderInfo", {"order_id": order_id})
        entry = YobitNormalizer.pair_entry(response, str(order_id))
        if entry is None:
            raise MalformedResponseError(
                f"No order returned for id {order_id}", operation="OrderInfo"
            )
        key, raw = entry
        return YobitNormalizer.parse_order(key, raw)

    async def get_completed_orders(
        self,
        symbol: Optional[str] = None,
        after_date: Optional[datetime] = None,
    ) -> List[Order]:
        """
        Fetch executed trades of one pair as filled orders.

        Yobit keeps roughly one week of trade history.

        Raises:
            InvalidArgumentError: If no symbol is given. Yobit cannot query
                all pairs in one call.
        """
        pair = self._require_symbol(symbol, "get_completed_orders")
        params: Dict[str, Any] = {"pair": pair}
        if after_date is not None:
            params["since"] = int(_as_utc(after_date).timestamp())

        response = await self._rest.post_private("TradeHistory", params)
        return YobitNormalizer.parse_orders(
            response, lambda _key, raw: YobitNormalizer.parse_trade_history_entry(raw)
        )

    async def get_open_orders(self, symbol: Optional[str] = None) -> List[Order]:
        pair = self._require_symbol(symbol, "get_open_orders")
        response = await self._rest.post_private("ActiveOrders", {"pair": pair})
        orders = YobitNormalizer.parse_orders(response, YobitNormalizer.parse_order)

        logger.debug("yobit_open_orders_fetched", pair=pair, count=len(orders))
        return orders

    async def place_order(self, order: OrderRequest) -> Order:
        pair = self._require_symbol(order.symbol, "place_order")
        params: Dict[str, Any] = {
            "pair": pair,
            "type": "buy" if order.is_buy else "sell",
            "rate": order.price,
            "amount": order.amount,
        }
        params.update(order.extra_parameters)

        response = await self._rest.post_private("Trade", params)
        placed = YobitNormalizer.parse_placed_order(response, pair, order)

        logger.info(
            "yobit_order_placed",
            order_id=placed.order_id,
            pair=pair,
            side=params["type"],
            result=placed.result.value,
        )
        return placed

    async def cancel_order(self, order_id: str, symbol: Optional[str] = None) -> None:
        if not str(order_id).strip():
            raise InvalidArgumentError("order_id cannot be empty", operation="cancel_order")

        await self._rest.post_private("CancelOrder", {"order_id": order_id})
        logger.info("yobit_order_cancelled", order_id=order_id)

    # =========================================================================
    # FUNDING
    # =========================================================================

    async def get_deposit_history(self, symbol: str) -> List[Any]:
        raise NotSupportedError(
            "Yobit has no deposit history endpoint", operation="get_deposit_history"
        )

    async def get_deposit_address(
        self, symbol: str, force_regenerate: bool = False
    ) -> DepositDetails:
        if symbol is None or not symbol.strip():
            raise InvalidArgumentError("symbol cannot be empty", operation="get_deposit_address")

        response = await self._rest.post_private(
            "GetDepositAddress",
            {"coinName": symbol, "need_new": 1 if force_regenerate else 0},
        )
        return YobitNormalizer.parse_deposit_address(response, symbol)

    async def withdraw(self, request: WithdrawalRequest) -> WithdrawalResponse:
        """
        Withdraw coins to an external address.

        Success is reported whenever the call itself does not fail; the
        response body is not inspected further.
        """
        await self._rest.post_private(
            "WithdrawCoinsToAddress",
            {
                "coinName": request.symbol,
                "amount": request.amount,
                "address": request.address,
            },
        )
        logger.info("yobit_withdrawal_submitted", symbol=request.symbol, amount=str(request.amount))
        return WithdrawalResponse(success=True)

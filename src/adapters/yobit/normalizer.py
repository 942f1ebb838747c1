"""
Yobit data normalizer.

Converts Yobit JSON fragments into the canonical Pydantic models. Every
field is decoded explicitly; a missing or non-numeric value raises
MalformedResponseError instead of defaulting to zero.

Yobit Pair Format:
    Lowercase currency codes joined by "_": "ltc_btc" is LTC priced in BTC.
    Split and upper-cased: market currency "LTC", base currency "BTC".

Yobit Info Format (GET /info):
    {
        "server_time": 1418654531,
        "pairs": {
            "ltc_btc": {
                "decimal_places": 8,
                "min_price": 0.00000001,
                "max_price": 10000,
                "min_amount": 0.0001,
                "hidden": 0,
                "fee": 0.2
            }
        }
    }

Yobit Ticker Format (GET /ticker/ltc_btc):
    {
        "ltc_btc": {
            "high": 105.41, "low": 104.67, "avg": 105.04,
            "vol": 43398.22251455, "vol_cur": 4546.26962359,
            "last": 105.11, "buy": 104.2, "sell": 105.11,
            "updated": 1418654531
        }
    }

Yobit Trades Format (GET /trades/ltc_btc):
    {
        "ltc_btc": [
            {"type": "ask", "price": 104.2, "amount": 0.101,
             "tid": 41234426, "timestamp": 1418654531}
        ]
    }

Yobit Order Format (ActiveOrders / OrderInfo "return"):
    {
        "100025362": {
            "pair": "ltc_btc", "type": "sell",
            "start_amount": 13.345, "amount": 12.345, "rate": 485,
            "timestamp_created": 1418654530, "status": 0
        }
    }
    "amount" is the quantity still open; "status" is legacy and ignored.

Yobit Trade History Format (TradeHistory "return"):
    {
        "24523": {
            "pair": "ltc_btc", "type": "sell", "amount": 11.4,
            "rate": 0.145, "order_id": 100025362,
            "is_your_order": 1, "timestamp": 1418654530
        }
    }
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import structlog
from pydantic import ValidationError

from src.adapters.yobit.order_status import resolve_order_result
from src.interfaces.exceptions import InvalidArgumentError, MalformedResponseError
from src.models.funding import DepositDetails
from src.models.market import Market
from src.models.order import Order, OrderRequest
from src.models.orderbook import OrderBook, PriceLevel
from src.models.ticker import Ticker, Trade, TradeSide, Volume

logger = structlog.get_logger(__name__)

PAIR_SEPARATOR = "_"

T = TypeVar("T")


def _malformed(message: str, **context: Any) -> MalformedResponseError:
    """Log a decoding failure and build the error to raise."""
    logger.error("yobit_response_malformed", error=message, **context)
    return MalformedResponseError(message)


def _require(raw: Any, field: str) -> Any:
    """Return ``raw[field]``, rejecting non-objects and missing/null fields."""
    if not isinstance(raw, Mapping):
        raise _malformed(f"Expected a JSON object holding '{field}'", field=field)
    value = raw.get(field)
    if value is None:
        raise _malformed(f"Missing required field '{field}'", field=field)
    return value


def _to_decimal(value: Any, field: str) -> Decimal:
    """Locale-invariant decimal conversion of a JSON number or numeric string."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise _malformed(f"Field '{field}' is not numeric: {value!r}", field=field)
    try:
        result = Decimal(repr(value)) if isinstance(value, float) else Decimal(str(value).strip())
    except InvalidOperation:
        raise _malformed(f"Field '{field}' is not numeric: {value!r}", field=field) from None
    if not result.is_finite():
        raise _malformed(f"Field '{field}' is not finite: {value!r}", field=field)
    return result


def _to_int(value: Any, field: str) -> int:
    """Integer conversion accepting JSON integers and integral strings."""
    number = _to_decimal(value, field)
    if number != number.to_integral_value():
        raise _malformed(f"Field '{field}' is not an integer: {value!r}", field=field)
    return int(number)


def _to_timestamp(value: Any, field: str) -> datetime:
    """Unix seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(_to_int(value, field), tz=timezone.utc)


def _build(factory: Callable[..., T], **fields: Any) -> T:
    """Construct a model, turning validation failures into MalformedResponseError."""
    try:
        return factory(**fields)
    except ValidationError as e:
        raise _malformed(f"Invalid {getattr(factory, '__name__', 'value')}: {e}") from e


class YobitNormalizer:
    """
    Normalizes Yobit data to canonical models.

    All methods are static and side-effect free apart from error logging.

    Example:
        >>> YobitNormalizer.split_pair("ltc_btc")
        ('LTC', 'BTC')
        >>> trade = YobitNormalizer.parse_trade(
        ...     {"type": "ask", "price": 104.2, "amount": 0.101,
        ...      "tid": 41234426, "timestamp": 1418654531}
        ... )
        >>> trade.is_buy
        True
    """

    # =========================================================================
    # SYMBOLS
    # =========================================================================

    @staticmethod
    def split_pair(pair: str) -> Tuple[str, str]:
        """
        Split a pair identifier into (market currency, base currency).

        Args:
            pair: Native pair identifier (e.g., "ltc_btc").

        Returns:
            Tuple[str, str]: Upper-cased currency codes (e.g., ("LTC", "BTC")).

        Raises:
            MalformedResponseError: Unless the identifier splits into exactly
                two non-empty tokens.
        """
        tokens = pair.upper().split(PAIR_SEPARATOR)
        if len(tokens) != 2 or not all(tokens):
            raise _malformed(f"Malformed pair identifier: {pair!r}", pair=pair)
        return tokens[0], tokens[1]

    @staticmethod
    def normalize_symbol(symbol: Optional[str]) -> str:
        """
        Convert a caller-supplied symbol to Yobit's native form.

        Args:
            symbol: Symbol such as "LTC_BTC", "ltc-btc" or "LTC/BTC".

        Returns:
            str: Lowercase, "_"-separated pair (e.g., "ltc_btc").

        Raises:
            InvalidArgumentError: If the symbol is empty.
        """
        if symbol is None or not symbol.strip():
            raise InvalidArgumentError("symbol cannot be empty")
        return symbol.strip().lower().replace("-", PAIR_SEPARATOR).replace("/", PAIR_SEPARATOR)

    @staticmethod
    def _pairs(info: Any) -> Dict[str, Any]:
        pairs = _require(info, "pairs")
        if not isinstance(pairs, Mapping):
            raise _malformed("Field 'pairs' is not an object", field="pairs")
        return dict(pairs)

    @staticmethod
    def parse_symbols(info: Any) -> List[str]:
        """
        Extract the tradable pair identifiers from an /info response.

        Returns:
            List[str]: Identifiers verbatim, in response order.
        """
        return list(YobitNormalizer._pairs(info).keys())

    @staticmethod
    def parse_markets(info: Any) -> List[Market]:
        """
        Build one Market per pair of an /info response.

        Raises:
            MalformedResponseError: If any pair identifier does not split
                into two currencies or a numeric field is missing.
        """
        markets: List[Market] = []
        for name, raw in YobitNormalizer._pairs(info).items():
            market_currency, base_currency = YobitNormalizer.split_pair(name)
            markets.append(
                _build(
                    Market,
                    market_name=name,
                    market_currency=market_currency,
                    base_currency=base_currency,
                    is_active=_to_int(_require(raw, "hidden"), "hidden") == 0,
                    min_price=_to_decimal(_require(raw, "min_price"), "min_price"),
                    max_price=_to_decimal(_require(raw, "max_price"), "max_price"),
                    min_trade_size=_to_decimal(_require(raw, "min_amount"), "min_amount"),
                )
            )

        logger.debug("normalized_markets", exchange="yobit", count=len(markets))
        return markets

    # =========================================================================
    # MARKET DATA
    # =========================================================================

    @staticmethod
    def pair_entry(response: Any, pair: str) -> Optional[Tuple[str, Any]]:
        """
        Select the entry for ``pair`` from a response keyed by pair.

        Falls back to the only entry when the response holds exactly one
        (the exchange may echo the pair in a different form).

        Returns:
            Optional[Tuple[str, Any]]: (pair key, value), or None for an
                empty response.

        Raises:
            MalformedResponseError: If the response is not an object or holds
                several entries, none of them for ``pair``.
        """
        if not isinstance(response, Mapping):
            raise _malformed("Expected a JSON object keyed by pair", pair=pair)
        if not response:
            return None
        if pair in response:
            return pair, response[pair]
        if len(response) == 1:
            key = next(iter(response))
            return key, response[key]
        raise _malformed(f"Response has no entry for pair {pair!r}", pair=pair)

    @staticmethod
    def parse_ticker(pair: str, raw: Any) -> Ticker:
        """
        Normalize one pair's ticker object.

        A pair identifier that does not split into two currencies leaves
        both volume symbols empty; it does not fail the ticker.

        Args:
            pair: Native pair identifier the ticker was keyed by.
            raw: Ticker object.

        Returns:
            Ticker: Normalized ticker.
        """
        try:
            converted_symbol, base_symbol = YobitNormalizer.split_pair(pair)
        except MalformedResponseError:
            converted_symbol, base_symbol = "", ""

        volume = _build(
            Volume,
            base_volume=_to_decimal(_require(raw, "vol"), "vol"),
            converted_volume=_to_decimal(_require(raw, "vol_cur"), "vol_cur"),
            base_symbol=base_symbol,
            converted_symbol=converted_symbol,
            timestamp=_to_timestamp(_require(raw, "updated"), "updated"),
        )
        return _build(
            Ticker,
            symbol=pair,
            ask=_to_decimal(_require(raw, "sell"), "sell"),
            bid=_to_decimal(_require(raw, "buy"), "buy"),
            last=_to_decimal(_require(raw, "last"), "last"),
            volume=volume,
        )

    @staticmethod
    def parse_trade(raw: Any) -> Trade:
        """
        Normalize one public trade.

        ``type == "ask"`` is reported as a buy. This is the exchange's
        convention and is kept as is.
        """
        trade_type = _require(raw, "type")
        if not isinstance(trade_type, str):
            raise _malformed(f"Field 'type' is not a string: {trade_type!r}", field="type")

        return _build(
            Trade,
            id=_to_int(_require(raw, "tid"), "tid"),
            price=_to_decimal(_require(raw, "price"), "price"),
            amount=_to_decimal(_require(raw, "amount"), "amount"),
            side=TradeSide.BUY if trade_type == "ask" else TradeSide.SELL,
            timestamp=_to_timestamp(_require(raw, "timestamp"), "timestamp"),
        )

    @staticmethod
    def parse_trades(response: Any, pair: str) -> List[Trade]:
        """Normalize a /trades response into trades, in response order."""
        entry = YobitNormalizer.pair_entry(response, pair)
        if entry is None:
            return []
        _, raw_trades = entry
        if not isinstance(raw_trades, list):
            raise _malformed("Trades entry is not a list", pair=pair)
        return [YobitNormalizer.parse_trade(raw) for raw in raw_trades]

    @staticmethod
    def _parse_levels(raw_levels: Any, side: str, pair: str) -> List[PriceLevel]:
        if raw_levels is None:
            return []
        if not isinstance(raw_levels, list):
            raise _malformed(f"Order book '{side}' is not a list", pair=pair)

        levels: List[PriceLevel] = []
        for level in raw_levels:
            if not isinstance(level, list) or len(level) < 2:
                raise _malformed(f"Order book '{side}' level is not [price, amount]", pair=pair)
            levels.append(
                _build(
                    PriceLevel,
                    price=_to_decimal(level[0], f"{side}.price"),
                    quantity=_to_decimal(level[1], f"{side}.amount"),
                )
            )
        return levels

    @staticmethod
    def parse_order_book(response: Any, pair: str) -> OrderBook:
        """
        Normalize a /depth response.

        Bids are sorted best (highest) first and asks best (lowest) first.
        Yobit omits a side with no orders, so a missing "bids" or "asks" key
        is an empty side.

        Raises:
            MalformedResponseError: If the response has no entry for the pair.
        """
        entry = YobitNormalizer.pair_entry(response, pair)
        if entry is None:
            raise _malformed(f"Order book response has no entry for pair {pair!r}", pair=pair)
        raw_book = entry[1]
        if not isinstance(raw_book, Mapping):
            raise _malformed("Order book entry is not an object", pair=pair)

        bids = YobitNormalizer._parse_levels(raw_book.get("bids"), "bids", pair)
        asks = YobitNormalizer._parse_levels(raw_book.get("asks"), "asks", pair)
        bids.sort(key=lambda x: x.price, reverse=True)
        asks.sort(key=lambda x: x.price)

        book = _build(
            OrderBook,
            symbol=pair,
            timestamp=datetime.now(timezone.utc),
            bids=bids,
            asks=asks,
        )

        logger.debug(
            "normalized_order_book",
            exchange="yobit",
            pair=pair,
            bids_count=len(bids),
            asks_count=len(asks),
        )
        return book

    # =========================================================================
    # ACCOUNT
    # =========================================================================

    @staticmethod
    def parse_balances(funds: Any) -> Dict[str, Decimal]:
        """
        Normalize a funds object, keeping strictly positive amounts only.

        Args:
            funds: Mapping of currency code to amount.

        Returns:
            Dict[str, Decimal]: Currency code (as sent) -> amount.
        """
        if not isinstance(funds, Mapping):
            raise _malformed("Funds entry is not an object")

        balances: Dict[str, Decimal] = {}
        for currency, raw_amount in funds.items():
            amount = _to_decimal(raw_amount, currency)
            if amount > 0:
                balances[currency] = amount
        return balances

    @staticmethod
    def _order_side(raw: Mapping) -> Optional[bool]:
        side = raw.get("type")
        if side == "buy":
            return True
        if side == "sell":
            return False
        return None

    @staticmethod
    def parse_order(order_id: str, raw: Any) -> Order:
        """
        Normalize an order object (ActiveOrders / OrderInfo shape).

        ``start_amount`` is the requested amount and ``amount`` the quantity
        still open, so the filled amount is their difference.

        Args:
            order_id: Key the order was listed under.
            raw: Order object.
        """
        requested = _to_decimal(_require(raw, "start_amount"), "start_amount")
        remaining = _to_decimal(_require(raw, "amount"), "amount")
        filled = requested - remaining

        return _build(
            Order,
            order_id=str(order_id),
            symbol=str(_require(raw, "pair")),
            amount=requested,
            amount_filled=filled,
            price=_to_decimal(_require(raw, "rate"), "rate"),
            order_date=_to_timestamp(_require(raw, "timestamp_created"), "timestamp_created"),
            result=resolve_order_result(requested, filled),
            is_buy=YobitNormalizer._order_side(raw),
        )

    @staticmethod
    def parse_trade_history_entry(raw: Any) -> Order:
        """
        Normalize one TradeHistory entry.

        Each entry is an execution, so the reported amount is both requested
        and filled.
        """
        amount = _to_decimal(_require(raw, "amount"), "amount")

        return _build(
            Order,
            order_id=str(_require(raw, "order_id")),
            symbol=str(_require(raw, "pair")),
            amount=amount,
            amount_filled=amount,
            price=_to_decimal(_require(raw, "rate"), "rate"),
            order_date=_to_timestamp(_require(raw, "timestamp"), "timestamp"),
            result=resolve_order_result(amount, amount),
            is_buy=YobitNormalizer._order_side(raw),
        )

    @staticmethod
    def parse_orders(payload: Any, parser: Callable[[str, Any], Order]) -> List[Order]:
        """
        Normalize an object of ``{key: order}`` entries, once per entry.

        Args:
            payload: Unwrapped ``return`` object; None means no orders.
            parser: Called with (key, raw entry).
        """
        if payload is None:
            return []
        if not isinstance(payload, Mapping):
            raise _malformed("Orders entry is not an object")
        return [parser(key, raw) for key, raw in payload.items()]

    @staticmethod
    def parse_placed_order(raw: Any, pair: str, request: OrderRequest) -> Order:
        """
        Normalize a Trade response.

        The exchange does not echo a timestamp, so the order date is the
        local time the response was processed.
        """
        received = _to_decimal(_require(raw, "received"), "received")
        remains = _to_decimal(_require(raw, "remains"), "remains")
        amount = remains + received

        return _build(
            Order,
            order_id=str(_require(raw, "order_id")),
            symbol=pair,
            amount=amount,
            amount_filled=received,
            price=request.price,
            order_date=datetime.now(timezone.utc),
            result=resolve_order_result(amount, received),
            is_buy=request.is_buy,
        )

    @staticmethod
    def parse_deposit_address(raw: Any, symbol: str) -> DepositDetails:
        """Normalize a GetDepositAddress response."""
        return _build(
            DepositDetails,
            symbol=symbol,
            address=str(_require(raw, "address")),
        )

"""
Abstract base class for exchange adapters.

This module defines the ExchangeAdapter interface: the fixed set of
operations a multi-exchange trading layer calls on every exchange
integration. Implementations translate one exchange's REST API into the
canonical models in ``src.models``.

The adapter pattern allows the system to:
- Add new exchanges without modifying the trading layer
- Normalize data into unified schemas (Ticker, Trade, Order, Market)
- Keep exchange-specific signing and nonce handling inside the adapter

Operations the exchange cannot serve raise ``NotSupportedError``; they
are never emulated silently.

Example:
    >>> class MyExchangeAdapter(ExchangeAdapter):
    ...     @property
    ...     def exchange_name(self) -> str:
    ...         return "myexchange"
    ...
    ...     async def get_symbols(self) -> List[str]:
    ...         info = await self._rest.get_public("/info")
    ...         return list(info["pairs"])
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

from src.models.funding import DepositDetails, WithdrawalRequest, WithdrawalResponse
from src.models.market import Market
from src.models.order import Order, OrderRequest
from src.models.orderbook import OrderBook
from src.models.ticker import Ticker, Trade

# Consumer for historical trades. May return an awaitable.
TradeCallback = Callable[[List[Trade]], Any]


class ExchangeAdapter(ABC):
    """
    Abstract base class for exchange adapters.

    Defines the contract that all exchange-specific implementations must
    follow. All network operations are coroutines.

    Attributes:
        exchange_name: Lowercase exchange identifier (e.g., "yobit").

    Note:
        All financial values in returned models use Decimal for precision.
        Never use float for prices, quantities, or balances.
    """

    @property
    @abstractmethod
    def exchange_name(self) -> str:
        """
        Return the lowercase exchange identifier.

        Used in log events and error messages.

        Returns:
            str: Lowercase exchange name (e.g., "yobit").
        """
        pass

    # =========================================================================
    # MARKET DATA
    # =========================================================================

    @abstractmethod
    async def get_symbols(self) -> List[str]:
        """
        List tradable symbols.

        Returns:
            List[str]: Native pair identifiers, unchanged (e.g., "ltc_btc").
        """
        pass

    @abstractmethod
    async def get_markets(self) -> List[Market]:
        """
        List metadata for every tradable symbol.

        Returns:
            List[Market]: One record per pair.

        Raises:
            MalformedResponseError: If a pair identifier or numeric field
                cannot be decoded.
        """
        pass

    @abstractmethod
    async def get_ticker(self, symbol: str) -> Optional[Ticker]:
        """
        Fetch the ticker of one symbol.

        Args:
            symbol: Pair identifier.

        Returns:
            Optional[Ticker]: The ticker, or None if the exchange returned
                no data for the symbol.
        """
        pass

    @abstractmethod
    async def get_tickers(self) -> List[Tuple[str, Ticker]]:
        """
        Fetch tickers for all symbols.

        Returns:
            List[Tuple[str, Ticker]]: (symbol, ticker) pairs.
        """
        pass

    @abstractmethod
    async def get_order_book(self, symbol: str, max_count: int = 100) -> OrderBook:
        """
        Fetch the order book of one symbol.

        Args:
            symbol: Pair identifier.
            max_count: Maximum number of levels per side.

        Returns:
            OrderBook: Bids best-first, asks best-first.
        """
        pass

    @abstractmethod
    async def get_recent_trades(self, symbol: str) -> List[Trade]:
        """
        Fetch the most recent public trades of one symbol.

        Args:
            symbol: Pair identifier.

        Returns:
            List[Trade]: Recent trades, newest first as sent by the exchange.
        """
        pass

    @abstractmethod
    async def get_historical_trades(
        self,
        callback: TradeCallback,
        symbol: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> None:
        """
        Fetch historical trades and hand them to ``callback``.

        Args:
            callback: Consumer invoked with batches of trades.
            symbol: Pair identifier.
            start_date: Only deliver trades at or after this time.
            end_date: Only deliver trades at or before this time, where the
                exchange supports it.
        """
        pass

    @abstractmethod
    async def get_candles(
        self,
        symbol: str,
        period_seconds: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Any]:
        """
        Fetch candlesticks.

        Raises:
            NotSupportedError: If the exchange has no candle endpoint.
        """
        pass

    @abstractmethod
    async def get_currencies(self) -> Dict[str, Any]:
        """
        Fetch currency metadata.

        Raises:
            NotSupportedError: If the exchange has no currency endpoint.
        """
        pass

    # =========================================================================
    # ACCOUNT AND TRADING
    # =========================================================================

    @abstractmethod
    async def get_balances(self) -> Dict[str, Decimal]:
        """
        Fetch account balances.

        Returns:
            Dict[str, Decimal]: Currency code -> amount, positive amounts only.
        """
        pass

    @abstractmethod
    async def get_tradable_balances(self) -> Dict[str, Decimal]:
        """
        Fetch balances including amounts reserved in open orders.

        Returns:
            Dict[str, Decimal]: Currency code -> amount, positive amounts only.
        """
        pass

    @abstractmethod
    async def get_order_details(self, order_id: str, symbol: Optional[str] = None) -> Order:
        """
        Fetch one order.

        Args:
            order_id: Exchange order id.
            symbol: Pair identifier, if the exchange needs it.

        Returns:
            Order: The order with a freshly derived fill state.
        """
        pass

    @abstractmethod
    async def get_completed_orders(
        self,
        symbol: Optional[str] = None,
        after_date: Optional[datetime] = None,
    ) -> List[Order]:
        """
        Fetch completed orders.

        Args:
            symbol: Pair identifier.
            after_date: Only return orders after this time.

        Raises:
            InvalidArgumentError: If the exchange requires a symbol and none
                was given.
        """
        pass

    @abstractmethod
    async def get_open_orders(self, symbol: Optional[str] = None) -> List[Order]:
        """
        Fetch open orders.

        Args:
            symbol: Pair identifier.

        Raises:
            InvalidArgumentError: If the exchange requires a symbol and none
                was given.
        """
        pass

    @abstractmethod
    async def place_order(self, order: OrderRequest) -> Order:
        """
        Place a limit order.

        Args:
            order: Order parameters.

        Returns:
            Order: The accepted order with its fill state.
        """
        pass

    @abstractmethod
    async def cancel_order(self, order_id: str, symbol: Optional[str] = None) -> None:
        """
        Cancel an order.

        Completes without a value when the exchange accepts the request.
        """
        pass

    # =========================================================================
    # FUNDING
    # =========================================================================

    @abstractmethod
    async def get_deposit_history(self, symbol: str) -> List[Any]:
        """
        Fetch deposit history.

        Raises:
            NotSupportedError: If the exchange has no deposit history endpoint.
        """
        pass

    @abstractmethod
    async def get_deposit_address(
        self, symbol: str, force_regenerate: bool = False
    ) -> DepositDetails:
        """
        Fetch, or generate, a deposit address.

        Args:
            symbol: Currency code.
            force_regenerate: Ask the exchange for a new address.
        """
        pass

    @abstractmethod
    async def withdraw(self, request: WithdrawalRequest) -> WithdrawalResponse:
        """
        Withdraw funds to an external address.

        Args:
            request: Withdrawal parameters.
        """
        pass

    async def close(self) -> None:
        """Release network and storage resources. Override if needed."""

    def __repr__(self) -> str:
        """Return string representation of adapter."""
        return f"{self.__class__.__name__}(exchange={self.exchange_name})"

"""
Ticker and trade data models.

This module defines the canonical ticker and trade shapes returned by
exchange adapters. All financial values use Decimal for precision.

Models:
    Volume: Volume sub-record of a ticker
    Ticker: Best bid/ask, last price and volume for one symbol
    Trade: Individual public trade
    TradeSide: Enum for trade side (buy/sell)
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class TradeSide(str, Enum):
    """
    Enumeration for trade side.

    Attributes:
        BUY: Trade is reported as a buy
        SELL: Trade is reported as a sell
    """

    BUY = "buy"
    SELL = "sell"


class Volume(BaseModel):
    """
    Traded volume attached to a ticker.

    Attributes:
        base_volume: Volume in the base currency of the pair.
        converted_volume: Volume in the market (quoted) currency of the pair.
        base_symbol: Base currency code (e.g., "BTC" for "ltc_btc").
        converted_symbol: Market currency code (e.g., "LTC" for "ltc_btc").
        timestamp: Time the exchange last updated the figures (UTC).

    Note:
        The symbol fields are empty strings when the pair identifier could
        not be split into exactly two currency codes.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    base_volume: Decimal = Field(
        ...,
        description="Volume in base currency",
        ge=Decimal("0"),
    )
    converted_volume: Decimal = Field(
        ...,
        description="Volume in market currency",
        ge=Decimal("0"),
    )
    base_symbol: str = Field(
        default="",
        description="Base currency code",
        examples=["BTC"],
    )
    converted_symbol: str = Field(
        default="",
        description="Market currency code",
        examples=["LTC"],
    )
    timestamp: datetime = Field(
        ...,
        description="Exchange update timestamp (UTC)",
    )


class Ticker(BaseModel):
    """
    Ticker data for a single symbol.

    Attributes:
        symbol: Native pair identifier (e.g., "ltc_btc").
        ask: Lowest ask price.
        bid: Highest bid price.
        last: Last traded price.
        volume: Volume sub-record.

    Example:
        >>> ticker = Ticker(
        ...     symbol="ltc_btc",
        ...     ask=Decimal("105.11"),
        ...     bid=Decimal("104.2"),
        ...     last=Decimal("105.11"),
        ...     volume=Volume(
        ...         base_volume=Decimal("43398.22"),
        ...         converted_volume=Decimal("4546.26"),
        ...         base_symbol="BTC",
        ...         converted_symbol="LTC",
        ...         timestamp=datetime(2014, 12, 15, 14, 42, 11, tzinfo=timezone.utc),
        ...     ),
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(
        ...,
        description="Native pair identifier",
        min_length=1,
        examples=["ltc_btc"],
    )
    ask: Decimal = Field(
        ...,
        description="Lowest ask price",
        ge=Decimal("0"),
    )
    bid: Decimal = Field(
        ...,
        description="Highest bid price",
        ge=Decimal("0"),
    )
    last: Decimal = Field(
        ...,
        description="Last traded price",
        ge=Decimal("0"),
    )
    volume: Volume

    @property
    def spread(self) -> Decimal:
        """
        Calculate the absolute spread (ask - bid).

        Returns:
            Decimal: Ask minus bid.
        """
        return self.ask - self.bid


class Trade(BaseModel):
    """
    Public trade.

    Attributes:
        id: Exchange-assigned trade id. Not unique across pairs.
        price: Execution price.
        amount: Executed amount in market currency.
        side: Trade side as reported by the exchange.
        timestamp: Execution time (UTC).

    Example:
        >>> trade = Trade(
        ...     id=41234426,
        ...     price=Decimal("104.2"),
        ...     amount=Decimal("0.101"),
        ...     side=TradeSide.BUY,
        ...     timestamp=datetime(2014, 12, 15, 14, 42, 11, tzinfo=timezone.utc),
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: int = Field(
        ...,
        description="Exchange trade id",
    )
    price: Decimal = Field(
        ...,
        description="Trade execution price",
        ge=Decimal("0"),
    )
    amount: Decimal = Field(
        ...,
        description="Trade amount in market currency",
        ge=Decimal("0"),
    )
    side: TradeSide = Field(
        ...,
        description="Trade side",
    )
    timestamp: datetime = Field(
        ...,
        description="Trade execution timestamp (UTC)",
    )

    @property
    def notional(self) -> Decimal:
        """
        Calculate the notional value of this trade.

        Returns:
            Decimal: The product of price and amount.
        """
        return self.price * self.amount

    @property
    def is_buy(self) -> bool:
        """
        Check if this trade is reported as a buy.

        Returns:
            bool: True if the trade side was buy.
        """
        return self.side == TradeSide.BUY

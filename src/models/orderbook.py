"""
Order book data models.

All financial values use Decimal for precision to avoid floating-point errors.

Models:
    PriceLevel: Single price level in an order book (price, quantity)
    OrderBook: Normalized order book for one symbol
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


class PriceLevel(BaseModel):
    """
    Single price level in an order book.

    Attributes:
        price: Price at this level in base currency.
        quantity: Quantity available at this level in market currency.

    Example:
        >>> level = PriceLevel(price=Decimal("0.0105"), quantity=Decimal("1.5"))
        >>> level.notional
        Decimal('0.01575')
    """

    model_config = {"frozen": True, "extra": "ignore"}

    price: Decimal = Field(
        ...,
        description="Price at this level",
        ge=Decimal("0"),
    )
    quantity: Decimal = Field(
        ...,
        description="Quantity available at this level",
        ge=Decimal("0"),
    )

    @computed_field  # type: ignore[misc]
    @property
    def notional(self) -> Decimal:
        """
        Calculate the notional value at this level.

        Returns:
            Decimal: The product of price and quantity.
        """
        return self.price * self.quantity


class OrderBook(BaseModel):
    """
    Normalized order book for a single symbol.

    Attributes:
        symbol: Native pair identifier (e.g., "ltc_btc").
        timestamp: When the book was received (UTC). The exchange does not
            timestamp its depth responses.
        bids: Bid levels, sorted best (highest price) to worst.
        asks: Ask levels, sorted best (lowest price) to worst.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    symbol: str = Field(
        ...,
        description="Native pair identifier",
        min_length=1,
    )
    timestamp: datetime = Field(
        ...,
        description="Local receipt timestamp (UTC)",
    )
    bids: List[PriceLevel] = Field(
        default_factory=list,
        description="Bid levels, sorted best (highest) to worst",
    )
    asks: List[PriceLevel] = Field(
        default_factory=list,
        description="Ask levels, sorted best (lowest) to worst",
    )

    @model_validator(mode="after")
    def validate_order_book(self) -> "OrderBook":
        """
        Validate level ordering.

        Ensures:
            - Bids are sorted in descending order (best first)
            - Asks are sorted in ascending order (best first)
        """
        for i in range(len(self.bids) - 1):
            if self.bids[i].price < self.bids[i + 1].price:
                raise ValueError(
                    f"Bids must be sorted descending: {self.bids[i].price} < {self.bids[i + 1].price}"
                )

        for i in range(len(self.asks) - 1):
            if self.asks[i].price > self.asks[i + 1].price:
                raise ValueError(
                    f"Asks must be sorted ascending: {self.asks[i].price} > {self.asks[i + 1].price}"
                )

        return self

    @computed_field  # type: ignore[misc]
    @property
    def best_bid(self) -> Optional[Decimal]:
        """Best (highest) bid price, or None if there are no bids."""
        return self.bids[0].price if self.bids else None

    @computed_field  # type: ignore[misc]
    @property
    def best_ask(self) -> Optional[Decimal]:
        """Best (lowest) ask price, or None if there are no asks."""
        return self.asks[0].price if self.asks else None

    @computed_field  # type: ignore[misc]
    @property
    def mid_price(self) -> Optional[Decimal]:
        """
        Calculate the mid price.

        Returns:
            Optional[Decimal]: Mid price, or None if either side is empty.
        """
        if self.best_bid is not None and self.best_ask is not None:
            return (self.best_bid + self.best_ask) / Decimal("2")
        return None

"""
Order data models.

Models:
    OrderResult: Fill state of an order, derived from amounts
    OrderRequest: Parameters for placing a limit order
    Order: Normalized order as reported by the exchange
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class OrderResult(str, Enum):
    """
    Fill state of an order.

    Attributes:
        FILLED: Filled amount equals requested amount (including 0 == 0)
        PENDING: Nothing filled yet
        PARTIALLY_FILLED: Some but not all of the amount filled
    """

    FILLED = "filled"
    PENDING = "pending"
    PARTIALLY_FILLED = "partially_filled"


class OrderRequest(BaseModel):
    """
    Limit order submission.

    Attributes:
        symbol: Pair identifier; normalized before submission.
        amount: Amount to buy or sell in market currency.
        price: Limit price (sent as ``rate``).
        is_buy: True for a buy order, False for a sell order.
        extra_parameters: Additional fields merged into the signed payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=Decimal("0"))
    price: Decimal = Field(..., gt=Decimal("0"))
    is_buy: bool = True
    extra_parameters: Dict[str, Any] = Field(default_factory=dict)


class Order(BaseModel):
    """
    Normalized order.

    The fill state is always computed from ``amount`` and ``amount_filled``
    by the adapter; the exchange status code is never trusted.

    Attributes:
        order_id: Exchange order id.
        symbol: Native pair identifier.
        amount: Requested amount.
        amount_filled: Executed amount, never above ``amount``.
        price: Limit price, if known.
        order_date: Creation time (UTC).
        result: Derived fill state.
        is_buy: Order side, if reported.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    order_id: str = Field(
        ...,
        description="Exchange order id",
        min_length=1,
    )
    symbol: str = Field(
        default="",
        description="Native pair identifier",
    )
    amount: Decimal = Field(
        ...,
        description="Requested amount",
        ge=Decimal("0"),
    )
    amount_filled: Decimal = Field(
        ...,
        description="Executed amount",
        ge=Decimal("0"),
    )
    price: Optional[Decimal] = Field(
        default=None,
        description="Limit price",
        ge=Decimal("0"),
    )
    order_date: datetime = Field(
        ...,
        description="Order creation time (UTC)",
    )
    result: OrderResult
    is_buy: Optional[bool] = None

    @model_validator(mode="after")
    def validate_amounts(self) -> "Order":
        """Ensure the filled amount never exceeds the requested amount."""
        if self.amount_filled > self.amount:
            raise ValueError(
                f"amount_filled ({self.amount_filled}) must be <= amount ({self.amount})"
            )
        return self

    @property
    def amount_remaining(self) -> Decimal:
        """Amount still open on the book."""
        return self.amount - self.amount_filled

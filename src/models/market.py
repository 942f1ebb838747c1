"""Tradable symbol metadata."""

from decimal import Decimal

from pydantic import BaseModel, Field


class Market(BaseModel):
    """
    Metadata for one tradable pair.

    Attributes:
        market_name: Native pair identifier, verbatim (e.g., "ltc_btc").
        market_currency: Upper-cased first currency code (e.g., "LTC").
        base_currency: Upper-cased second currency code (e.g., "BTC").
        is_active: False when the exchange marks the pair hidden.
        min_price: Minimum accepted limit price.
        max_price: Maximum accepted limit price.
        min_trade_size: Minimum order amount.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    market_name: str = Field(..., min_length=1)
    market_currency: str = Field(..., min_length=1)
    base_currency: str = Field(..., min_length=1)
    is_active: bool
    min_price: Decimal = Field(..., ge=Decimal("0"))
    max_price: Decimal = Field(..., ge=Decimal("0"))
    min_trade_size: Decimal = Field(..., ge=Decimal("0"))

"""
Canonical Pydantic data models returned by exchange adapters.

All models are frozen and use Decimal for financial precision.

Modules:
    ticker: Ticker, volume and trade snapshots
    orderbook: Order book and price levels
    market: Tradable symbol metadata
    order: Orders, order requests and fill state
    funding: Deposit addresses and withdrawals

Example:
    >>> from src.models import Ticker, Trade, Order, OrderResult
"""

# Ticker models
from src.models.ticker import (
    Ticker,
    Trade,
    TradeSide,
    Volume,
)

# Order book models
from src.models.orderbook import (
    OrderBook,
    PriceLevel,
)

# Market metadata
from src.models.market import Market

# Order models
from src.models.order import (
    Order,
    OrderRequest,
    OrderResult,
)

# Funding models
from src.models.funding import (
    DepositDetails,
    WithdrawalRequest,
    WithdrawalResponse,
)

__all__ = [
    # Ticker
    "Ticker",
    "Trade",
    "TradeSide",
    "Volume",
    # Order book
    "OrderBook",
    "PriceLevel",
    # Market
    "Market",
    # Orders
    "Order",
    "OrderRequest",
    "OrderResult",
    # Funding
    "DepositDetails",
    "WithdrawalRequest",
    "WithdrawalResponse",
]

"""Shared fixtures for adapter tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapters.yobit.adapter import YobitAdapter
from src.auth.signer import Credentials


@pytest.fixture
def credentials():
    """Test API key pair."""
    return Credentials(public_key="test-public-key", private_key="test-private-key")


@pytest.fixture
def mock_rest():
    """REST client double with async public/private calls."""
    rest = MagicMock()
    rest.has_credentials = True
    rest.get_public = AsyncMock()
    rest.post_private = AsyncMock()
    rest.close = AsyncMock()
    return rest


@pytest.fixture
def adapter(mock_rest):
    """YobitAdapter wired to the mocked REST client."""
    return YobitAdapter(mock_rest)


@pytest.fixture
def info_response():
    """GET /info payload with one visible and one hidden pair."""
    return {
        "server_time": 1418654531,
        "pairs": {
            "ltc_btc": {
                "decimal_places": 8,
                "min_price": 0.00000001,
                "max_price": 10000,
                "min_amount": 0.0001,
                "hidden": 0,
                "fee": 0.2,
            },
            "nvc_btc": {
                "decimal_places": 8,
                "min_price": "0.00000001",
                "max_price": "500",
                "min_amount": "0.01",
                "hidden": 1,
                "fee": 0.2,
            },
        },
    }


@pytest.fixture
def ticker_payload():
    """Ticker object for ltc_btc."""
    return {
        "high": 105.41,
        "low": 104.67,
        "avg": 105.04,
        "vol": 43398.22251455,
        "vol_cur": 4546.26962359,
        "last": 105.11,
        "buy": 104.2,
        "sell": 105.11,
        "updated": 1418654531,
    }

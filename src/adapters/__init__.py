"""
Exchange adapters.

All adapters implement the ExchangeAdapter interface.

Supported Exchanges:
    - Yobit (spot, public market data and private trading API)
"""

from src.adapters.yobit import YobitAdapter

__all__ = ["YobitAdapter"]

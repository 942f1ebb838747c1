"""
Yobit Exchange Adapter.

An async adapter exposing the Yobit spot exchange through a common
exchange interface.

This package provides:
- Data models for tickers, trades, order books, orders and funding
- Abstract interfaces for exchange adapters and typed errors
- Durable nonce storage and request signing
- Configuration management
"""

__version__ = "0.1.0"

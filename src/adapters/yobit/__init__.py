"""
Yobit exchange adapter.

This package provides Yobit exchange integration over the public and the
signed private REST APIs.

Components:
    - YobitRestClient: HTTP transport; signs private calls under a nonce lock
    - YobitNormalizer: Data format converter
    - resolve_order_result: Fill state inference for orders
    - YobitAdapter: Main adapter implementing ExchangeAdapter interface

Example:
    >>> from src.adapters.yobit import YobitAdapter
    >>> from src.config.loader import load_config
    >>>
    >>> adapter = YobitAdapter.from_config(load_config())
    >>> markets = await adapter.get_markets()
"""

from src.adapters.yobit.adapter import YobitAdapter
from src.adapters.yobit.normalizer import YobitNormalizer
from src.adapters.yobit.order_status import resolve_order_result
from src.adapters.yobit.rest import YobitRestClient

__all__ = [
    "YobitAdapter",
    "YobitNormalizer",
    "YobitRestClient",
    "resolve_order_result",
]

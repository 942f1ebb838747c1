"""
Authentication primitives for the private API.

Components:
    nonce: Durable, strictly increasing request nonce (file or Redis backed)
    signer: HMAC-SHA512 request signing
"""

from src.auth.nonce import (
    MAX_NONCE,
    FileNonceStore,
    NonceStore,
    RedisNonceStore,
    key_fingerprint,
)
from src.auth.signer import Credentials, RequestSigner, SignedRequest, encode_form

__all__ = [
    "MAX_NONCE",
    "Credentials",
    "FileNonceStore",
    "NonceStore",
    "RedisNonceStore",
    "RequestSigner",
    "SignedRequest",
    "encode_form",
    "key_fingerprint",
]

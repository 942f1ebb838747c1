"""
Request signing for the authenticated API.

The private endpoint expects a form-encoded POST body and two headers:
    Key:  the public API key
    Sign: lowercase hex HMAC-SHA512 of the exact body, keyed by the private key

Field order in the body is part of what gets signed, so the payload is
encoded in insertion order: ``nonce`` first, then ``method``, then the
method-specific fields.

Example:
    >>> signer = RequestSigner()
    >>> signed = signer.sign({"method": "getInfo"}, nonce=1, credentials=creds)
    >>> signed.body
    b'nonce=1&method=getInfo'
"""

import hashlib
import hmac
from decimal import Decimal
from typing import Any, Dict, Mapping
from urllib.parse import urlencode

from pydantic import BaseModel, Field, SecretStr


class Credentials(BaseModel):
    """API key pair. Values are SecretStr and never rendered in reprs."""

    model_config = {"frozen": True, "extra": "forbid"}

    public_key: SecretStr
    private_key: SecretStr


class SignedRequest(BaseModel):
    """Headers and body of a signed request."""

    model_config = {"frozen": True, "extra": "forbid"}

    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes

    def __repr__(self) -> str:
        return f"SignedRequest(body_length={len(self.body)})"

    __str__ = __repr__


def format_form_value(value: Any) -> str:
    """
    Render a payload value the way the exchange parses it.

    Decimals and floats are written in plain positional notation, never in
    exponent form.
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return str(value)


def encode_form(fields: Mapping[str, Any]) -> str:
    """Form-encode ``fields`` preserving insertion order."""
    return urlencode([(key, format_form_value(value)) for key, value in fields.items()])


class RequestSigner:
    """
    Builds signed requests for the authenticated endpoint.

    Stateless: signing never touches the nonce store or any shared state.
    """

    NONCE_FIELD = "nonce"
    METHOD_FIELD = "method"

    def sign(
        self,
        payload: Mapping[str, Any],
        nonce: int,
        credentials: Credentials,
    ) -> SignedRequest:
        """
        Sign a private API call.

        Args:
            payload: Ordered fields; must contain ``method`` and must not
                contain ``nonce``.
            nonce: Nonce reserved for this request.
            credentials: API key pair.

        Returns:
            SignedRequest: ``Key``/``Sign`` headers and the encoded body.

        Raises:
            ValueError: If ``method`` is missing or ``nonce`` is already set.
        """
        if self.METHOD_FIELD not in payload:
            raise ValueError("Signed payload requires a 'method' field")
        if self.NONCE_FIELD in payload:
            raise ValueError("Payload must not carry its own 'nonce' field")

        fields: Dict[str, Any] = {self.NONCE_FIELD: nonce}
        fields.update(payload)

        message = encode_form(fields)
        signature = hmac.new(
            credentials.private_key.get_secret_value().encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha512,
        ).hexdigest()

        return SignedRequest(
            headers={
                "Key": credentials.public_key.get_secret_value(),
                "Sign": signature.lower(),
            },
            body=message.encode("utf-8"),
        )

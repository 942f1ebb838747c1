"""
Deposit and withdrawal models.

Models:
    DepositDetails: Deposit address for a currency
    WithdrawalRequest: Parameters for a withdrawal to an external address
    WithdrawalResponse: Outcome of a withdrawal call
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class DepositDetails(BaseModel):
    """Deposit address for one currency."""

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


class WithdrawalRequest(BaseModel):
    """Withdrawal of ``amount`` of ``symbol`` to ``address``."""

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=Decimal("0"))
    address: str = Field(..., min_length=1)


class WithdrawalResponse(BaseModel):
    """
    Outcome of a withdrawal.

    Attributes:
        success: True when the call completed without a transport or
            exchange error. The response body is not inspected further.
        message: Optional free-form note.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    success: bool
    message: Optional[str] = None

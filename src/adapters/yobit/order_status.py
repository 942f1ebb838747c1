"""Fill state inference shared by every order-returning call."""

from decimal import Decimal

from src.models.order import OrderResult


def resolve_order_result(amount: Decimal, filled: Decimal) -> OrderResult:
    """
    Derive an order's fill state from requested and executed amounts.

    The exchange's own status field is legacy and is never consulted.

    Args:
        amount: Requested amount.
        filled: Executed amount.

    Returns:
        OrderResult: FILLED when the amounts match (0 == 0 included),
            PENDING when nothing executed, PARTIALLY_FILLED otherwise.

    Example:
        >>> resolve_order_result(Decimal("5"), Decimal("2"))
        <OrderResult.PARTIALLY_FILLED: 'partially_filled'>
    """
    if amount == filled:
        return OrderResult.FILLED
    if filled == 0:
        return OrderResult.PENDING
    return OrderResult.PARTIALLY_FILLED

"""
Display formatting for ledger amounts and confirmation prompts.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Union

from src.config import get_settings
from src.models.transaction import Transaction, TransactionType


DELETE_PROMPT = "Are you sure you want to delete this transaction?"

_TYPE_LABELS = {
    TransactionType.RECEIVED: "Money Received",
    TransactionType.GIVEN: "Money Given",
}

_TYPE_BADGES = {
    TransactionType.RECEIVED: "Received",
    TransactionType.GIVEN: "Given",
}


def format_amount(value: Union[Decimal, int, float]) -> str:
    """
    Group thousands, no decimal places.

    >>> format_amount(Decimal("1234567"))
    '1,234,567'
    >>> format_amount(Decimal("-1000"))
    '-1,000'
    """
    value = Decimal(str(value))
    # quantize needs room for every integer digit, sums can exceed the default 28
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        rounded = value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:,}"


def format_currency(
    value: Union[Decimal, int, float],
    symbol: Optional[str] = None,
) -> str:
    """Amount with the configured currency prefix, e.g. 'Rs. 5,000'."""
    if symbol is None:
        symbol = get_settings().app.currency_symbol
    return f"{symbol} {format_amount(value)}"


def type_label(transaction_type: TransactionType) -> str:
    return _TYPE_LABELS[transaction_type]


def type_badge(transaction_type: TransactionType) -> str:
    return _TYPE_BADGES[transaction_type]


def describe_for_edit(transaction: Transaction, symbol: Optional[str] = None) -> str:
    """Prompt shown before a transaction is loaded into the form for editing."""
    return (
        "You are editing this transaction:\n\n"
        f"Partner: {transaction.partner_name}\n"
        f"Type: {type_label(transaction.type)}\n"
        f"Amount: {format_currency(transaction.amount, symbol)}\n"
        f"Date: {transaction.date.isoformat()}\n\n"
        "Confirm to continue editing or cancel to add a new transaction instead."
    )

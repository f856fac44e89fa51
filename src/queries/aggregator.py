"""
Ledger Aggregation

Derives totals and per-partner balances from a ledger snapshot.

All functions are pure and run in one pass over the snapshot. Sums are
plain Decimal addition; rounding is a display concern (see formatting).
"""

from decimal import Decimal
from functools import lru_cache
from typing import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from src.models.transaction import Transaction, TransactionType


ZERO = Decimal("0")


class LedgerTotals(BaseModel):
    """Sum of amounts per transaction type."""
    model_config = ConfigDict(frozen=True)

    received: Decimal = ZERO
    given: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.received - self.given


class PartnerBalance(LedgerTotals):
    """Received/given totals for one partner."""


class LedgerSummary(BaseModel):
    """Everything the ledger view derives from one snapshot."""
    model_config = ConfigDict(frozen=True)

    totals: LedgerTotals
    partner_balances: dict[str, PartnerBalance] = Field(default_factory=dict)
    partners: list[str] = Field(default_factory=list)
    transaction_count: int = 0

    @property
    def net_balance(self) -> Decimal:
        return self.totals.net

    def partner_net(self, partner_name: str) -> Decimal:
        return partner_net(self.partner_balances, partner_name)


def totals(ledger: Iterable[Transaction]) -> LedgerTotals:
    """Sum received and given amounts across the ledger."""
    received = ZERO
    given = ZERO
    for transaction in ledger:
        if transaction.type == TransactionType.RECEIVED:
            received += transaction.amount
        else:
            given += transaction.amount
    return LedgerTotals(received=received, given=given)


def net_balance(ledger: Iterable[Transaction]) -> Decimal:
    """Total received minus total given."""
    return totals(ledger).net


def partner_balances(ledger: Iterable[Transaction]) -> dict[str, PartnerBalance]:
    """
    Group amounts by partner name.

    Partners appear in the order they are first seen in the ledger.
    Names are matched exactly (case-sensitive).
    """
    buckets: dict[str, dict[str, Decimal]] = {}
    for transaction in ledger:
        bucket = buckets.setdefault(
            transaction.partner_name,
            {"received": ZERO, "given": ZERO},
        )
        bucket[transaction.type.value] += transaction.amount
    return {
        name: PartnerBalance(received=bucket["received"], given=bucket["given"])
        for name, bucket in buckets.items()
    }


def partner_net(balances: Mapping[str, LedgerTotals], partner_name: str) -> Decimal:
    """Net balance of one partner; zero for a partner with no transactions."""
    balance = balances.get(partner_name)
    if balance is None:
        return ZERO
    return balance.net


def distinct_partners(ledger: Iterable[Transaction]) -> list[str]:
    """Sorted list of every partner name in the ledger."""
    return sorted({transaction.partner_name for transaction in ledger})


@lru_cache(maxsize=16)
def _summarize_snapshot(snapshot: tuple[Transaction, ...]) -> LedgerSummary:
    balances = partner_balances(snapshot)
    return LedgerSummary(
        totals=totals(snapshot),
        partner_balances=balances,
        partners=sorted(balances),
        transaction_count=len(snapshot),
    )


def summarize(ledger: Iterable[Transaction]) -> LedgerSummary:
    """
    Compute every derived view of a snapshot.

    Memoized per snapshot: summarizing the same snapshot twice reuses the
    first result.
    """
    return _summarize_snapshot(tuple(ledger))

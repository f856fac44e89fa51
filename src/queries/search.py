"""
Ledger Search

Case-insensitive substring search over partner name and description.
Matching transactions keep their order in the ledger.
"""

from typing import Iterable

from pydantic import BaseModel, ConfigDict

from src.models.transaction import Transaction


NO_TRANSACTIONS_MESSAGE = "No transactions yet"
NO_MATCHES_MESSAGE = "No transactions match your search"


def matches(transaction: Transaction, term: str) -> bool:
    """True if `term` occurs in the partner name or the description."""
    if not term:
        return True
    needle = term.lower()
    return (
        needle in transaction.partner_name.lower()
        or needle in transaction.description.lower()
    )


def filter_transactions(
    ledger: Iterable[Transaction],
    term: str,
) -> tuple[Transaction, ...]:
    """
    Order-preserving subsequence of the ledger matching `term`.

    An empty term returns the whole ledger.
    """
    snapshot = tuple(ledger)
    if not term:
        return snapshot
    return tuple(t for t in snapshot if matches(t, term))


class SearchResult(BaseModel):
    """A search over one snapshot, with what the list view shows around it."""
    model_config = ConfigDict(frozen=True)

    term: str
    matches: tuple[Transaction, ...]
    total: int

    @property
    def shown(self) -> int:
        return len(self.matches)

    @property
    def caption(self) -> str:
        return f"Showing {self.shown} of {self.total} transactions"

    @property
    def empty_message(self) -> str:
        """Message for an empty result; distinguishes empty ledger from no matches."""
        if self.total == 0:
            return NO_TRANSACTIONS_MESSAGE
        return NO_MATCHES_MESSAGE


def search(ledger: Iterable[Transaction], term: str) -> SearchResult:
    snapshot = tuple(ledger)
    return SearchResult(
        term=term,
        matches=filter_transactions(snapshot, term),
        total=len(snapshot),
    )

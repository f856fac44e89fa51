"""
In-Memory Storage Implementation

Holds the ledger slot as a JSON string in process memory. Used by tests and
by the app when LEDGER_STORAGE_BACKEND=memory.

The blob goes through the same encode/decode path as the file backend, so
the persisted shape is identical.
"""

from typing import Iterable, Optional

from src.models.transaction import Transaction
from src.services.storage.interface import (
    LedgerStorageInterface,
    decode_ledger,
    encode_ledger,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ephemeral implementation of the ledger slot."""

    def __init__(self, key: str = "partnerTransactions", blob: Optional[str] = None):
        self.key = key
        self._blob = blob
        self.save_count = 0

    @property
    def blob(self) -> Optional[str]:
        """The raw stored JSON, None if never written."""
        return self._blob

    def load(self) -> list[Transaction]:
        if self._blob is None:
            return []
        return decode_ledger(self._blob, self.key)

    def save(self, transactions: Iterable[Transaction]) -> None:
        self._blob = encode_ledger(transactions)
        self.save_count += 1

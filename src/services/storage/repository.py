"""
Ledger Repository

The Ledger Store. Owns the list of transactions and is the only component
that writes it.

Every mutation is read-modify-write over the full sequence:
1. Load the current ledger from the slot
2. Apply exactly one structural change
3. Save the whole ledger back
4. Return the fresh snapshot

Snapshots are tuples of frozen transactions. Callers recompute derived
views (totals, balances, search results) from the snapshot they get back.
"""

from typing import Callable, Optional
from uuid import uuid4

from src.audit import AuditLogger
from src.models.transaction import Transaction
from src.services.storage.interface import (
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)


LedgerSnapshot = tuple[Transaction, ...]


class IdGenerator:
    """
    Produces unique opaque ids namespaced by entity kind.

    >>> IdGenerator("trans")()  # doctest: +SKIP
    'trans_5f0c2a9e41b7'
    """

    def __init__(self, prefix: str, token_factory: Optional[Callable[[], str]] = None):
        self.prefix = prefix
        self._token_factory = token_factory or (lambda: uuid4().hex[:12])

    def __call__(self) -> str:
        return f"{self.prefix}_{self._token_factory()}"


class LedgerRepository:
    """
    Read-modify-write access to the ledger slot.

    Single writer: there is no locking, one session owns the slot.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger

    def snapshot(self) -> LedgerSnapshot:
        """
        Load the current ledger.

        Raises:
            CorruptLedgerError: If the slot cannot be parsed. The ledger is
                never replaced with an empty one behind the caller's back.
        """
        try:
            transactions = self._storage.load()
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_ledger_load_failed(self._storage.key, str(e))
            raise

        if self._audit_logger:
            self._audit_logger.log_ledger_loaded(self._storage.key, len(transactions))
        return tuple(transactions)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self.snapshot():
            if transaction.id == transaction_id:
                return transaction
        return None

    def append(self, transaction: Transaction) -> LedgerSnapshot:
        """
        Add a new transaction at the front of the ledger (newest first).

        Raises:
            DuplicateError: If a transaction with the same id exists
        """
        current = self.snapshot()
        if any(t.id == transaction.id for t in current):
            raise DuplicateError(f"Transaction {transaction.id} already exists")
        return self._persist((transaction,) + current)

    def replace(self, transaction_id: str, transaction: Transaction) -> LedgerSnapshot:
        """
        Overwrite every field of a transaction except its id.

        The record keeps its position in the ledger.

        Raises:
            NotFoundError: If no transaction has this id
        """
        current = self.snapshot()
        replacement = transaction.with_id(transaction_id)
        updated = []
        found = False
        for existing in current:
            if existing.id == transaction_id:
                updated.append(replacement)
                found = True
            else:
                updated.append(existing)
        if not found:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return self._persist(tuple(updated))

    def remove(self, transaction_id: str) -> LedgerSnapshot:
        """
        Permanently delete one transaction.

        Raises:
            NotFoundError: If no transaction has this id
        """
        current = self.snapshot()
        remaining = tuple(t for t in current if t.id != transaction_id)
        if len(remaining) == len(current):
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return self._persist(remaining)

    def _persist(self, transactions: LedgerSnapshot) -> LedgerSnapshot:
        try:
            self._storage.save(transactions)
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(self._storage.key, str(e))
            raise

        if self._audit_logger:
            self._audit_logger.log_ledger_saved(self._storage.key, len(transactions))
        return transactions

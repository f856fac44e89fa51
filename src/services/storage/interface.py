"""
Abstract Storage Interface

DESIGN DECISION: The ledger is persisted as one blob in one named
key-value slot. The storage contract is exactly two operations:
load the whole ledger and save the whole ledger.

Structural changes (append, replace, remove) are not storage operations.
They live in LedgerRepository as read-modify-write over the full sequence,
so any backend that can hold one blob can hold the ledger.
"""

import json
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from src.models.transaction import Transaction


_LEDGER_ADAPTER = TypeAdapter(list[Transaction])


class LedgerStorageInterface(ABC):
    """
    Abstract interface for the ledger's key-value slot.

    Implementations hold a JSON array of transactions under one key.
    """

    key: str

    @abstractmethod
    def load(self) -> list[Transaction]:
        """
        Read the whole ledger.

        Returns:
            The stored transactions in stored order, or an empty list
            when the slot has never been written

        Raises:
            CorruptLedgerError: If the slot holds something that is not
                a JSON array of transactions
            StorageError: If the slot cannot be read
        """
        pass

    @abstractmethod
    def save(self, transactions: Iterable[Transaction]) -> None:
        """
        Replace the whole ledger.

        A reader never observes a partially written slot.

        Raises:
            StorageError: If the write fails
        """
        pass


def encode_ledger(transactions: Iterable[Transaction]) -> str:
    """Serialize transactions to the persisted JSON array."""
    return _LEDGER_ADAPTER.dump_json(list(transactions), by_alias=True).decode("utf-8")


def decode_ledger(blob: str, key: str) -> list[Transaction]:
    """
    Parse a persisted JSON array.

    Raises:
        CorruptLedgerError: If the blob is not valid JSON or not an array
            of well-formed transactions
    """
    # Fractional amounts go straight to Decimal, never through float
    try:
        payload = json.loads(blob, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise CorruptLedgerError(
            f"Ledger slot {key!r} is not valid JSON: {e.msg}"
        ) from e
    try:
        return _LEDGER_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise CorruptLedgerError(
            f"Ledger slot {key!r} does not hold a valid transaction array: "
            f"{e.error_count()} errors"
        ) from e


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class CorruptLedgerError(StorageError):
    """The persisted slot exists but cannot be parsed as a ledger."""
    pass

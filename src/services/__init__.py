"""Services package."""

from src.services.storage import (
    CorruptLedgerError,
    DuplicateError,
    IdGenerator,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerRepository,
    LedgerSnapshot,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)

__all__ = [
    "CorruptLedgerError",
    "DuplicateError",
    "IdGenerator",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "LedgerRepository",
    "LedgerSnapshot",
    "LedgerStorageInterface",
    "NotFoundError",
    "StorageError",
]

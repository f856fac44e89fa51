"""
Storage Services Package

Provides the abstract slot interface, two slot implementations
(JSON file and in-memory) and the repository that owns the ledger.
"""

from src.services.storage.interface import (
    CorruptLedgerError,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
    decode_ledger,
    encode_ledger,
)
from src.services.storage.json_file import JsonFileLedgerStorage
from src.services.storage.memory import InMemoryLedgerStorage
from src.services.storage.repository import (
    IdGenerator,
    LedgerRepository,
    LedgerSnapshot,
)

__all__ = [
    # Interface
    "LedgerStorageInterface",
    "decode_ledger",
    "encode_ledger",
    # Exceptions
    "CorruptLedgerError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    # Repository
    "IdGenerator",
    "LedgerRepository",
    "LedgerSnapshot",
]

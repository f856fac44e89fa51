"""
JSON File Storage Implementation

The key-value slot is a single file, `<directory>/<key>.json`, holding the
JSON array of transactions.

Writes go to a temporary file in the same directory and are moved into
place with an atomic rename, so a reader sees either the previous ledger
or the new one, never half of it.
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.config import get_settings
from src.models.transaction import Transaction
from src.services.storage.interface import (
    LedgerStorageInterface,
    StorageError,
    decode_ledger,
    encode_ledger,
)


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    File-backed implementation of the ledger slot.

    A missing file is an empty ledger. The directory is created on the
    first save.
    """

    def __init__(
        self,
        directory: Optional[Path] = None,
        key: Optional[str] = None,
    ):
        settings = get_settings().storage
        self._directory = Path(directory) if directory is not None else settings.directory
        self.key = key or settings.key

    @property
    def path(self) -> Path:
        return self._directory / f"{self.key}.json"

    def load(self) -> list[Transaction]:
        """Read the slot. Absent slot -> empty ledger."""
        try:
            blob = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Failed to read ledger slot {self.key!r}: {e}") from e

        return decode_ledger(blob, self.key)

    def save(self, transactions: Iterable[Transaction]) -> None:
        """Replace the slot with the given transactions."""
        blob = encode_ledger(transactions)
        try:
            self._write_atomic(blob)
        except OSError as e:
            raise StorageError(f"Failed to save ledger slot {self.key!r}: {e}") from e

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, blob: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.key}.",
            suffix=".tmp",
            dir=self._directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(blob)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

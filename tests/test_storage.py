"""Tests for the ledger slot implementations and the repository."""

import json
import os
from decimal import Decimal

import pytest

from src.models.transaction import TransactionType
from src.services.storage import (
    CorruptLedgerError,
    DuplicateError,
    IdGenerator,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerRepository,
    NotFoundError,
    StorageError,
)
from tests.conftest import make_transaction


class TestJsonFileStorage:
    """Tests for the file-backed slot."""

    def test_missing_slot_is_empty_ledger(self, tmp_path):
        """Test an absent file loads as an empty ledger."""
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        assert storage.load() == []

    def test_save_then_load(self, tmp_path, sample_ledger):
        """Test the ledger survives a save/load cycle in order."""
        storage = JsonFileLedgerStorage(directory=tmp_path / "nested", key="partnerTransactions")
        storage.save(sample_ledger)
        assert tuple(storage.load()) == sample_ledger

    def test_persisted_shape(self, tmp_path):
        """Test the file holds a JSON array with camelCase keys."""
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        storage.save([make_transaction()])
        payload = json.loads((tmp_path / "partnerTransactions.json").read_text())
        assert payload == [{
            "id": "trans_1",
            "partnerName": "Ram",
            "type": "received",
            "amount": 5000,
            "date": "2024-12-01",
            "description": "Payment for vehicle sale",
        }]

    def test_save_replaces_whole_slot(self, tmp_path, sample_ledger):
        """Test a save overwrites rather than appends."""
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        storage.save(sample_ledger)
        storage.save(sample_ledger[:1])
        assert len(storage.load()) == 1

    def test_no_temp_files_left_behind(self, tmp_path, sample_ledger):
        """Test the atomic write cleans up after itself."""
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        storage.save(sample_ledger)
        assert [p.name for p in tmp_path.iterdir()] == ["partnerTransactions.json"]

    def test_invalid_json_is_fatal(self, tmp_path):
        """Test a corrupt slot raises instead of loading as empty."""
        (tmp_path / "partnerTransactions.json").write_text("{not json")
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        with pytest.raises(CorruptLedgerError):
            storage.load()

    def test_wrong_shape_is_fatal(self, tmp_path):
        """Test a JSON value that is not a transaction array raises."""
        (tmp_path / "partnerTransactions.json").write_text('{"id": "trans_1"}')
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        with pytest.raises(CorruptLedgerError):
            storage.load()

    @pytest.mark.parametrize("amount", ["0.01", "12345.67", "9999999999999.99"])
    def test_amount_is_exact_after_reload(self, tmp_path, amount):
        """Test fractional amounts come back as the same Decimal, not a float."""
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        storage.save([make_transaction(amount=amount)])
        loaded = storage.load()[0].amount
        assert loaded == Decimal(amount)
        assert str(loaded) == amount

    @pytest.mark.parametrize("amount", ["0.0", "1.005"])
    def test_unstorable_amount_in_slot_is_fatal(self, tmp_path, amount):
        """Test a slot holding an amount the ledger cannot hold is corrupt."""
        payload = (
            '[{"id": "trans_1", "partnerName": "Ram", "type": "received", '
            f'"amount": {amount}, "date": "2024-12-01", "description": "Payment"}}]'
        )
        (tmp_path / "partnerTransactions.json").write_text(payload)
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        with pytest.raises(CorruptLedgerError):
            storage.load()

    def test_corrupt_slot_is_a_storage_error(self, tmp_path):
        """Test CorruptLedgerError can be handled as a StorageError."""
        (tmp_path / "partnerTransactions.json").write_text('[{"id": "x"}]')
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        with pytest.raises(StorageError):
            storage.load()


class TestJsonFileWriteFailures:
    """Retries and error wrapping around the atomic rename."""

    def test_transient_rename_failure_is_retried(self, tmp_path, sample_ledger, monkeypatch):
        """Test a rename that fails once still leaves the full ledger in place."""
        real_replace = os.replace
        calls = []

        def flaky_replace(src, dst):
            calls.append(src)
            if len(calls) == 1:
                raise OSError("device busy")
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", flaky_replace)
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        storage.save(sample_ledger)

        assert len(calls) == 2
        assert tuple(storage.load()) == sample_ledger
        assert [p.name for p in tmp_path.iterdir()] == ["partnerTransactions.json"]

    def test_persistent_rename_failure_raises_storage_error(self, tmp_path, sample_ledger, monkeypatch):
        """Test the last failure surfaces as StorageError and no temp file is left."""
        storage = JsonFileLedgerStorage(directory=tmp_path, key="partnerTransactions")
        storage.save(sample_ledger[:1])
        calls = []

        def broken_replace(src, dst):
            calls.append(src)
            raise OSError("read-only file system")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(StorageError):
            storage.save(sample_ledger)

        assert len(calls) == 3
        assert [p.name for p in tmp_path.iterdir()] == ["partnerTransactions.json"]
        assert tuple(storage.load()) == sample_ledger[:1]


class TestInMemoryStorage:
    """Tests for the in-memory slot."""

    def test_empty_until_saved(self):
        storage = InMemoryLedgerStorage()
        assert storage.load() == []
        assert storage.blob is None

    def test_blob_is_json_array(self, sample_ledger):
        """Test the blob has the same shape as the file slot."""
        storage = InMemoryLedgerStorage()
        storage.save(sample_ledger)
        payload = json.loads(storage.blob)
        assert [item["id"] for item in payload] == ["trans_1", "trans_2", "trans_3", "trans_4"]
        assert payload[2]["amount"] == 1200.5

    def test_corrupt_blob_is_fatal(self):
        storage = InMemoryLedgerStorage(blob="[1, 2, 3]")
        with pytest.raises(CorruptLedgerError):
            storage.load()


class TestIdGenerator:
    """Tests for namespaced id generation."""

    def test_prefix(self):
        ids = IdGenerator("trans")
        assert ids().startswith("trans_")

    def test_unique(self):
        ids = IdGenerator("trans")
        assert len({ids() for _ in range(200)}) == 200


class TestLedgerRepository:
    """Read-modify-write operations over the slot."""

    def test_snapshot_of_empty_slot(self, storage):
        assert LedgerRepository(storage).snapshot() == ()

    def test_append_puts_newest_first(self, seeded_storage):
        """Test new transactions go to the front and are persisted."""
        repo = LedgerRepository(seeded_storage)
        new = make_transaction("trans_9", "Gita")
        snapshot = repo.append(new)
        assert snapshot[0] == new
        assert len(snapshot) == 5
        assert repo.snapshot() == snapshot

    def test_append_rejects_duplicate_id(self, seeded_storage):
        repo = LedgerRepository(seeded_storage)
        with pytest.raises(DuplicateError):
            repo.append(make_transaction("trans_1"))

    def test_replace_preserves_id_position_and_length(self, seeded_storage, sample_ledger):
        """Test edit-by-id keeps id, position and ledger length."""
        repo = LedgerRepository(seeded_storage)
        replacement = make_transaction(
            "ignored", "Ramesh", TransactionType.GIVEN, "42", description="Fuel",
        )
        snapshot = repo.replace("trans_2", replacement)
        assert len(snapshot) == len(sample_ledger)
        assert snapshot[1].id == "trans_2"
        assert snapshot[1].partner_name == "Ramesh"
        assert snapshot[1].amount == Decimal("42")
        assert snapshot[0] == sample_ledger[0]
        assert snapshot[2:] == sample_ledger[2:]

    def test_replace_unknown_id(self, seeded_storage):
        repo = LedgerRepository(seeded_storage)
        with pytest.raises(NotFoundError):
            repo.replace("trans_404", make_transaction())

    def test_remove_deletes_exactly_one(self, seeded_storage, sample_ledger):
        """Test delete-by-id shrinks the ledger by one and keeps the rest."""
        repo = LedgerRepository(seeded_storage)
        snapshot = repo.remove("trans_3")
        assert len(snapshot) == len(sample_ledger) - 1
        assert [t.id for t in snapshot] == ["trans_1", "trans_2", "trans_4"]
        assert repo.get("trans_3") is None

    def test_remove_unknown_id_leaves_slot_untouched(self, seeded_storage):
        repo = LedgerRepository(seeded_storage)
        saves_before = seeded_storage.save_count
        with pytest.raises(NotFoundError):
            repo.remove("trans_404")
        assert seeded_storage.save_count == saves_before

    def test_corrupt_slot_propagates(self):
        repo = LedgerRepository(InMemoryLedgerStorage(blob="oops"))
        with pytest.raises(CorruptLedgerError):
            repo.snapshot()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""Shared fixtures: sample transactions and an in-memory ledger."""

import itertools
from datetime import date
from decimal import Decimal

import pytest

from src.models.transaction import Transaction, TransactionType
from src.orchestrator import PartnerTransactionFlow
from src.services.storage import IdGenerator, InMemoryLedgerStorage, LedgerRepository


def make_transaction(
    transaction_id: str = "trans_1",
    partner_name: str = "Ram",
    transaction_type: TransactionType = TransactionType.RECEIVED,
    amount: str = "5000",
    on: date = date(2024, 12, 1),
    description: str = "Payment for vehicle sale",
) -> Transaction:
    return Transaction(
        id=transaction_id,
        partner_name=partner_name,
        type=transaction_type,
        amount=Decimal(amount),
        date=on,
        description=description,
    )


@pytest.fixture
def sample_ledger() -> tuple[Transaction, ...]:
    return (
        make_transaction("trans_1", "Ram", TransactionType.RECEIVED, "5000"),
        make_transaction("trans_2", "Ram", TransactionType.GIVEN, "6000",
                         description="Interest payment"),
        make_transaction("trans_3", "Shyam", TransactionType.GIVEN, "1200.50",
                         description="Tyres for truck"),
        make_transaction("trans_4", "Anita", TransactionType.RECEIVED, "300",
                         description="Vehicle rent share"),
    )


@pytest.fixture
def storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def seeded_storage(sample_ledger) -> InMemoryLedgerStorage:
    storage = InMemoryLedgerStorage()
    storage.save(sample_ledger)
    return storage


@pytest.fixture
def sequential_ids() -> IdGenerator:
    counter = itertools.count(100)
    return IdGenerator("trans", token_factory=lambda: str(next(counter)))


@pytest.fixture
def flow(storage, sequential_ids) -> PartnerTransactionFlow:
    return PartnerTransactionFlow(
        repository=LedgerRepository(storage),
        id_generator=sequential_ids,
        currency_symbol="Rs.",
    )


@pytest.fixture
def seeded_flow(seeded_storage, sequential_ids) -> PartnerTransactionFlow:
    return PartnerTransactionFlow(
        repository=LedgerRepository(seeded_storage),
        id_generator=sequential_ids,
        currency_symbol="Rs.",
    )

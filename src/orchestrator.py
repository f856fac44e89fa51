"""
Main Orchestrator for the Partner Ledger

This module ties the components together and defines the view flow:
1. Submit (form draft -> validate -> append or replace -> recompute)
2. Edit (request -> confirm -> form filled -> submit replaces in place)
3. Delete (request -> confirm -> remove -> cancel edit if it was the target)

DESIGN DECISION: Edit and delete are two-phase.
request_edit / request_delete return a PendingConfirmation token and change
nothing. The UI decides how to ask the user, then calls confirm(token) or
cancel(token). The core never blocks waiting for an answer. At most one
confirmation is open: a new request cancels the previous one.

After every mutation the flow recomputes its summary from the snapshot the
repository returns. There is no ambient state: the repository is injected.
"""

from enum import Enum
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.audit import AuditLogger, configure_logging, create_correlation_id
from src.config import get_settings
from src.models.transaction import Transaction, TransactionDraft
from src.queries.aggregator import LedgerSummary, summarize
from src.queries.formatting import DELETE_PROMPT, describe_for_edit
from src.queries.search import SearchResult, search
from src.services.storage import (
    IdGenerator,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerRepository,
    LedgerSnapshot,
    LedgerStorageInterface,
    NotFoundError,
)
from src.validation import TransactionValidator


class ConfirmationError(Exception):
    """A confirmation token is unknown or has already been used."""
    pass


class ConfirmationAction(str, Enum):
    EDIT = "edit"
    DELETE = "delete"


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class PendingConfirmation(BaseModel):
    """An edit or delete waiting for the user to confirm or cancel."""
    model_config = ConfigDict(frozen=True)

    token: UUID = Field(default_factory=create_correlation_id)
    action: ConfirmationAction
    transaction_id: str
    prompt: str


class SubmitOutcome(BaseModel):
    """Result of submitting the form."""

    success: bool
    mode: FormMode
    transaction: Optional[Transaction] = None
    errors: dict[str, str] = Field(default_factory=dict)


class PartnerTransactionFlow:
    """
    Orchestrates the partner transactions view.

    Holds the current snapshot and its summary, the form draft with its
    field errors, and which transaction (if any) is being edited.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        validator: Optional[TransactionValidator] = None,
        id_generator: Optional[IdGenerator] = None,
        audit_logger: Optional[AuditLogger] = None,
        currency_symbol: Optional[str] = None,
    ):
        self._repository = repository
        self._validator = validator or TransactionValidator()
        self._id_generator = id_generator or IdGenerator(
            get_settings().app.transaction_id_prefix
        )
        self._audit_logger = audit_logger
        self._currency_symbol = currency_symbol
        self._pending: dict[UUID, PendingConfirmation] = {}

        self.editing_id: Optional[str] = None
        self.draft = TransactionDraft()
        self.errors: dict[str, str] = {}
        self.search_term = ""

        # Load failures (including a corrupt slot) propagate to the caller
        self._apply_snapshot(self._repository.snapshot())

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def ledger(self) -> LedgerSnapshot:
        return self._ledger

    @property
    def summary(self) -> LedgerSummary:
        return self._summary

    @property
    def mode(self) -> FormMode:
        return FormMode.EDIT if self.editing_id else FormMode.CREATE

    @property
    def pending(self) -> list[PendingConfirmation]:
        return list(self._pending.values())

    def search(self, term: Optional[str] = None) -> SearchResult:
        """Filter the current snapshot. Remembers the term when given."""
        if term is not None:
            self.search_term = term
        return search(self._ledger, self.search_term)

    def reload(self) -> LedgerSnapshot:
        """Re-read the slot and recompute."""
        return self._apply_snapshot(self._repository.snapshot())

    def _apply_snapshot(self, snapshot: LedgerSnapshot) -> LedgerSnapshot:
        self._ledger = snapshot
        self._summary = summarize(snapshot)
        return snapshot

    def _find(self, transaction_id: str) -> Transaction:
        for transaction in self._ledger:
            if transaction.id == transaction_id:
                return transaction
        raise NotFoundError(f"Transaction {transaction_id} not found")

    # -------------------------------------------------------------------------
    # Form
    # -------------------------------------------------------------------------

    def update_field(self, field: str, value: str) -> TransactionDraft:
        """Change one form field and clear its error, if any."""
        if field not in TransactionDraft.model_fields:
            raise ValueError(f"Unknown form field: {field}")
        self.draft = self.draft.model_copy(update={field: value})
        self.clear_field_error(field)
        return self.draft

    def clear_field_error(self, field: str) -> None:
        self.errors.pop(field, None)

    def reset_form(self) -> None:
        """Back to create mode with an empty form."""
        self.editing_id = None
        self.draft = TransactionDraft()
        self.errors = {}

    def cancel_edit(self) -> None:
        """User pressed Cancel while editing."""
        if self.editing_id and self._audit_logger:
            self._audit_logger.log_edit_cancelled(self.editing_id, reason="cancelled by user")
        self.reset_form()

    def submit(self, draft: Optional[TransactionDraft] = None) -> SubmitOutcome:
        """
        Validate the draft and admit it to the ledger.

        In create mode a new transaction is added at the front. In edit mode
        the transaction being edited is replaced in place, keeping its id.
        On validation failure the ledger is untouched and the errors are
        kept for the form.
        """
        if draft is not None:
            self.draft = draft
        mode = self.mode

        result = self._validator.validate(self.draft)
        if not result.is_valid:
            self.errors = result.errors
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    errors=result.errors,
                    editing_id=self.editing_id,
                )
            return SubmitOutcome(success=False, mode=mode, errors=result.errors)

        validated = result.validated
        if mode == FormMode.EDIT:
            transaction = validated.to_transaction(self.editing_id)
            snapshot = self._repository.replace(self.editing_id, transaction)
            if self._audit_logger:
                self._audit_logger.log_transaction_updated(
                    transaction_id=transaction.id,
                    partner_name=transaction.partner_name,
                    transaction_type=transaction.type.value,
                    amount=transaction.amount,
                )
        else:
            transaction = validated.to_transaction(self._id_generator())
            snapshot = self._repository.append(transaction)
            if self._audit_logger:
                self._audit_logger.log_transaction_added(
                    transaction_id=transaction.id,
                    partner_name=transaction.partner_name,
                    transaction_type=transaction.type.value,
                    amount=transaction.amount,
                )

        self._apply_snapshot(snapshot)
        self.reset_form()
        return SubmitOutcome(success=True, mode=mode, transaction=transaction)

    # -------------------------------------------------------------------------
    # Two-phase edit / delete
    # -------------------------------------------------------------------------

    def request_edit(self, transaction_id: str) -> PendingConfirmation:
        """Ask to load a transaction into the form. Nothing changes yet."""
        transaction = self._find(transaction_id)
        pending = PendingConfirmation(
            action=ConfirmationAction.EDIT,
            transaction_id=transaction_id,
            prompt=describe_for_edit(transaction, self._currency_symbol),
        )
        self._open(pending)
        if self._audit_logger:
            self._audit_logger.log_edit_requested(transaction_id, pending.token)
        return pending

    def request_delete(self, transaction_id: str) -> PendingConfirmation:
        """Ask to delete a transaction. Nothing changes yet."""
        self._find(transaction_id)
        pending = PendingConfirmation(
            action=ConfirmationAction.DELETE,
            transaction_id=transaction_id,
            prompt=DELETE_PROMPT,
        )
        self._open(pending)
        if self._audit_logger:
            self._audit_logger.log_delete_requested(transaction_id, pending.token)
        return pending

    def confirm(self, token: Union[PendingConfirmation, UUID]) -> LedgerSnapshot:
        """
        Carry out a pending edit or delete.

        Edit: the form is filled from the transaction and edit mode starts.
        Delete: the transaction is removed; if it was being edited, the edit
        session is cancelled and the form returns to create mode.

        Raises:
            ConfirmationError: If the token is unknown or already used
            NotFoundError: If the transaction disappeared in the meantime
        """
        pending = self._take(token)

        if pending.action == ConfirmationAction.EDIT:
            transaction = self._find(pending.transaction_id)
            self.editing_id = transaction.id
            self.draft = TransactionDraft.from_transaction(transaction)
            self.errors = {}
            if self._audit_logger:
                self._audit_logger.log_edit_started(transaction.id, pending.token)
            return self._ledger

        snapshot = self._repository.remove(pending.transaction_id)
        self._apply_snapshot(snapshot)
        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(
                pending.transaction_id,
                correlation_id=pending.token,
            )
        if self.editing_id == pending.transaction_id:
            if self._audit_logger:
                self._audit_logger.log_edit_cancelled(
                    pending.transaction_id,
                    reason="transaction deleted",
                )
            self.reset_form()
        return snapshot

    def cancel(self, token: Union[PendingConfirmation, UUID]) -> None:
        """Drop a pending edit or delete without changing anything."""
        self._log_cancelled(self._take(token))

    def _open(self, pending: PendingConfirmation) -> None:
        """Make `pending` the only open confirmation, cancelling any earlier one."""
        for stale in list(self._pending.values()):
            del self._pending[stale.token]
            self._log_cancelled(stale)
        self._pending[pending.token] = pending

    def _log_cancelled(self, pending: PendingConfirmation) -> None:
        if self._audit_logger:
            self._audit_logger.log_confirmation_cancelled(
                transaction_id=pending.transaction_id,
                action=pending.action.value,
                correlation_id=pending.token,
            )

    def _take(self, token: Union[PendingConfirmation, UUID]) -> PendingConfirmation:
        key = token.token if isinstance(token, PendingConfirmation) else token
        pending = self._pending.pop(key, None)
        if pending is None:
            raise ConfirmationError(f"No pending confirmation for token {key}")
        return pending


def create_storage(
    backend: Optional[str] = None,
) -> LedgerStorageInterface:
    """Build the ledger slot configured in settings."""
    storage_settings = get_settings().storage
    backend = backend or storage_settings.backend
    if backend == "memory":
        return InMemoryLedgerStorage(key=storage_settings.key)
    return JsonFileLedgerStorage(
        directory=storage_settings.directory,
        key=storage_settings.key,
    )


def create_app_components(
    storage: Optional[LedgerStorageInterface] = None,
) -> PartnerTransactionFlow:
    """
    Factory function to create the application's flow.

    Args:
        storage: Slot to use. Defaults to the one configured in settings.

    Returns:
        A PartnerTransactionFlow with the ledger already loaded
    """
    app_settings = get_settings().app
    configure_logging(app_settings.log_level)

    audit_logger = AuditLogger()
    repository = LedgerRepository(
        storage or create_storage(),
        audit_logger=audit_logger,
    )
    return PartnerTransactionFlow(
        repository=repository,
        id_generator=IdGenerator(app_settings.transaction_id_prefix),
        audit_logger=audit_logger,
        currency_symbol=app_settings.currency_symbol,
    )

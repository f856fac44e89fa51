"""
Audit Logger

DESIGN DECISION: Every significant action on the ledger is logged as a
structured event. This provides:
1. Traceability of a session (what was added, edited, deleted)
2. Debugging capability when the slot fails to load or save

The audit logger:
- Writes to the local structured log only
- Is synchronous, like everything else in the ledger
- Supports correlation IDs to tie a confirmation to its request
"""

import logging
import sys
from decimal import Decimal
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog
from pydantic import ValidationError

from src.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route the structured log to stderr at the given level.

    Called once by the app entrypoint. Library code only logs.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Each log_* helper builds an AuditEvent and writes it at the level
    matching its severity.
    """

    def __init__(self, logger_name: str = "partner_ledger.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Write an audit event to the structured log."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def _record(self, build: Callable[..., AuditEvent], **kwargs) -> None:
        """
        Build an event and log it.

        Audit logging runs after the ledger has already changed, so an event
        that fails its own validation is reported as a warning and dropped.
        """
        try:
            event = build(**kwargs)
        except ValidationError as e:
            self._logger.warning(
                "audit_event_failed",
                builder=build.__name__,
                error_count=e.error_count(),
            )
            return
        self.log(event)

    def log_ledger_loaded(self, key: str, count: int) -> None:
        self._record(AuditEventBuilder.ledger_loaded, key=key, count=count)

    def log_ledger_load_failed(self, key: str, error_message: str) -> None:
        self._record(
            AuditEventBuilder.ledger_load_failed,
            key=key,
            error_message=error_message,
        )

    def log_ledger_saved(self, key: str, count: int) -> None:
        self._record(AuditEventBuilder.ledger_saved, key=key, count=count)

    def log_save_failed(self, key: str, error_message: str) -> None:
        self._record(AuditEventBuilder.save_failed, key=key, error_message=error_message)

    def log_validation_failed(
        self,
        errors: dict[str, str],
        editing_id: Optional[str] = None,
    ) -> None:
        """Log a rejected form submission."""
        self._record(
            AuditEventBuilder.validation_failed,
            errors=errors,
            editing_id=editing_id,
        )

    def log_transaction_added(
        self,
        transaction_id: str,
        partner_name: str,
        transaction_type: str,
        amount: Decimal,
    ) -> None:
        self._record(
            AuditEventBuilder.transaction_added,
            transaction_id=transaction_id,
            partner_name=partner_name,
            transaction_type=transaction_type,
            amount=amount,
        )

    def log_transaction_updated(
        self,
        transaction_id: str,
        partner_name: str,
        transaction_type: str,
        amount: Decimal,
    ) -> None:
        self._record(
            AuditEventBuilder.transaction_updated,
            transaction_id=transaction_id,
            partner_name=partner_name,
            transaction_type=transaction_type,
            amount=amount,
        )

    def log_transaction_deleted(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._record(
            AuditEventBuilder.transaction_deleted,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )

    def log_edit_requested(self, transaction_id: str, correlation_id: UUID) -> None:
        self._record(
            AuditEventBuilder.edit_requested,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )

    def log_edit_started(self, transaction_id: str, correlation_id: UUID) -> None:
        self._record(
            AuditEventBuilder.edit_started,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )

    def log_edit_cancelled(self, transaction_id: str, reason: str) -> None:
        self._record(
            AuditEventBuilder.edit_cancelled,
            transaction_id=transaction_id,
            reason=reason,
        )

    def log_delete_requested(self, transaction_id: str, correlation_id: UUID) -> None:
        self._record(
            AuditEventBuilder.delete_requested,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )

    def log_confirmation_cancelled(
        self,
        transaction_id: str,
        action: str,
        correlation_id: UUID,
    ) -> None:
        self._record(
            AuditEventBuilder.confirmation_cancelled,
            transaction_id=transaction_id,
            action=action,
            correlation_id=correlation_id,
        )



def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Used as the token of a pending confirmation, so the request and the
    confirm/cancel that follows share one ID in the log.
    """
    return uuid4()

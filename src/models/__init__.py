"""
Data Models Package

This package contains all Pydantic models used by the partner ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidatedFields,
    ValidationIssue,
    ValidationResult,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "ValidatedFields",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

"""
Core Data Models for the Partner Ledger

These models define the schemas for everything that flows through the ledger:
1. Transactions as they are persisted
2. Drafts as they come out of the entry form
3. Validation results returned to the form

DESIGN DECISION: Persisted transactions are frozen Pydantic models.
A ledger snapshot is a tuple of them, so a snapshot can be shared with the
aggregator and the search without anyone mutating it.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
)


# Largest amount with two decimal places that fits in 15 significant digits
AMOUNT_DECIMAL_PLACES = 2
MAX_AMOUNT = Decimal("9999999999999.99")


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of money between the business and a partner.

    Exactly two variants. The string values are the persisted form.
    """
    RECEIVED = "received"  # Money received from the partner
    GIVEN = "given"        # Money given to the partner


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single partner transaction.

    The `id` is assigned once when the transaction is created and never
    changes. Editing replaces every other field.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier (e.g. trans_1a2b3c)"
    )
    partner_name: str = Field(
        ...,
        min_length=1,
        alias="partnerName",
        description="Partner the money moved to or from"
    )
    type: TransactionType = Field(
        ...,
        description="Received from or given to the partner"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        decimal_places=AMOUNT_DECIMAL_PLACES,
        description="Amount in currency units"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was for"
    )

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, value: Decimal) -> Union[int, float]:
        """
        Amounts are stored as JSON numbers, integral ones without a fraction.

        Within MAX_AMOUNT and two decimal places an amount has at most 15
        significant digits, so the float's shortest repr is the exact value.
        """
        if value == value.to_integral_value():
            return int(value)
        return float(value)

    @property
    def is_received(self) -> bool:
        return self.type == TransactionType.RECEIVED

    def to_storage_dict(self) -> dict:
        """Convert to the persisted JSON shape (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    def with_id(self, transaction_id: str) -> "Transaction":
        """Return a copy carrying a different id."""
        return self.model_copy(update={"id": transaction_id})


# =============================================================================
# FORM MODELS
# =============================================================================

def _today_iso() -> str:
    return dt.date.today().isoformat()


class TransactionDraft(BaseModel):
    """
    Raw values from the entry form.

    Everything is a string because that is what the form produces.
    Nothing here is trusted until it passes the validator.
    """

    partner_name: str = ""
    type: str = TransactionType.RECEIVED.value
    amount: str = ""
    date: str = Field(default_factory=_today_iso)
    description: str = ""

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionDraft":
        """Fill a draft from an existing transaction (entering edit mode)."""
        return cls(
            partner_name=transaction.partner_name,
            type=transaction.type.value,
            amount=str(transaction.amount),
            date=transaction.date.isoformat(),
            description=transaction.description,
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single invalid form field."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'invalid_format')"
    )
    message: str = Field(
        ...,
        description="Message shown next to the field"
    )


class ValidatedFields(BaseModel):
    """Normalized field values of a draft that passed validation."""

    partner_name: str
    type: TransactionType
    amount: Decimal
    date: dt.date
    description: str

    def to_transaction(self, transaction_id: str) -> Transaction:
        return Transaction(
            id=transaction_id,
            partner_name=self.partner_name,
            type=self.type,
            amount=self.amount,
            date=self.date,
            description=self.description,
        )


class ValidationResult(BaseModel):
    """
    Result of validating a draft.

    Every failing field is reported, not just the first one.
    An empty `errors` mapping means the draft is valid.
    """

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    validated: Optional[ValidatedFields] = Field(
        default=None,
        description="Normalized values, present only when valid"
    )

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def errors(self) -> dict[str, str]:
        """Field name -> message, one entry per invalid field."""
        return {issue.field: issue.message for issue in self.issues}

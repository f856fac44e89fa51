"""
Transaction Form Validation

Checks a draft coming out of the entry form before it is admitted to the
ledger.

RULES (all run, every failing field is reported):
- Partner name must be non-empty after trimming
- Amount must parse as a number and be greater than zero, with at most
  two decimal places and no more than MAX_AMOUNT
- Date must be present and a YYYY-MM-DD calendar date
- Description must be non-empty after trimming
- Type must be one of the two transaction types

IMPORTANT: Validation never raises for bad input and never fixes values
silently. It reports issues so the form can show them inline.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Optional

from src.models.transaction import (
    AMOUNT_DECIMAL_PLACES,
    MAX_AMOUNT,
    TransactionDraft,
    TransactionType,
    ValidatedFields,
    ValidationIssue,
    ValidationResult,
)


PARTNER_NAME_REQUIRED = "Partner name is required"
AMOUNT_MUST_BE_POSITIVE = "Amount must be greater than 0"
AMOUNT_TOO_PRECISE = f"Amount can have at most {AMOUNT_DECIMAL_PLACES} decimal places"
AMOUNT_TOO_LARGE = "Amount is too large"
DATE_REQUIRED = "Date is required"
DATE_INVALID = "Date must be a valid date (YYYY-MM-DD)"
DESCRIPTION_REQUIRED = "Description is required"
TYPE_INVALID = "Type must be received or given"


def parse_amount(raw: str) -> Optional[Decimal]:
    """Parse a form amount, returning None if it is not a finite number."""
    text = raw.strip() if raw else ""
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def decimal_places(value: Decimal) -> int:
    """Significant decimal places, ignoring trailing zeros ("5.10" -> 1)."""
    _, digits, exponent = value.as_tuple()
    significant = "".join(map(str, digits)).rstrip("0")
    return max(0, -exponent - (len(digits) - len(significant)))


def normalize_amount(value: Decimal) -> Decimal:
    """
    Drop exponents the form may have produced ("1E+2" -> 100, "5.000" -> 5.00).

    Only called on amounts already within MAX_AMOUNT and the place limit.
    """
    exponent = value.as_tuple().exponent
    if exponent > 0:
        return value.quantize(Decimal(1))
    if exponent < -AMOUNT_DECIMAL_PLACES:
        return value.quantize(Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES))
    return value


def parse_date(raw: str) -> Optional[dt.date]:
    """Parse a YYYY-MM-DD form date."""
    try:
        return dt.date.fromisoformat(raw.strip())
    except ValueError:
        return None


class TransactionValidator:
    """
    Validates transaction drafts.

    Pure: no storage access, no side effects.
    """

    def validate(self, draft: TransactionDraft) -> ValidationResult:
        """
        Run every rule against the draft.

        Args:
            draft: Raw form values

        Returns:
            ValidationResult with one issue per invalid field and, when
            there are none, the normalized values
        """
        issues = []

        partner_name = draft.partner_name.strip()
        if not partner_name:
            issues.append(ValidationIssue(
                field="partner_name",
                issue_type="missing",
                message=PARTNER_NAME_REQUIRED,
            ))

        transaction_type = None
        try:
            transaction_type = TransactionType(draft.type)
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=TYPE_INVALID,
            ))

        amount = parse_amount(draft.amount)
        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=AMOUNT_MUST_BE_POSITIVE,
            ))
        elif amount > MAX_AMOUNT:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message=AMOUNT_TOO_LARGE,
            ))
        elif decimal_places(amount) > AMOUNT_DECIMAL_PLACES:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=AMOUNT_TOO_PRECISE,
            ))
        else:
            amount = normalize_amount(amount)

        transaction_date = None
        if not draft.date or not draft.date.strip():
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message=DATE_REQUIRED,
            ))
        else:
            transaction_date = parse_date(draft.date)
            if transaction_date is None:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message=DATE_INVALID,
                ))

        description = draft.description.strip()
        if not description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message=DESCRIPTION_REQUIRED,
            ))

        if issues:
            return ValidationResult(issues=issues)

        return ValidationResult(
            validated=ValidatedFields(
                partner_name=partner_name,
                type=transaction_type,
                amount=amount,
                date=transaction_date,
                description=description,
            ),
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One-line summary shown above the form when submission fails."""
        if result.is_valid:
            return "All fields look good."
        count = len(result.issues)
        noun = "field needs" if count == 1 else "fields need"
        return f"{count} {noun} attention: " + "; ".join(
            issue.message for issue in result.issues
        )

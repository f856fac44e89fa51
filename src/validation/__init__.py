"""Form validation package."""

from src.validation.validator import TransactionValidator, parse_amount, parse_date

__all__ = ["TransactionValidator", "parse_amount", "parse_date"]

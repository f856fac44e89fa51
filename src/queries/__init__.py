"""Ledger queries package: aggregation, search and display formatting."""

from src.queries.aggregator import (
    LedgerSummary,
    LedgerTotals,
    PartnerBalance,
    distinct_partners,
    net_balance,
    partner_balances,
    partner_net,
    summarize,
    totals,
)
from src.queries.formatting import (
    DELETE_PROMPT,
    describe_for_edit,
    format_amount,
    format_currency,
    type_badge,
    type_label,
)
from src.queries.search import SearchResult, filter_transactions, search

__all__ = [
    # Aggregation
    "LedgerSummary",
    "LedgerTotals",
    "PartnerBalance",
    "distinct_partners",
    "net_balance",
    "partner_balances",
    "partner_net",
    "summarize",
    "totals",
    # Search
    "SearchResult",
    "filter_transactions",
    "search",
    # Formatting
    "DELETE_PROMPT",
    "describe_for_edit",
    "format_amount",
    "format_currency",
    "type_badge",
    "type_label",
]

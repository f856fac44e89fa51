"""Tests for aggregation, search and formatting over ledger snapshots."""

from decimal import Decimal

import pytest

from src.models.transaction import TransactionType
from src.queries import (
    DELETE_PROMPT,
    describe_for_edit,
    distinct_partners,
    filter_transactions,
    format_amount,
    format_currency,
    net_balance,
    partner_balances,
    partner_net,
    search,
    summarize,
    totals,
    type_label,
)
from tests.conftest import make_transaction


class TestTotals:
    """Tests for global totals."""

    def test_empty_ledger(self):
        result = totals(())
        assert result.received == Decimal("0")
        assert result.given == Decimal("0")
        assert net_balance(()) == Decimal("0")

    def test_totals_by_type(self, sample_ledger):
        result = totals(sample_ledger)
        assert result.received == Decimal("5300")
        assert result.given == Decimal("7200.50")

    def test_totals_cover_every_amount(self, sample_ledger):
        """Test received + given equals the sum of all amounts."""
        result = totals(sample_ledger)
        assert result.received + result.given == sum(t.amount for t in sample_ledger)

    def test_net_balance(self, sample_ledger):
        result = totals(sample_ledger)
        assert net_balance(sample_ledger) == result.received - result.given
        assert net_balance(sample_ledger) == Decimal("-1900.50")


class TestPartnerBalances:
    """Tests for per-partner grouping."""

    def test_ram_scenario(self):
        """Test received 5000 then given 6000 nets to -1000."""
        ledger = (
            make_transaction("trans_1", "Ram", TransactionType.RECEIVED, "5000"),
            make_transaction("trans_2", "Ram", TransactionType.GIVEN, "6000"),
        )
        balances = partner_balances(ledger)
        assert balances["Ram"].received == Decimal("5000")
        assert balances["Ram"].given == Decimal("6000")
        assert partner_net(balances, "Ram") == Decimal("-1000")

    def test_single_partner_net_equals_ledger_net(self):
        """Test the only partner's balance equals the ledger's net balance."""
        ledger = (
            make_transaction("trans_1", "Ram", TransactionType.RECEIVED, "700"),
            make_transaction("trans_2", "Ram", TransactionType.GIVEN, "250"),
            make_transaction("trans_3", "Ram", TransactionType.RECEIVED, "25.75"),
        )
        assert partner_net(partner_balances(ledger), "Ram") == net_balance(ledger)

    def test_bucket_sums_match_partner_amounts(self, sample_ledger):
        """Test each partner's received + given equals that partner's amounts."""
        balances = partner_balances(sample_ledger)
        for name, balance in balances.items():
            expected = sum(t.amount for t in sample_ledger if t.partner_name == name)
            assert balance.received + balance.given == expected

    def test_first_sighting_order(self, sample_ledger):
        assert list(partner_balances(sample_ledger)) == ["Ram", "Shyam", "Anita"]

    def test_partner_names_are_case_sensitive(self):
        ledger = (
            make_transaction("trans_1", "Ram"),
            make_transaction("trans_2", "ram"),
        )
        assert set(partner_balances(ledger)) == {"Ram", "ram"}

    def test_unknown_partner_net_is_zero(self, sample_ledger):
        assert partner_net(partner_balances(sample_ledger), "Nobody") == Decimal("0")

    def test_distinct_partners_sorted(self, sample_ledger):
        assert distinct_partners(sample_ledger) == ["Anita", "Ram", "Shyam"]


class TestSummary:
    """Tests for the bundled summary."""

    def test_summary_contents(self, sample_ledger):
        summary = summarize(sample_ledger)
        assert summary.transaction_count == 4
        assert summary.totals == totals(sample_ledger)
        assert summary.net_balance == Decimal("-1900.50")
        assert summary.partners == ["Anita", "Ram", "Shyam"]
        assert summary.partner_net("Shyam") == Decimal("-1200.50")

    def test_summary_memoized_per_snapshot(self, sample_ledger):
        """Test the same snapshot is summarized once."""
        assert summarize(sample_ledger) is summarize(sample_ledger)

    def test_new_snapshot_recomputes(self, sample_ledger):
        first = summarize(sample_ledger)
        second = summarize(sample_ledger[:2])
        assert second.transaction_count == 2
        assert first.transaction_count == 4


class TestFilter:
    """Tests for search over partner name and description."""

    def test_empty_term_is_identity(self, sample_ledger):
        assert filter_transactions(sample_ledger, "") == sample_ledger

    def test_matches_partner_name_case_insensitively(self, sample_ledger):
        result = filter_transactions(sample_ledger, "rAM")
        assert [t.id for t in result] == ["trans_1", "trans_2"]

    def test_matches_description(self, sample_ledger):
        result = filter_transactions(sample_ledger, "vehicle")
        assert [t.id for t in result] == ["trans_1", "trans_4"]

    def test_preserves_order(self, sample_ledger):
        result = filter_transactions(sample_ledger, "a")
        positions = [sample_ledger.index(t) for t in result]
        assert positions == sorted(positions)

    @pytest.mark.parametrize("term", ["", "ram", "truck", "zzz", "A"])
    def test_idempotent(self, sample_ledger, term):
        once = filter_transactions(sample_ledger, term)
        assert filter_transactions(once, term) == once

    def test_search_caption(self, sample_ledger):
        result = search(sample_ledger, "shyam")
        assert result.shown == 1
        assert result.caption == "Showing 1 of 4 transactions"

    def test_empty_messages(self, sample_ledger):
        assert search((), "").empty_message == "No transactions yet"
        assert search(sample_ledger, "zzz").empty_message == "No transactions match your search"


class TestFormatting:
    """Tests for display formatting."""

    @pytest.mark.parametrize("value,expected", [
        (Decimal("0"), "0"),
        (Decimal("999"), "999"),
        (Decimal("5000"), "5,000"),
        (Decimal("1234567"), "1,234,567"),
        (Decimal("-1000"), "-1,000"),
        (Decimal("1200.50"), "1,201"),
        (Decimal("-0.4"), "0"),
    ])
    def test_format_amount(self, value, expected):
        assert format_amount(value) == expected

    def test_format_amount_beyond_default_precision(self):
        """Test values with more than 28 integer digits still format."""
        assert format_amount(Decimal("1e30")) == "1" + ",000" * 10
        assert format_amount(Decimal("-123456789012345678901234567890.5")) == (
            "-123,456,789,012,345,678,901,234,567,891"
        )

    def test_format_currency(self):
        assert format_currency(Decimal("-1000"), symbol="Rs.") == "Rs. -1,000"

    def test_type_labels(self):
        assert type_label(TransactionType.RECEIVED) == "Money Received"
        assert type_label(TransactionType.GIVEN) == "Money Given"

    def test_edit_prompt(self):
        prompt = describe_for_edit(
            make_transaction(transaction_type=TransactionType.GIVEN, amount="6000"),
            symbol="Rs.",
        )
        assert "Partner: Ram" in prompt
        assert "Type: Money Given" in prompt
        assert "Amount: Rs. 6,000" in prompt
        assert "Date: 2024-12-01" in prompt

    def test_delete_prompt(self):
        assert DELETE_PROMPT == "Are you sure you want to delete this transaction?"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

import pytest

from app.schemas.settlement_schema import PersonBalance
from app.utils.formatting import balance_label, balances_for_display, format_amount, format_currency


@pytest.mark.unit
class TestFormatAmount:
    """Test en-IN amount formatting."""

    @pytest.mark.parametrize("value,expected", [
        (0, "0.00"),
        (5.5, "5.50"),
        (999.994, "999.99"),
        (1000, "1,000.00"),
        (100000, "1,00,000.00"),
        (1234567.5, "12,34,567.50"),
        (-999.999, "-1,000.00"),
        (-0.001, "0.00"),
        (0.125, "0.13"),
        (-0.125, "-0.13"),
    ])
    def test_grouping(self, value, expected):
        assert format_amount(value) == expected

    @pytest.mark.parametrize("value", [None, float("nan"), float("inf")])
    def test_not_a_number(self, value):
        assert format_amount(value) == "0.00"

    def test_currency_symbol(self):
        assert format_currency(1500, symbol="$") == "$1,500.00"
        assert format_currency(1500) == "₹1,500.00"


@pytest.mark.unit
class TestDisplayHelpers:
    """Test labels and ordering used when rendering balances."""

    def test_labels(self):
        assert balance_label(12.5) == "owed"
        assert balance_label(-0.01) == "owes"
        assert balance_label(0.0) == ""

    def test_sorted_by_name(self):
        balances = [
            PersonBalance(id="u1", name="carol", paid=0, share=0, net=0),
            PersonBalance(id="u2", name="alice", paid=0, share=0, net=0),
        ]
        assert [b.name for b in balances_for_display(balances)] == ["alice", "carol"]
        assert [b.name for b in balances] == ["carol", "alice"]

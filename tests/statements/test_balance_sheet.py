"""
Tests for the pure Súvaha builder (build_balance_sheet).

Balances are built in memory and run through the shipped Úč 1-01
templates.
"""

from datetime import date
from decimal import Decimal

import pytest

from statutory_kernel.domain.balances import CodeBalance
from statutory_modules.statements.balance_sheet import build_balance_sheet
from statutory_modules.statements.templates import load_statement_template


def _book(balances, debit, credit, amount):
    """Apply Dr ``debit`` / Cr ``credit`` ``amount`` to a code map."""
    amount = Decimal(amount)
    for code, d, c in ((debit, amount, Decimal("0")), (credit, Decimal("0"), amount)):
        old = balances.get(code, CodeBalance(code))
        balances[code] = CodeBalance(code, old.debit_total + d, old.credit_total + c)
    return balances


def _build(current, prior=None, tolerance=Decimal("0.01")):
    return build_balance_sheet(
        load_statement_template("balance_sheet_assets"),
        load_statement_template("balance_sheet_liabilities"),
        current,
        prior,
        fiscal_year=2025,
        date_to=date(2025, 12, 31),
        generated_at="2025-03-31T12:00:00+00:00",
        prior_date_to=date(2024, 12, 31) if prior is not None else None,
        tolerance=tolerance,
    )


def _row(lines, row_number):
    for root in lines:
        for line in root.flatten():
            if line.row_number == row_number:
                return line
    raise AssertionError(f"row {row_number} not found")


@pytest.fixture
def capital_and_machine():
    balances = {}
    _book(balances, "221", "411", "1000")
    _book(balances, "022", "321", "400")
    return balances


class TestBalancedSheet:

    def test_totals(self, capital_and_machine):
        sheet = _build(capital_and_machine)

        assert sheet.assets_total.net == Decimal("1400.00")
        assert sheet.liabilities_total.net == Decimal("1400.00")
        assert sheet.is_balanced
        assert sheet.difference == Decimal("0.00")

    def test_leaf_rows(self, capital_and_machine):
        sheet = _build(capital_and_machine)

        assert _row(sheet.assets, 57).net == Decimal("1000.00")
        assert _row(sheet.assets, 16).net == Decimal("400.00")
        assert _row(sheet.liabilities, 68).net == Decimal("1000.00")
        assert _row(sheet.liabilities, 103).net == Decimal("400.00")

    def test_depreciation_reduces_net_not_gross(self, capital_and_machine):
        _book(capital_and_machine, "551", "082", "100")
        _book(capital_and_machine, "431", "551", "100")

        sheet = _build(capital_and_machine)
        machine = _row(sheet.assets, 16)

        assert machine.gross == Decimal("400.00")
        assert machine.correction == Decimal("100.00")
        assert machine.net == Decimal("300.00")
        assert sheet.assets_total.gross == Decimal("1400.00")
        assert sheet.assets_total.correction == Decimal("100.00")
        assert _row(sheet.liabilities, 84).net == Decimal("-100.00")
        assert sheet.is_balanced

    def test_tree_order_and_shape(self, capital_and_machine):
        sheet = _build(capital_and_machine)

        assert [line.row_number for line in sheet.assets] == [3, 31, 60]
        assert [line.row_number for line in sheet.liabilities] == [66, 85, 117]

    def test_empty_ledger_is_balanced(self):
        sheet = _build({})
        assert sheet.is_balanced
        assert sheet.assets_total.net == Decimal("0.00")


class TestImbalance:

    def test_unclosed_expense_is_flagged_not_raised(self, capital_and_machine):
        _book(capital_and_machine, "551", "082", "100")

        sheet = _build(capital_and_machine)

        assert not sheet.is_balanced
        assert sheet.difference == Decimal("-100.00")
        assert sheet.assets_total.net == Decimal("1300.00")
        assert sheet.liabilities_total.net == Decimal("1400.00")

    def test_gap_below_tolerance_counts_as_balanced(self):
        balances = _book({}, "221", "411", "100")
        _book(balances, "211", "601", "0.005")

        sheet = _build(balances)

        assert sheet.difference == Decimal("0.01")
        assert not sheet.is_balanced
        assert _build(balances, tolerance=Decimal("0.02")).is_balanced


class TestPriorColumn:

    def test_prior_snapshot_fills_prior_net(self, capital_and_machine):
        prior = _book({}, "221", "411", "250")

        sheet = _build(capital_and_machine, prior)

        assert sheet.assets_total.prior_net == Decimal("250.00")
        assert sheet.liabilities_total.prior_net == Decimal("250.00")
        assert _row(sheet.assets, 57).prior_net == Decimal("250.00")
        assert sheet.prior_date_to == date(2024, 12, 31)

    def test_no_prior_snapshot_is_zero(self, capital_and_machine):
        sheet = _build(capital_and_machine, None)

        assert sheet.assets_total.prior_net == Decimal("0.00")
        assert sheet.prior_date_to is None

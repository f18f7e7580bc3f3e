"""Tests for the notes to the financial statements (generate_notes)."""

from datetime import date
from decimal import Decimal

import pytest

from statutory_kernel.domain.balances import CodeBalance
from statutory_modules.filings.models import CompanyInfo
from statutory_modules.filings.notes import (
    NBSP,
    format_money,
    generate_notes,
    year_over_year_change,
)
from statutory_modules.statements.balance_sheet import build_balance_sheet
from statutory_modules.statements.models import PeriodValues
from statutory_modules.statements.profit_loss import build_profit_loss
from statutory_modules.statements.templates import load_statement_template

SECTION_IDS = [
    "identification",
    "accounting_methods",
    "balance_sheet_notes",
    "profit_loss_notes",
    "cash_flow",
    "employees",
    "post_closing_events",
]


def _balances(*entries):
    return {code: CodeBalance(code, Decimal(debit), Decimal(credit)) for code, debit, credit in entries}


def _sheet(current):
    return build_balance_sheet(
        load_statement_template("balance_sheet_assets"),
        load_statement_template("balance_sheet_liabilities"),
        current,
        None,
        fiscal_year=2025,
        date_to=date(2025, 12, 31),
        generated_at="2026-02-15T09:00:00+00:00",
    )


def _pl(current, prior):
    return build_profit_loss(
        load_statement_template("profit_and_loss"),
        current,
        prior,
        fiscal_year=2025,
        date_from=date(2025, 1, 1),
        date_to=date(2025, 12, 31),
        generated_at="2026-02-15T09:00:00+00:00",
    )


@pytest.fixture
def company():
    return CompanyInfo(
        name="Príklad & Syn s.r.o.",
        ico="12345678",
        dic="2020123456",
        ic_dph="SK2020123456",
        street="Hlavná 1",
        city="Nitra",
        zip="94901",
        statutory_body="Ján <Konateľ>",
    )


class TestFormatting:

    def test_format_money_groups_thousands(self):
        assert format_money(Decimal("1234.5")) == f"1{NBSP}234,50{NBSP}€"

    def test_format_money_millions_and_negatives(self):
        assert format_money(Decimal("-1234567.891")) == f"-1{NBSP}234{NBSP}567,89{NBSP}€"

    def test_format_money_never_negative_zero(self):
        assert format_money(Decimal("-0.001")) == f"0,00{NBSP}€"

    def test_year_over_year_change(self):
        assert year_over_year_change(PeriodValues(Decimal("150"), Decimal("100"))) == Decimal("50.0")

    def test_change_against_prior_loss(self):
        values = PeriodValues(Decimal("50"), Decimal("-200"))
        assert year_over_year_change(values) == Decimal("125.0")

    def test_change_rounds_half_up(self):
        values = PeriodValues(Decimal("100.05"), Decimal("100"))
        assert year_over_year_change(values) == Decimal("0.1")

    def test_no_change_without_prior(self):
        assert year_over_year_change(PeriodValues(Decimal("10"), Decimal("0"))) is None


class TestGenerateNotes:

    def test_sections_in_order(self, company):
        notes = generate_notes(company, 2025, None, None, "2026-02-15T09:00:00+00:00")

        assert [s.id for s in notes.sections] == SECTION_IDS
        assert [s.order for s in notes.sections] == list(range(1, 8))
        assert all(s.editable for s in notes.sections)
        assert notes.fiscal_year == 2025
        assert notes.company_name == "Príklad & Syn s.r.o."

    def test_section_lookup(self, company):
        notes = generate_notes(company, 2025, None, None, "2026-02-15T09:00:00+00:00")

        assert notes.section("employees").title == "6. Informácie o zamestnancoch"
        with pytest.raises(KeyError):
            notes.section("auditor")

    def test_identification_escapes_company_data(self, company):
        notes = generate_notes(company, 2025, None, None, "2026-02-15T09:00:00+00:00")
        content = notes.section("identification").content

        assert "Príklad &amp; Syn s.r.o." in content
        assert "Ján &lt;Konateľ&gt;" in content
        assert "Hlavná 1, 94901 Nitra" in content
        assert "01.01.2025 - 31.12.2025" in content

    def test_missing_statements(self, company):
        notes = generate_notes(company, 2025, None, None, "2026-02-15T09:00:00+00:00")

        assert "Údaje súvahy nie sú k dispozícii." in notes.section("balance_sheet_notes").content
        assert (
            "Údaje výkazu ziskov a strát nie sú k dispozícii."
            in notes.section("profit_loss_notes").content
        )

    def test_balanced_sheet(self, company):
        sheet = _sheet(_balances(("221", "1000", "0"), ("411", "0", "1000")))

        notes = generate_notes(company, 2025, sheet, None, "2026-02-15T09:00:00+00:00")
        content = notes.section("balance_sheet_notes").content

        assert "Súvaha je vyvážená, aktíva sa rovnajú pasívam." in content
        assert f"1{NBSP}000,00{NBSP}€" in content

    def test_imbalance_warning(self, company):
        sheet = _sheet(_balances(("221", "1250.50", "0"), ("411", "0", "1000")))

        notes = generate_notes(company, 2025, sheet, None, "2026-02-15T09:00:00+00:00")
        content = notes.section("balance_sheet_notes").content

        assert "<strong>Upozornenie:</strong> Súvaha nie je vyvážená." in content
        assert f"Rozdiel medzi aktívami a pasívami je 250,50{NBSP}€." in content

    def test_profit_loss_with_year_over_year(self, company):
        pl = _pl(
            _balances(("604", "0", "1500"), ("504", "900", "0")),
            _balances(("604", "0", "1000"), ("504", "600", "0")),
        )

        notes = generate_notes(company, 2025, None, pl, "2026-02-15T09:00:00+00:00")
        content = notes.section("profit_loss_notes").content

        assert "Obchodná marža" in content
        assert f"600,00{NBSP}€" in content
        assert "zmenil o 50.0 %." in content

    def test_no_year_over_year_without_prior(self, company):
        pl = _pl(_balances(("604", "0", "1500")), None)

        notes = generate_notes(company, 2025, None, pl, "2026-02-15T09:00:00+00:00")

        assert "zmenil o" not in notes.section("profit_loss_notes").content

    def test_single_entry_accounting(self):
        company = CompanyInfo(name="Živnostník", ico="1", dic="2", accounting_type="jednoduche")
        notes = generate_notes(company, 2025, None, None, "2026-02-15T09:00:00+00:00")
        assert "jednoduchého" in notes.section("accounting_methods").content

    def test_generation_logged(self, company, captured_logs):
        generate_notes(company, 2025, None, None, "2026-02-15T09:00:00+00:00")

        records = [r for r in captured_logs() if r["message"] == "notes_generated"]
        assert records[0]["section_count"] == 7
        assert records[0]["has_balance_sheet"] is False

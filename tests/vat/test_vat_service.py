"""
Integration tests for VatService against SQLite.

Invoices, contacts and 343 postings are written through the ``ledger``
builder; the service reads them back and runs the calculators.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from statutory_modules.vat.config import VatConfig
from statutory_modules.vat.models import DeadlineWarning, InvoiceKind
from statutory_modules.vat.service import VatService

MARCH = (date(2025, 3, 1), date(2025, 3, 31))


@pytest.fixture
def service(session, deterministic_clock):
    return VatService(session, clock=deterministic_clock)


@pytest.fixture
def march_ledger(ledger):
    customer = ledger.contact("Odberateľ s.r.o.", ic_dph="SK2020123456")
    supplier = ledger.contact("Dodávateľ a.s.", ic_dph="SK2020654321")
    ledger.invoice("FV-2025-001", "vydana", date(2025, 3, 3), [("23", "1000.00", "230.00")], contact=customer)
    ledger.invoice(
        "FV-2025-002", "vydana", date(2025, 3, 5),
        [("19", "100.00", "19.00"), ("5", "50.00", "2.50")],
        contact=customer,
    )
    ledger.invoice("FP-2025-001", "prijata", date(2025, 3, 7), [("23", "500.00", "115.00")], contact=supplier)
    ledger.invoice(
        "FV-2025-003", "vydana", date(2025, 3, 9), [("23", "900.00", "207.00")],
        status="stornovana",
    )
    ledger.invoice("FV-2025-000", "vydana", date(2025, 2, 28), [("23", "100.00", "23.00")])
    return ledger


class TestLoading:

    def test_window_and_order(self, service, company_id, march_ledger):
        invoices = service.load_invoices(company_id, *MARCH)

        assert [i.number for i in invoices] == [
            "FV-2025-001", "FV-2025-002", "FP-2025-001", "FV-2025-003",
        ]
        assert invoices[0].kind == InvoiceKind.ISSUED
        assert invoices[0].counterparty_vat_id == "SK2020123456"
        assert invoices[1].items[1].vat_rate == Decimal("5")
        assert invoices[3].is_cancelled

    def test_soft_deleted_invoice_is_hidden(self, service, session, company_id, ledger):
        invoice = ledger.invoice("FV-1", "vydana", date(2025, 3, 3), [("23", "10", "2.30")])
        invoice.deleted_at = datetime(2025, 3, 4, tzinfo=timezone.utc)
        session.flush()

        assert service.load_invoices(company_id, *MARCH) == []

    def test_contacts(self, service, company_id, march_ledger):
        contacts = service.load_contacts(company_id)
        assert sorted(c.ic_dph for c in contacts) == ["SK2020123456", "SK2020654321"]


class TestCalculations:

    def test_vat_return(self, service, company_id, march_ledger, captured_logs):
        result = service.calculate_vat_return(company_id, *MARCH)

        assert result.output_vat_total == Decimal("251.50")
        assert result.input_vat_total == Decimal("115.00")
        assert result.liability == Decimal("136.50")
        assert result.issued_invoice_count == 2
        records = [r for r in captured_logs() if r["message"] == "vat_return_calculated"]
        assert records[0]["report_type"] == "vat_return"
        assert records[0]["company_id"] == str(company_id)

    def test_control_report(self, service, company_id, march_ledger):
        report = service.calculate_control_report(company_id, *MARCH)

        assert report.counts()["A2"] == 3
        assert report.counts()["B3"] == 1
        assert {r.counterparty_vat_id for r in report.a2} == {"SK2020123456"}
        assert report.b3[0].counterparty_vat_id == "SK2020654321"

    def test_return_vs_control_report(self, service, company_id, march_ledger):
        result = service.crosscheck_return_vs_control_report(company_id, *MARCH)

        assert result.output_matched
        assert result.input_matched


class TestVatAccountCrosscheck:

    def test_matches_343_postings(self, service, company_id, march_ledger):
        march_ledger.post(date(2025, 3, 3), "311", "343", "230.00")
        march_ledger.post(date(2025, 3, 5), "311", "343100", "21.50")
        march_ledger.post(date(2025, 3, 7), "343", "321", "115.00")

        result = service.crosscheck_vat_account(company_id, *MARCH)

        assert result.account_balance == Decimal("136.50")
        assert result.invoice_net_vat == Decimal("136.50")
        assert result.is_matched

    def test_postings_outside_window_ignored(self, service, company_id, march_ledger):
        march_ledger.post(date(2025, 2, 28), "311", "343", "23.00")
        march_ledger.post(date(2025, 3, 3), "311", "343", "251.50")
        march_ledger.post(date(2025, 3, 7), "343", "321", "115.00")

        assert service.crosscheck_vat_account(company_id, *MARCH).is_matched

    def test_missing_posting_is_reported(self, service, company_id, march_ledger):
        march_ledger.post(date(2025, 3, 3), "311", "343", "230.00")
        march_ledger.post(date(2025, 3, 7), "343", "321", "115.00")

        result = service.crosscheck_vat_account(company_id, *MARCH)

        assert not result.is_matched
        assert result.difference == Decimal("21.50")


class TestDeadline:

    def test_uses_clock_today(self, service, captured_logs):
        deadline = service.next_deadline()

        # Clock is fixed at 31 March 2025; February was due on the 25th
        assert deadline.period_label == "február 2025"
        assert deadline.days_remaining == -6
        assert deadline.warning_level == DeadlineWarning.OVERDUE
        assert any(r["message"] == "filing_deadline_computed" for r in captured_logs())

    def test_frequency_override(self, service):
        assert service.next_deadline("quarterly").period_label == "Q1 2025"

    def test_configured_frequency(self, session, deterministic_clock):
        service = VatService(
            session, clock=deterministic_clock, config=VatConfig(filing_frequency="quarterly"),
        )
        assert service.next_deadline().deadline == date(2025, 4, 25)

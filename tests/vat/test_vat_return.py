"""
Tests for the DPH return calculator (calculate_vat_return).

Invoices are built in memory; no database.
"""

from datetime import date
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from statutory_modules.vat.models import (
    RETURN_ROWS,
    Invoice,
    InvoiceKind,
    InvoiceLineItem,
)
from statutory_modules.vat.vat_return import calculate_vat_return

MARCH = (date(2025, 3, 1), date(2025, 3, 31))


def _invoice(number, kind, items, issue_date=date(2025, 3, 10), **kwargs):
    line_items = tuple(
        InvoiceLineItem(Decimal(rate), Decimal(base), Decimal(vat)) for rate, base, vat in items
    )
    vat = sum((item.vat_amount for item in line_items), Decimal("0"))
    base = sum((item.taxable_base for item in line_items), Decimal("0"))
    return Invoice(
        number=number,
        kind=InvoiceKind(kind),
        issue_date=issue_date,
        total=base + vat,
        vat_amount=vat,
        items=line_items,
        **kwargs,
    )


class TestBuckets:

    def test_multi_rate_output_and_input(self):
        invoices = [
            _invoice("FV-1", "vydana", [("23", "1000", "230"), ("19", "100", "19"), ("5", "50", "2.5")]),
            _invoice("FP-1", "prijata", [("23", "500", "115")]),
        ]

        result = calculate_vat_return(invoices, *MARCH)

        assert result.output_vat_base_23 == Decimal("1000.00")
        assert result.output_vat_amount_19 == Decimal("19.00")
        assert result.output_vat_amount_5 == Decimal("2.50")
        assert result.output_vat_total == Decimal("251.50")
        assert result.input_vat_base_23 == Decimal("500.00")
        assert result.input_vat_total == Decimal("115.00")
        assert result.liability == Decimal("136.50")
        assert result.refund == Decimal("0.00")
        assert result.issued_invoice_count == 1
        assert result.received_invoice_count == 1

    def test_credit_note_reduces_output(self):
        invoices = [
            _invoice("FV-1", "vydana", [("23", "1000", "230")]),
            _invoice("DB-1", "dobropis", [("23", "800", "184")]),
        ]

        result = calculate_vat_return(invoices, *MARCH)

        assert result.output_vat_base_23 == Decimal("200.00")
        assert result.output_vat_amount_23 == Decimal("46.00")
        assert result.issued_invoice_count == 1

    def test_negative_credit_note_amounts_are_treated_alike(self):
        invoices = [
            _invoice("FV-1", "vydana", [("23", "1000", "230")]),
            _invoice("DB-1", "dobropis", [("23", "-800", "-184")]),
        ]
        assert calculate_vat_return(invoices, *MARCH).output_vat_amount_23 == Decimal("46.00")

    def test_proforma_and_advance_count_as_output(self):
        invoices = [
            _invoice("PF-1", "proforma", [("23", "100", "23")]),
            _invoice("ZF-1", "zalohova", [("23", "200", "46")]),
        ]

        result = calculate_vat_return(invoices, *MARCH)

        assert result.output_vat_amount_23 == Decimal("69.00")
        assert result.issued_invoice_count == 2

    def test_zero_and_unknown_rates_are_left_out(self):
        invoices = [_invoice("FV-1", "vydana", [("0", "1000", "0"), ("10", "100", "10")])]

        result = calculate_vat_return(invoices, *MARCH)

        assert result.output_vat_total == Decimal("0.00")
        assert result.issued_invoice_count == 1

    def test_rounding_happens_once_per_bucket(self):
        invoices = [
            _invoice(f"FV-{i}", "vydana", [("23", "0.01", "0.004")]) for i in range(3)
        ]
        # 3 x 0.004 = 0.012 -> 0.01, not 3 x 0.00
        assert calculate_vat_return(invoices, *MARCH).output_vat_amount_23 == Decimal("0.01")


class TestFiltering:

    def test_period_window_is_inclusive(self):
        invoices = [
            _invoice("FV-0", "vydana", [("23", "100", "23")], issue_date=date(2025, 2, 28)),
            _invoice("FV-1", "vydana", [("23", "100", "23")], issue_date=date(2025, 3, 1)),
            _invoice("FV-2", "vydana", [("23", "100", "23")], issue_date=date(2025, 3, 31)),
            _invoice("FV-3", "vydana", [("23", "100", "23")], issue_date=date(2025, 4, 1)),
        ]

        result = calculate_vat_return(invoices, *MARCH)

        assert result.output_vat_amount_23 == Decimal("46.00")
        assert result.issued_invoice_count == 2

    def test_cancelled_invoices_are_excluded(self):
        invoices = [
            _invoice("FV-1", "vydana", [("23", "100", "23")]),
            _invoice("FV-2", "vydana", [("23", "900", "207")], status="stornovana"),
        ]

        result = calculate_vat_return(invoices, *MARCH)

        assert result.output_vat_total == Decimal("23.00")
        assert result.issued_invoice_count == 1

    def test_empty_period(self):
        result = calculate_vat_return([], *MARCH)
        assert result.liability == Decimal("0.00")
        assert result.refund == Decimal("0.00")
        assert all(value == 0 for value in result.lines().values())


class TestReturnLines:

    def test_refund_rows(self):
        invoices = [
            _invoice("FV-1", "vydana", [("23", "100", "23")]),
            _invoice("FP-1", "prijata", [("23", "1000", "230")]),
        ]

        lines = calculate_vat_return(invoices, *MARCH).lines()

        assert list(lines) == list(RETURN_ROWS)
        assert lines["r02"] == Decimal("23.00")
        assert lines["r22"] == Decimal("230.00")
        assert lines["r27"] == Decimal("230.00")
        assert lines["r28"] == Decimal("23.00")
        assert lines["r29"] == lines["r27"]
        assert lines["r30"] == Decimal("0.00")
        assert lines["r31"] == Decimal("207.00")
        assert lines["r37"] == Decimal("-207.00")

    def test_liability_rows(self):
        invoices = [_invoice("FV-1", "vydana", [("23", "100", "23")])]

        lines = calculate_vat_return(invoices, *MARCH).lines()

        assert lines["r30"] == Decimal("23.00")
        assert lines["r37"] == Decimal("23.00")

    def test_rows_without_source_are_zero(self):
        invoices = [_invoice("FV-1", "vydana", [("23", "100", "23")])]
        lines = calculate_vat_return(invoices, *MARCH).lines()
        for row in ("r07", "r15", "r21", "r23", "r26", "r32", "r36"):
            assert lines[row] == 0


amounts = st.decimals(min_value="0", max_value="100000", places=2)


class TestReturnProperties:

    @settings(max_examples=50, deadline=None)
    @given(
        issued=st.lists(amounts, max_size=6),
        received=st.lists(amounts, max_size=6),
    )
    def test_liability_and_refund_are_exclusive(self, issued, received):
        invoices = [
            _invoice(f"FV-{i}", "vydana", [("23", "0", vat)]) for i, vat in enumerate(issued)
        ] + [
            _invoice(f"FP-{i}", "prijata", [("23", "0", vat)]) for i, vat in enumerate(received)
        ]

        result = calculate_vat_return(invoices, *MARCH)

        assert result.liability >= 0
        assert result.refund >= 0
        assert result.liability == 0 or result.refund == 0
        assert result.liability - result.refund == result.output_vat_total - result.input_vat_total

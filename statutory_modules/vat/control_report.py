"""
VAT Control-Report Classifier -- kontrolný výkaz DPH (KV DPH).

Routes every non-cancelled invoice of the period to one section; the first
matching rule wins:

1. credit note                               -> C1
2. reverse charge: issued -> D1, received    -> D2
3. issued: |VAT| >= threshold -> A1, else    -> A2
4. received: |total| <= simplified limit     -> B3
5. received: |VAT| >= threshold -> B1, else  -> B2

Each routed invoice yields one record per distinct non-zero VAT rate, in
the order the rates first appear on the invoice.  Proforma and advance
documents are not reported.  C2 is never populated: credit notes are not
told apart by direction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from uuid import UUID

from statutory_kernel.db.types import ZERO, round_money
from statutory_kernel.logging_config import get_logger
from statutory_modules.vat.config import VatConfig
from statutory_modules.vat.models import (
    Contact,
    ControlReportBuckets,
    ControlReportRecord,
    ControlReportSection,
    Invoice,
    InvoiceKind,
    in_period,
)

logger = get_logger("modules.vat.control_report")


def classify_invoice(invoice: Invoice, config: VatConfig) -> ControlReportSection | None:
    """Section for one invoice, or None when it is not reported."""
    vat = abs(invoice.vat_amount)

    if invoice.kind == InvoiceKind.CREDIT_NOTE:
        return ControlReportSection.C1

    if invoice.reverse_charge:
        if invoice.kind == InvoiceKind.ISSUED:
            return ControlReportSection.D1
        if invoice.kind == InvoiceKind.RECEIVED:
            return ControlReportSection.D2
        return None

    if invoice.kind == InvoiceKind.ISSUED:
        if vat >= config.large_vat_threshold:
            return ControlReportSection.A1
        return ControlReportSection.A2

    if invoice.kind == InvoiceKind.RECEIVED:
        if abs(invoice.total) <= config.simplified_invoice_limit:
            return ControlReportSection.B3
        if vat >= config.large_vat_threshold:
            return ControlReportSection.B1
        return ControlReportSection.B2

    return None


def records_for_invoice(invoice: Invoice, counterparty_vat_id: str) -> list[ControlReportRecord]:
    """One record per distinct non-zero VAT rate on the invoice."""
    bases: dict[Decimal, Decimal] = {}
    amounts: dict[Decimal, Decimal] = {}
    for item in invoice.items:
        if item.vat_rate == 0:
            continue
        bases[item.vat_rate] = bases.get(item.vat_rate, ZERO) + item.taxable_base
        amounts[item.vat_rate] = amounts.get(item.vat_rate, ZERO) + item.vat_amount

    return [
        ControlReportRecord(
            counterparty_vat_id=counterparty_vat_id,
            invoice_number=invoice.number,
            invoice_date=invoice.issue_date,
            vat_base=round_money(bases[rate]),
            vat_amount=round_money(amounts[rate]),
            vat_rate=rate,
        )
        for rate in bases
    ]


def _counterparty_vat_id(invoice: Invoice, contacts: Mapping[UUID, Contact]) -> str:
    contact = contacts.get(invoice.contact_id) if invoice.contact_id is not None else None
    if contact is not None and contact.ic_dph:
        return contact.ic_dph
    return invoice.counterparty_vat_id or ""


def calculate_control_report(
    invoices: Iterable[Invoice],
    contacts: Iterable[Contact],
    period_from: date,
    period_to: date,
    config: VatConfig | None = None,
) -> ControlReportBuckets:
    """
    Classify the period's invoices into the nine KV DPH sections.

    Args:
        invoices: Candidate invoices; out-of-window and cancelled ones are
            skipped.
        contacts: Counterparties used to resolve the reported VAT id.
        period_from: Inclusive window start.
        period_to: Inclusive window end.
        config: Routing thresholds; defaults to ``VatConfig()``.
    """
    config = config or VatConfig.with_defaults()
    contact_map = {contact.contact_id: contact for contact in contacts}
    sections: dict[ControlReportSection, list[ControlReportRecord]] = {
        section: [] for section in ControlReportSection
    }

    for invoice in invoices:
        if not in_period(invoice, period_from, period_to) or invoice.is_cancelled:
            continue
        section = classify_invoice(invoice, config)
        if section is None:
            continue
        sections[section].extend(
            records_for_invoice(invoice, _counterparty_vat_id(invoice, contact_map))
        )

    buckets = ControlReportBuckets(
        period_from=period_from,
        period_to=period_to,
        **{section.value.lower(): tuple(records) for section, records in sections.items()},
    )

    logger.info(
        "control_report_calculated",
        extra={
            "period_from": period_from.isoformat(),
            "period_to": period_to.isoformat(),
            "counts": buckets.counts(),
        },
    )
    return buckets

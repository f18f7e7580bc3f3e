"""
VAT cross-checks.

Two reconciliations run before filing:

* invoice VAT of the period against the balance of the VAT settlement
  account (343), credit minus debit over the same window;
* the DPH return totals against the control report sections
  (r28 vs A1+A2, r27 vs B1+B2+B3).

Both compare rounded figures against ``VatConfig.crosscheck_tolerance``
and explain a mismatch in Slovak, the language the filing staff work in.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from statutory_kernel.db.types import ZERO, round_money
from statutory_kernel.logging_config import get_logger
from statutory_modules.vat.config import VatConfig
from statutory_modules.vat.models import (
    ControlReportBuckets,
    ControlReportSection,
    Invoice,
    InvoiceKind,
    ReturnVsControlReportCrosscheck,
    VatAccountCrosscheck,
    VATReturn,
    in_period,
)

logger = get_logger("modules.vat.crosscheck")

_ACCOUNT_OUTPUT_KINDS = (InvoiceKind.ISSUED, InvoiceKind.PROFORMA)

OUTPUT_SECTIONS = (ControlReportSection.A1, ControlReportSection.A2)
INPUT_SECTIONS = (ControlReportSection.B1, ControlReportSection.B2, ControlReportSection.B3)


def crosscheck_vat_account(
    invoices: Iterable[Invoice],
    account_balance: Decimal,
    period_from: date,
    period_to: date,
    config: VatConfig | None = None,
) -> VatAccountCrosscheck:
    """
    Compare invoice VAT with the VAT account balance of the period.

    Args:
        invoices: Candidate invoices; out-of-window and cancelled ones are
            skipped.
        account_balance: Credit minus debit of the VAT account over the
            same window.
    """
    config = config or VatConfig.with_defaults()
    output_vat = ZERO
    input_vat = ZERO
    for invoice in invoices:
        if not in_period(invoice, period_from, period_to) or invoice.is_cancelled:
            continue
        if invoice.kind in _ACCOUNT_OUTPUT_KINDS:
            output_vat += invoice.vat_amount
        elif invoice.kind == InvoiceKind.RECEIVED:
            input_vat += invoice.vat_amount
        elif invoice.kind == InvoiceKind.CREDIT_NOTE:
            output_vat -= abs(invoice.vat_amount)

    net_vat = round_money(output_vat - input_vat)
    balance = round_money(account_balance)
    difference = round_money(net_vat - balance)
    is_matched = abs(difference) < config.crosscheck_tolerance

    if is_matched:
        details = f"DPH z faktúr sa zhoduje so zostatkom účtu {config.vat_account_code}."
    elif difference > 0:
        details = (
            f"DPH z faktúr je o {abs(difference):.2f} € vyššia ako zostatok účtu "
            f"{config.vat_account_code}. Skontrolujte zaúčtovanie faktúr."
        )
    else:
        details = (
            f"Zostatok účtu {config.vat_account_code} je o {abs(difference):.2f} € vyšší "
            f"ako DPH z faktúr. Skontrolujte ručné zápisy na účte {config.vat_account_code}."
        )

    result = VatAccountCrosscheck(
        invoice_output_vat=round_money(output_vat),
        invoice_input_vat=round_money(input_vat),
        invoice_net_vat=net_vat,
        account_balance=balance,
        difference=difference,
        is_matched=is_matched,
        details=details,
    )
    if not is_matched:
        logger.warning(
            "vat_account_mismatch",
            extra={
                "account_code": config.vat_account_code,
                "invoice_net_vat": str(net_vat),
                "account_balance": str(balance),
                "difference": str(difference),
            },
        )
    return result


def crosscheck_return_vs_control_report(
    vat_return: VATReturn,
    control_report: ControlReportBuckets,
    config: VatConfig | None = None,
) -> ReturnVsControlReportCrosscheck:
    """Compare r28 with A1+A2 VAT and r27 with B1+B2+B3 VAT."""
    config = config or VatConfig.with_defaults()
    lines = vat_return.lines()
    return_output = lines["r28"]
    return_input = lines["r27"]
    report_output = round_money(control_report.vat_total(*OUTPUT_SECTIONS))
    report_input = round_money(control_report.vat_total(*INPUT_SECTIONS))

    output_gap = abs(return_output - report_output)
    input_gap = abs(return_input - report_input)
    output_matched = output_gap < config.crosscheck_tolerance
    input_matched = input_gap < config.crosscheck_tolerance

    if output_matched and input_matched:
        details = "DPH priznanie sa zhoduje s kontrolným výkazom."
    else:
        parts: list[str] = []
        if not output_matched:
            parts.append(
                f"Výstup DPH: priznanie {return_output:.2f} € vs KV {report_output:.2f} € "
                f"(rozdiel {output_gap:.2f} €)"
            )
        if not input_matched:
            parts.append(
                f"Vstup DPH: priznanie {return_input:.2f} € vs KV {report_input:.2f} € "
                f"(rozdiel {input_gap:.2f} €)"
            )
        details = ". ".join(parts)

    return ReturnVsControlReportCrosscheck(
        return_output_total=return_output,
        report_output_total=report_output,
        return_input_total=return_input,
        report_input_total=report_input,
        output_matched=output_matched,
        input_matched=input_matched,
        details=details,
    )

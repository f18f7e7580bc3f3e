"""
VAT Return Calculator -- DPH priznanie.

Pure function over an invoice list.  Output VAT comes from issued,
proforma and advance documents; input VAT from received invoices.  Credit
notes always subtract their absolute base and amount from the output
buckets, whatever document they correct.

Rounding happens once per bucket, after summing the raw item amounts.
Items at 0% (exempt supply) and at rates without a row are left out.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from statutory_kernel.db.types import ZERO, round_money
from statutory_kernel.logging_config import get_logger
from statutory_modules.vat.config import VatConfig
from statutory_modules.vat.models import (
    VAT_RATES,
    Invoice,
    InvoiceKind,
    VATReturn,
    in_period,
)

logger = get_logger("modules.vat.vat_return")


class _Buckets:
    """Mutable per-rate accumulator used while folding invoices."""

    def __init__(self):
        self.base = dict.fromkeys(VAT_RATES, ZERO)
        self.amount = dict.fromkeys(VAT_RATES, ZERO)

    def add(self, rate: Decimal, base: Decimal, amount: Decimal) -> None:
        if rate in self.base:
            self.base[rate] += base
            self.amount[rate] += amount

    def rounded(self) -> tuple[dict[Decimal, Decimal], dict[Decimal, Decimal]]:
        return (
            {rate: round_money(v) for rate, v in self.base.items()},
            {rate: round_money(v) for rate, v in self.amount.items()},
        )


def calculate_vat_return(
    invoices: Iterable[Invoice],
    period_from: date,
    period_to: date,
    config: VatConfig | None = None,
) -> VATReturn:
    """
    Compute the DPH return for ``[period_from, period_to]``.

    Args:
        invoices: Candidate invoices; those outside the window or
            cancelled contribute nothing.
        period_from: Inclusive window start.
        period_to: Inclusive window end.
        config: Accepted for a uniform calculator signature; the return
            itself has no tunable thresholds.

    Returns:
        VATReturn with rounded buckets, totals, liability/refund and counts.
    """
    output = _Buckets()
    input_ = _Buckets()
    issued_count = 0
    received_count = 0

    for invoice in invoices:
        if not in_period(invoice, period_from, period_to) or invoice.is_cancelled:
            continue

        if invoice.kind.is_output:
            issued_count += 1
            for item in invoice.items:
                output.add(item.vat_rate, item.taxable_base, item.vat_amount)
        elif invoice.kind == InvoiceKind.RECEIVED:
            received_count += 1
            for item in invoice.items:
                input_.add(item.vat_rate, item.taxable_base, item.vat_amount)
        elif invoice.kind == InvoiceKind.CREDIT_NOTE:
            for item in invoice.items:
                output.add(item.vat_rate, -abs(item.taxable_base), -abs(item.vat_amount))

    out_base, out_amount = output.rounded()
    in_base, in_amount = input_.rounded()

    output_total = round_money(sum(out_amount.values(), ZERO))
    input_total = round_money(sum(in_amount.values(), ZERO))
    difference = round_money(output_total - input_total)
    if difference > 0:
        liability, refund = difference, round_money(ZERO)
    else:
        liability, refund = round_money(ZERO), abs(difference)

    rate_23, rate_19, rate_5 = VAT_RATES
    result = VATReturn(
        period_from=period_from,
        period_to=period_to,
        output_vat_base_23=out_base[rate_23],
        output_vat_amount_23=out_amount[rate_23],
        output_vat_base_19=out_base[rate_19],
        output_vat_amount_19=out_amount[rate_19],
        output_vat_base_5=out_base[rate_5],
        output_vat_amount_5=out_amount[rate_5],
        output_vat_total=output_total,
        input_vat_base_23=in_base[rate_23],
        input_vat_amount_23=in_amount[rate_23],
        input_vat_base_19=in_base[rate_19],
        input_vat_amount_19=in_amount[rate_19],
        input_vat_base_5=in_base[rate_5],
        input_vat_amount_5=in_amount[rate_5],
        input_vat_total=input_total,
        liability=liability,
        refund=refund,
        issued_invoice_count=issued_count,
        received_invoice_count=received_count,
    )

    logger.info(
        "vat_return_calculated",
        extra={
            "period_from": period_from.isoformat(),
            "period_to": period_to.isoformat(),
            "output_vat_total": str(output_total),
            "input_vat_total": str(input_total),
            "liability": str(liability),
            "refund": str(refund),
            "issued_invoice_count": issued_count,
            "received_invoice_count": received_count,
        },
    )
    return result

"""
VAT Domain Models.

Responsibility:
    Frozen dataclass DTOs for the Slovak VAT return (DPH priznanie), the
    VAT control report (kontrolný výkaz, KV DPH), the VAT cross-checks and
    the filing calendar.

Architecture:
    statutory_modules -- pure data containers with no I/O and no ORM
    coupling.  The service converts ORM rows into ``Invoice`` / ``Contact``
    before calling the calculators.

Invariants:
    - All models are ``frozen=True``.
    - All monetary fields use ``Decimal`` -- NEVER ``float``.
    - ``VATReturn.liability`` and ``VATReturn.refund`` are never both
      non-zero and are never negative.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from statutory_kernel.db.types import ZERO

# Rates with their own rows on the return (r01-r06)
VAT_RATES: tuple[Decimal, ...] = (Decimal("23"), Decimal("19"), Decimal("5"))

CANCELLED_STATUS = "stornovana"


class InvoiceKind(str, Enum):
    """Slovak document kinds."""

    ISSUED = "vydana"
    RECEIVED = "prijata"
    CREDIT_NOTE = "dobropis"
    PROFORMA = "proforma"
    ADVANCE = "zalohova"

    @property
    def is_output(self) -> bool:
        """Counts as an issued document on the VAT return."""
        return self in (InvoiceKind.ISSUED, InvoiceKind.PROFORMA, InvoiceKind.ADVANCE)


@dataclass(frozen=True)
class InvoiceLineItem:
    """One invoice item; a single VAT rate."""

    vat_rate: Decimal
    taxable_base: Decimal = ZERO
    vat_amount: Decimal = ZERO


@dataclass(frozen=True)
class Invoice:
    """An invoice with its items, as read for VAT reporting."""

    number: str
    kind: InvoiceKind
    issue_date: date
    total: Decimal = ZERO
    vat_amount: Decimal = ZERO
    items: tuple[InvoiceLineItem, ...] = ()
    counterparty_vat_id: str = ""
    reverse_charge: bool = False
    status: str = ""
    contact_id: UUID | None = None
    invoice_id: UUID | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == CANCELLED_STATUS


@dataclass(frozen=True)
class Contact:
    """Counterparty; ``ic_dph`` is its Slovak VAT id."""

    contact_id: UUID
    name: str = ""
    ic_dph: str | None = None


def in_period(invoice: Invoice, period_from: date, period_to: date) -> bool:
    """Issue date within the inclusive window."""
    return period_from <= invoice.issue_date <= period_to


# =========================================================================
# VAT return
# =========================================================================

# Row identifiers of the DPH return, in filing order
RETURN_ROWS: tuple[str, ...] = tuple(f"r{n:02d}" for n in range(1, 38))


@dataclass(frozen=True)
class VATReturn:
    """
    DPH return for one period.

    Buckets are rounded sums of the period's invoice items per rate.
    Rows r07-r21, r23-r26 and r32-r36 have no data source and stay zero.
    """

    period_from: date
    period_to: date

    output_vat_base_23: Decimal = ZERO
    output_vat_amount_23: Decimal = ZERO
    output_vat_base_19: Decimal = ZERO
    output_vat_amount_19: Decimal = ZERO
    output_vat_base_5: Decimal = ZERO
    output_vat_amount_5: Decimal = ZERO
    output_vat_total: Decimal = ZERO

    input_vat_base_23: Decimal = ZERO
    input_vat_amount_23: Decimal = ZERO
    input_vat_base_19: Decimal = ZERO
    input_vat_amount_19: Decimal = ZERO
    input_vat_base_5: Decimal = ZERO
    input_vat_amount_5: Decimal = ZERO
    input_vat_total: Decimal = ZERO

    liability: Decimal = ZERO  # vlastná daňová povinnosť
    refund: Decimal = ZERO  # nadmerný odpočet

    issued_invoice_count: int = 0
    received_invoice_count: int = 0

    @property
    def difference(self) -> Decimal:
        return self.output_vat_total - self.input_vat_total

    def lines(self) -> dict[str, Decimal]:
        """Rows r01..r37 in filing order."""
        rows = dict.fromkeys(RETURN_ROWS, ZERO)
        rows["r01"] = self.output_vat_base_23
        rows["r02"] = self.output_vat_amount_23
        rows["r03"] = self.output_vat_base_19
        rows["r04"] = self.output_vat_amount_19
        rows["r05"] = self.output_vat_base_5
        rows["r06"] = self.output_vat_amount_5
        rows["r22"] = self.input_vat_total
        rows["r27"] = rows["r22"] + rows["r23"] + rows["r24"] - rows["r25"] + rows["r26"]
        rows["r28"] = self.output_vat_total
        rows["r29"] = rows["r27"]
        rows["r30"] = self.liability
        rows["r31"] = self.refund
        rows["r37"] = self.liability if self.liability > 0 else ZERO - self.refund
        return rows


# =========================================================================
# Control report
# =========================================================================


class ControlReportSection(str, Enum):
    """KV DPH sections, in filing order."""

    A1 = "A1"  # issued, VAT >= threshold
    A2 = "A2"  # issued, VAT below threshold
    B1 = "B1"  # received, VAT >= threshold
    B2 = "B2"  # received, VAT below threshold
    B3 = "B3"  # received simplified invoices
    C1 = "C1"  # credit notes
    C2 = "C2"  # received credit notes (not routed)
    D1 = "D1"  # domestic reverse charge, supplier
    D2 = "D2"  # domestic reverse charge, customer


@dataclass(frozen=True)
class ControlReportRecord:
    """One KV DPH record: one invoice, one VAT rate."""

    counterparty_vat_id: str
    invoice_number: str
    invoice_date: date
    vat_base: Decimal
    vat_amount: Decimal
    vat_rate: Decimal


@dataclass(frozen=True)
class ControlReportBuckets:
    """The nine KV DPH sections."""

    period_from: date
    period_to: date
    a1: tuple[ControlReportRecord, ...] = ()
    a2: tuple[ControlReportRecord, ...] = ()
    b1: tuple[ControlReportRecord, ...] = ()
    b2: tuple[ControlReportRecord, ...] = ()
    b3: tuple[ControlReportRecord, ...] = ()
    c1: tuple[ControlReportRecord, ...] = ()
    c2: tuple[ControlReportRecord, ...] = ()
    d1: tuple[ControlReportRecord, ...] = ()
    d2: tuple[ControlReportRecord, ...] = ()

    def section(self, name: ControlReportSection | str) -> tuple[ControlReportRecord, ...]:
        return getattr(self, ControlReportSection(name).value.lower())

    def counts(self) -> dict[str, int]:
        return {s.value: len(self.section(s)) for s in ControlReportSection}

    def vat_total(self, *sections: ControlReportSection) -> Decimal:
        """Sum of record VAT over the given sections."""
        return sum(
            (record.vat_amount for s in sections for record in self.section(s)),
            ZERO,
        )


# =========================================================================
# Cross-checks
# =========================================================================


@dataclass(frozen=True)
class VatAccountCrosscheck:
    """Invoice VAT compared with the VAT settlement account balance."""

    invoice_output_vat: Decimal
    invoice_input_vat: Decimal
    invoice_net_vat: Decimal
    account_balance: Decimal
    difference: Decimal
    is_matched: bool
    details: str


@dataclass(frozen=True)
class ReturnVsControlReportCrosscheck:
    """DPH return totals compared with the control report sections."""

    return_output_total: Decimal
    report_output_total: Decimal
    return_input_total: Decimal
    report_input_total: Decimal
    output_matched: bool
    input_matched: bool
    details: str


# =========================================================================
# Filing calendar
# =========================================================================


class FilingFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class DeadlineWarning(str, Enum):
    OK = "ok"
    WARNING = "warning"
    URGENT = "urgent"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class FilingDeadline:
    """The filing obligation that is due next."""

    period_label: str
    period_from: date
    period_to: date
    deadline: date
    days_remaining: int
    warning_level: DeadlineWarning = field(default=DeadlineWarning.OK)

    @property
    def is_overdue(self) -> bool:
        return self.days_remaining < 0

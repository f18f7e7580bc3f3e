"""
VAT Module Service (``statutory_modules.vat.service``).

Responsibility
--------------
Loads a company's invoices, contacts and VAT account turnover from the
database and hands them to the pure VAT calculators: the DPH return, the
KV DPH control report, the cross-checks and the filing calendar.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config``.  ORM rows are converted to the frozen DTOs of ``models.py``
before any calculation runs.

Invariants enforced
-------------------
* Read-only.
* Soft-deleted invoices and contacts are never read.
* "Today" for deadlines comes from the injected clock.

Failure modes
-------------
* Query failure  -> SQLAlchemy exception propagates, not retried.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from statutory_kernel.db.types import round_money, to_decimal
from statutory_kernel.domain.balances import credit_side_total
from statutory_kernel.domain.clock import Clock, SystemClock
from statutory_kernel.logging_config import LogContext, get_logger
from statutory_kernel.models.invoice import Contact as ContactModel
from statutory_kernel.models.invoice import Invoice as InvoiceModel
from statutory_kernel.selectors.ledger_selector import LedgerSelector
from statutory_modules.vat.config import VatConfig
from statutory_modules.vat.control_report import calculate_control_report
from statutory_modules.vat.crosscheck import (
    crosscheck_return_vs_control_report,
    crosscheck_vat_account,
)
from statutory_modules.vat.deadlines import next_filing_deadline
from statutory_modules.vat.models import (
    Contact,
    ControlReportBuckets,
    FilingDeadline,
    FilingFrequency,
    Invoice,
    InvoiceKind,
    InvoiceLineItem,
    ReturnVsControlReportCrosscheck,
    VatAccountCrosscheck,
    VATReturn,
)
from statutory_modules.vat.vat_return import calculate_vat_return

logger = get_logger("modules.vat.service")


def _to_invoice(row: InvoiceModel) -> Invoice:
    return Invoice(
        number=row.number,
        kind=InvoiceKind(row.invoice_type),
        issue_date=row.issue_date,
        total=to_decimal(row.total),
        vat_amount=to_decimal(row.vat_amount),
        items=tuple(
            InvoiceLineItem(
                vat_rate=to_decimal(item.vat_rate),
                taxable_base=to_decimal(item.subtotal),
                vat_amount=to_decimal(item.vat_amount),
            )
            for item in row.items
        ),
        counterparty_vat_id=(row.contact.ic_dph or "") if row.contact is not None else "",
        reverse_charge=bool(row.reverse_charge),
        status=row.status or "",
        contact_id=row.contact_id,
        invoice_id=row.id,
    )


class VatService:
    """
    Slovak VAT reporting service.

    Contract
    --------
    * Every public method returns a frozen DTO from ``models.py``.
    * Period arguments are inclusive issue-date windows.

    Non-goals
    ---------
    * Does NOT submit filings; see ``statutory_modules.filings`` for the
      XML documents.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: VatConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or VatConfig.with_defaults()

    # =========================================================================
    # Loading
    # =========================================================================

    def load_invoices(self, company_id: UUID, date_from: date, date_to: date) -> list[Invoice]:
        """Invoices issued in the window, with items and counterparty VAT id."""
        query = (
            select(InvoiceModel)
            .where(InvoiceModel.company_id == company_id)
            .where(InvoiceModel.deleted_at.is_(None))
            .where(InvoiceModel.issue_date >= date_from)
            .where(InvoiceModel.issue_date <= date_to)
            .options(selectinload(InvoiceModel.items), selectinload(InvoiceModel.contact))
            .order_by(InvoiceModel.issue_date, InvoiceModel.number)
        )
        invoices = [_to_invoice(row) for row in self._session.execute(query).scalars()]
        logger.debug(
            "invoices_loaded",
            extra={
                "company_id": str(company_id),
                "date_from": date_from.isoformat(),
                "date_to": date_to.isoformat(),
                "invoice_count": len(invoices),
            },
        )
        return invoices

    def load_contacts(self, company_id: UUID) -> list[Contact]:
        """Active contacts of the company."""
        query = (
            select(ContactModel)
            .where(ContactModel.company_id == company_id)
            .where(ContactModel.deleted_at.is_(None))
        )
        return [
            Contact(contact_id=row.id, name=row.name, ic_dph=row.ic_dph)
            for row in self._session.execute(query).scalars()
        ]

    # =========================================================================
    # Public API
    # =========================================================================

    def calculate_vat_return(
        self,
        company_id: UUID,
        period_from: date,
        period_to: date,
    ) -> VATReturn:
        with LogContext.bind(company_id=str(company_id), report_type="vat_return"):
            invoices = self.load_invoices(company_id, period_from, period_to)
            return calculate_vat_return(invoices, period_from, period_to, self._config)

    def calculate_control_report(
        self,
        company_id: UUID,
        period_from: date,
        period_to: date,
    ) -> ControlReportBuckets:
        with LogContext.bind(company_id=str(company_id), report_type="control_report"):
            invoices = self.load_invoices(company_id, period_from, period_to)
            contacts = self.load_contacts(company_id)
            return calculate_control_report(
                invoices, contacts, period_from, period_to, self._config,
            )

    def crosscheck_vat_account(
        self,
        company_id: UUID,
        period_from: date,
        period_to: date,
    ) -> VatAccountCrosscheck:
        """
        Reconcile invoice VAT with the VAT account (343 by default).

        The account balance is credit minus debit of the posted lines in
        the window, read through the Ledger Aggregator.
        """
        with LogContext.bind(company_id=str(company_id), report_type="vat_crosscheck"):
            invoices = self.load_invoices(company_id, period_from, period_to)
            balances = LedgerSelector(self._session).code_balances(
                company_id, period_from, period_to,
            )
            account_balance = round_money(
                credit_side_total(balances, (self._config.vat_account_code,))
            )
            return crosscheck_vat_account(
                invoices, account_balance, period_from, period_to, self._config,
            )

    def crosscheck_return_vs_control_report(
        self,
        company_id: UUID,
        period_from: date,
        period_to: date,
    ) -> ReturnVsControlReportCrosscheck:
        vat_return = self.calculate_vat_return(company_id, period_from, period_to)
        control_report = self.calculate_control_report(company_id, period_from, period_to)
        return crosscheck_return_vs_control_report(vat_return, control_report, self._config)

    def next_deadline(self, frequency: FilingFrequency | str | None = None) -> FilingDeadline:
        """Next filing obligation as of the clock's today."""
        deadline = next_filing_deadline(frequency, self._clock.today(), self._config)
        logger.info(
            "filing_deadline_computed",
            extra={
                "period_label": deadline.period_label,
                "deadline": deadline.deadline.isoformat(),
                "days_remaining": deadline.days_remaining,
                "warning_level": deadline.warning_level.value,
            },
        )
        return deadline

"""
Slovak VAT Module (``statutory_modules.vat``).

Responsibility
--------------
Read-only module computing the periodic VAT return (DPH priznanie), the
VAT control report (kontrolný výkaz DPH), the pre-filing cross-checks and
the next filing deadline.

Architecture position
---------------------
**Modules layer** -- pure calculators over frozen invoice DTOs plus one
service that loads invoices and ledger turnover through SQLAlchemy.

Invariants enforced
-------------------
* Cancelled (``stornovana``) invoices never contribute.
* Every reported amount is rounded half-up to two places.
* Liability and refund are never both non-zero.
"""

from statutory_modules.vat.config import VatConfig
from statutory_modules.vat.control_report import (
    calculate_control_report,
    classify_invoice,
    records_for_invoice,
)
from statutory_modules.vat.crosscheck import (
    crosscheck_return_vs_control_report,
    crosscheck_vat_account,
)
from statutory_modules.vat.deadlines import (
    is_business_day,
    next_business_day,
    next_filing_deadline,
)
from statutory_modules.vat.models import (
    RETURN_ROWS,
    VAT_RATES,
    Contact,
    ControlReportBuckets,
    ControlReportRecord,
    ControlReportSection,
    DeadlineWarning,
    FilingDeadline,
    FilingFrequency,
    Invoice,
    InvoiceKind,
    InvoiceLineItem,
    ReturnVsControlReportCrosscheck,
    VatAccountCrosscheck,
    VATReturn,
)
from statutory_modules.vat.service import VatService
from statutory_modules.vat.vat_return import calculate_vat_return

__all__ = [
    "RETURN_ROWS",
    "VAT_RATES",
    "Contact",
    "ControlReportBuckets",
    "ControlReportRecord",
    "ControlReportSection",
    "DeadlineWarning",
    "FilingDeadline",
    "FilingFrequency",
    "Invoice",
    "InvoiceKind",
    "InvoiceLineItem",
    "ReturnVsControlReportCrosscheck",
    "VATReturn",
    "VatAccountCrosscheck",
    "VatConfig",
    "VatService",
    "calculate_control_report",
    "calculate_vat_return",
    "classify_invoice",
    "crosscheck_return_vs_control_report",
    "crosscheck_vat_account",
    "is_business_day",
    "next_business_day",
    "next_filing_deadline",
    "records_for_invoice",
]

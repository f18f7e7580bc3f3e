"""Read-side ORM models consumed by the report selectors and services."""

from statutory_kernel.models.account import Account, NormalBalance
from statutory_kernel.models.fiscal_year import FiscalYear
from statutory_kernel.models.invoice import Contact, Invoice, InvoiceItem
from statutory_kernel.models.journal import (
    JournalEntry,
    JournalEntryStatus,
    JournalLine,
    LineSide,
)

__all__ = [
    "Account",
    "Contact",
    "FiscalYear",
    "Invoice",
    "InvoiceItem",
    "JournalEntry",
    "JournalEntryStatus",
    "JournalLine",
    "LineSide",
    "NormalBalance",
]

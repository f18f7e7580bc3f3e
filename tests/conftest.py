"""
Pytest fixtures for the statutory reporting test suite.

Provides:
- In-memory SQLite sessions with the read-side tables created
- A ``ledger`` builder for accounts, fiscal years, journal entries,
  contacts and invoices
- Deterministic clock and structured-log capture

Environment Variables:
- DATABASE_URL: optional database URL; defaults to in-memory SQLite.
"""

import json
import logging
import os
from collections.abc import Iterable
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import UUID, uuid4

import pytest

from statutory_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from statutory_kernel.domain.clock import DeterministicClock
from statutory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from statutory_kernel.models import (
    Account,
    Contact,
    FiscalYear,
    Invoice,
    InvoiceItem,
    JournalEntry,
    JournalEntryStatus,
    JournalLine,
    LineSide,
)

DEFAULT_DATABASE_URL = "sqlite://"


def get_database_url() -> str:
    """Get database URL from environment, or use in-memory SQLite."""
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture statutory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, statements_service):
            statements_service.calculate_balance_sheet(...)
            logs = captured_logs()
            assert any(r["message"] == "balance_sheet_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("statutory_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """Fresh schema per test; in-memory SQLite unless DATABASE_URL is set."""
    engine = init_engine_from_url(get_database_url())
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(engine):
    session = get_session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2025, 3, 31, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def company_id() -> UUID:
    return uuid4()


# =============================================================================
# Ledger builder
# =============================================================================


class LedgerBuilder:
    """
    Writes read-side rows for one company.

    Accounts are created on first use of a code, so tests only name the
    codes they post to.
    """

    def __init__(self, session, company_id: UUID):
        self.session = session
        self.company_id = company_id
        self._accounts: dict[str, Account] = {}

    def account(self, code: str, name: str = "") -> Account:
        if code not in self._accounts:
            account = Account(company_id=self.company_id, code=code, name=name or code)
            self.session.add(account)
            self.session.flush()
            self._accounts[code] = account
        return self._accounts[code]

    def fiscal_year(self, year: int) -> FiscalYear:
        fiscal_year = FiscalYear(
            company_id=self.company_id,
            year=year,
            start_date=date(year, 1, 1),
            end_date=date(year, 12, 31),
        )
        self.session.add(fiscal_year)
        self.session.flush()
        return fiscal_year

    def post(
        self,
        entry_date: date,
        debit: str,
        credit: str,
        amount: Decimal | str,
        status: JournalEntryStatus = JournalEntryStatus.POSTED,
    ) -> JournalEntry:
        """Book ``amount`` Dr ``debit`` / Cr ``credit``."""
        amount = Decimal(amount)
        entry = JournalEntry(
            company_id=self.company_id,
            entry_date=entry_date,
            status=status.value,
        )
        entry.lines = [
            JournalLine(account_id=self.account(debit).id, side=LineSide.DEBIT.value, amount=amount),
            JournalLine(account_id=self.account(credit).id, side=LineSide.CREDIT.value, amount=amount),
        ]
        self.session.add(entry)
        self.session.flush()
        return entry

    def contact(self, name: str, ic_dph: str | None = None) -> Contact:
        contact = Contact(company_id=self.company_id, name=name, ic_dph=ic_dph)
        self.session.add(contact)
        self.session.flush()
        return contact

    def invoice(
        self,
        number: str,
        invoice_type: str,
        issue_date: date,
        items: Iterable[tuple[str, str, str]],
        contact: Contact | None = None,
        status: str = "odoslana",
        reverse_charge: bool = False,
    ) -> Invoice:
        """``items`` are ``(vat_rate, subtotal, vat_amount)`` string triples."""
        invoice_items = [
            InvoiceItem(
                position=position,
                vat_rate=Decimal(rate),
                subtotal=Decimal(base),
                vat_amount=Decimal(vat),
                total=Decimal(base) + Decimal(vat),
            )
            for position, (rate, base, vat) in enumerate(items)
        ]
        subtotal = sum((item.subtotal for item in invoice_items), Decimal("0"))
        vat_amount = sum((item.vat_amount for item in invoice_items), Decimal("0"))
        invoice = Invoice(
            company_id=self.company_id,
            contact_id=contact.id if contact is not None else None,
            number=number,
            invoice_type=invoice_type,
            status=status,
            issue_date=issue_date,
            subtotal=subtotal,
            vat_amount=vat_amount,
            total=subtotal + vat_amount,
            reverse_charge=reverse_charge,
        )
        invoice.items = invoice_items
        self.session.add(invoice)
        self.session.flush()
        return invoice


@pytest.fixture
def ledger(session, company_id) -> LedgerBuilder:
    return LedgerBuilder(session, company_id)


@pytest.fixture
def make_ledger(company_id):
    """Builder factory for tests that manage their own session."""

    def _make(session) -> LedgerBuilder:
        return LedgerBuilder(session, company_id)

    return _make

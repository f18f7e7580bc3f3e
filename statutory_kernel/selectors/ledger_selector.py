"""
Module: statutory_kernel.selectors.ledger_selector
Responsibility: The Ledger Aggregator's read side.  Exposes the two
    collaborator reads (posted lines in a window, chart of accounts) and
    composes them into per-code debit/credit totals.
Architecture position: Kernel > Selectors.  Delegates folding to the pure
    ``statutory_kernel.domain.balances`` module.

Invariants enforced:
    - Only lines whose entry status is POSTED are read.
    - The window is inclusive on both ends; ``date_from=None`` is a
      point-in-time (as-of) read used by the balance sheet.
    - Soft-deleted accounts are excluded from the chart, so their lines
      drop out of the aggregation.

Failure modes:
    - Empty window -> empty mapping, not an error.
    - Data-access failure -> SQLAlchemy exception propagates as-is, no
      partial result.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import case, select
from sqlalchemy.orm import Session

from statutory_kernel.db.types import ZERO
from statutory_kernel.domain.balances import (
    AccountRef,
    CodeBalance,
    PostedLine,
    aggregate_by_code,
)
from statutory_kernel.logging_config import get_logger
from statutory_kernel.models.account import Account
from statutory_kernel.models.journal import (
    JournalEntry,
    JournalEntryStatus,
    JournalLine,
    LineSide,
)
from statutory_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.ledger")


class LedgerSelector(BaseSelector):
    """
    Selector for ledger aggregation.

    Guarantees:
        - No stored balances: every total is computed at query time from
          posted JournalLine rows.
        - All amounts are Decimal.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def posted_lines(
        self,
        company_id: UUID,
        date_from: date | None,
        date_to: date,
    ) -> list[PostedLine]:
        """
        Posted lines of one company inside ``[date_from, date_to]``.

        Args:
            company_id: Owning company.
            date_from: Inclusive lower bound, or None for "since inception".
            date_to: Inclusive upper bound.
        """
        debit_amount = case(
            (JournalLine.side == LineSide.DEBIT.value, JournalLine.amount),
            else_=ZERO,
        ).label("debit_amount")
        credit_amount = case(
            (JournalLine.side == LineSide.CREDIT.value, JournalLine.amount),
            else_=ZERO,
        ).label("credit_amount")

        query = (
            select(
                JournalLine.account_id,
                JournalEntry.entry_date,
                debit_amount,
                credit_amount,
            )
            .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
            .where(JournalEntry.company_id == company_id)
            .where(JournalEntry.status == JournalEntryStatus.POSTED.value)
            .where(JournalEntry.entry_date <= date_to)
        )
        if date_from is not None:
            query = query.where(JournalEntry.entry_date >= date_from)

        rows = self.session.execute(query).all()
        return [
            PostedLine(
                account_id=row.account_id,
                entry_date=row.entry_date,
                debit_amount=Decimal(row.debit_amount or 0),
                credit_amount=Decimal(row.credit_amount or 0),
            )
            for row in rows
        ]

    def chart_of_accounts(self, company_id: UUID) -> list[AccountRef]:
        """Active (not soft-deleted) accounts of one company."""
        query = (
            select(Account.id, Account.code)
            .where(Account.company_id == company_id)
            .where(Account.deleted_at.is_(None))
            .order_by(Account.code)
        )
        return [
            AccountRef(account_id=row.id, code=row.code)
            for row in self.session.execute(query).all()
        ]

    def code_balances(
        self,
        company_id: UUID,
        date_from: date | None,
        date_to: date,
    ) -> dict[str, CodeBalance]:
        """
        Per-code debit/credit totals for the window.

        Postconditions: One CodeBalance per account code with at least one
            posted line in the window; ``{}`` when there are none.
        """
        lines = self.posted_lines(company_id, date_from, date_to)
        accounts = self.chart_of_accounts(company_id)
        balances = aggregate_by_code(lines, accounts)

        logger.debug(
            "ledger_aggregated",
            extra={
                "company_id": str(company_id),
                "date_from": date_from.isoformat() if date_from else None,
                "date_to": date_to.isoformat(),
                "line_count": len(lines),
                "code_count": len(balances),
            },
        )
        return balances

"""
Journal entries and lines.

Only entries with status ``posted`` are eligible for reporting.  Each line
books one amount on one side of one account; the selectors fold sides into
debit/credit totals.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from statutory_kernel.db.base import Base, UUIDString

if TYPE_CHECKING:
    from statutory_kernel.models.account import Account


class JournalEntryStatus(str, Enum):
    """Lifecycle of a journal entry."""

    DRAFT = "draft"
    POSTED = "posted"
    REVERSED = "reversed"


class LineSide(str, Enum):
    """Which side of the account a line books to."""

    DEBIT = "debit"
    CREDIT = "credit"


class JournalEntry(Base):
    """A ledger transaction header."""

    __tablename__ = "journal_entries"

    __table_args__ = (
        Index("idx_journal_company_date", "company_id", "entry_date"),
        Index("idx_journal_status", "status"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    entry_date: Mapped[date] = mapped_column(nullable=False)

    status: Mapped[JournalEntryStatus] = mapped_column(
        String(20),
        nullable=False,
        default=JournalEntryStatus.DRAFT,
    )

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.entry_date} {self.status}>"


class JournalLine(Base):
    """One debit or credit booking inside a journal entry."""

    __tablename__ = "journal_entry_lines"

    __table_args__ = (
        Index("idx_line_entry", "journal_entry_id"),
        Index("idx_line_account", "account_id"),
    )

    journal_entry_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("chart_of_accounts.id"),
        nullable=False,
    )

    side: Mapped[LineSide] = mapped_column(String(10), nullable=False)

    amount: Mapped[Decimal] = mapped_column(nullable=False)

    entry: Mapped["JournalEntry"] = relationship(back_populates="lines")
    account: Mapped["Account"] = relationship(back_populates="journal_lines")

"""
Chart of Accounts entry.

Slovak charts are keyed by the synthetic account code (``"343"``) with
optional analytic suffixes (``"343100"``).  Statement templates match codes
by equality or by prefix, so an analytic account always reports under its
synthetic parent.
"""

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from statutory_kernel.db.base import Base, SoftDeleteMixin, UUIDString

if TYPE_CHECKING:
    from statutory_kernel.models.journal import JournalLine


class NormalBalance(str, Enum):
    """Normal balance side for an account or a statement row."""

    DEBIT = "debit"
    CREDIT = "credit"


class Account(SoftDeleteMixin, Base):
    """
    Chart of Accounts entry scoped to one company.

    Contract:
        (company_id, code) is unique.  Soft-deleted accounts are excluded
        from the chart-of-accounts read; lines posted to them therefore drop
        out of every aggregation.
    """

    __tablename__ = "chart_of_accounts"

    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_account_company_code"),
        Index("idx_account_company", "company_id"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    # Synthetic (optionally analytic) account code
    code: Mapped[str] = mapped_column(String(20), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    journal_lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="account",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return f"<Account {self.code}: {self.name}>"

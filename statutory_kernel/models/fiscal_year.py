"""Fiscal year (účtovné obdobie) of a company."""

from datetime import date
from uuid import UUID

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from statutory_kernel.db.base import Base, UUIDString


class FiscalYear(Base):
    """
    Accounting period of one company.

    ``year`` is the calendar label used to locate the immediately preceding
    fiscal year (``year - 1``) for comparison columns.
    """

    __tablename__ = "fiscal_years"

    __table_args__ = (
        UniqueConstraint("company_id", "year", name="uq_fiscal_year_company_year"),
    )

    company_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    year: Mapped[int] = mapped_column(nullable=False)
    start_date: Mapped[date] = mapped_column(nullable=False)
    end_date: Mapped[date] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<FiscalYear {self.year} {self.start_date}..{self.end_date}>"

"""
Module: statutory_kernel.selectors.fiscal_year_selector
Responsibility: Fiscal year lookups used to bound report windows and to
    locate the preceding year for comparison columns.
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import select

from statutory_kernel.models.fiscal_year import FiscalYear
from statutory_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class FiscalYearInfo:
    """Fiscal year snapshot."""

    fiscal_year_id: UUID
    company_id: UUID
    year: int
    start_date: date
    end_date: date


def _to_info(fy: FiscalYear) -> FiscalYearInfo:
    return FiscalYearInfo(
        fiscal_year_id=fy.id,
        company_id=fy.company_id,
        year=fy.year,
        start_date=fy.start_date,
        end_date=fy.end_date,
    )


class FiscalYearSelector(BaseSelector):
    """Read-only fiscal year queries; absence is reported as None."""

    def get(self, company_id: UUID, fiscal_year_id: UUID) -> FiscalYearInfo | None:
        """Fiscal year by id, scoped to the company."""
        fy = self.session.execute(
            select(FiscalYear)
            .where(FiscalYear.id == fiscal_year_id)
            .where(FiscalYear.company_id == company_id)
        ).scalar_one_or_none()
        return _to_info(fy) if fy is not None else None

    def by_year(self, company_id: UUID, year: int) -> FiscalYearInfo | None:
        """Fiscal year by its calendar label."""
        fy = self.session.execute(
            select(FiscalYear)
            .where(FiscalYear.company_id == company_id)
            .where(FiscalYear.year == year)
        ).scalar_one_or_none()
        return _to_info(fy) if fy is not None else None

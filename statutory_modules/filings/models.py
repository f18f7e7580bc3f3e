"""
Filing Domain Models.

Responsibility:
    Frozen dataclass DTOs describing who files (``CompanyInfo``), which
    period a VAT filing covers (``FilingPeriod``), which kind of filing it
    is (``FilingKind``) and the generated notes to the financial
    statements (``NotesData``).

Architecture:
    statutory_modules -- pure data containers with no I/O.

Invariants:
    - All models are ``frozen=True``.
    - A ``FilingPeriod`` names at most one of month or quarter.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from enum import Enum

from statutory_kernel.exceptions import InvalidFilingPeriodError


class FilingKind(str, Enum):
    """Filing kind codes (druh priznania / druh výkazu)."""

    REGULAR = "R"  # riadne
    CORRECTIVE = "O"  # opravné
    SUPPLEMENTARY = "D"  # dodatočné


class SizeCategory(str, Enum):
    """Accounting-entity size category for the RUZ registry."""

    MICRO = "mikro"
    SMALL = "mala"
    LARGE = "velka"

    @property
    def code(self) -> str:
        return _SIZE_CODES[self]


_SIZE_CODES = {
    SizeCategory.MICRO: "1",
    SizeCategory.SMALL: "2",
    SizeCategory.LARGE: "3",
}

DEFAULT_SIZE_CODE = "2"


def size_category_code(value: SizeCategory | str) -> str:
    """Registry code for a size category; unknown categories file as small."""
    try:
        return SizeCategory(value).code
    except ValueError:
        return DEFAULT_SIZE_CODE


@dataclass(frozen=True)
class CompanyInfo:
    """Identification of the filing entity."""

    name: str
    ico: str
    dic: str
    ic_dph: str = ""
    street: str = ""
    city: str = ""
    zip: str = ""
    legal_form: str = ""
    sk_nace: str = ""
    size_category: SizeCategory | str | None = None
    accounting_type: str = "podvojne"  # or "jednoduche"
    business_type: str = ""
    registration_number: str = ""
    date_of_establishment: str = ""
    statutory_body: str = ""

    @property
    def address(self) -> str:
        """Single-line seat address, empty when no street is known."""
        if not self.street:
            return ""
        locality = " ".join(part for part in (self.zip, self.city) if part)
        return f"{self.street}, {locality}" if locality else self.street


@dataclass(frozen=True)
class FilingPeriod:
    """
    Period of a VAT filing: a calendar month, a quarter or (for annual
    documents) the whole year.
    """

    year: int
    month: int | None = None
    quarter: int | None = None

    def __post_init__(self) -> None:
        if self.month is not None and self.quarter is not None:
            raise InvalidFilingPeriodError("month and quarter are mutually exclusive")
        if self.month is not None and not 1 <= self.month <= 12:
            raise InvalidFilingPeriodError(f"month must be 1..12, got {self.month}")
        if self.quarter is not None and not 1 <= self.quarter <= 4:
            raise InvalidFilingPeriodError(f"quarter must be 1..4, got {self.quarter}")
        if not 1900 <= self.year <= 9999:
            raise InvalidFilingPeriodError(f"year out of range: {self.year}")

    @classmethod
    def monthly(cls, year: int, month: int) -> FilingPeriod:
        return cls(year=year, month=month)

    @classmethod
    def quarterly(cls, year: int, quarter: int) -> FilingPeriod:
        return cls(year=year, quarter=quarter)

    @property
    def period_from(self) -> date:
        if self.month is not None:
            return date(self.year, self.month, 1)
        if self.quarter is not None:
            return date(self.year, 3 * self.quarter - 2, 1)
        return date(self.year, 1, 1)

    @property
    def period_to(self) -> date:
        if self.month is not None:
            last_month = self.month
        elif self.quarter is not None:
            last_month = 3 * self.quarter
        else:
            last_month = 12
        return date(self.year, last_month, calendar.monthrange(self.year, last_month)[1])


@dataclass(frozen=True)
class NotesSection:
    """One section of the notes; ``content`` is an HTML fragment."""

    id: str
    title: str
    content: str
    order: int
    editable: bool = True


@dataclass(frozen=True)
class NotesData:
    """Generated notes to the financial statements (Poznámky)."""

    sections: tuple[NotesSection, ...]
    fiscal_year: int
    generated_at: str
    company_name: str

    def section(self, section_id: str) -> NotesSection:
        for section in self.sections:
            if section.id == section_id:
                return section
        raise KeyError(section_id)

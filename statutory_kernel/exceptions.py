"""
Typed exception hierarchy for the statutory reporting engine.

Every error carries a machine-readable ``code`` class attribute and keeps
its context as attributes, so callers catch by type and log structured
fields instead of parsing messages.

    StatutoryKernelError (base)
    |
    +-- FiscalYearError
    |   +-- FiscalYearNotFoundError
    |   +-- InvalidPeriodError
    |
    +-- TemplateError
    |   +-- MalformedTemplateError
    |   +-- DuplicateRowNumberError
    |   +-- UnresolvedRowReferenceError
    |   +-- TemplateCycleError
    |
    +-- FilingError
        +-- InvalidFilingPeriodError

Category        | Code                      | When Raised
----------------|---------------------------|-------------------------------------------
Fiscal year     | FISCAL_YEAR_NOT_FOUND     | Requested fiscal year absent for company
                | INVALID_PERIOD            | date_from after date_to
----------------|---------------------------|-------------------------------------------
Template        | MALFORMED_TEMPLATE        | Node with zero or several computation modes
                | DUPLICATE_ROW_NUMBER      | Two nodes share a row number
                | UNRESOLVED_ROW_REFERENCE  | sum_of_rows / formula names unknown row
                | TEMPLATE_CYCLE            | Derived rows reference each other in a loop
----------------|---------------------------|-------------------------------------------
Filing          | INVALID_FILING_PERIOD     | Month and quarter both set, or out of range

Data-access failures are not wrapped: SQLAlchemy exceptions propagate to
the caller unchanged and abort the report.

A missing *prior* fiscal year is not an error (comparison values default
to zero), and a balance sheet imbalance is only flagged on the result.
"""


class StatutoryKernelError(Exception):
    """
    Base exception for all statutory reporting errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STATUTORY_KERNEL_ERROR"


# Fiscal year exceptions


class FiscalYearError(StatutoryKernelError):
    """Base exception for fiscal-year and reporting-window errors."""

    code: str = "FISCAL_YEAR_ERROR"


class FiscalYearNotFoundError(FiscalYearError):
    """The requested fiscal year does not exist for the company."""

    code: str = "FISCAL_YEAR_NOT_FOUND"

    def __init__(self, company_id: str, fiscal_year_id: str):
        self.company_id = company_id
        self.fiscal_year_id = fiscal_year_id
        super().__init__(
            f"Fiscal year {fiscal_year_id} not found for company {company_id}"
        )


class InvalidPeriodError(FiscalYearError):
    """Reporting window is inverted."""

    code: str = "INVALID_PERIOD"

    def __init__(self, date_from: str, date_to: str):
        self.date_from = date_from
        self.date_to = date_to
        super().__init__(
            f"Invalid reporting period: {date_from} is after {date_to}"
        )


# Template exceptions (raised at template-load time)


class TemplateError(StatutoryKernelError):
    """Base exception for statement template defects."""

    code: str = "TEMPLATE_ERROR"


class MalformedTemplateError(TemplateError):
    """A template node is structurally invalid."""

    code: str = "MALFORMED_TEMPLATE"

    def __init__(self, template: str, row_number: int | None, reason: str):
        self.template = template
        self.row_number = row_number
        self.reason = reason
        where = f"row {row_number}" if row_number is not None else "template root"
        super().__init__(f"Malformed template {template} at {where}: {reason}")


class DuplicateRowNumberError(TemplateError):
    """Two template nodes declare the same row number."""

    code: str = "DUPLICATE_ROW_NUMBER"

    def __init__(self, template: str, row_number: int):
        self.template = template
        self.row_number = row_number
        super().__init__(
            f"Template {template} declares row {row_number} more than once"
        )


class UnresolvedRowReferenceError(TemplateError):
    """A derived row references a row number that the template lacks."""

    code: str = "UNRESOLVED_ROW_REFERENCE"

    def __init__(self, template: str, row_number: int, reference: int):
        self.template = template
        self.row_number = row_number
        self.reference = reference
        super().__init__(
            f"Template {template} row {row_number} references "
            f"unknown row {reference}"
        )


class TemplateCycleError(TemplateError):
    """Derived rows depend on each other cyclically."""

    code: str = "TEMPLATE_CYCLE"

    def __init__(self, template: str, rows: list[int]):
        self.template = template
        self.rows = rows
        super().__init__(
            f"Template {template} has cyclic row references among {rows}"
        )


# Filing exceptions


class FilingError(StatutoryKernelError):
    """Base exception for regulator filing metadata errors."""

    code: str = "FILING_ERROR"


class InvalidFilingPeriodError(FilingError):
    """Filing period metadata is inconsistent."""

    code: str = "INVALID_FILING_PERIOD"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid filing period: {reason}")

"""
Regulator Filings Module (``statutory_modules.filings``).

Responsibility
--------------
Turns computed statements and VAT reports into the documents that leave
the system: the RUZ financial-statements XML, the DPH return XML, the
KV DPH control-report XML and the HTML notes to the financial statements.

Architecture position
---------------------
**Modules layer** -- pure renderers.  No database access and no clock
reads; compilation and filing dates are arguments.

Failure modes
-------------
* Inconsistent filing period -> ``InvalidFilingPeriodError``.
"""

from statutory_modules.filings.models import (
    CompanyInfo,
    FilingKind,
    FilingPeriod,
    NotesData,
    NotesSection,
    SizeCategory,
    size_category_code,
)
from statutory_modules.filings.notes import format_money, generate_notes, year_over_year_change
from statutory_modules.filings.ruz import RUZ_NAMESPACE, render_ruz_xml
from statutory_modules.filings.vat import (
    DPH_NAMESPACE,
    KVDPH_NAMESPACE,
    render_control_report_xml,
    render_vat_xml,
)
from statutory_modules.filings.xml_writer import (
    XmlWriter,
    escape_text,
    format_amount,
    format_date,
    format_rate,
)

__all__ = [
    "DPH_NAMESPACE",
    "KVDPH_NAMESPACE",
    "RUZ_NAMESPACE",
    "CompanyInfo",
    "FilingKind",
    "FilingPeriod",
    "NotesData",
    "NotesSection",
    "SizeCategory",
    "XmlWriter",
    "escape_text",
    "format_amount",
    "format_date",
    "format_money",
    "format_rate",
    "generate_notes",
    "render_control_report_xml",
    "render_ruz_xml",
    "render_vat_xml",
    "size_category_code",
    "year_over_year_change",
]

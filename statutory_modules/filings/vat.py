"""
DPH and KV DPH XML Serializers.

Renders the VAT return (namespace ``dphdp/2025``) and the VAT control
report (namespace ``kvdph/2025``) for the Finančná správa.  Rows r01-r37
and the nine control-report sections are always emitted, in fixed order,
whether or not they carry data.
"""

from __future__ import annotations

from datetime import date

from statutory_kernel.logging_config import get_logger
from statutory_modules.filings.models import CompanyInfo, FilingKind, FilingPeriod
from statutory_modules.filings.xml_writer import XmlWriter, format_date, format_rate
from statutory_modules.vat.models import (
    ControlReportBuckets,
    ControlReportSection,
    VATReturn,
)

logger = get_logger("modules.filings.vat")

DPH_NAMESPACE = "http://www.financnasprava.sk/dphdp/2025"
KVDPH_NAMESPACE = "http://www.financnasprava.sk/kvdph/2025"

# Form parts of the DPH return and the rows each one holds
RETURN_PARTS: tuple[tuple[str, tuple[int, ...]], ...] = (
    ("I. Dodanie tovarov a sluzieb", tuple(range(1, 8))),
    ("II. Nadobudnutie tovaru z EU, sluzby, prenos, dovoz", tuple(range(8, 18))),
    ("III. Oprava zakladu dane", tuple(range(18, 22))),
    ("IV. Dan na vstupe - narok na odpocet", tuple(range(22, 28))),
    ("V. Vysledok", tuple(range(28, 32))),
    ("VI. Korekcie", tuple(range(32, 38))),
)


def _header(
    writer: XmlWriter,
    company: CompanyInfo,
    period: FilingPeriod,
    kind_tag: str,
    filing_kind: FilingKind | str,
    filed_on: date,
) -> None:
    with writer.element_block("hlavicka"):
        writer.element("dic", company.dic)
        writer.element("icDph", company.ic_dph)
        writer.element("nazovDanSubjektu", company.name)
        writer.element("ulica", company.street)
        writer.element("mesto", company.city)
        writer.element("psc", company.zip)
        writer.element("stat", "SK")
        writer.element("rok", period.year)
        if period.month is not None:
            writer.element("mesiac", f"{period.month:02d}")
        if period.quarter is not None:
            writer.element("stvrrok", period.quarter)
        writer.element(kind_tag, FilingKind(filing_kind).value)
        writer.element("datumPodania", format_date(filed_on))


def render_vat_xml(
    company: CompanyInfo,
    vat_return: VATReturn,
    period: FilingPeriod,
    filing_kind: FilingKind | str,
    filed_on: date,
) -> str:
    """
    Render the DPH return document.

    Args:
        company: Filing entity.
        vat_return: Computed return; rows come from ``VATReturn.lines()``.
        period: Month or quarter filed.
        filing_kind: R, O or D.
        filed_on: datumPodania; callers take it from their clock.
    """
    rows = vat_return.lines()
    writer = XmlWriter()
    with writer.element_block("dokument", xmlns=DPH_NAMESPACE):
        _header(writer, company, period, "druhPriznania", filing_kind, filed_on)
        with writer.element_block("telo"):
            for title, numbers in RETURN_PARTS:
                writer.comment(title)
                for number in numbers:
                    key = f"r{number:02d}"
                    writer.amount(key, rows[key])
        with writer.element_block("statistiky"):
            writer.element("pocetVydanychFaktur", vat_return.issued_invoice_count)
            writer.element("pocetPrijatychFaktur", vat_return.received_invoice_count)

    document = writer.getvalue()
    logger.info(
        "vat_xml_rendered",
        extra={
            "period_from": period.period_from.isoformat(),
            "period_to": period.period_to.isoformat(),
            "filing_kind": FilingKind(filing_kind).value,
        },
    )
    return document


def render_control_report_xml(
    company: CompanyInfo,
    control_report: ControlReportBuckets,
    period: FilingPeriod,
    filing_kind: FilingKind | str,
    filed_on: date,
) -> str:
    """Render the KV DPH document: header, then sections castA1..castD2."""
    writer = XmlWriter()
    with writer.element_block("dokument", xmlns=KVDPH_NAMESPACE):
        _header(writer, company, period, "druhVykazu", filing_kind, filed_on)
        with writer.element_block("telo"):
            for section in ControlReportSection:
                records = control_report.section(section)
                with writer.element_block(f"cast{section.value}"):
                    writer.element("pocetZaznamov", len(records))
                    for record in records:
                        with writer.element_block("zaznam"):
                            writer.element("icDphOdberatela", record.counterparty_vat_id)
                            writer.element("cisloFaktury", record.invoice_number)
                            writer.element("datumFaktury", format_date(record.invoice_date))
                            writer.amount("zakladDane", record.vat_base)
                            writer.amount("sumaDane", record.vat_amount)
                            writer.element("sadzbaDane", format_rate(record.vat_rate))

    document = writer.getvalue()
    logger.info(
        "control_report_xml_rendered",
        extra={
            "period_from": period.period_from.isoformat(),
            "period_to": period.period_to.isoformat(),
            "filing_kind": FilingKind(filing_kind).value,
            "counts": control_report.counts(),
        },
    )
    return document

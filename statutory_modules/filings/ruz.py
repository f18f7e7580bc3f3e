"""
RUZ XML Serializer.

Renders the annual financial statements for the Register účtovných
závierok: header, identification, the Súvaha (Úč 1-01) asset and liability
trees with their totals, then the Výkaz ziskov a strát (Úč 2-01) rows and
its composite summary.

No validation happens here; the statement builders own the content.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from statutory_kernel.logging_config import get_logger
from statutory_kernel.selectors.fiscal_year_selector import FiscalYearInfo
from statutory_modules.filings.models import CompanyInfo, size_category_code
from statutory_modules.filings.xml_writer import XmlWriter, format_date
from statutory_modules.statements.models import (
    BalanceSheetData,
    ComputedLine,
    PeriodValues,
    ProfitLossData,
)

logger = get_logger("modules.filings.ruz")

RUZ_NAMESPACE = "http://www.registeruz.sk/uz/doc"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"


def _balance_sheet_rows(writer: XmlWriter, lines: Iterable[ComputedLine]) -> None:
    # Rows are filed flat, in pre-order.
    for root in lines:
        for line in root.flatten():
            with writer.element_block("Riadok"):
                writer.element("Oznacenie", line.label)
                writer.element("CisloRiadku", line.row_number)
                writer.amount("Brutto", line.gross)
                writer.amount("Korekcia", line.correction)
                writer.amount("Netto", line.net)
                writer.amount("PredchadzajuceObdobie", line.prior_net)


def _profit_loss_rows(writer: XmlWriter, lines: Iterable[ComputedLine]) -> None:
    for root in lines:
        for line in root.flatten():
            with writer.element_block("Riadok"):
                writer.element("Oznacenie", line.label)
                writer.element("CisloRiadku", line.row_number)
                writer.amount("BezneObdobie", line.current)
                writer.amount("PredchadzajuceObdobie", line.prior)


def _summary(writer: XmlWriter, tag: str, values: PeriodValues) -> None:
    with writer.element_block(tag):
        writer.amount("BezneObdobie", values.current)
        writer.amount("PredchadzajuceObdobie", values.prior)


def _identification(writer: XmlWriter, company: CompanyInfo) -> None:
    with writer.element_block("Identifikacia"):
        writer.element("ObchodneMeno", company.name)
        writer.element("ICO", company.ico)
        writer.element("DIC", company.dic)
        if company.ic_dph:
            writer.element("ICDPH", company.ic_dph)
        if company.street:
            with writer.element_block("Sidlo"):
                writer.element("Ulica", company.street)
                if company.city:
                    writer.element("Obec", company.city)
                if company.zip:
                    writer.element("PSC", company.zip)
        if company.legal_form:
            writer.element("PravnaForma", company.legal_form)
        if company.sk_nace:
            writer.element("SKNACE", company.sk_nace)
        if company.size_category:
            writer.element("VelkostnaKategoria", size_category_code(company.size_category))


def render_ruz_xml(
    company: CompanyInfo,
    balance_sheet: BalanceSheetData,
    profit_loss: ProfitLossData,
    fiscal_year: FiscalYearInfo,
    compiled_on: date,
) -> str:
    """
    Render the regular (riadna) financial statements document.

    Args:
        company: Filing entity.
        balance_sheet: Computed Súvaha.
        profit_loss: Computed Výkaz ziskov a strát.
        fiscal_year: Year whose statements are filed; the comparative
            period is the previous calendar year.
        compiled_on: DatumZostavenia; callers take it from their clock.

    Returns:
        UTF-8 XML document as a string.
    """
    writer = XmlWriter()
    with writer.element_block("UctovnaZavierka", xmlns=RUZ_NAMESPACE, xmlns__xsi=XSI_NAMESPACE):
        with writer.element_block("Hlavicka"):
            writer.element("TypDokumentu", "uctovna_zavierka")
            writer.element("DruhZavierky", "riadna")
            writer.element("DatumZostavenia", format_date(compiled_on))
            writer.element("ObdobieOd", format_date(fiscal_year.start_date))
            writer.element("ObdobieDo", format_date(fiscal_year.end_date))
            writer.element("PredchadzajuceObdobieOd", f"{fiscal_year.year - 1}-01-01")
            writer.element("PredchadzajuceObdobieDo", f"{fiscal_year.year - 1}-12-31")

        _identification(writer, company)

        with writer.element_block("Suvaha"):
            writer.element("OznaczenieVykazu", "Uc 1-01")
            with writer.element_block("Aktiva"):
                _balance_sheet_rows(writer, balance_sheet.assets)
                with writer.element_block("AktivaSpolu"):
                    totals = balance_sheet.assets_total
                    writer.amount("Brutto", totals.gross)
                    writer.amount("Korekcia", totals.correction)
                    writer.amount("Netto", totals.net)
                    writer.amount("PredchadzajuceObdobie", totals.prior_net)
            with writer.element_block("Pasiva"):
                _balance_sheet_rows(writer, balance_sheet.liabilities)
                with writer.element_block("PasivaSpolu"):
                    writer.amount("Netto", balance_sheet.liabilities_total.net)
                    writer.amount(
                        "PredchadzajuceObdobie", balance_sheet.liabilities_total.prior_net,
                    )

        with writer.element_block("VykazZiskovAStrat"):
            writer.element("OznaczenieVykazu", "Uc 2-01")
            with writer.element_block("Udaje"):
                _profit_loss_rows(writer, profit_loss.lines)
            with writer.element_block("Suhrn"):
                _summary(writer, "ObchodnaMarza", profit_loss.trading_margin)
                _summary(writer, "PridanaHodnota", profit_loss.value_added)
                _summary(writer, "VHHospodarska", profit_loss.operating_result)
                _summary(writer, "VHFinancna", profit_loss.financial_result)
                _summary(writer, "VHZaObdobie", profit_loss.period_result)

    document = writer.getvalue()
    logger.info(
        "ruz_xml_rendered",
        extra={
            "fiscal_year": fiscal_year.year,
            "is_balanced": balance_sheet.is_balanced,
            "size_bytes": len(document.encode("utf-8")),
        },
    )
    return document

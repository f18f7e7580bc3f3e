"""
Notes Generator -- Poznámky k účtovnej závierke.

Produces the seven editable sections of the notes as HTML fragments:
identification, accounting methods, balance-sheet overview, P&L key
indicators, a cash-flow placeholder, an employees placeholder and events
after the balance-sheet date.  Company-supplied strings are HTML-escaped;
statement figures are formatted the Slovak way (``1 234,56 €``).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from html import escape

from statutory_kernel.db.types import round_money
from statutory_kernel.logging_config import get_logger
from statutory_modules.filings.models import CompanyInfo, NotesData, NotesSection
from statutory_modules.statements.models import BalanceSheetData, PeriodValues, ProfitLossData

logger = get_logger("modules.filings.notes")

NBSP = "\u00a0"
PENDING = "Údaje sa doplnia"


def format_money(value: Decimal) -> str:
    """``1234.5`` -> ``1 234,50 €`` with non-breaking spaces."""
    rounded = round_money(value)
    if rounded == 0:
        rounded = abs(rounded)
    grouped = f"{rounded:,.2f}".replace(",", NBSP).replace(".", ",")
    return f"{grouped}{NBSP}€"


def year_over_year_change(values: PeriodValues) -> Decimal | None:
    """Percentage change of current over prior, one decimal; None without a prior value."""
    if values.prior == 0:
        return None
    change = (values.current - values.prior) / abs(values.prior) * 100
    return change.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def _row(label: str, *cells: str) -> str:
    return "<tr><td>" + "</td><td>".join((label, *cells)) + "</td></tr>"


def _identification(company: CompanyInfo, fiscal_year: int) -> str:
    lines = [
        "<h3>1. Identifikácia účtovnej jednotky</h3>",
        "<table>",
        _row("<strong>Obchodné meno:</strong>", escape(company.name)),
        _row("<strong>IČO:</strong>", escape(company.ico)),
        _row("<strong>DIČ:</strong>", escape(company.dic)),
    ]
    optional = (
        ("IČ DPH", company.ic_dph),
        ("Sídlo", company.address),
        ("Právna forma", company.legal_form),
        ("Predmet podnikania", company.business_type),
        ("Registrácia", company.registration_number),
        ("Dátum vzniku", company.date_of_establishment),
        ("Štatutárny orgán", company.statutory_body),
    )
    for label, value in optional:
        if value:
            lines.append(_row(f"<strong>{label}:</strong>", escape(value)))
    lines.append(
        _row("<strong>Účtovné obdobie:</strong>", f"01.01.{fiscal_year} - 31.12.{fiscal_year}")
    )
    lines.append("</table>")
    lines.append(
        "<p>Účtovná závierka bola zostavená za účtovné obdobie, ktoré sa zhoduje "
        "s kalendárnym rokom.</p>"
    )
    return "\n".join(lines)


def _accounting_methods(company: CompanyInfo) -> str:
    system = "jednoduchého" if company.accounting_type == "jednoduche" else "podvojného"
    return "\n".join([
        "<h3>2. Účtovné metódy a zásady</h3>",
        "<h4>2.1 Spôsob vedenia účtovníctva</h4>",
        f"<p>Účtovná jednotka uplatňuje sústavu {system} účtovníctva v zmysle zákona "
        "č. 431/2002 Z. z. o účtovníctve v znení neskorších predpisov.</p>",
        "<h4>2.2 Dlhodobý nehmotný majetok</h4>",
        "<p>Dlhodobý nehmotný majetok sa účtuje v obstarávacích cenách a odpisuje sa "
        "rovnomerne počas doby jeho použiteľnosti.</p>",
        "<h4>2.3 Dlhodobý hmotný majetok</h4>",
        "<p>Dlhodobý hmotný majetok sa účtuje v obstarávacích cenách znížených o oprávky "
        "a opravné položky. Odpisy sú počítané rovnomernou metódou.</p>",
        "<h4>2.4 Zásoby</h4>",
        "<p>Zásoby sa oceňujú obstarávacími cenami vrátane nákladov súvisiacich "
        "s obstaraním. Úbytok zásob sa účtuje spôsobom A.</p>",
        "<h4>2.5 Pohľadávky</h4>",
        "<p>Pohľadávky sa pri vzniku oceňujú menovitou hodnotou. Opravné položky "
        "k pochybným pohľadávkam sa tvoria na základe individuálneho posúdenia.</p>",
        "<h4>2.6 Záväzky</h4>",
        "<p>Záväzky sa pri vzniku oceňujú menovitou hodnotou.</p>",
        "<h4>2.7 Cudzia mena</h4>",
        "<p>Majetok a záväzky v cudzej mene sa prepočítavajú na euro kurzom ECB "
        "platným v deň účtovného prípadu.</p>",
        "<h4>2.8 Daň z príjmov</h4>",
        "<p>Daň z príjmov sa počíta v súlade so zákonom č. 595/2003 Z. z. o dani "
        "z príjmov.</p>",
    ])


def _balance_sheet_notes(balance_sheet: BalanceSheetData | None) -> str:
    lines = ["<h3>3. Informácie k súvahe</h3>"]
    if balance_sheet is None:
        lines.append("<p>Údaje súvahy nie sú k dispozícii.</p>")
        return "\n".join(lines)

    lines.append("<h4>3.1 Prehľad aktív</h4>")
    lines.append("<table>")
    lines.append(
        "<tr><th>Položka</th><th>Brutto</th><th>Korekcia</th><th>Netto</th>"
        "<th>Predch. obdobie</th></tr>"
    )
    for line in balance_sheet.assets:
        lines.append(_row(
            f"<strong>{escape(line.label)} {escape(line.name)}</strong>",
            format_money(line.gross),
            format_money(line.correction),
            format_money(line.net),
            format_money(line.prior_net),
        ))
    totals = balance_sheet.assets_total
    lines.append(_row(
        "<strong>AKTÍVA SPOLU</strong>",
        f"<strong>{format_money(totals.gross)}</strong>",
        f"<strong>{format_money(totals.correction)}</strong>",
        f"<strong>{format_money(totals.net)}</strong>",
        f"<strong>{format_money(totals.prior_net)}</strong>",
    ))
    lines.append("</table>")

    lines.append("<h4>3.2 Prehľad pasív</h4>")
    lines.append("<table>")
    lines.append("<tr><th>Položka</th><th>Bežné obdobie</th><th>Predch. obdobie</th></tr>")
    for line in balance_sheet.liabilities:
        lines.append(_row(
            f"<strong>{escape(line.label)} {escape(line.name)}</strong>",
            format_money(line.net),
            format_money(line.prior_net),
        ))
    lines.append(_row(
        "<strong>PASÍVA SPOLU</strong>",
        f"<strong>{format_money(balance_sheet.liabilities_total.net)}</strong>",
        f"<strong>{format_money(balance_sheet.liabilities_total.prior_net)}</strong>",
    ))
    lines.append("</table>")

    if balance_sheet.is_balanced:
        lines.append("<p>Súvaha je vyvážená, aktíva sa rovnajú pasívam.</p>")
    else:
        lines.append(
            "<p><strong>Upozornenie:</strong> Súvaha nie je vyvážená. Rozdiel medzi "
            f"aktívami a pasívami je {format_money(abs(balance_sheet.difference))}.</p>"
        )
    return "\n".join(lines)


def _profit_loss_notes(profit_loss: ProfitLossData | None) -> str:
    lines = ["<h3>4. Informácie k výkazu ziskov a strát</h3>"]
    if profit_loss is None:
        lines.append("<p>Údaje výkazu ziskov a strát nie sú k dispozícii.</p>")
        return "\n".join(lines)

    indicators = (
        ("Obchodná marža", profit_loss.trading_margin),
        ("Pridaná hodnota", profit_loss.value_added),
        ("VH z hospodárskej činnosti", profit_loss.operating_result),
        ("VH z finančnej činnosti", profit_loss.financial_result),
    )
    lines.append("<h4>4.1 Kľúčové ukazovatele</h4>")
    lines.append("<table>")
    lines.append("<tr><th>Ukazovateľ</th><th>Bežné obdobie</th><th>Predch. obdobie</th></tr>")
    for label, values in indicators:
        lines.append(_row(label, format_money(values.current), format_money(values.prior)))
    result = profit_loss.period_result
    lines.append(_row(
        "<strong>VH za účtovné obdobie</strong>",
        f"<strong>{format_money(result.current)}</strong>",
        f"<strong>{format_money(result.prior)}</strong>",
    ))
    lines.append("</table>")

    change = year_over_year_change(result)
    if change is not None:
        lines.append(
            "<p>Výsledok hospodárenia za účtovné obdobie sa oproti minulému roku "
            f"zmenil o {change} %.</p>"
        )
    return "\n".join(lines)


def _cash_flow_notes() -> str:
    return "\n".join([
        "<h3>5. Prehľad o peňažných tokoch (zjednodušený)</h3>",
        "<p>Prehľad o peňažných tokoch uvádza pohyb peňažných prostriedkov účtovnej "
        "jednotky počas účtovného obdobia.</p>",
        "<table>",
        "<tr><th>Položka</th><th>Suma</th></tr>",
        _row("A. Peňažné toky z hospodárskej činnosti", PENDING),
        _row("B. Peňažné toky z investičnej činnosti", PENDING),
        _row("C. Peňažné toky z finančnej činnosti", PENDING),
        _row("<strong>Čistý prírastok/úbytok peňažných prostriedkov</strong>", PENDING),
        "</table>",
    ])


def _employee_notes() -> str:
    rows = (
        "Priemerný počet zamestnancov",
        "Z toho riadiaci pracovníci",
        "Osobné náklady celkom",
        "Z toho mzdové náklady",
        "Z toho sociálne náklady",
    )
    lines = [
        "<h3>6. Informácie o zamestnancoch</h3>",
        "<table>",
        "<tr><th>Ukazovateľ</th><th>Bežné obdobie</th><th>Predch. obdobie</th></tr>",
    ]
    lines.extend(_row(label, PENDING, PENDING) for label in rows)
    lines.append("</table>")
    return "\n".join(lines)


def _post_closing_events() -> str:
    return "\n".join([
        "<h3>7. Významné udalosti po dni, ku ktorému sa zostavuje účtovná závierka</h3>",
        "<p>Po dni, ku ktorému sa zostavuje účtovná závierka, nenastali žiadne "
        "významné udalosti, ktoré by ovplyvnili verný obraz o finančnej situácii "
        "účtovnej jednotky.</p>",
        "<p><em>Ak nastali významné udalosti, doplňte ich popis a dopad na účtovnú "
        "závierku.</em></p>",
    ])


def generate_notes(
    company: CompanyInfo,
    fiscal_year: int,
    balance_sheet: BalanceSheetData | None,
    profit_loss: ProfitLossData | None,
    generated_at: str,
) -> NotesData:
    """
    Build the notes to the financial statements.

    Args:
        company: Reporting entity.
        fiscal_year: Calendar year of the statements.
        balance_sheet: Computed Súvaha, or None when not available.
        profit_loss: Computed Výkaz ziskov a strát, or None.
        generated_at: ISO timestamp from the caller's clock.
    """
    contents = (
        ("identification", "1. Identifikácia účtovnej jednotky",
         _identification(company, fiscal_year)),
        ("accounting_methods", "2. Účtovné metódy a zásady",
         _accounting_methods(company)),
        ("balance_sheet_notes", "3. Informácie k súvahe",
         _balance_sheet_notes(balance_sheet)),
        ("profit_loss_notes", "4. Informácie k výkazu ziskov a strát",
         _profit_loss_notes(profit_loss)),
        ("cash_flow", "5. Prehľad o peňažných tokoch", _cash_flow_notes()),
        ("employees", "6. Informácie o zamestnancoch", _employee_notes()),
        ("post_closing_events", "7. Významné udalosti po závierke",
         _post_closing_events()),
    )
    sections = tuple(
        NotesSection(id=section_id, title=title, content=content, order=order)
        for order, (section_id, title, content) in enumerate(contents, start=1)
    )

    logger.info(
        "notes_generated",
        extra={
            "fiscal_year": fiscal_year,
            "section_count": len(sections),
            "has_balance_sheet": balance_sheet is not None,
            "has_profit_loss": profit_loss is not None,
        },
    )
    return NotesData(
        sections=sections,
        fiscal_year=fiscal_year,
        generated_at=generated_at,
        company_name=company.name,
    )

"""
VAT filing deadlines.

Monthly payers file the return for month M by day 25 of M+1; quarterly
payers file Q1..Q4 by 25 April, 25 July, 25 October and 25 January of the
following year.  A due date falling on a weekend or a fixed Slovak public
holiday moves to the next business day.  Easter holidays are not
modelled.

Pure functions; "today" is passed in (the service takes it from the
injected clock).
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from statutory_modules.vat.config import VatConfig
from statutory_modules.vat.models import DeadlineWarning, FilingDeadline, FilingFrequency

# (month, day)
SLOVAK_HOLIDAYS: frozenset[tuple[int, int]] = frozenset({
    (1, 1),    # Deň vzniku Slovenskej republiky
    (1, 6),    # Zjavenie Pána (Traja králi)
    (5, 1),    # Sviatok práce
    (5, 8),    # Deň víťazstva nad fašizmom
    (7, 5),    # Sviatok svätého Cyrila a Metoda
    (8, 29),   # Výročie SNP
    (9, 1),    # Deň Ústavy
    (9, 15),   # Sedembolestná Panna Mária
    (11, 1),   # Sviatok Všetkých svätých
    (11, 17),  # Deň boja za slobodu a demokraciu
    (12, 24),  # Štedrý deň
    (12, 25),  # Prvý sviatok vianočný
    (12, 26),  # Druhý sviatok vianočný
})

MONTHS_SK = (
    "január", "február", "marec", "apríl", "máj", "jún",
    "júl", "august", "september", "október", "november", "december",
)


def is_business_day(day: date) -> bool:
    return day.weekday() < 5 and (day.month, day.day) not in SLOVAK_HOLIDAYS


def next_business_day(day: date) -> date:
    """``day`` itself when it is a business day, else the next one."""
    while not is_business_day(day):
        day += timedelta(days=1)
    return day


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _monthly_candidates(today: date, filing_day: int) -> list[tuple[str, date, date, date]]:
    candidates = []
    for offset in (-1, 0, 1):
        year, month = _shift_month(today.year, today.month, offset)
        due_year, due_month = _shift_month(year, month, 1)
        candidates.append((
            f"{MONTHS_SK[month - 1]} {year}",
            date(year, month, 1),
            _month_end(year, month),
            date(due_year, due_month, filing_day),
        ))
    return candidates


def _quarterly_candidates(today: date, filing_day: int) -> list[tuple[str, date, date, date]]:
    current = (today.month - 1) // 3  # 0-based quarter index
    candidates = []
    for offset in (-1, 0, 1):
        index = today.year * 4 + current + offset
        year, quarter = index // 4, index % 4 + 1
        first_month = 3 * quarter - 2
        last_month = 3 * quarter
        due_year, due_month = _shift_month(year, last_month, 1)
        candidates.append((
            f"Q{quarter} {year}",
            date(year, first_month, 1),
            _month_end(year, last_month),
            date(due_year, due_month, filing_day),
        ))
    return candidates


def warning_level(days_remaining: int, config: VatConfig) -> DeadlineWarning:
    if days_remaining < 0:
        return DeadlineWarning.OVERDUE
    if days_remaining <= config.urgent_days:
        return DeadlineWarning.URGENT
    if days_remaining <= config.warning_days:
        return DeadlineWarning.WARNING
    return DeadlineWarning.OK


def next_filing_deadline(
    frequency: FilingFrequency | str | None,
    today: date,
    config: VatConfig | None = None,
) -> FilingDeadline:
    """
    The filing obligation to show next.

    Candidates are the previous, current and next periods; the earliest
    whose (rolled) deadline is not more than ``overdue_grace_days`` before
    ``today`` wins, so a recently missed deadline stays visible as
    overdue.

    Args:
        frequency: Monthly or quarterly; None uses the configured one.
        today: Reference day.
    """
    config = config or VatConfig.with_defaults()
    frequency = FilingFrequency(frequency or config.filing_frequency)
    if frequency == FilingFrequency.MONTHLY:
        candidates = _monthly_candidates(today, config.filing_day)
    else:
        candidates = _quarterly_candidates(today, config.filing_day)

    horizon = today - timedelta(days=config.overdue_grace_days)
    chosen = candidates[-1]
    for candidate in candidates:
        if next_business_day(candidate[3]) >= horizon:
            chosen = candidate
            break

    label, period_from, period_to, raw_deadline = chosen
    deadline = next_business_day(raw_deadline)
    days_remaining = (deadline - today).days
    return FilingDeadline(
        period_label=label,
        period_from=period_from,
        period_to=period_to,
        deadline=deadline,
        days_remaining=days_remaining,
        warning_level=warning_level(days_remaining, config),
    )

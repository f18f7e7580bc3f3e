"""
Profit & Loss Calculator -- Výkaz ziskov a strát (Úč 2-01).

Pure transformation: ranged per-code turnovers in, ``ProfitLossData`` out.
ZERO I/O.

The eight composite results are ordinary ``formula`` rows of the template;
the engine resolves them in topological order, so every composite is
computed strictly after each row it references and is then available
under its own row number like any other row.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from uuid import UUID

from statutory_kernel.domain.balances import CodeBalance
from statutory_modules.statements.engine import evaluate_template
from statutory_modules.statements.models import (
    LineAmounts,
    PeriodValues,
    ProfitLossData,
    StatementTemplate,
)

# Summary field -> composite row number on Úč 2-01
COMPOSITE_ROWS: dict[str, int] = {
    "trading_margin": 3,
    "value_added": 11,
    "operating_result": 32,
    "financial_result": 51,
    "pretax_result": 52,
    "posttax_result": 56,
    "extraordinary_result": 62,
    "period_result": 64,
}


def _period_values(amounts: LineAmounts | None) -> PeriodValues:
    if amounts is None:
        return PeriodValues()
    return PeriodValues(current=amounts.net, prior=amounts.prior_net)


def build_profit_loss(
    template: StatementTemplate,
    current: Mapping[str, CodeBalance],
    prior: Mapping[str, CodeBalance] | None,
    *,
    fiscal_year: int,
    date_from: date,
    date_to: date,
    generated_at: str,
    prior_date_from: date | None = None,
    prior_date_to: date | None = None,
    company_id: UUID | None = None,
) -> ProfitLossData:
    """
    Evaluate the P&L template for the current and prior windows.

    Revenue rows carry credit-minus-debit, cost rows debit-minus-credit.
    A composite row missing from a custom template yields zeros.
    """
    statement = evaluate_template(template, current, prior)
    row_values = {
        row_number: _period_values(amounts) for row_number, amounts in statement.rows.items()
    }
    composites = {
        field_name: _period_values(statement.rows.get(row_number))
        for field_name, row_number in COMPOSITE_ROWS.items()
    }

    return ProfitLossData(
        lines=statement.lines,
        fiscal_year=fiscal_year,
        date_from=date_from,
        date_to=date_to,
        generated_at=generated_at,
        prior_date_from=prior_date_from,
        prior_date_to=prior_date_to,
        company_id=company_id,
        row_values=row_values,
        **composites,
    )

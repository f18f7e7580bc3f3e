"""
Balance Sheet Calculator -- Súvaha (Úč 1-01).

Pure transformation: per-code balances in, ``BalanceSheetData`` out.
ZERO I/O.  The asset half is evaluated with the debit-side convention and
correction accounts; the liabilities and equity half with the credit-side
convention and no corrections.

An imbalance between the two halves is reported on the result
(``is_balanced`` / ``difference``) and never raised.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from uuid import UUID

from statutory_kernel.db.types import ZERO, round_money
from statutory_kernel.domain.balances import CodeBalance
from statutory_modules.statements.engine import evaluate_template
from statutory_modules.statements.models import (
    AssetTotals,
    BalanceSheetData,
    EvaluatedStatement,
    LiabilityTotals,
    StatementTemplate,
)


def _root_sum(statement: EvaluatedStatement, attr: str) -> Decimal:
    return round_money(sum((getattr(line, attr) for line in statement.lines), ZERO))


def asset_totals(statement: EvaluatedStatement) -> AssetTotals:
    """Asset totals from the template total row, else the root rows."""
    if statement.total is not None:
        total = statement.total
        return AssetTotals(
            gross=total.gross,
            correction=total.correction,
            net=total.net,
            prior_net=total.prior_net,
        )
    return AssetTotals(
        gross=_root_sum(statement, "gross"),
        correction=_root_sum(statement, "correction"),
        net=_root_sum(statement, "net"),
        prior_net=_root_sum(statement, "prior_net"),
    )


def liability_totals(statement: EvaluatedStatement) -> LiabilityTotals:
    """Liabilities and equity totals; no gross/correction columns."""
    if statement.total is not None:
        return LiabilityTotals(net=statement.total.net, prior_net=statement.total.prior_net)
    return LiabilityTotals(
        net=_root_sum(statement, "net"),
        prior_net=_root_sum(statement, "prior_net"),
    )


def build_balance_sheet(
    assets_template: StatementTemplate,
    liabilities_template: StatementTemplate,
    current: Mapping[str, CodeBalance],
    prior: Mapping[str, CodeBalance] | None,
    *,
    fiscal_year: int,
    date_to: date,
    generated_at: str,
    prior_date_to: date | None = None,
    company_id: UUID | None = None,
    tolerance: Decimal = Decimal("0.01"),
) -> BalanceSheetData:
    """
    Evaluate both halves of the balance sheet.

    Args:
        assets_template: Asset-side template (row 1 total).
        liabilities_template: Liabilities and equity template (row 65 total).
        current: As-of balances at ``date_to``.
        prior: As-of balances at the prior fiscal year end, or None.
        tolerance: Largest absolute gap still reported as balanced.

    Returns:
        BalanceSheetData with both trees, totals and the balance check.
    """
    assets = evaluate_template(assets_template, current, prior, is_asset_side=True)
    liabilities = evaluate_template(liabilities_template, current, prior, is_asset_side=False)

    assets_total = asset_totals(assets)
    liabilities_total = liability_totals(liabilities)
    difference = round_money(assets_total.net - liabilities_total.net)

    return BalanceSheetData(
        assets=assets.lines,
        liabilities=liabilities.lines,
        assets_total=assets_total,
        liabilities_total=liabilities_total,
        is_balanced=abs(difference) < tolerance,
        difference=difference,
        fiscal_year=fiscal_year,
        date_to=date_to,
        generated_at=generated_at,
        prior_date_to=prior_date_to,
        company_id=company_id,
    )

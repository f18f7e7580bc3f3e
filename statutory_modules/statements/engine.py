"""
Statement Template Engine (``statutory_modules.statements.engine``).

Responsibility
--------------
Evaluates a validated ``StatementTemplate`` against current and prior
per-code ledger balances and produces the computed line tree.

Architecture position
---------------------
**Modules layer** -- pure computation, ZERO I/O.  Consumes the output of
``statutory_kernel.domain.balances`` and is driven by
``balance_sheet.py`` / ``profit_loss.py``.

Evaluation runs in two passes:

1. Every ``accounts`` leaf is computed from the balances.
2. Derived rows (``children``, ``sum_of_rows``, ``formula``) are resolved
   in the template's precomputed ``evaluation_order`` by looking up
   already-final row values.  No recursion through row references.

Invariants enforced
-------------------
* Leaf sign convention follows the node's normal balance: debit-side rows
  report debit minus credit, credit-side rows credit minus debit.  Asset
  leaves subtract their correction accounts (credit minus debit).
* Each leaf's gross, correction and prior values are rounded once with
  ``round_money``; net is always ``gross - correction``.
* A leaf whose codes match no balance evaluates to zero.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from statutory_kernel.db.types import ZERO, round_money
from statutory_kernel.domain.balances import (
    CodeBalance,
    credit_side_total,
    debit_side_total,
)
from statutory_kernel.models.account import NormalBalance
from statutory_modules.statements.models import (
    ComputationMode,
    ComputedLine,
    EvaluatedStatement,
    LineAmounts,
    LineTemplate,
    StatementSide,
    StatementTemplate,
)


def _default_balance(side: StatementSide) -> NormalBalance:
    if side == StatementSide.LIABILITIES:
        return NormalBalance.CREDIT
    return NormalBalance.DEBIT


def _side_total(
    balances: Mapping[str, CodeBalance],
    codes: tuple[str, ...],
    normal_balance: NormalBalance,
) -> Decimal:
    if normal_balance == NormalBalance.CREDIT:
        return credit_side_total(balances, codes)
    return debit_side_total(balances, codes)


def evaluate_leaf(
    node: LineTemplate,
    side: StatementSide,
    current: Mapping[str, CodeBalance],
    prior: Mapping[str, CodeBalance],
) -> LineAmounts:
    """Compute one ``accounts`` row for both periods."""
    normal_balance = node.normal_balance or _default_balance(side)
    corrections = node.correction_account_codes if side == StatementSide.ASSETS else ()

    gross = _side_total(current, node.account_codes, normal_balance)
    correction = credit_side_total(current, corrections) if corrections else ZERO
    prior_gross = _side_total(prior, node.account_codes, normal_balance)
    prior_correction = credit_side_total(prior, corrections) if corrections else ZERO

    return LineAmounts(
        gross=round_money(gross),
        correction=round_money(correction),
        prior_net=round_money(prior_gross - prior_correction),
    )


def _combine(node: LineTemplate, rows: Mapping[int, LineAmounts]) -> LineAmounts:
    gross = correction = prior_net = ZERO
    for term in node.terms():
        amounts = rows[term.row_number]
        gross += term.sign * amounts.gross
        correction += term.sign * amounts.correction
        prior_net += term.sign * amounts.prior_net
    return LineAmounts(
        gross=round_money(gross),
        correction=round_money(correction),
        prior_net=round_money(prior_net),
    )


def _build_line(node: LineTemplate, rows: Mapping[int, LineAmounts]) -> ComputedLine:
    amounts = rows[node.row_number]
    return ComputedLine(
        label=node.label,
        name=node.name,
        row_number=node.row_number,
        gross=amounts.gross,
        correction=amounts.correction,
        net=amounts.net,
        prior_net=amounts.prior_net,
        account_codes=node.account_codes,
        children=tuple(_build_line(child, rows) for child in node.children),
        is_subtotal=node.is_subtotal,
        is_highlight=node.is_highlight,
    )


def evaluate_template(
    template: StatementTemplate,
    current: Mapping[str, CodeBalance],
    prior: Mapping[str, CodeBalance] | None = None,
    is_asset_side: bool | None = None,
) -> EvaluatedStatement:
    """
    Evaluate ``template`` against per-code balances.

    Args:
        template: A template produced by ``templates.load_template_from_dict``.
        current: Per-code balances of the current reporting window.
        prior: Per-code balances of the comparison window; ``None`` or an
            empty mapping yields zero prior values.
        is_asset_side: Overrides the template side.  True evaluates with
            the asset convention (debit side, corrections subtracted),
            False with the liability convention; None keeps
            ``template.side``.

    Returns:
        ``EvaluatedStatement`` with the computed tree (template order),
        a flat row map and the ``total`` line when the template has one.
    """
    prior = prior or {}
    nodes = template.node_by_row()
    side = template.side
    if is_asset_side is not None:
        side = StatementSide.ASSETS if is_asset_side else StatementSide.LIABILITIES

    rows: dict[int, LineAmounts] = {}
    for row_number, node in nodes.items():
        if node.mode == ComputationMode.ACCOUNTS:
            rows[row_number] = evaluate_leaf(node, side, current, prior)

    for row_number in template.evaluation_order:
        rows[row_number] = _combine(nodes[row_number], rows)

    return EvaluatedStatement(
        template_name=template.name,
        lines=tuple(_build_line(root, rows) for root in template.roots),
        rows=rows,
        total=_build_line(template.total, rows) if template.total is not None else None,
    )

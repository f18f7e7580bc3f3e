"""
Statement Domain Models (``statutory_modules.statements.models``).

Responsibility
--------------
Frozen dataclass value objects for the declarative line templates and for
the computed Balance Sheet (Súvaha, Úč 1-01) and Profit & Loss statement
(Výkaz ziskov a strát, Úč 2-01).

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``ComputedLine.net == gross - correction`` for every line.
* A ``LineTemplate`` has exactly one computation mode; the loader in
  ``templates.py`` rejects anything else.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from statutory_kernel.db.types import ZERO
from statutory_kernel.models.account import NormalBalance


class ComputationMode(str, Enum):
    """How a template row obtains its value."""

    ACCOUNTS = "accounts"  # ledger lookup by account code
    CHILDREN = "children"  # sum of nested child rows
    SUM_OF_ROWS = "sum_of_rows"  # sum of arbitrary rows by number
    FORMULA = "formula"  # signed sum of arbitrary rows by number


class StatementSide(str, Enum):
    """Which half of a statement a template describes."""

    ASSETS = "assets"
    LIABILITIES = "liabilities"
    PROFIT_AND_LOSS = "profit_and_loss"


# =========================================================================
# Templates
# =========================================================================


@dataclass(frozen=True)
class FormulaTerm:
    """One signed row reference in a composite formula."""

    sign: int  # +1 or -1
    row_number: int


@dataclass(frozen=True)
class LineTemplate:
    """A node of a statement template tree."""

    label: str
    name: str
    row_number: int
    account_codes: tuple[str, ...] = ()
    correction_account_codes: tuple[str, ...] = ()
    children: tuple[LineTemplate, ...] = ()
    sum_of_rows: tuple[int, ...] = ()
    formula: tuple[FormulaTerm, ...] = ()
    is_subtotal: bool = False
    is_highlight: bool = False
    normal_balance: NormalBalance | None = None

    @property
    def mode(self) -> ComputationMode:
        if self.children:
            return ComputationMode.CHILDREN
        if self.sum_of_rows:
            return ComputationMode.SUM_OF_ROWS
        if self.formula:
            return ComputationMode.FORMULA
        return ComputationMode.ACCOUNTS

    def terms(self) -> tuple[FormulaTerm, ...]:
        """Row references of a derived node as signed terms."""
        if self.children:
            return tuple(FormulaTerm(1, c.row_number) for c in self.children)
        if self.sum_of_rows:
            return tuple(FormulaTerm(1, r) for r in self.sum_of_rows)
        return self.formula

    def walk(self) -> Iterator[LineTemplate]:
        """Pre-order traversal of this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class StatementTemplate:
    """
    A validated statement template.

    ``evaluation_order`` lists the derived rows (children, sum_of_rows,
    formula) in dependency order; it is fixed at load time so evaluation
    never recurses through row references.
    """

    name: str
    side: StatementSide
    roots: tuple[LineTemplate, ...]
    total: LineTemplate | None
    evaluation_order: tuple[int, ...]

    def nodes(self) -> Iterator[LineTemplate]:
        for root in self.roots:
            yield from root.walk()
        if self.total is not None:
            yield self.total

    def node_by_row(self) -> dict[int, LineTemplate]:
        return {node.row_number: node for node in self.nodes()}


# =========================================================================
# Computed statements
# =========================================================================


@dataclass(frozen=True)
class LineAmounts:
    """Row values for both columns.  ``net`` is always gross - correction."""

    gross: Decimal = ZERO
    correction: Decimal = ZERO
    prior_net: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.gross - self.correction


@dataclass(frozen=True)
class ComputedLine:
    """A template row evaluated against ledger balances."""

    label: str
    name: str
    row_number: int
    gross: Decimal
    correction: Decimal
    net: Decimal
    prior_net: Decimal
    account_codes: tuple[str, ...] = ()
    children: tuple[ComputedLine, ...] = ()
    is_subtotal: bool = False
    is_highlight: bool = False

    @property
    def current(self) -> Decimal:
        """Current-period value (P&L column "bežné obdobie")."""
        return self.net

    @property
    def prior(self) -> Decimal:
        """Prior-period value (column "predchádzajúce obdobie")."""
        return self.prior_net

    def flatten(self) -> Iterator[ComputedLine]:
        """Pre-order traversal, the order rows are filed in."""
        yield self
        for child in self.children:
            yield from child.flatten()


@dataclass(frozen=True)
class EvaluatedStatement:
    """Output of the template engine for one statement half."""

    template_name: str
    lines: tuple[ComputedLine, ...]
    rows: Mapping[int, LineAmounts]
    total: ComputedLine | None = None

    def flatten(self) -> Iterator[ComputedLine]:
        for line in self.lines:
            yield from line.flatten()


@dataclass(frozen=True)
class PeriodValues:
    """A (current, prior) pair."""

    current: Decimal = ZERO
    prior: Decimal = ZERO


@dataclass(frozen=True)
class AssetTotals:
    gross: Decimal = ZERO
    correction: Decimal = ZERO
    net: Decimal = ZERO
    prior_net: Decimal = ZERO


@dataclass(frozen=True)
class LiabilityTotals:
    net: Decimal = ZERO
    prior_net: Decimal = ZERO


@dataclass(frozen=True)
class BalanceSheetData:
    """Computed Súvaha with dual-period totals and the balance check."""

    assets: tuple[ComputedLine, ...]
    liabilities: tuple[ComputedLine, ...]
    assets_total: AssetTotals
    liabilities_total: LiabilityTotals
    is_balanced: bool
    difference: Decimal  # assets net - liabilities net
    fiscal_year: int
    date_to: date
    generated_at: str
    prior_date_to: date | None = None
    company_id: UUID | None = None


@dataclass(frozen=True)
class ProfitLossData:
    """Computed Výkaz ziskov a strát with its eight composite results."""

    lines: tuple[ComputedLine, ...]
    trading_margin: PeriodValues
    value_added: PeriodValues
    operating_result: PeriodValues
    financial_result: PeriodValues
    pretax_result: PeriodValues
    posttax_result: PeriodValues
    extraordinary_result: PeriodValues
    period_result: PeriodValues
    fiscal_year: int
    date_from: date
    date_to: date
    generated_at: str
    prior_date_from: date | None = None
    prior_date_to: date | None = None
    company_id: UUID | None = None
    row_values: Mapping[int, PeriodValues] = field(default_factory=dict)

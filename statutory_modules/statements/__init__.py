"""
Statutory Statements Module (``statutory_modules.statements``).

Responsibility
--------------
Read-only module that evaluates the Slovak statutory statement templates
against the ledger: the Balance Sheet (Súvaha, Úč 1-01) and the Profit &
Loss statement (Výkaz ziskov a strát, Úč 2-01).

Architecture position
---------------------
**Modules layer** -- declarative YAML templates, a pure template engine,
pure statement builders and one read-only service.

Invariants enforced
-------------------
* No journal entries are created by this module.
* Statements derive entirely from posted journal lines; nothing is
  stored between requests.

Failure modes
-------------
* Malformed template -> ``TemplateError`` subclass at load time.
* Unknown fiscal year -> ``FiscalYearNotFoundError``.
"""

from statutory_modules.statements.balance_sheet import build_balance_sheet
from statutory_modules.statements.config import StatementsConfig
from statutory_modules.statements.engine import evaluate_template
from statutory_modules.statements.models import (
    AssetTotals,
    BalanceSheetData,
    ComputationMode,
    ComputedLine,
    EvaluatedStatement,
    FormulaTerm,
    LiabilityTotals,
    LineAmounts,
    LineTemplate,
    PeriodValues,
    ProfitLossData,
    StatementSide,
    StatementTemplate,
)
from statutory_modules.statements.profit_loss import COMPOSITE_ROWS, build_profit_loss
from statutory_modules.statements.service import StatementsService
from statutory_modules.statements.templates import (
    load_statement_template,
    load_template_from_dict,
)

__all__ = [
    "AssetTotals",
    "BalanceSheetData",
    "COMPOSITE_ROWS",
    "ComputationMode",
    "ComputedLine",
    "EvaluatedStatement",
    "FormulaTerm",
    "LiabilityTotals",
    "LineAmounts",
    "LineTemplate",
    "PeriodValues",
    "ProfitLossData",
    "StatementSide",
    "StatementTemplate",
    "StatementsConfig",
    "StatementsService",
    "build_balance_sheet",
    "build_profit_loss",
    "evaluate_template",
    "load_statement_template",
    "load_template_from_dict",
]

"""
Statement Template Loader (``statutory_modules.statements.templates``).

Responsibility
--------------
Loads the declarative Úč 1-01 / Úč 2-01 line templates from YAML and
turns them into validated ``StatementTemplate`` trees.  All structural
checks happen here, once, so the evaluation engine can assume a sound
template.

Architecture position
---------------------
**Modules layer** -- template tooling.  Reads packaged YAML files; has no
database access.

Invariants enforced
-------------------
* Every node has exactly one computation mode: ``accounts``,
  ``children``, ``sum_of_rows`` or ``formula``.
* Row numbers are unique within a template (the ``total`` node included).
* Every ``sum_of_rows`` / ``formula`` reference names an existing row.
* Derived rows form a DAG; ``evaluation_order`` is a topological order of
  them, ties broken by pre-order position.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Structural defects -> ``MalformedTemplateError``,
  ``DuplicateRowNumberError``, ``UnresolvedRowReferenceError``,
  ``TemplateCycleError``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from statutory_kernel.exceptions import (
    DuplicateRowNumberError,
    MalformedTemplateError,
    TemplateCycleError,
    UnresolvedRowReferenceError,
)
from statutory_kernel.logging_config import get_logger
from statutory_kernel.models.account import NormalBalance
from statutory_modules.statements.models import (
    ComputationMode,
    FormulaTerm,
    LineTemplate,
    StatementSide,
    StatementTemplate,
)

logger = get_logger("modules.statements.templates")

TEMPLATE_DIR = Path(__file__).parent / "definitions"

_TERM_RE = re.compile(r"\s*([+-]?)\s*r(\d+)\s*")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; an empty file yields an empty dict."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_formula(template: str, row_number: int, expression: str) -> tuple[FormulaTerm, ...]:
    """
    Parse ``"r11 - r12 + r21"`` into signed terms.

    The first term may omit its sign; every later term must carry one.
    """
    terms: list[FormulaTerm] = []
    pos = 0
    while pos < len(expression):
        match = _TERM_RE.match(expression, pos)
        if match is None or (terms and not match.group(1)):
            raise MalformedTemplateError(
                template, row_number, f"cannot parse formula {expression!r}"
            )
        sign = -1 if match.group(1) == "-" else 1
        terms.append(FormulaTerm(sign=sign, row_number=int(match.group(2))))
        pos = match.end()
    if not terms:
        raise MalformedTemplateError(template, row_number, "empty formula")
    return tuple(terms)


def _parse_codes(template: str, row_number: int, raw: Any) -> tuple[str, ...]:
    codes = tuple(raw or ())
    for code in codes:
        # Unquoted YAML numbers lose leading zeros ("012" -> 10)
        if not isinstance(code, str):
            raise MalformedTemplateError(
                template, row_number, f"account code {code!r} must be a quoted string"
            )
    return codes


def parse_line(template: str, data: dict[str, Any]) -> LineTemplate:
    """Parse one template node (recursively) from its YAML mapping."""
    row_number = data.get("row")
    for key in ("row", "name"):
        if key not in data:
            raise MalformedTemplateError(template, row_number, f"missing key {key!r}")
    if not isinstance(row_number, int):
        raise MalformedTemplateError(template, None, f"row {row_number!r} is not an integer")

    accounts = _parse_codes(template, row_number, data.get("accounts"))
    corrections = _parse_codes(template, row_number, data.get("corrections"))
    children = tuple(parse_line(template, child) for child in data.get("children") or ())
    sum_of_rows = tuple(int(r) for r in data.get("sum_of_rows") or ())
    formula = (
        parse_formula(template, row_number, data["formula"]) if data.get("formula") else ()
    )

    modes = [
        mode
        for mode, present in (
            (ComputationMode.ACCOUNTS, bool(accounts)),
            (ComputationMode.CHILDREN, bool(children)),
            (ComputationMode.SUM_OF_ROWS, bool(sum_of_rows)),
            (ComputationMode.FORMULA, bool(formula)),
        )
        if present
    ]
    if len(modes) != 1:
        found = ", ".join(m.value for m in modes) or "none"
        raise MalformedTemplateError(
            template, row_number, f"expected exactly one computation mode, found {found}"
        )
    if corrections and not accounts:
        raise MalformedTemplateError(
            template, row_number, "corrections are only allowed on account rows"
        )

    balance = data.get("balance")
    return LineTemplate(
        label=str(data.get("label", "")),
        name=data["name"],
        row_number=row_number,
        account_codes=accounts,
        correction_account_codes=corrections,
        children=children,
        sum_of_rows=sum_of_rows,
        formula=formula,
        is_subtotal=bool(data.get("subtotal", False)),
        is_highlight=bool(data.get("highlight", False)),
        normal_balance=NormalBalance(balance) if balance else None,
    )


def _evaluation_order(
    template: str,
    nodes: list[LineTemplate],
) -> tuple[int, ...]:
    """Topologically order the derived rows; raise on cycles."""
    derived = {
        node.row_number: node for node in nodes if node.mode != ComputationMode.ACCOUNTS
    }
    order: list[int] = []
    done: set[int] = set()
    in_progress: list[int] = []

    def visit(row: int) -> None:
        if row in done or row not in derived:
            return
        if row in in_progress:
            cycle = in_progress[in_progress.index(row):]
            raise TemplateCycleError(template, sorted(cycle))
        in_progress.append(row)
        for term in derived[row].terms():
            visit(term.row_number)
        in_progress.pop()
        done.add(row)
        order.append(row)

    for node in nodes:
        visit(node.row_number)
    return tuple(order)


def load_template_from_dict(data: dict[str, Any]) -> StatementTemplate:
    """
    Build and validate a ``StatementTemplate`` from parsed YAML.

    Raises:
        MalformedTemplateError: missing keys or a node without exactly
            one computation mode.
        DuplicateRowNumberError: a row number is declared twice.
        UnresolvedRowReferenceError: a reference to an unknown row.
        TemplateCycleError: derived rows reference each other in a loop.
    """
    name = data.get("name")
    if not name:
        raise MalformedTemplateError("<unnamed>", None, "missing key 'name'")
    if "side" not in data or not data.get("lines"):
        raise MalformedTemplateError(name, None, "a template needs 'side' and 'lines'")

    roots = tuple(parse_line(name, line) for line in data["lines"])
    total = parse_line(name, data["total"]) if data.get("total") else None

    nodes = [node for root in roots for node in root.walk()]
    if total is not None:
        nodes.append(total)

    seen: set[int] = set()
    for node in nodes:
        if node.row_number in seen:
            raise DuplicateRowNumberError(name, node.row_number)
        seen.add(node.row_number)

    for node in nodes:
        if node.mode in (ComputationMode.SUM_OF_ROWS, ComputationMode.FORMULA):
            for term in node.terms():
                if term.row_number not in seen:
                    raise UnresolvedRowReferenceError(name, node.row_number, term.row_number)

    return StatementTemplate(
        name=name,
        side=StatementSide(data["side"]),
        roots=roots,
        total=total,
        evaluation_order=_evaluation_order(name, nodes),
    )


@lru_cache(maxsize=None)
def load_statement_template(name: str) -> StatementTemplate:
    """Load a packaged template by name (``balance_sheet_assets`` ...)."""
    path = TEMPLATE_DIR / f"{name}.yaml"
    template = load_template_from_dict(load_yaml_file(path))
    logger.debug(
        "statement_template_loaded",
        extra={
            "template": template.name,
            "rows": len(template.node_by_row()),
            "derived_rows": len(template.evaluation_order),
        },
    )
    return template

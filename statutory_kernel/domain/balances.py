"""
Ledger aggregation -- pure core of the Ledger Aggregator.

Responsibility:
    Folds posted ledger lines into per-synthetic-code debit/credit totals
    and answers "what is the balance of these template codes" questions for
    the statement templates.

Architecture position:
    Kernel > Domain -- ZERO I/O.  The LedgerSelector feeds it the two
    collaborator reads (posted lines, chart of accounts); the statement
    engine consumes its output.

Invariants enforced:
    - A balance code matches a template code by equality or prefix.
    - Totals are raw sums; rounding happens in the consumers, once per
      report row.
    - Lines whose account is absent from the chart (soft-deleted or foreign)
      are skipped, never guessed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from statutory_kernel.db.types import ZERO


@dataclass(frozen=True)
class PostedLine:
    """A posted journal line folded to debit/credit columns."""

    account_id: UUID
    entry_date: date
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO


@dataclass(frozen=True)
class AccountRef:
    """Chart of accounts entry: id to synthetic code."""

    account_id: UUID
    code: str


@dataclass(frozen=True)
class CodeBalance:
    """Debit and credit totals of one account code over a window."""

    code: str
    debit_total: Decimal = ZERO
    credit_total: Decimal = ZERO

    @property
    def net_debit(self) -> Decimal:
        """Debit-side balance (assets, expenses)."""
        return self.debit_total - self.credit_total

    @property
    def net_credit(self) -> Decimal:
        """Credit-side balance (liabilities, equity, revenue)."""
        return self.credit_total - self.debit_total


def aggregate_by_code(
    lines: Iterable[PostedLine],
    accounts: Iterable[AccountRef],
) -> dict[str, CodeBalance]:
    """
    Accumulate debit/credit totals per account code.

    Empty input yields an empty mapping.
    """
    code_by_account = {a.account_id: a.code for a in accounts}
    debits: dict[str, Decimal] = {}
    credits: dict[str, Decimal] = {}

    for line in lines:
        code = code_by_account.get(line.account_id)
        if code is None:
            continue
        debits[code] = debits.get(code, ZERO) + line.debit_amount
        credits[code] = credits.get(code, ZERO) + line.credit_amount

    return {
        code: CodeBalance(code=code, debit_total=debits[code], credit_total=credits[code])
        for code in debits
    }


def code_matches(balance_code: str, template_code: str) -> bool:
    """True when ``balance_code`` is ``template_code`` or one of its analytics."""
    return balance_code == template_code or balance_code.startswith(template_code)


def debit_side_total(
    balances: Mapping[str, CodeBalance],
    template_codes: Iterable[str],
) -> Decimal:
    """Sum of debit-minus-credit over every balance matching any template code."""
    total = ZERO
    for template_code in template_codes:
        for balance in balances.values():
            if code_matches(balance.code, template_code):
                total += balance.net_debit
    return total


def credit_side_total(
    balances: Mapping[str, CodeBalance],
    template_codes: Iterable[str],
) -> Decimal:
    """Sum of credit-minus-debit over every balance matching any template code."""
    return -debit_side_total(balances, template_codes)

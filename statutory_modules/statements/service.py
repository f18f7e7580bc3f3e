"""
Statements Module Service (``statutory_modules.statements.service``).

Responsibility
--------------
Orchestrates Balance Sheet (Úč 1-01) and Profit & Loss (Úč 2-01)
generation by bridging the kernel selectors (``FiscalYearSelector``,
``LedgerSelector``) to the pure builders in ``balance_sheet.py`` and
``profit_loss.py``.  This is a **read-only** service.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config`` and an optional ``session_factory`` for concurrent reads.

Invariants enforced
-------------------
* Read-only -- nothing is written to the ledger.
* The current and prior aggregations are independent reads over disjoint
  windows; with a session factory they run on two worker threads, each on
  its own session.
* A missing prior fiscal year is a soft condition: prior values are zero.

Failure modes
-------------
* Unknown fiscal year  -> ``FiscalYearNotFoundError``.
* ``date_from`` after ``date_to``  -> ``InvalidPeriodError``.
* Selector query failure  -> SQLAlchemy exception propagates, not retried.
* Imbalance  -> flagged on the result and logged at WARNING, never raised.

Audit relevance
---------------
Every statement carries its generation timestamp from the injected clock
and the windows it was computed over; every calculation emits a
structured log event.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from statutory_kernel.domain.balances import CodeBalance
from statutory_kernel.domain.clock import Clock, SystemClock
from statutory_kernel.exceptions import FiscalYearNotFoundError, InvalidPeriodError
from statutory_kernel.logging_config import LogContext, get_logger
from statutory_kernel.selectors.fiscal_year_selector import (
    FiscalYearInfo,
    FiscalYearSelector,
)
from statutory_kernel.selectors.ledger_selector import LedgerSelector
from statutory_modules.statements.balance_sheet import build_balance_sheet
from statutory_modules.statements.config import StatementsConfig
from statutory_modules.statements.models import BalanceSheetData, ProfitLossData
from statutory_modules.statements.profit_loss import build_profit_loss
from statutory_modules.statements.templates import load_statement_template

logger = get_logger("modules.statements.service")

# (date_from, date_to); date_from None means an as-of read
Window = tuple[date | None, date]


class StatementsService:
    """
    Statutory financial statement service.

    Contract
    --------
    * ``calculate_balance_sheet`` returns ``BalanceSheetData``.
    * ``calculate_profit_loss`` returns ``ProfitLossData``.

    Guarantees
    ----------
    * Financial logic lives in the pure builders; this class only loads
      inputs and picks the reporting windows.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT persist the computed statements.
    * Does NOT retry failed reads.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: StatementsConfig | None = None,
        session_factory: Callable[[], Session] | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or StatementsConfig.with_defaults()
        self._session_factory = session_factory
        self._fiscal_years = FiscalYearSelector(session)

        logger.info(
            "statements_service_initialized",
            extra={
                "parallel_reads": self._parallel_reads,
                "balance_tolerance": str(self._config.balance_tolerance),
            },
        )

    @property
    def _parallel_reads(self) -> bool:
        return self._session_factory is not None and self._config.parallel_reads

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _get_fiscal_year(self, company_id: UUID, fiscal_year_id: UUID) -> FiscalYearInfo:
        fiscal_year = self._fiscal_years.get(company_id, fiscal_year_id)
        if fiscal_year is None:
            raise FiscalYearNotFoundError(str(company_id), str(fiscal_year_id))
        return fiscal_year

    def _prior_fiscal_year(self, fiscal_year: FiscalYearInfo) -> FiscalYearInfo | None:
        prior = self._fiscal_years.by_year(fiscal_year.company_id, fiscal_year.year - 1)
        if prior is None:
            logger.info(
                "prior_fiscal_year_missing",
                extra={
                    "company_id": str(fiscal_year.company_id),
                    "year": fiscal_year.year - 1,
                },
            )
        return prior

    def _aggregate_in_own_session(self, company_id: UUID, window: Window) -> dict[str, CodeBalance]:
        session = self._session_factory()
        try:
            return LedgerSelector(session).code_balances(company_id, *window)
        finally:
            session.close()

    def _read_balances(
        self,
        company_id: UUID,
        current_window: Window,
        prior_window: Window | None,
    ) -> tuple[dict[str, CodeBalance], dict[str, CodeBalance]]:
        """Aggregate the current and (optional) prior windows."""
        if prior_window is None:
            current = LedgerSelector(self._session).code_balances(company_id, *current_window)
            return current, {}

        if not self._parallel_reads:
            ledger = LedgerSelector(self._session)
            return (
                ledger.code_balances(company_id, *current_window),
                ledger.code_balances(company_id, *prior_window),
            )

        with ThreadPoolExecutor(max_workers=2) as executor:
            current_future = executor.submit(
                self._aggregate_in_own_session, company_id, current_window,
            )
            prior_future = executor.submit(
                self._aggregate_in_own_session, company_id, prior_window,
            )
            return current_future.result(), prior_future.result()

    # =========================================================================
    # Public API
    # =========================================================================

    def calculate_balance_sheet(
        self,
        company_id: UUID,
        fiscal_year_id: UUID,
        date_to: date | None = None,
    ) -> BalanceSheetData:
        """
        Compute the Súvaha as of ``date_to``.

        Args:
            company_id: Reporting company.
            fiscal_year_id: Fiscal year the statement belongs to.
            date_to: Snapshot date; defaults to the fiscal year end.

        Returns:
            BalanceSheetData; the comparison column is the snapshot at the
            prior fiscal year's end date, or zero when there is none.

        Raises:
            FiscalYearNotFoundError: fiscal year unknown for the company.
        """
        fiscal_year = self._get_fiscal_year(company_id, fiscal_year_id)
        effective_date_to = date_to or fiscal_year.end_date
        prior_fy = self._prior_fiscal_year(fiscal_year)
        prior_window = (None, prior_fy.end_date) if prior_fy is not None else None

        with LogContext.bind(
            company_id=str(company_id),
            report_type="balance_sheet",
            fiscal_year=str(fiscal_year.year),
        ):
            current, prior = self._read_balances(
                company_id, (None, effective_date_to), prior_window,
            )
            data = build_balance_sheet(
                load_statement_template(self._config.assets_template),
                load_statement_template(self._config.liabilities_template),
                current,
                prior,
                fiscal_year=fiscal_year.year,
                date_to=effective_date_to,
                generated_at=self._clock.now().isoformat(),
                prior_date_to=prior_fy.end_date if prior_fy is not None else None,
                company_id=company_id,
                tolerance=self._config.balance_tolerance,
            )

            if not data.is_balanced:
                logger.warning(
                    "balance_sheet_imbalance",
                    extra={
                        "assets_net": str(data.assets_total.net),
                        "liabilities_net": str(data.liabilities_total.net),
                        "difference": str(data.difference),
                    },
                )
            logger.info(
                "balance_sheet_calculated",
                extra={
                    "date_to": effective_date_to.isoformat(),
                    "assets_net": str(data.assets_total.net),
                    "liabilities_net": str(data.liabilities_total.net),
                    "is_balanced": data.is_balanced,
                    "code_count": len(current),
                },
            )
        return data

    def calculate_profit_loss(
        self,
        company_id: UUID,
        fiscal_year_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> ProfitLossData:
        """
        Compute the Výkaz ziskov a strát for a window of the fiscal year.

        Args:
            company_id: Reporting company.
            fiscal_year_id: Fiscal year the statement belongs to.
            date_from: Window start; defaults to the fiscal year start.
            date_to: Window end; defaults to the fiscal year end.

        Returns:
            ProfitLossData; the comparison column covers the whole prior
            fiscal year, or is zero when there is none.

        Raises:
            FiscalYearNotFoundError: fiscal year unknown for the company.
            InvalidPeriodError: the window is inverted.
        """
        fiscal_year = self._get_fiscal_year(company_id, fiscal_year_id)
        effective_from = date_from or fiscal_year.start_date
        effective_to = date_to or fiscal_year.end_date
        if effective_from > effective_to:
            raise InvalidPeriodError(effective_from.isoformat(), effective_to.isoformat())

        prior_fy = self._prior_fiscal_year(fiscal_year)
        prior_window = (
            (prior_fy.start_date, prior_fy.end_date) if prior_fy is not None else None
        )

        with LogContext.bind(
            company_id=str(company_id),
            report_type="profit_loss",
            fiscal_year=str(fiscal_year.year),
        ):
            current, prior = self._read_balances(
                company_id, (effective_from, effective_to), prior_window,
            )
            data = build_profit_loss(
                load_statement_template(self._config.profit_loss_template),
                current,
                prior,
                fiscal_year=fiscal_year.year,
                date_from=effective_from,
                date_to=effective_to,
                generated_at=self._clock.now().isoformat(),
                prior_date_from=prior_fy.start_date if prior_fy is not None else None,
                prior_date_to=prior_fy.end_date if prior_fy is not None else None,
                company_id=company_id,
            )

            logger.info(
                "profit_loss_calculated",
                extra={
                    "date_from": effective_from.isoformat(),
                    "date_to": effective_to.isoformat(),
                    "period_result": str(data.period_result.current),
                    "code_count": len(current),
                },
            )
        return data

"""
Statements Configuration Schema.

Names the packaged line templates and the balance-check tolerance.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Self

from statutory_kernel.logging_config import get_logger

logger = get_logger("modules.statements.config")


@dataclass
class StatementsConfig:
    """
    Configuration schema for the statements module.

    Template names refer to YAML files shipped in
    ``statutory_modules/statements/definitions``.
    """

    assets_template: str = "balance_sheet_assets"
    liabilities_template: str = "balance_sheet_liabilities"
    profit_loss_template: str = "profit_and_loss"

    # |assets net - liabilities net| below this counts as balanced
    balance_tolerance: Decimal = Decimal("0.01")

    # Run current and prior aggregations on separate sessions when the
    # service has a session factory
    parallel_reads: bool = True

    def __post_init__(self):
        if not isinstance(self.balance_tolerance, Decimal):
            self.balance_tolerance = Decimal(str(self.balance_tolerance))
        if self.balance_tolerance < 0:
            raise ValueError("balance_tolerance cannot be negative")
        for name in (self.assets_template, self.liabilities_template, self.profit_loss_template):
            if not name:
                raise ValueError("template names cannot be empty")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("statements_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary."""
        logger.info(
            "statements_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

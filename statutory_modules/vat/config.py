"""
VAT Configuration Schema.

Thresholds and tolerances of the Slovak VAT return (DPH), the control
report (KV DPH), the 343 cross-check and the filing calendar.  Defaults
follow the current Slovak rules; override per company at instantiation.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self

from statutory_kernel.logging_config import get_logger

logger = get_logger("modules.vat.config")

VALID_FILING_FREQUENCIES = {"monthly", "quarterly"}

_DECIMAL_FIELDS = (
    "large_vat_threshold",
    "simplified_invoice_limit",
    "crosscheck_tolerance",
)


@dataclass
class VatConfig:
    """
    Configuration schema for the VAT module.

        config = VatConfig(filing_frequency="quarterly")
    """

    # Control report routing
    large_vat_threshold: Decimal = Decimal("5000")  # A1 / B1 at or above
    simplified_invoice_limit: Decimal = Decimal("1000")  # B3 at or below

    # Cross-checks
    crosscheck_tolerance: Decimal = Decimal("0.02")
    vat_account_code: str = "343"

    # Filing calendar
    filing_frequency: str = "monthly"
    filing_day: int = 25
    warning_days: int = 7
    urgent_days: int = 3
    overdue_grace_days: int = 30

    def __post_init__(self):
        for name in _DECIMAL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                setattr(self, name, Decimal(str(value)))
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

        if not self.vat_account_code:
            raise ValueError("vat_account_code cannot be empty")

        if self.filing_frequency not in VALID_FILING_FREQUENCIES:
            raise ValueError(
                f"filing_frequency must be one of {VALID_FILING_FREQUENCIES}, "
                f"got '{self.filing_frequency}'"
            )

        if not 1 <= self.filing_day <= 28:
            raise ValueError("filing_day must be between 1 and 28")

        if self.urgent_days < 0 or self.warning_days < self.urgent_days:
            raise ValueError("expected 0 <= urgent_days <= warning_days")

        if self.overdue_grace_days < 0:
            raise ValueError("overdue_grace_days cannot be negative")

        logger.info(
            "vat_config_initialized",
            extra={
                "large_vat_threshold": str(self.large_vat_threshold),
                "simplified_invoice_limit": str(self.simplified_invoice_limit),
                "filing_frequency": self.filing_frequency,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the statutory defaults."""
        logger.info("vat_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary (e.g., loaded from database/file)."""
        logger.info(
            "vat_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

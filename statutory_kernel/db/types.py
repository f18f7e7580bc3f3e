"""
Module: statutory_kernel.db.types
Responsibility: Annotated column type aliases and the single sanctioned
    rounding function for monetary values.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    selectors/ and the module layer.

Invariants enforced:
    - No floats anywhere.  All monetary amounts use Decimal.
    - round_money() is the ONLY rounding function for reported figures and
      is applied only at aggregation boundaries (after summing raw ledger
      amounts, after summing VAT buckets), never per line item.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric, String

# Monetary amount: 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

# Synthetic account code ("343", "021", "3430100")
AccountCode = Annotated[str, String(20)]

# Short identifier strings
ShortCode = Annotated[str, String(50)]

REPORT_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def round_money(
    value: Decimal,
    decimal_places: int = REPORT_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the reported precision.

    Preconditions: value is a Decimal (never float).
    Postconditions: Returns a Decimal with exactly ``decimal_places``
        fractional digits, rounded half-up.
    """
    quantizer = Decimal(1).scaleb(-decimal_places)
    return value.quantize(quantizer, rounding=rounding)


def to_decimal(value: object) -> Decimal:
    """
    Coerce a stored or user-supplied number to Decimal.

    None becomes zero.  Floats are converted through ``str`` so that
    ``0.1`` stays ``Decimal("0.1")``.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)

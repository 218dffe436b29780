"""
Money Handling

All amounts are held as integer minor units (pence/cents) so that sums
never drift the way binary floats do.

DESIGN DECISION: "not a number" and "not a positive number" are two
different failures. A record with Amount "abc" and a record with Amount
"0.00" are both rejected, but for different reasons, and the audit trail
must be able to tell them apart. Zero-value transactions are not permitted.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from supportbank.errors import SupportBankError


MINOR_UNITS_PER_MAJOR = 100

AmountInput = Union[str, int, float, Decimal, None]


class AmountError(SupportBankError):
    """Base exception for amount conversion."""

    def __init__(self, value: AmountInput, message: str):
        self.value = value
        super().__init__(message)


class AmountParseError(AmountError):
    """The value is not a finite decimal number."""
    pass


class NonPositiveAmountError(AmountError):
    """The value is a number, but rounds to zero or less."""

    def __init__(self, value: AmountInput, minor_units: int):
        self.minor_units = minor_units
        super().__init__(
            value,
            f"Amount must be greater than zero, got {value!r}"
        )


def to_decimal(value: AmountInput) -> Decimal:
    """
    Convert raw input to a finite Decimal.

    Floats go through their repr so 10.1 stays 10.1 rather than
    10.0999999999999996447286321199499070644378662109375.
    """
    if value is None or isinstance(value, bool):
        raise AmountParseError(value, f"Amount is not a number: {value!r}")

    if isinstance(value, float):
        value = repr(value)

    try:
        number = Decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, ValueError, TypeError):
        raise AmountParseError(value, f"Amount is not a number: {value!r}")

    if not number.is_finite():
        raise AmountParseError(value, f"Amount is not a number: {value!r}")

    return number


def parse_amount(value: AmountInput) -> int:
    """
    Parse an amount into minor units.

    Rounds round(100 x value) half away from zero.

    Raises:
        AmountParseError: value is not a finite number
        NonPositiveAmountError: value rounds to zero or less
    """
    number = to_decimal(value)
    minor = int(
        (number * MINOR_UNITS_PER_MAJOR).to_integral_value(rounding=ROUND_HALF_UP)
    )
    if minor <= 0:
        raise NonPositiveAmountError(value, minor)
    return minor


def format_amount(minor_units: int) -> str:
    """Render minor units as a 2-decimal string, e.g. 1050 -> '10.50'."""
    sign = "-" if minor_units < 0 else ""
    major, minor = divmod(abs(minor_units), MINOR_UNITS_PER_MAJOR)
    return f"{sign}{major}.{minor:02d}"

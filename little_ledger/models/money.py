"""
Money Helpers

Money is an integer count of minor units (cents). Every stored and
computed balance stays an int, so there is no floating-point drift.

DESIGN DECISION: Conversion from a decimal amount rounds to the nearest
cent, ties away from zero. Truncation would silently lose a cent on
inputs like 19.999999.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union


Money = int

CENTS_PER_UNIT = 100
_CENT = Decimal("0.01")

DecimalLike = Union[Decimal, int, float, str]


class InvalidAmount(ValueError):
    """Amount is negative or not a number."""
    pass


def from_decimal(value: DecimalLike) -> Money:
    """
    Convert a decimal amount to integer cents.

    Floats go through their shortest repr, so 19.99 stays 19.99
    instead of 19.989999999999998436805981327779591083526611328125.

    Raises:
        InvalidAmount: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"Not an amount: {value!r}")
    try:
        if isinstance(value, float):
            amount = Decimal(repr(value))
        else:
            amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmount(f"Not an amount: {value!r}")

    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite: {value!r}")

    # Precision must cover every integer digit plus the two cent places.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 8)
        try:
            rounded = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
            return int(rounded * CENTS_PER_UNIT)
        except InvalidOperation:
            raise InvalidAmount(f"Amount out of range: {value!r}")


def to_decimal(money: Money) -> Decimal:
    """Convert integer cents to a two-place Decimal for display."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(str(abs(money))) + 4)
        return Decimal(money).scaleb(-2)


def format_money(money: Money, symbol: str = "$", width: int = 0) -> str:
    """
    Render cents as a currency string, e.g. -$1,234.50.

    The result is right-aligned to `width` characters.
    """
    sign = "-" if money < 0 else ""
    text = f"{sign}{symbol}{to_decimal(abs(money)):,.2f}"
    return text.rjust(width)

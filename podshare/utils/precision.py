"""
Precision helpers for co-efficient/exponent number encoding.

Prices and volumes travel as (co, exp) integer pairs with value co * 10**exp,
so no precision is lost between the trader and the matching network.
"""

from decimal import Decimal, InvalidOperation
from typing import Tuple, Union


def to_co_exp(value: Union[str, int, Decimal]) -> Tuple[int, int]:
    """
    Split a decimal number into (co, exp).

    Trailing zeros are folded into the exponent only when they sit after
    the decimal point, so "100" stays (100, 0) and "1.50" becomes (15, -1).

    Args:
        value: Decimal string, integer or Decimal

    Returns:
        (co, exp) with value == co * 10**exp
    """
    try:
        dec = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except InvalidOperation:
        raise ValueError(f"not a decimal number: {value!r}")
    if not dec.is_finite():
        raise ValueError(f"number must be finite, got {value!r}")

    sign, digits, exp = dec.as_tuple()
    co = int("".join(map(str, digits)) or "0")
    while exp < 0 and co != 0 and co % 10 == 0:
        co //= 10
        exp += 1
    if co == 0:
        exp = 0
    return (-co if sign else co), exp


def from_co_exp(co: int, exp: int) -> Decimal:
    """Rebuild the exact decimal value of a (co, exp) pair."""
    return Decimal(co).scaleb(exp)


def format_co_exp(co: int, exp: int) -> str:
    """
    Format a (co, exp) pair as a plain decimal string.

    Returns:
        String without exponent notation, e.g. (15, -1) -> "1.5"
    """
    dec = from_co_exp(co, exp)
    text = f"{dec:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text

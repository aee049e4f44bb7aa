"""Utilities: co-efficient/exponent precision helpers."""

from podshare.utils.precision import format_co_exp, from_co_exp, to_co_exp

__all__ = [
    "to_co_exp",
    "from_co_exp",
    "format_co_exp",
]

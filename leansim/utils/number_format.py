"""
Number rendering shared by the recommendation messages and the CLI reports.

Amounts follow the es-ES convention used by the web front end: no decimals,
``.`` as thousands separator, and no grouping for four-digit numbers
(``1000`` but ``10.000``). Rounding is half away from zero.

``format_fixed`` matches JavaScript's ``Number.prototype.toFixed``: it rounds
the exact binary value, so ``12.5`` gives ``13`` where Python's ``:.0f``
(ties to even) gives ``12``.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal

# Enough digits for any finite float, which tops out around 1.8e308.
_EXACT = Context(prec=400)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP, context=_EXACT))


def format_fixed(value: float, decimals: int = 0) -> str:
    """Render ``value`` with exactly ``decimals`` places, halves away from zero.

    >>> format_fixed(12.5)
    '13'
    >>> format_fixed(5.0, 1)
    '5.0'
    """
    if math.isnan(value):
        return "0"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_EXACT)
    return format(rounded, "f")


def format_amount(value: float) -> str:
    """Render ``value`` as a whole-number amount without currency symbol.

    >>> format_amount(1250.4)
    '1250'
    >>> format_amount(-12500)
    '-12.500'
    """
    if math.isnan(value):
        return "0"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"

    rounded = round_half_up(abs(value))
    digits = str(rounded)
    if len(digits) > 4:
        digits = f"{rounded:,}".replace(",", ".")
    return f"-{digits}" if value < 0 and rounded != 0 else digits


def format_euro(value: float) -> str:
    """Render ``value`` as euros with the symbol after the number (``1.250€``)."""
    return f"{format_amount(value)}€"


def format_quantity(value: float) -> str:
    """Render a count or month figure as given; integral values without decimals."""
    if not math.isfinite(value):
        return "∞"
    if value == int(value):
        return str(int(value))
    return repr(float(value))

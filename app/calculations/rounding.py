"""
Rounding Helpers

Monetary values are reported to two decimal places with halves rounded away
from zero (Python's built-in round() uses banker's rounding, which would
report 1.005 as 1.0).
"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

# Enough digits to quantize any finite float (max ~1.8e308) to a few places
ROUNDING_PRECISION = 400


def round_money(value: float, places: int = 2) -> float:
    """
    Round a value half-away-from-zero to a fixed number of decimal places.

    Non-finite values (inf, nan) are returned unchanged.

    Args:
        value: Number to round
        places: Decimal places to keep (default 2)

    Returns:
        Rounded value as float
    """
    if not math.isfinite(value):
        return value

    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = ROUNDING_PRECISION
        # repr() gives the shortest string that round-trips, so 1.005 stays 1.005
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percent_of(part: float, whole: float) -> float:
    """Return part as a percentage of whole, or 0 when whole is 0."""
    if whole == 0:
        return 0.0
    return part / whole * 100

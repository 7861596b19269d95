"""
Dose arithmetic.

All doses are in units per day (one unit = one whole tablet). Rounding is
round-half-up on the exact binary value of the float, which keeps results
stable regardless of how the platform's round() treats ties.
"""

from decimal import ROUND_HALF_UP, Decimal

DOSE_DECIMALS = 3


def round_to(value: float, places: int) -> float:
    """Round a float half-up to a fixed number of decimal places."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round3(value: float) -> float:
    """Round a dose to the engine's fixed 3-decimal precision."""
    return round_to(value, DOSE_DECIMALS)


def to_fixed(value: float, places: int) -> str:
    """Format a number with a fixed number of decimals (half-up)."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Format a bound for messages: integers without a trailing .0."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def units_to_milligrams(units: float, unit_strength_mg: float) -> float:
    """
    Convert a dose in units to milligrams.

    Args:
        units: Dose in units (tablets)
        unit_strength_mg: Strength of one whole unit in mg

    Returns:
        Dose in mg, rounded to 3 decimals
    """
    return round3(units * unit_strength_mg)

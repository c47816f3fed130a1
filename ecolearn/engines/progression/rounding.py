"""Percentage helpers shared by the reward calculator and the rollup aggregator."""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: Decimal) -> int:
    """Round .5 away from zero (Python's round() would go to even)."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> int:
    """round(100 * part / whole) with exact arithmetic; 0 when whole is 0."""
    if whole == 0:
        return 0
    return round_half_up(Decimal(100 * part) / Decimal(whole))

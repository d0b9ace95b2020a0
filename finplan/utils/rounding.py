"""Whole-dollar rounding shared by every planner"""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest whole number, halves toward positive infinity.

    Python's round() uses banker's rounding (round(2.5) == 2), which would
    shift bucket amounts by a dollar on exact halves.
    """
    return int(math.floor(value + 0.5))


def percent_of(amount: float, total: float) -> int:
    """Whole-number percentage of total, 0 when total is not positive"""
    if total <= 0:
        return 0
    return round_half_up(amount / total * 100)

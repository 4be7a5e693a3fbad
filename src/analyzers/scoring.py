"""Small numeric helpers shared by the scorers."""

import math


def clamp(value: float, low: int = 0, high: int = 100) -> int:
    """Clamp a point total into [low, high]."""
    return int(max(low, min(high, value)))


def round_half_up(value: float) -> int:
    # round() is banker's rounding; scores round .5 upwards
    return int(math.floor(value + 0.5))

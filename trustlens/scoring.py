"""Score arithmetic shared by the trust, text and workflow scorers."""

import math


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest int with .5 going up (``round`` uses banker's rounding)."""
    return int(math.floor(value + 0.5))


def to_score(value: float) -> int:
    """Clamp to [0, 100] and round half-up."""
    return round_half_up(clamp(value))

"""Pure helpers mapping raw metric ranges onto 0-100 risk."""
import math

# Weighted sums are snapped to this many decimals before rounding, so
# float noise like 2.4999999999999996 still rounds as 2.5.
ROUNDING_DIGITS = 9


def clamp(value: float, lo: float, hi: float) -> float:
    """Restrict value to [lo, hi]."""
    return max(lo, min(hi, value))


def normalize_linear(value: float, in_min: float, in_max: float) -> float:
    """Map value linearly from [in_min, in_max] onto [0, 100].

    Values outside the range saturate at 0 or 100. Callers pass fixed
    bounds with in_max > in_min.
    """
    if value <= in_min:
        return 0.0
    if value >= in_max:
        return 100.0
    return ((value - in_min) / (in_max - in_min)) * 100


def round_half_up(value: float) -> int:
    """Round to the nearest int, halves toward positive infinity.

    Built-in round() uses banker's rounding, which would score 2.5 as 2.
    Expects a finite value; clamp first.
    """
    return int(math.floor(round(value, ROUNDING_DIGITS) + 0.5))


def bounded_score(value: float, saturate_nan_to: int = 100) -> int:
    """Clamp to [0, 100] and round.

    Infinite values saturate at the nearest bound. NaN can only come from
    opposing infinities and saturates to saturate_nan_to.
    """
    if math.isnan(value):
        return saturate_nan_to
    return round_half_up(clamp(value, 0, 100))

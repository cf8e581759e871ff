"""
Rating scale detection and normalization.

Source ratings arrive on 5, 10, 20 or 100 point scales, usually without
saying which. Everything is projected onto a 0-5 scale.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

import config.settings as settings

_QUANTUM = Decimal(1).scaleb(-settings.RATING_DECIMALS)


def is_number(value) -> bool:
    """True for finite ints/floats (bools and ints beyond float range excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def round_rating(value: float) -> float:
    """Round half-up to the configured number of decimals."""
    return float(Decimal(repr(float(value))).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def detect_scale(raw_value: Optional[float], scale_hint: Optional[float] = None) -> float:
    """
    Infer the scale a rating was given on.

    An explicit positive hint always wins. Otherwise the value's magnitude
    picks the smallest known scale that can hold it. A value of exactly 5
    is read as "5 out of 5"; that is an assumption about the upstream data,
    there is no way to tell it apart from "5 out of 10".

    Args:
        raw_value: Source rating, may be None
        scale_hint: Scale declared by the source, may be None

    Returns:
        Detected scale (defaults to settings.DEFAULT_RATING_SCALE)
    """
    if is_number(scale_hint) and scale_hint > 0:
        return scale_hint

    if not is_number(raw_value):
        return settings.DEFAULT_RATING_SCALE

    for scale in settings.KNOWN_RATING_SCALES:
        if raw_value <= scale:
            return scale

    # Larger than any known scale
    return settings.DEFAULT_RATING_SCALE


def normalize_to_target(
    value: Optional[float],
    scale: Optional[float],
    target: float = settings.NORMALIZED_TARGET_SCALE
) -> Optional[float]:
    """
    Convert value on `scale` to the equivalent on `target`.

    Returns None when value is missing or scale is not a positive number.
    The result is clamped to [0, target].
    """
    if not is_number(value):
        return None
    if not is_number(scale) or scale <= 0:
        return None

    projected = (value / scale) * target
    return round_rating(min(max(projected, 0.0), float(target)))


def rescale(
    value: Optional[float],
    from_scale: float,
    to_scale: float
) -> Optional[float]:
    """Project a value between scales without clamping."""
    if not is_number(value) or not is_number(from_scale) or from_scale <= 0:
        return None
    return round_rating((value / from_scale) * to_scale)


def average(values: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the present values, rounded; None if there are none."""
    present = [v for v in values if is_number(v)]
    if not present:
        return None
    return round_rating(sum(present) / len(present))


# Design Rationale and Trade-offs:
#
# 1. Why Decimal for rounding?
#    - round() uses banker's rounding on binary floats (0.625 -> 0.62)
#    - Half-up matches what the dashboards display
#    - Trade-off: Slower than round(), irrelevant at this volume
#
# 2. Why clamp normalized ratings?
#    - Values above an explicit hint or below zero still land in [0, 5]
#    - Trade-off: An out-of-range source value is silently capped
#
# 3. Why treat ints beyond float range as non-numbers?
#    - json parses arbitrarily large integers; float conversion overflows
#    - Trade-off: Such a rating reads as missing rather than as a maximum

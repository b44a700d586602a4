"""
Numeric guards shared by every stage of quarter resolution.

All arithmetic boundaries pass through `safe()` so that NaN/Infinity from
degenerate inputs (zero totals, zero revenue) never reach a persisted result.
"""

import math
from typing import Any, Optional


def safe(value: Any, default: float = 0.0) -> float:
    """Coerce to a finite float, substituting `default` for None/NaN/Inf/garbage."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def safe_ratio(numerator: Any, denominator: Any, default: float = 0.0) -> float:
    """Division that returns `default` when the denominator is zero or non-finite."""
    den = safe(denominator)
    if den == 0:
        return default
    return safe(safe(numerator) / den, default)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, safe(value)))


def round_half_up(value: Any) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(safe(value) + 0.5))


def resolve_with_default(*candidates: Optional[float], default: float) -> float:
    """Return the first candidate that is set and finite, else `default`.

    This is the single defaulting policy for optional numeric decision fields:
    ``None`` means "not supplied" and falls through; an explicit 0 is a value.
    """
    for candidate in candidates:
        if candidate is None:
            continue
        number = safe(candidate, default=math.nan)
        if not math.isnan(number):
            return number
    return default

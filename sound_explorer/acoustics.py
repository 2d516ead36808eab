"""Point-source acoustics: intensity, decibel level, and display formatting."""

from __future__ import annotations

import math
from typing import Dict

from . import config


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def intensity(power: float, distance: float) -> float:
    """Intensity (W/m^2) of an isotropic source of *power* watts at *distance* metres."""
    area = config.FOUR_PI * distance * distance
    if area == 0:
        # IEEE behaviour instead of ZeroDivisionError
        if power > 0:
            return math.inf
        if power < 0:
            return -math.inf
        return math.nan
    return power / area


def level_db(intensity_value: float) -> float:
    """Sound level in dB relative to ``config.I0``; ``-inf`` for non-positive intensity."""
    if intensity_value <= 0:
        return -math.inf
    if math.isinf(intensity_value):
        return math.inf
    return 10 * math.log10(intensity_value / config.I0)


def clamped_level(power: float, distance: float) -> float:
    return clamp(
        level_db(intensity(power, distance)),
        config.LEVEL_CLAMP_MIN,
        config.LEVEL_CLAMP_MAX,
    )


def power_from_exponent(exponent: float) -> float:
    return 10 ** exponent


def format_sci(value: float) -> str:
    if not math.isfinite(value):
        return config.NON_FINITE_PLACEHOLDER
    if value == 0:
        return "0"
    magnitude = abs(value)
    if 0.01 <= magnitude < 10000:
        text = f"{value:.4f}".rstrip("0").rstrip(".")
        return text if text else "0"
    mantissa, exponent = f"{value:.3e}".split("e")
    return f"{mantissa}×10^{int(exponent):+d}"


def format_db(value: float) -> str:
    if not math.isfinite(value):
        return config.NON_FINITE_PLACEHOLDER
    return f"{value:.1f}"


def format_distance(value: float) -> str:
    return f"{value:.1f}"


def classify_level(level: float) -> str:
    """Bucket a decibel level into one of the safety band keys.

    Bands are half-open ``[lower, upper)``, so 20.0 already belongs to the
    second band. Non-finite levels (including ``-inf`` from a zero intensity)
    are ``"undefined"``.
    """
    if not math.isfinite(level):
        return config.SAFETY_UNDEFINED
    for upper, key in config.SAFETY_THRESHOLDS:
        if level < upper:
            return key
    return config.SAFETY_TOP_BAND


def safety_label(level: float) -> str:
    return config.SAFETY_LABELS[classify_level(level)]


def readouts(power_exp: float, distance: float) -> Dict[str, str]:
    """Formatted text for every readout shown next to the chart."""
    power = power_from_exponent(power_exp)
    i_value = intensity(power, distance)
    level = level_db(i_value)
    return {
        "power": format_sci(power),
        "distance": format_distance(distance),
        "intensity": format_sci(i_value),
        "level": format_db(level),
        "safety": safety_label(level),
        "band": classify_level(level),
    }

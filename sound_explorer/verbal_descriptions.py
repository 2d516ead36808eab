"""Verbal rules for slider changes."""

import math


def describe_distance_change(old, new):
    if old <= 0 or new <= 0:
        return "At zero distance the level is undefined."
    if math.isclose(old, new):
        return "Distance unchanged, so the level stays the same."
    delta = -20 * math.log10(new / old)
    trend = "Moving away" if new > old else "Moving closer"
    return f"{trend} ({old:.1f} m → {new:.1f} m) changes the level by {delta:+.1f} dB (inverse-square law)."


def describe_power_change(old_exp, new_exp):
    if math.isclose(old_exp, new_exp):
        return "Power unchanged, so the level stays the same."
    delta = 10 * (new_exp - old_exp)
    factor = 10 ** (new_exp - old_exp)
    trend = "Raising" if new_exp > old_exp else "Lowering"
    return f"{trend} the power by a factor of {factor:.3g} changes the level by {delta:+.1f} dB."

import math

import pytest

from sound_explorer import config
from sound_explorer.acoustics import (
    clamp,
    clamped_level,
    classify_level,
    format_db,
    format_distance,
    format_sci,
    intensity,
    level_db,
    readouts,
    safety_label,
)


@pytest.mark.parametrize("power, distance", [(1.0, 1.0), (1e-6, 10.0), (100.0, 0.2), (3.5, 47.25)])
def test_intensity_matches_inverse_square_law(power, distance):
    assert intensity(power, distance) == pytest.approx(power / (4 * math.pi * distance ** 2))


def test_intensity_at_zero_distance_is_infinite():
    assert intensity(1.0, 0.0) == math.inf
    assert level_db(intensity(1.0, 0.0)) == math.inf


def test_level_is_strictly_increasing():
    values = [1e-15, 1e-12, 1e-9, 1e-3, 1.0, 1e4]
    levels = [level_db(v) for v in values]
    assert all(a < b for a, b in zip(levels, levels[1:]))
    assert level_db(config.I0) == pytest.approx(0.0)


@pytest.mark.parametrize("value", [0.0, -1e-9, -5.0])
def test_level_of_non_positive_intensity_is_negative_infinity(value):
    assert level_db(value) == -math.inf


def test_clamp_band_absorbs_infinities():
    assert clamp(-math.inf, config.LEVEL_CLAMP_MIN, config.LEVEL_CLAMP_MAX) == -20.0
    assert clamp(math.inf, config.LEVEL_CLAMP_MIN, config.LEVEL_CLAMP_MAX) == 140.0
    assert clamped_level(1e30, 0.2) == 140.0
    assert clamped_level(1e-30, 50.0) == -20.0


@pytest.mark.parametrize(
    "level, expected",
    [
        (-500.0, "very weak"),
        (19.999, "very weak"),
        (20.0, "weak"),
        (49.99, "weak"),
        (50.0, "moderate"),
        (69.9, "moderate"),
        (70.0, "loud"),
        (85.0, "very loud"),
        (99.99, "very loud"),
        (100.0, "extreme"),
        (1e6, "extreme"),
        (math.inf, "undefined"),
        (-math.inf, "undefined"),
        (math.nan, "undefined"),
    ],
)
def test_classify_level_bands(level, expected):
    assert classify_level(level) == expected


def test_safety_label_text():
    assert safety_label(109.0) == config.SAFETY_LABELS["extreme"]
    assert safety_label(-math.inf) == "Level undefined"


def test_scenario_one_watt_at_one_metre():
    i_value = intensity(1.0, 1.0)
    assert i_value == pytest.approx(0.0796, abs=1e-4)
    level = level_db(i_value)
    assert level == pytest.approx(109.0, abs=0.05)
    assert classify_level(level) == "extreme"


def test_scenario_microwatt_at_ten_metres():
    i_value = intensity(1e-6, 10.0)
    assert i_value == pytest.approx(7.96e-10, rel=1e-3)
    level = level_db(i_value)
    assert level == pytest.approx(29.0, abs=0.05)
    assert classify_level(level) == "weak"


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.0, "0"),
        (1.0, "1"),
        (100.0, "100"),
        (0.0795775, "0.0796"),
        (0.01, "0.01"),
        (7.957747e-10, "7.958×10^-10"),
        (1e-8, "1.000×10^-8"),
        (12345.678, "1.235×10^+4"),
        (math.inf, "—"),
        (math.nan, "—"),
    ],
)
def test_format_sci(value, expected):
    assert format_sci(value) == expected


def test_format_db_and_distance():
    assert format_db(109.0079) == "109.0"
    assert format_db(-math.inf) == "—"
    assert format_distance(2) == "2.0"


def test_readouts_for_default_style_input():
    values = readouts(0.0, 1.0)
    assert values["power"] == "1"
    assert values["distance"] == "1.0"
    assert values["intensity"] == "0.0796"
    assert values["level"] == "109.0"
    assert values["band"] == "extreme"
    assert values["safety"] == config.SAFETY_LABELS["extreme"]

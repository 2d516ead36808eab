from sound_explorer.verbal_descriptions import describe_distance_change, describe_power_change


def test_doubling_distance_loses_six_db():
    text = describe_distance_change(1.0, 2.0)
    assert "Moving away" in text
    assert "-6.0 dB" in text


def test_halving_distance_gains_six_db():
    assert "+6.0 dB" in describe_distance_change(4.0, 2.0)


def test_zero_distance_is_undefined():
    assert "undefined" in describe_distance_change(0.0, 1.0)


def test_unchanged_values():
    assert "unchanged" in describe_distance_change(2.0, 2.0)
    assert "unchanged" in describe_power_change(-2.0, -2.0)


def test_power_decade_adds_ten_db():
    text = describe_power_change(-2.0, -1.0)
    assert "factor of 10" in text
    assert "+10.0 dB" in text
    assert "-10.0 dB" in describe_power_change(0.0, -1.0)

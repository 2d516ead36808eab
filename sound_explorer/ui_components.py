"""Streamlit UI components."""

import streamlit as st

from . import config


def sound_controls(defaults=None):
    defaults = defaults or config.DEFAULT_PARAMS
    exp_cfg = config.PARAM_BOUNDS["power_exp"]
    dist_cfg = config.PARAM_BOUNDS["distance"]
    power_exp = st.slider(
        "Power exponent (P = 10^x W)",
        exp_cfg["min"],
        exp_cfg["max"],
        defaults["power_exp"],
        exp_cfg["step"],
        key="param_power_exp",
    )
    distance = st.slider(
        "Distance r (m)",
        dist_cfg["min"],
        dist_cfg["max"],
        defaults["distance"],
        dist_cfg["step"],
        key="param_distance",
    )
    return power_exp, distance


def readout_metrics(values):
    cols = st.columns(4)
    cols[0].metric("Power P (W)", values["power"])
    cols[1].metric("Distance r (m)", values["distance"])
    cols[2].metric("Intensity I (W/m²)", values["intensity"])
    cols[3].metric("Level L (dB)", values["level"])

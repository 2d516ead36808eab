import streamlit as st
import streamlit_shadcn_ui as ui

from sound_explorer import config
from sound_explorer.acoustics import power_from_exponent, readouts
from sound_explorer.graph_engine import chart_figure
from sound_explorer.logger import normalize_mode, normalize_params
from sound_explorer.ui_components import readout_metrics, sound_controls
from sound_explorer.verbal_descriptions import describe_distance_change, describe_power_change

st.set_page_config(page_title="Sound Explorer", layout="wide")

st.title("Sound Explorer")
st.caption("Sound level of a point source: pick a power and a distance, read the level in dB.")

# Previous slider values, used for the change description
if "last_params" not in st.session_state:
    st.session_state["last_params"] = dict(config.DEFAULT_PARAMS)
if "last_description" not in st.session_state:
    st.session_state["last_description"] = ""

_MODE_BY_LABEL = {label: mode for mode, label in config.MODE_LABELS.items()}

left_col, right_col = st.columns([1, 2], gap="large")

with left_col:
    st.header("Controls")
    raw_power_exp, raw_distance = sound_controls()
    params = normalize_params({"power_exp": raw_power_exp, "distance": raw_distance})

    last = st.session_state["last_params"]
    if params["distance"] != last["distance"]:
        st.session_state["last_description"] = describe_distance_change(last["distance"], params["distance"])
    elif params["power_exp"] != last["power_exp"]:
        st.session_state["last_description"] = describe_power_change(last["power_exp"], params["power_exp"])
    st.session_state["last_params"] = params

    if st.session_state["last_description"]:
        st.info(st.session_state["last_description"])

with right_col:
    st.header("Chart")
    selected = ui.tabs(
        options=list(_MODE_BY_LABEL),
        default_value=config.MODE_LABELS[config.DEFAULT_MODE],
        key="chart_mode_tabs",
    )
    mode = normalize_mode(_MODE_BY_LABEL.get(selected))
    power = power_from_exponent(params["power_exp"])
    fig = chart_figure(mode, power, params["distance"], uirevision=mode)
    st.plotly_chart(fig, use_container_width=False, config={"displaylogo": False, "staticPlot": True})

st.divider()

values = readouts(params["power_exp"], params["distance"])
readout_metrics(values)
st.subheader(values["safety"])
st.caption("Indicative bands only, not medical guidance.")

"""Dash front end for Sound Explorer."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

import dash
from dash import Input, Output, State, dcc, html

from sound_explorer import config
from sound_explorer.acoustics import power_from_exponent, readouts
from sound_explorer.graph_engine import chart_figure
from sound_explorer.logger import (
    append_preview_log,
    build_event_record,
    changed_fields,
    format_preview_message,
    log_with_throttle,
    normalize_mode,
    normalize_params,
    reset_session,
    write_log_record,
)
from sound_explorer.verbal_descriptions import describe_distance_change, describe_power_change

_POWER_MARKS = {float(e): f"1e{e}" for e in range(-8, 3, 2)}
_DISTANCE_MARKS = {0.2: "0.2", 10.0: "10", 20.0: "20", 30.0: "30", 40.0: "40", 50.0: "50"}

_READOUT_STYLE: Dict[str, Any] = {
    "display": "flex",
    "justifyContent": "space-between",
    "padding": "6px 0",
    "borderBottom": "1px solid rgba(255,255,255,0.08)",
}
_PANEL_STYLE: Dict[str, Any] = {
    "backgroundColor": "#121a33",
    "color": "#e8ecff",
    "padding": "20px",
    "borderRadius": "12px",
}


def _get_session_id(session_data: Optional[Dict[str, Any]]) -> str:
    if isinstance(session_data, dict):
        raw = session_data.get("session_id")
        if isinstance(raw, str) and raw:
            return raw
    return "unknown"


def _default_view_state() -> Dict[str, Any]:
    state: Dict[str, Any] = dict(config.DEFAULT_PARAMS)
    state["mode"] = config.DEFAULT_MODE
    return state


def _slider_row(param: str, label: str, *, marks: Dict[float, str]) -> html.Div:
    cfg = config.PARAM_BOUNDS[param]
    slider_id = "slider-power-exp" if param == "power_exp" else "slider-distance"
    return html.Div(
        [
            html.Label(label, htmlFor=slider_id, style={"fontWeight": 600}),
            dcc.Slider(
                id=slider_id,
                min=cfg["min"],
                max=cfg["max"],
                step=cfg["step"],
                value=config.DEFAULT_PARAMS[param],
                marks=marks,
                updatemode="drag",
                tooltip={"placement": "bottom", "always_visible": False},
            ),
        ],
        style={"marginBottom": "24px"},
    )


def _readout_row(label: str, value_id: str) -> html.Div:
    return html.Div(
        [html.Span(label), html.Strong(id=value_id)],
        style=_READOUT_STYLE,
    )


app = dash.Dash(__name__)
server = app.server


def _serve_layout() -> html.Div:
    return html.Div(
        [
            dcc.Store(id="store-session", storage_type="session", data={"session_id": uuid.uuid4().hex}),
            dcc.Store(id="store-view", data=_default_view_state()),
            dcc.Store(id="store-log-sink", data=[]),
            html.H1("Sound Explorer"),
            html.P("Sound level of an isotropic point source. Drag the sliders to change power and distance."),
            html.Div(
                [
                    html.Div(
                        [
                            html.H3("Controls"),
                            _slider_row("power_exp", "Power exponent (P = 10^x W)", marks=_POWER_MARKS),
                            _slider_row("distance", "Distance r (m)", marks=_DISTANCE_MARKS),
                            _readout_row("Power P (W)", "readout-power"),
                            _readout_row("Distance r (m)", "readout-distance"),
                            _readout_row("Intensity I (W/m²)", "readout-intensity"),
                            _readout_row("Level L (dB)", "readout-level"),
                            html.H4(id="safety-label", style={"marginTop": "16px"}),
                            html.P(
                                "Indicative bands only, not medical guidance.",
                                style={"opacity": 0.7, "fontSize": "0.85em"},
                            ),
                            html.Button("Reset", id="btn-reset", n_clicks=0, type="button"),
                        ],
                        style=dict(_PANEL_STYLE, flex="1", marginRight="24px"),
                    ),
                    html.Div(
                        [
                            dcc.Tabs(
                                id="tabs-mode",
                                value=config.DEFAULT_MODE,
                                children=[
                                    dcc.Tab(label=config.MODE_LABELS[mode], value=mode)
                                    for mode in config.MODES
                                ],
                            ),
                            dcc.Graph(
                                id="graph",
                                figure=chart_figure(
                                    config.DEFAULT_MODE,
                                    power_from_exponent(config.DEFAULT_PARAMS["power_exp"]),
                                    config.DEFAULT_PARAMS["distance"],
                                ),
                                config={"displaylogo": False, "staticPlot": True},
                            ),
                            html.P(id="change-description", style={"minHeight": "1.5em"}),
                        ],
                        style=dict(_PANEL_STYLE, flex="2"),
                    ),
                ],
                style={"display": "flex", "alignItems": "flex-start"},
            ),
            html.Pre(id="log-display", style={"marginTop": "24px", "fontSize": "0.85em"}),
        ],
        style={"fontFamily": "Arial, sans-serif", "maxWidth": "1280px", "margin": "0 auto", "padding": "16px"},
    )


app.layout = _serve_layout


@app.callback(
    [
        Output("readout-power", "children"),
        Output("readout-distance", "children"),
        Output("readout-intensity", "children"),
        Output("readout-level", "children"),
        Output("safety-label", "children"),
        Output("graph", "figure"),
    ],
    [
        Input("slider-power-exp", "value"),
        Input("slider-distance", "value"),
        Input("tabs-mode", "value"),
    ],
)
def _update_view(power_exp_value, distance_value, mode_value):
    params = normalize_params({"power_exp": power_exp_value, "distance": distance_value})
    mode = normalize_mode(mode_value)
    values = readouts(params["power_exp"], params["distance"])
    fig = chart_figure(
        mode,
        power_from_exponent(params["power_exp"]),
        params["distance"],
        uirevision=mode,
    )
    return (
        values["power"],
        values["distance"],
        values["intensity"],
        values["level"],
        values["safety"],
        fig,
    )


_DESCRIBERS = {"power_exp": describe_power_change, "distance": describe_distance_change}


@app.callback(
    [
        Output("store-view", "data"),
        Output("change-description", "children"),
        Output("store-log-sink", "data", allow_duplicate=True),
    ],
    [
        Input("slider-power-exp", "value"),
        Input("slider-distance", "value"),
        Input("tabs-mode", "value"),
    ],
    [
        State("store-view", "data"),
        State("store-session", "data"),
        State("store-log-sink", "data"),
    ],
    prevent_initial_call=True,
)
def _log_interaction(power_exp_value, distance_value, mode_value, view_data, session_data, log_store_data):
    ctx = dash.callback_context
    if not ctx.triggered:
        return dash.no_update, dash.no_update, dash.no_update
    previous = view_data if isinstance(view_data, dict) else _default_view_state()
    old_params = normalize_params(previous)
    old_mode = normalize_mode(previous.get("mode"))
    new_view = dict(normalize_params({"power_exp": power_exp_value, "distance": distance_value}))
    new_view["mode"] = normalize_mode(mode_value)
    fields = changed_fields(previous, new_view)
    if not fields:
        return dash.no_update, dash.no_update, dash.no_update

    session_id = _get_session_id(session_data)
    mode = new_view["mode"]
    params = normalize_params(new_view)
    level = readouts(params["power_exp"], params["distance"])["level"]
    descriptions = []
    log_entries = log_store_data
    for field in fields:
        if field == "mode":
            record = build_event_record(
                session_id,
                event="mode_switch",
                mode=mode,
                params=params,
                old_value=old_mode,
                new_value=mode,
                source="tab",
            )
        else:
            descriptions.append(_DESCRIBERS[field](old_params[field], params[field]))
            record = build_event_record(
                session_id,
                event="param_change",
                mode=mode,
                params=params,
                param_name=field,
                old_value=old_params[field],
                new_value=params[field],
                source="slider",
                extras={"level_db": level},
            )
        if len(fields) == 1:
            log_with_throttle(session_id, record)
        else:
            write_log_record(record)
        log_entries = append_preview_log(log_entries, format_preview_message(record))

    description = " ".join(descriptions) if descriptions else dash.no_update
    return new_view, description, log_entries


@app.callback(
    [
        Output("slider-power-exp", "value"),
        Output("slider-distance", "value"),
        Output("tabs-mode", "value"),
        Output("store-log-sink", "data", allow_duplicate=True),
    ],
    Input("btn-reset", "n_clicks"),
    State("store-session", "data"),
    State("store-view", "data"),
    State("store-log-sink", "data"),
    prevent_initial_call=True,
)
def _handle_reset(n_clicks, session_data, view_data, log_store_data):
    if not n_clicks:
        return dash.no_update, dash.no_update, dash.no_update, dash.no_update
    session_id = _get_session_id(session_data)
    previous = view_data if isinstance(view_data, dict) else _default_view_state()
    reset_session(session_id)
    record = build_event_record(
        session_id,
        event="reset",
        mode=normalize_mode(previous.get("mode")),
        params=dict(config.DEFAULT_PARAMS),
        source="button",
    )
    log_with_throttle(session_id, record)
    return (
        config.DEFAULT_PARAMS["power_exp"],
        config.DEFAULT_PARAMS["distance"],
        config.DEFAULT_MODE,
        append_preview_log(log_store_data, format_preview_message(record)),
    )


@app.callback(
    Output("log-display", "children"),
    Input("store-log-sink", "data"),
)
def _render_log_display(log_entries):
    if not isinstance(log_entries, list):
        log_entries = []
    if not log_entries:
        return "Recent events will appear here."
    lines = [f"- {entry}" for entry in reversed(log_entries)]
    return "\n".join(["Recent events:", *lines])


if __name__ == "__main__":
    app.run(debug=True)

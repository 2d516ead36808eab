from __future__ import annotations

import json
import math
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from . import config

_SESSION_LOG_STATE: Dict[str, Dict[str, Any]] = {}
_THROTTLE_STATE: Dict[str, Dict[str, Any]] = {}
_STATE_LOCK = threading.Lock()


def normalize_param_value(param: str, value: Any) -> float:
    cfg = config.PARAM_BOUNDS.get(param, {"min": -10.0, "max": 10.0, "step": 0.1})
    try:
        num = float(value)
    except (TypeError, ValueError):
        num = float(config.DEFAULT_PARAMS.get(param, 0.0))
    if math.isnan(num):
        num = float(config.DEFAULT_PARAMS.get(param, 0.0))
    num = max(cfg["min"], min(cfg["max"], num))
    step = cfg.get("step", 0.1) or 0.1
    quantized = round(num / step) * step
    if quantized == -0.0:
        quantized = 0.0
    return float(f"{quantized:.12g}")


def normalize_params(raw: Optional[Dict[str, Any]]) -> Dict[str, float]:
    params = {}
    for key, default_val in config.DEFAULT_PARAMS.items():
        params[key] = normalize_param_value(key, (raw or {}).get(key, default_val))
    return params


def normalize_mode(value: Any) -> str:
    return value if value in config.MODES else config.DEFAULT_MODE


def normalized_equal(param: str, old_value: Any, new_value: Any) -> bool:
    old_norm = normalize_param_value(param, old_value)
    new_norm = normalize_param_value(param, new_value)
    return abs(old_norm - new_norm) < 1e-9


def changed_fields(old_view: Optional[Dict[str, Any]], new_view: Dict[str, Any]) -> List[str]:
    """Fields that differ between two view states, in ``mode``, ``power_exp``, ``distance`` order."""
    old_params = normalize_params(old_view)
    new_params = normalize_params(new_view)
    changed = []
    if normalize_mode((old_view or {}).get("mode")) != normalize_mode(new_view.get("mode")):
        changed.append("mode")
    for param in config.DEFAULT_PARAMS:
        if not normalized_equal(param, old_params[param], new_params[param]):
            changed.append(param)
    return changed


def _evict_idle_sessions(now: float) -> None:
    # caller holds _STATE_LOCK
    cutoff = now - config.SESSION_IDLE_SECONDS
    for sid in [s for s, st in _SESSION_LOG_STATE.items() if st["last_seen"] < cutoff]:
        del _SESSION_LOG_STATE[sid]
    for sid in [s for s, st in _THROTTLE_STATE.items() if st["last_ts"] < cutoff and not st["pending"]]:
        del _THROTTLE_STATE[sid]


def next_seq_and_elapsed(session_id: str) -> Dict[str, Any]:
    now = time.monotonic()
    with _STATE_LOCK:
        _evict_idle_sessions(now)
        state = _SESSION_LOG_STATE.setdefault(session_id, {"seq": 0, "last_seen": None})
        seq = state["seq"] + 1
        state["seq"] = seq
        elapsed = 0
        if state["last_seen"] is not None:
            elapsed = max(int((now - state["last_seen"]) * 1000), 0)
        state["last_seen"] = now
    ts = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {"seq": seq, "elapsed_time_ms": elapsed, "t_server_iso": ts}


def reset_session(session_id: str) -> None:
    with _STATE_LOCK:
        _SESSION_LOG_STATE.pop(session_id, None)
        state = _THROTTLE_STATE.pop(session_id, None)
    if state and state.get("timer"):
        state["timer"].cancel()


def build_event_record(
    session_id: str,
    *,
    event: str,
    mode: str,
    params: Dict[str, float],
    param_name: Optional[str] = None,
    old_value: Optional[Any] = None,
    new_value: Optional[Any] = None,
    source: str = "system",
    extras: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    timing = next_seq_and_elapsed(session_id)
    record: Dict[str, Any] = {
        "schema_version": config.SCHEMA_VERSION,
        "session_id": session_id,
        "t_server_iso": timing["t_server_iso"],
        "seq": timing["seq"],
        "event": event,
        "chart_mode": mode,
        "param_name": param_name,
        "old_value": old_value,
        "new_value": new_value,
        "source": source,
        "power_exp": params.get("power_exp"),
        "distance": params.get("distance"),
        "elapsed_time_ms": timing["elapsed_time_ms"],
        "app_mode": config.APP_MODE,
    }
    if extras:
        record.update(extras)
    return record


def format_value_preview(value: Optional[Any]) -> str:
    if value is None:
        return config.NON_FINITE_PLACEHOLDER
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text if text else "0"
    return str(value)


def format_preview_message(record: Dict[str, Any]) -> str:
    event = record.get("event", "event")
    if event == "param_change":
        param = record.get("param_name", "?")
        old_v = format_value_preview(record.get("old_value"))
        new_v = format_value_preview(record.get("new_value"))
        level = record.get("level_db")
        suffix = f" [{level} dB]" if level else ""
        return f"param_change: {param} {old_v} → {new_v}{suffix}"
    if event == "mode_switch":
        return f"mode_switch: {record.get('old_value')} → {record.get('new_value')}"
    if event == "reset":
        return "reset: sliders restored"
    return str(event)


def append_preview_log(log_data: Any, message: str) -> List[str]:
    keep = config.PREVIEW_LOG_LENGTH
    entries = list(log_data[-(keep - 1):]) if isinstance(log_data, list) else []
    entries.append(message)
    return entries[-keep:]


def write_log_record(record: Dict[str, Any]) -> None:
    try:
        print(config.LOG_TAG, json.dumps(record, ensure_ascii=False), flush=True)
    except (TypeError, ValueError) as exc:
        print(config.LOG_TAG, exc, record)


def _flush_pending_record(session_id: str) -> None:
    with _STATE_LOCK:
        state = _THROTTLE_STATE.get(session_id)
        if not state:
            return
        state["timer"] = None
        pending = state.get("pending")
        state["pending"] = None
        if pending:
            state["last_ts"] = time.monotonic()
    if pending:
        write_log_record(pending)


def log_with_throttle(session_id: str, record: Dict[str, Any]) -> None:
    now = time.monotonic()
    with _STATE_LOCK:
        _evict_idle_sessions(now)
        state = _THROTTLE_STATE.setdefault(
            session_id,
            {"last_ts": 0.0, "pending": None, "timer": None},
        )
        since_last = now - state["last_ts"]
        if since_last >= config.LOG_RATE_LIMIT_SECONDS:
            state["last_ts"] = now
            state["pending"] = None
            timer = state.get("timer")
            state["timer"] = None
            write_now = True
        else:
            state["pending"] = record
            timer = None
            write_now = False
            if not state.get("timer"):
                delay = max(config.LOG_RATE_LIMIT_SECONDS - since_last, 0.01)
                state["timer"] = threading.Timer(delay, _flush_pending_record, args=(session_id,))
                state["timer"].daemon = True
                state["timer"].start()
    if timer:
        timer.cancel()
    if write_now:
        write_log_record(record)

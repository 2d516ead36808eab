from __future__ import annotations

import math

# Physics
I0 = 1e-12  # reference intensity, W/m^2
FOUR_PI = 4 * math.pi
LEVEL_CLAMP_MIN = -20.0
LEVEL_CLAMP_MAX = 140.0

# Chart modes
MODE_DISTANCE = "distance"
MODE_POWER = "power"
MODES = (MODE_DISTANCE, MODE_POWER)
DEFAULT_MODE = MODE_DISTANCE
MODE_LABELS = {MODE_DISTANCE: "Level vs distance", MODE_POWER: "Level vs power"}

# Sampling grids
DISTANCE_X_MIN = 0.2
DISTANCE_X_MAX = 50.0
DISTANCE_STEP = 0.25
POWER_EXP_MIN = -8.0
POWER_EXP_MAX = 2.0
POWER_EXP_STEP = 0.05
POWER_X_MIN = 10 ** POWER_EXP_MIN
POWER_X_MAX = 10 ** POWER_EXP_MAX
GRID_EPS = 1e-9

# Autoscale
Y_MARGIN = 5.0

# Slider defaults and bounds
DEFAULT_PARAMS = {"power_exp": -2.0, "distance": 2.0}
PARAM_BOUNDS = {
    "power_exp": {"min": -8.0, "max": 2.0, "step": 0.1},
    "distance": {"min": 0.2, "max": 50.0, "step": 0.1},
}

# Canvas layout (pixels)
CANVAS_WIDTH = 820
CANVAS_HEIGHT = 360
CANVAS_PAD = 55
CANVAS_EDGE = 18
GRID_STEP = 40
Y_LABEL_OFFSET = 28
X_LABEL_OFFSET = 22
MARKER_RADIUS = 5
MARKER_RING_RADIUS = 10

# Axis text
AXIS_LABELS = {
    MODE_DISTANCE: ("Distance r (m)", "Level L (dB)"),
    MODE_POWER: ("Power P (W)", "Level L (dB)"),
}
CHART_CAPTION = "Pink dot = current setting"

# Plot palette
FIGURE_COLORS = {
    "background": "#0b1020",
    "grid": "rgba(255,255,255,0.06)",
    "axis": "rgba(255,255,255,0.16)",
    "text": "rgba(255,255,255,0.75)",
    "caption": "rgba(255,255,255,0.7)",
    "curve": "rgba(124,240,255,0.9)",
    "marker": "rgba(255,124,200,0.95)",
    "ring": "rgba(255,124,200,0.35)",
}
GRID_LINE_WIDTH = 1
AXIS_LINE_WIDTH = 1
CURVE_LINE_WIDTH = 2
RING_LINE_WIDTH = 2
FONT_SIZE = 12

# Safety bands: (upper bound exclusive, key); the last band is open-ended
SAFETY_THRESHOLDS = (
    (20.0, "very weak"),
    (50.0, "weak"),
    (70.0, "moderate"),
    (85.0, "loud"),
    (100.0, "very loud"),
)
SAFETY_TOP_BAND = "extreme"
SAFETY_UNDEFINED = "undefined"
SAFETY_LABELS = {
    "very weak": "🔈 Very weak (calm)",
    "weak": "🔉 Weak (quiet room)",
    "moderate": "🔊 Moderate (conversation / light street noise)",
    "loud": "⚠️ Loud (take care over long exposure)",
    "very loud": "🚨 Very loud (risk with exposure)",
    "extreme": "☠️ Extreme (hearing danger)",
    "undefined": "Level undefined",
}

# Display placeholders
NON_FINITE_PLACEHOLDER = "—"

# Logging and event preview
SCHEMA_VERSION = 1
APP_MODE = "dash"
LOG_RATE_LIMIT_SECONDS = 0.1
SESSION_IDLE_SECONDS = 30 * 60
LOG_TAG = "[sound-log]"
PREVIEW_LOG_LENGTH = 5

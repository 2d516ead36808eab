from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import plotly.graph_objects as go

from . import config
from .acoustics import clamped_level, power_from_exponent

LINEAR = "linear"
LOG = "log"

_TEXT_ANCHORS = {"start": "left", "middle": "center", "end": "right"}


@dataclass(frozen=True)
class Sample:
    x: float
    y: float


@dataclass(frozen=True)
class ViewRange:
    """Data window projected onto the canvas; x may be linear or log, y is linear."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    x_scale: str = LINEAR

    def __post_init__(self) -> None:
        if self.x_scale not in (LINEAR, LOG):
            raise ValueError(f"unknown x scale: {self.x_scale!r}")
        if self.x_max == self.x_min:
            raise ValueError("x range is empty")
        if self.y_max == self.y_min:
            raise ValueError("y range is empty")
        if self.x_scale == LOG and (self.x_min <= 0 or self.x_max <= 0):
            raise ValueError("log x range needs positive bounds")


@dataclass(frozen=True)
class CanvasRect:
    x0: float
    y0: float
    width: float
    height: float


@dataclass(frozen=True)
class ChartData:
    mode: str
    samples: Tuple[Sample, ...]
    view: ViewRange
    marker: Sample
    x_label: str
    y_label: str


class DrawingSurface(Protocol):
    def draw_line(self, x1: float, y1: float, x2: float, y2: float, *, color: str, width: float) -> None:
        ...

    def draw_circle(
        self,
        cx: float,
        cy: float,
        radius: float,
        *,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        width: float = 1.0,
    ) -> None:
        ...

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        color: str,
        size: int,
        anchor: str = "start",
        rotation: float = 0.0,
    ) -> None:
        ...


def canvas_rect(width: int = config.CANVAS_WIDTH, height: int = config.CANVAS_HEIGHT) -> CanvasRect:
    pad, edge = config.CANVAS_PAD, config.CANVAS_EDGE
    return CanvasRect(x0=pad, y0=edge, width=width - pad - edge, height=height - edge - pad)


def generate_grid(start: float, stop: float, step: float) -> List[float]:
    """Values ``start + i*step`` up to and including *stop*, ascending."""
    if step <= 0:
        raise ValueError("step must be positive")
    count = int(math.floor((stop - start) / step + config.GRID_EPS)) + 1
    return [start + i * step for i in range(max(count, 0))]


def sample_distance_curve(power: float) -> List[Sample]:
    xs = generate_grid(config.DISTANCE_X_MIN, config.DISTANCE_X_MAX, config.DISTANCE_STEP)
    return [Sample(r, clamped_level(power, r)) for r in xs]


def sample_power_curve(distance: float) -> List[Sample]:
    exponents = generate_grid(config.POWER_EXP_MIN, config.POWER_EXP_MAX, config.POWER_EXP_STEP)
    samples = []
    for e in exponents:
        p = power_from_exponent(e)
        samples.append(Sample(p, clamped_level(p, distance)))
    return samples


def sample_curve(mode: str, power: float, distance: float) -> List[Sample]:
    """Sample the level curve for *mode*; samples come back in ascending x order."""
    if mode == config.MODE_DISTANCE:
        return sample_distance_curve(power)
    if mode == config.MODE_POWER:
        return sample_power_curve(distance)
    raise ValueError(f"unknown mode: {mode!r}")


def autoscale(
    samples: Sequence[Sample],
    *,
    x_min: float,
    x_max: float,
    x_scale: str = LINEAR,
    margin: float = config.Y_MARGIN,
) -> ViewRange:
    if not samples:
        raise ValueError("cannot autoscale an empty sample set")
    ys = [s.y for s in samples]
    return ViewRange(x_min, x_max, min(ys) - margin, max(ys) + margin, x_scale)


def _log10(value: float) -> float:
    if value <= 0:
        return -math.inf
    return math.log10(value)


def project_x(value: float, view: ViewRange, rect: CanvasRect) -> float:
    if view.x_scale == LOG:
        lo, hi, v = _log10(view.x_min), _log10(view.x_max), _log10(value)
    else:
        lo, hi, v = view.x_min, view.x_max, value
    return (v - lo) / (hi - lo) * rect.width + rect.x0


def project_y(value: float, view: ViewRange, rect: CanvasRect) -> float:
    ratio = (value - view.y_min) / (view.y_max - view.y_min)
    return rect.height - ratio * rect.height + rect.y0


def project_points(samples: Sequence[Sample], view: ViewRange, rect: CanvasRect) -> List[Tuple[float, float]]:
    return [(project_x(s.x, view, rect), project_y(s.y, view, rect)) for s in samples]


def _mode_domain(mode: str) -> Tuple[float, float, str]:
    if mode == config.MODE_DISTANCE:
        return config.DISTANCE_X_MIN, config.DISTANCE_X_MAX, LINEAR
    if mode == config.MODE_POWER:
        return config.POWER_X_MIN, config.POWER_X_MAX, LOG
    raise ValueError(f"unknown mode: {mode!r}")


def build_chart(mode: str, power: float, distance: float) -> ChartData:
    x_min, x_max, x_scale = _mode_domain(mode)
    samples = sample_curve(mode, power, distance)
    view = autoscale(samples, x_min=x_min, x_max=x_max, x_scale=x_scale)
    marker_x = distance if mode == config.MODE_DISTANCE else power
    marker = Sample(marker_x, clamped_level(power, distance))
    x_label, y_label = config.AXIS_LABELS[mode]
    return ChartData(
        mode=mode,
        samples=tuple(samples),
        view=view,
        marker=marker,
        x_label=x_label,
        y_label=y_label,
    )


def _steps(start: float, stop: float, step: float) -> List[float]:
    values = []
    v = start
    while v <= stop:
        values.append(v)
        v += step
    return values


def draw_grid(surface: DrawingSurface, rect: CanvasRect, step: int = config.GRID_STEP) -> None:
    color = config.FIGURE_COLORS["grid"]
    bottom = rect.y0 + rect.height
    right = rect.x0 + rect.width
    for x in _steps(rect.x0, right, step):
        surface.draw_line(x, rect.y0, x, bottom, color=color, width=config.GRID_LINE_WIDTH)
    for y in _steps(rect.y0, bottom, step):
        surface.draw_line(rect.x0, y, right, y, color=color, width=config.GRID_LINE_WIDTH)


def draw_axes(surface: DrawingSurface, rect: CanvasRect, x_label: str, y_label: str) -> None:
    color = config.FIGURE_COLORS["axis"]
    bottom = rect.y0 + rect.height
    right = rect.x0 + rect.width
    surface.draw_line(rect.x0, bottom, right, bottom, color=color, width=config.AXIS_LINE_WIDTH)
    surface.draw_line(rect.x0, rect.y0, rect.x0, bottom, color=color, width=config.AXIS_LINE_WIDTH)

    text_color = config.FIGURE_COLORS["text"]
    surface.draw_text(
        right,
        bottom + config.X_LABEL_OFFSET,
        x_label,
        color=text_color,
        size=config.FONT_SIZE,
        anchor="end",
    )
    surface.draw_text(
        rect.x0 - config.Y_LABEL_OFFSET,
        rect.y0 + rect.height / 2,
        y_label,
        color=text_color,
        size=config.FONT_SIZE,
        anchor="middle",
        rotation=-90.0,
    )


def draw_curve(surface: DrawingSurface, points: Sequence[Tuple[float, float]]) -> None:
    color = config.FIGURE_COLORS["curve"]
    for (xa, ya), (xb, yb) in zip(points, points[1:]):
        surface.draw_line(xa, ya, xb, yb, color=color, width=config.CURVE_LINE_WIDTH)


def draw_marker(surface: DrawingSurface, cx: float, cy: float) -> None:
    surface.draw_circle(cx, cy, config.MARKER_RADIUS, fill=config.FIGURE_COLORS["marker"])
    surface.draw_circle(
        cx,
        cy,
        config.MARKER_RING_RADIUS,
        stroke=config.FIGURE_COLORS["ring"],
        width=config.RING_LINE_WIDTH,
    )


def render_chart(surface: DrawingSurface, chart: ChartData, rect: Optional[CanvasRect] = None) -> None:
    rect = rect or canvas_rect()
    draw_grid(surface, rect)
    draw_axes(surface, rect, chart.x_label, chart.y_label)
    draw_curve(surface, project_points(chart.samples, chart.view, rect))
    draw_marker(
        surface,
        project_x(chart.marker.x, chart.view, rect),
        project_y(chart.marker.y, chart.view, rect),
    )
    surface.draw_text(
        rect.x0,
        rect.y0 + rect.height + config.CANVAS_PAD - config.CANVAS_EDGE,
        config.CHART_CAPTION,
        color=config.FIGURE_COLORS["caption"],
        size=config.FONT_SIZE,
    )


class FigureSurface:
    """Drawing surface that collects Plotly layout shapes and annotations in pixel space."""

    def __init__(self, width: int = config.CANVAS_WIDTH, height: int = config.CANVAS_HEIGHT) -> None:
        self.width = width
        self.height = height
        self.shapes: List[Dict[str, Any]] = []
        self.annotations: List[Dict[str, Any]] = []

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, *, color: str, width: float) -> None:
        self.shapes.append(
            dict(
                type="line",
                xref="x",
                yref="y",
                x0=x1,
                y0=y1,
                x1=x2,
                y1=y2,
                line=dict(color=color, width=width),
            )
        )

    def draw_circle(
        self,
        cx: float,
        cy: float,
        radius: float,
        *,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        width: float = 1.0,
    ) -> None:
        self.shapes.append(
            dict(
                type="circle",
                xref="x",
                yref="y",
                x0=cx - radius,
                y0=cy - radius,
                x1=cx + radius,
                y1=cy + radius,
                fillcolor=fill or "rgba(0,0,0,0)",
                line=dict(color=stroke or fill or "rgba(0,0,0,0)", width=width if stroke else 0),
            )
        )

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        color: str,
        size: int,
        anchor: str = "start",
        rotation: float = 0.0,
    ) -> None:
        self.annotations.append(
            dict(
                x=x,
                y=y,
                xref="x",
                yref="y",
                text=text,
                showarrow=False,
                font=dict(color=color, size=size),
                xanchor=_TEXT_ANCHORS.get(anchor, "left"),
                yanchor="middle" if rotation else "bottom",
                textangle=rotation,
            )
        )

    def figure(self, *, uirevision: Optional[str] = None) -> go.Figure:
        fig = go.Figure()
        fig.update_layout(
            width=self.width,
            height=self.height,
            margin=dict(l=0, r=0, t=0, b=0),
            paper_bgcolor=config.FIGURE_COLORS["background"],
            plot_bgcolor=config.FIGURE_COLORS["background"],
            xaxis=dict(range=[0, self.width], visible=False, fixedrange=True),
            yaxis=dict(range=[self.height, 0], visible=False, fixedrange=True),
            showlegend=False,
            uirevision=uirevision,
            shapes=self.shapes,
            annotations=self.annotations,
        )
        return fig


def chart_figure(mode: str, power: float, distance: float, *, uirevision: Optional[str] = None) -> go.Figure:
    surface = FigureSurface()
    render_chart(surface, build_chart(mode, power, distance))
    return surface.figure(uirevision=uirevision)

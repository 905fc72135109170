"""
Explicit scene description for the charts.

A chart build produces a `Scene`: a frame plus a flat, paint-ordered list of
drawables (rectangles, text, polylines, markers, callouts) and its axes. The
scene is rebuilt on every render and rendered to a Plotly figure in pixel
space: the x axis spans [0, inner_width], the y axis [inner_height, 0]
(reversed, so pixel 0 is the top), and the figure margins equal the frame
margins. Pixel positions reported by hover events therefore map back through
the same scales that placed the geometry.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import plotly.graph_objects as go

import config
from layout_engine import ChartFrame

# ============================================================
# DRAWABLES
# ============================================================

@dataclass(frozen=True)
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float
    fill: Optional[str] = None
    stroke: Optional[str] = "black"
    stroke_width: float = 1
    hover_id: Optional[int] = None


@dataclass(frozen=True)
class Text:
    """Text whose baseline starts (anchor='start'), centres or ends at (x, y)."""
    x: float
    y: float
    text: str
    size: int = 13
    color: Optional[str] = None
    anchor: str = "start"


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Tuple[float, float], ...]
    color: str = config.LINE_COLOR
    width: float = 2.5
    dash: Optional[str] = None


@dataclass(frozen=True)
class Marker:
    x: float
    y: float
    radius: float = 5
    color: str = config.LINE_COLOR


@dataclass(frozen=True)
class Callout:
    """Annotation text placed (dx, dy) pixels from the point it is pinned to."""
    x: float
    y: float
    dx: float
    dy: float
    title: str
    label: str = ""
    color: Optional[str] = None


@dataclass(frozen=True)
class Axis:
    orientation: str  # "bottom" or "left"
    ticks: Tuple[Tuple[float, str], ...] = ()
    title: str = ""
    grid: bool = False


@dataclass
class Scene:
    frame: ChartFrame
    items: List[object] = field(default_factory=list)
    axes: List[Axis] = field(default_factory=list)
    hover: Optional[str] = None  # "columns" | "cells" | None
    focus_color: Optional[str] = None

    def add(self, *items):
        self.items.extend(items)
        return self

    def of_type(self, kind):
        return [i for i in self.items if isinstance(i, kind)]

# ============================================================
# RENDERING
# ============================================================

_TEXT_POSITION = {"start": "top right", "middle": "top center", "end": "top left"}


def _template(theme):
    return "plotly_white" if theme == "light" else "plotly_dark"


def _ink(theme):
    return "black" if theme == "light" else "white"


def _rect_trace(rect: Rect):
    return go.Scatter(
        x=[rect.x0, rect.x1, rect.x1, rect.x0, rect.x0],
        y=[rect.y0, rect.y0, rect.y1, rect.y1, rect.y0],
        mode="lines",
        fill="toself" if rect.fill else "none",
        fillcolor=rect.fill,
        line=dict(color=rect.stroke or "rgba(0,0,0,0)", width=rect.stroke_width if rect.stroke else 0),
        hoveron="fills",
        hoverinfo="none" if rect.hover_id is not None else "skip",
        showlegend=False,
    )


def _text_trace(texts, theme):
    return go.Scatter(
        x=[t.x for t in texts],
        y=[t.y for t in texts],
        mode="text",
        text=[t.text for t in texts],
        textposition=[_TEXT_POSITION.get(t.anchor, "top right") for t in texts],
        textfont=dict(size=[t.size for t in texts], color=[t.color or _ink(theme) for t in texts]),
        hoverinfo="skip",
        showlegend=False,
    )


def _marker_traces(markers):
    groups = OrderedDict()
    for m in markers:
        groups.setdefault((m.radius, m.color), []).append(m)
    for (radius, color), group in groups.items():
        yield go.Scatter(
            x=[m.x for m in group],
            y=[m.y for m in group],
            mode="markers",
            marker=dict(size=radius * 2, color=color),
            hoverinfo="skip",
            showlegend=False,
        )


def _apply_axis(fig, axis: Axis, theme):
    update = fig.update_xaxes if axis.orientation == "bottom" else fig.update_yaxes
    update(
        visible=True,
        showticklabels=True,
        tickmode="array",
        tickvals=[pos for pos, _ in axis.ticks],
        ticktext=[label for _, label in axis.ticks],
        ticks="outside",
        showline=True,
        linecolor=_ink(theme),
        title_text=axis.title,
        showgrid=axis.grid,
        gridcolor=config.GRID_COLOR,
        griddash="dot",
    )


def scene_to_figure(scene: Scene, theme="light") -> go.Figure:
    """
    Render a scene to a Plotly figure. Rects become filled scatter outlines
    (hoverable ones keep their paint order as curveNumber), text is batched
    into one text trace, callouts become arrow annotations.
    """
    frame = scene.frame
    inner_w, inner_h = frame.inner_width, frame.inner_height
    fig = go.Figure()

    for item in scene.items:
        if isinstance(item, Rect):
            fig.add_trace(_rect_trace(item))
        elif isinstance(item, Polyline):
            fig.add_trace(go.Scatter(
                x=[p[0] for p in item.points],
                y=[p[1] for p in item.points],
                mode="lines",
                line=dict(color=item.color, width=item.width, dash=item.dash),
                hoverinfo="skip",
                showlegend=False,
            ))

    for trace in _marker_traces(scene.of_type(Marker)):
        fig.add_trace(trace)

    texts = scene.of_type(Text)
    if texts:
        fig.add_trace(_text_trace(texts, theme))

    for c in scene.of_type(Callout):
        text = f"<b>{c.title}</b>" + (f"<br>{c.label}" if c.label else "")
        fig.add_annotation(
            x=c.x, y=c.y, ax=c.dx, ay=c.dy, axref="pixel", ayref="pixel",
            text=text, showarrow=True, arrowhead=0, arrowwidth=1,
            arrowcolor=c.color or _ink(theme),
            font=dict(color=c.color or _ink(theme), size=12),
        )

    if scene.hover == "columns":
        # One invisible marker per pixel column: with hovermode "x" the
        # hovered column's bbox is the pointer's horizontal position.
        columns = list(range(0, int(inner_w) + 1))
        fig.add_trace(go.Scatter(
            x=columns,
            y=[inner_h / 2] * len(columns),
            mode="markers",
            marker=dict(size=1, opacity=0),
            hoverinfo="none",
            showlegend=False,
        ))

    if scene.focus_color:
        # Hidden until a hover callback patches in a position
        fig.add_trace(go.Scatter(
            x=[], y=[], mode="markers",
            marker=dict(size=16, color=scene.focus_color),
            hoverinfo="skip",
            showlegend=False,
        ))

    fig.update_layout(
        template=_template(theme),
        width=frame.width,
        height=frame.height,
        autosize=False,
        margin=dict(l=frame.margin.left, r=frame.margin.right,
                    t=frame.margin.top, b=frame.margin.bottom, pad=0),
        showlegend=False,
        hovermode="x" if scene.hover == "columns" else "closest",
        dragmode=False,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    fig.update_xaxes(range=[0, inner_w], fixedrange=True, zeroline=False,
                     showgrid=False, visible=False, showspikes=False)
    fig.update_yaxes(range=[inner_h, 0], fixedrange=True, zeroline=False,
                     showgrid=False, visible=False, showspikes=False)

    for axis in scene.axes:
        _apply_axis(fig, axis, theme)

    return fig


def focus_trace_index(fig: go.Figure) -> int:
    """The focus marker is always the last trace."""
    return len(fig.data) - 1


def empty_figure(message="Data unavailable", theme="light") -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=message, x=0.5, y=0.5, xref="paper", yref="paper",
                       showarrow=False, font=dict(size=16, color="gray"))
    fig.update_layout(
        template=_template(theme),
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        margin=dict(l=20, r=20, t=20, b=20),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig

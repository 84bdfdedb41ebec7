# dashboard/draw_charts.py — Plotly chart builders for the two 311 views
# What it does:
# - bar_top(): ranked reasons -> horizontal bars, largest on top
# - bar_monthly(): 12-month summary -> vertical bars with value labels
# Both return a brand-new figure every call (the caller replaces or animates
# towards it). Axis ranges, ticks, bar widths and colors come from dashboard.scales;
# Plotly places the categories; the band scale sizes the bars within them.

import pandas as pd
import plotly.graph_objects as go

from dashboard.aggregate import ALL, for_display
from dashboard.scales import (
    BandScale, chart_height, format_tick, gradient, value_scale,
)

DATA_YEAR = 2025
TICK_COUNT = 6
CORNER_RADIUS = 4

# Top Reasons geometry / palette
TOP_MARGIN = dict(t=30, r=100, b=60, l=260)
TOP_WIDTH = 900 - TOP_MARGIN["l"] - TOP_MARGIN["r"]
TOP_ROW_HEIGHT = 35
TOP_MIN_HEIGHT = 400
TOP_PADDING = 0.25
TOP_COLORS = ("#a29bfe", "#6c5ce7")
TOP_HIGHLIGHT = "#fd79a8"

# Monthly dashboard geometry / palette
MONTHLY_MARGIN = dict(t=40, r=30, b=60, l=70)
MONTHLY_WIDTH = 860 - MONTHLY_MARGIN["l"] - MONTHLY_MARGIN["r"]
MONTHLY_HEIGHT = 450 - MONTHLY_MARGIN["t"] - MONTHLY_MARGIN["b"]
MONTHLY_PADDING = 0.2
MONTHLY_HEADROOM = 1.15
MONTHLY_COLORS = ("#74b9ff", "#0984e3")
MONTHLY_HIGHLIGHT = "#fdcb6e"

GRID = dict(showgrid=True, gridcolor="#e9ecef", griddash="dash", zeroline=False)


def _ticks(scale):
    vals = scale.ticks(TICK_COUNT)
    return dict(tickvals=vals, ticktext=[format_tick(v) for v in vals])


def _base_layout(fig, width, height, margin, title):
    fig.update_layout(
        title=title,
        width=width,
        height=height,
        margin=margin,
        plot_bgcolor="white",
        showlegend=False,
        hoverlabel=dict(bgcolor="rgba(33, 37, 41, 0.95)", font_color="white"),
        uirevision="bars",
    )


def bar_colors(fig: go.Figure) -> list:
    """Gradient colors of the bars as drawn (before any hover styling)."""
    return list(fig.data[0].marker.color or [])


def bar_top(summary: pd.DataFrame, title: str = "", entering: bool = False):
    """
    Expect a ranked frame (largest first) with columns:
      - category: complaint reason
      - value: number of calls
    Rows are reversed so the first ranked reason is drawn at the top. The plot
    grows 35px per row (at least 400px), so bar thickness stays the same in
    the Top 10 and All views. entering=True draws every bar at zero length.
    """
    rows = for_display(summary)
    cats = rows["category"].tolist()
    values = rows["value"].tolist()

    plot_h = chart_height(len(rows), TOP_ROW_HEIGHT, TOP_MIN_HEIGHT)
    x = value_scale(values, TOP_WIDTH)
    y = BandScale(cats, (plot_h, 0), padding=TOP_PADDING)
    color = gradient(values, TOP_COLORS)

    fig = go.Figure(go.Bar(
        x=[0] * len(values) if entering else values,
        y=cats,
        ids=cats,
        orientation="h",
        width=y.fill,
        marker=dict(color=[color(v) for v in values], cornerradius=CORNER_RADIUS),
        text=["" if entering else f"{v:,}" for v in values],
        textposition="outside",
        cliponaxis=False,
        hovertext=[f"<b>{c}</b><br>Calls: {v:,}" for c, v in zip(cats, values)],
        hovertemplate="%{hovertext}<extra></extra>",
    ))
    _base_layout(
        fig,
        width=TOP_WIDTH + TOP_MARGIN["l"] + TOP_MARGIN["r"],
        height=plot_h + TOP_MARGIN["t"] + TOP_MARGIN["b"],
        margin=TOP_MARGIN,
        title=title if cats else "No data",
    )
    fig.update_xaxes(range=list(x.domain), title_text="Number of Calls", **_ticks(x), **GRID)
    fig.update_yaxes(type="category", categoryorder="array", categoryarray=cats, showgrid=False)
    return fig


def bar_monthly(summary: pd.DataFrame, reason: str = ALL, neighborhood: str = ALL,
                title: str = "", entering: bool = False):
    """
    Expect the 12-row monthly summary (category = month name, value = count)
    in display order. The y axis runs to 115% of the tallest bar so the value
    labels above bars are not clipped; zero bars get no label.
    """
    cats = summary["category"].tolist()
    values = summary["value"].tolist()

    x = BandScale(cats, (0, MONTHLY_WIDTH), padding=MONTHLY_PADDING)
    y = value_scale(values, MONTHLY_HEIGHT, headroom=MONTHLY_HEADROOM, inverted=True)
    color = gradient(values, MONTHLY_COLORS, from_zero=True)

    reason_text = "All Types" if reason == ALL else reason
    area_text = "All Neighborhoods" if neighborhood == ALL else neighborhood
    hover = [
        f"<b>{c} {DATA_YEAR}</b><br>Type: {reason_text}<br>Area: {area_text}"
        f"<br><b>Count: {v:,}</b>"
        for c, v in zip(cats, values)
    ]

    fig = go.Figure(go.Bar(
        x=cats,
        y=[0] * len(values) if entering else values,
        ids=cats,
        width=x.fill,
        marker=dict(color=[color(v) for v in values], cornerradius=CORNER_RADIUS),
        text=["" if entering or v <= 0 else f"{v:,}" for v in values],
        textposition="outside",
        cliponaxis=False,
        hovertext=hover,
        hovertemplate="%{hovertext}<extra></extra>",
    ))
    _base_layout(
        fig,
        width=MONTHLY_WIDTH + MONTHLY_MARGIN["l"] + MONTHLY_MARGIN["r"],
        height=MONTHLY_HEIGHT + MONTHLY_MARGIN["t"] + MONTHLY_MARGIN["b"],
        margin=MONTHLY_MARGIN,
        title=title,
    )
    fig.update_xaxes(type="category", categoryorder="array", categoryarray=cats, showgrid=False)
    fig.update_yaxes(range=list(y.domain), title_text="Number of Complaints", **_ticks(y), **GRID)
    return fig

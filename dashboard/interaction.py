# dashboard/interaction.py — chart state and hover / click feedback
# What it does:
# - ChartState: the per-session selections; every change returns a new state
# - bar_styles(): colors + opacities for "bar i is hovered" (or nothing is)
# - bind_hover() / bind_click_flash(): wire those styles onto a FigureWidget
# The tooltip itself is Plotly's hover label (follows the pointer, hides on leave).

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Callable, Sequence

from dashboard.aggregate import ALL, SORT_COUNT, SORT_MONTH
from dashboard.animate import FLASH_MS, HOVER_MS

logger = logging.getLogger(__name__)

FLASH_COLOR = "#ffffff"


@dataclass(frozen=True)
class ChartState:
    show_all: bool = False
    sort_by: str = SORT_MONTH
    reason: str = ALL
    neighborhood: str = ALL

    def toggled(self) -> "ChartState":
        return replace(self, show_all=not self.show_all)

    def with_filters(self, reason: str = ALL, neighborhood: str = ALL) -> "ChartState":
        return replace(self, reason=reason or ALL, neighborhood=neighborhood or ALL)

    def with_sort(self, by: str) -> "ChartState":
        if by not in (SORT_MONTH, SORT_COUNT):
            raise ValueError(f"unknown sort mode: {by!r}")
        return replace(self, sort_by=by)


def toggle_label(state: ChartState) -> str:
    """Label for the action the toggle button would perform next."""
    return "Show Top 10 Only" if state.show_all else "Show All Reasons"


@dataclass(frozen=True)
class HoverStyle:
    highlight: str
    dim_opacity: float = 0.4


def bar_styles(base_colors: Sequence[str], hovered: int | None,
               style: HoverStyle) -> tuple[list[str], list[float]]:
    """
    hovered=None  -> every bar back to its own color at full opacity
    hovered=i     -> bar i in the highlight color, siblings dimmed
    """
    colors = list(base_colors)
    if hovered is None or not 0 <= hovered < len(colors):
        return colors, [1.0] * len(colors)
    opacities = [style.dim_opacity] * len(colors)
    colors[hovered] = style.highlight
    opacities[hovered] = 1.0
    return colors, opacities


def flash_steps(highlight: str) -> list[tuple[str, int]]:
    """Click flash: jump to white, then fade back to the highlight color."""
    return [(FLASH_COLOR, 0), (highlight, FLASH_MS * 2)]


def _restyle(widget, colors, opacities=None, duration: int = HOVER_MS) -> None:
    trace = widget.data[0]
    if duration:
        with widget.batch_animate(duration=duration, easing="cubic-out"):
            trace.marker.color = colors
            if opacities is not None:
                trace.marker.opacity = opacities
    else:
        with widget.batch_update():
            trace.marker.color = colors
            if opacities is not None:
                trace.marker.opacity = opacities


def bind_hover(widget, base_colors: Callable[[], Sequence[str]], style: HoverStyle) -> None:
    """
    Highlight the bar under the pointer and dim its siblings; restore all
    bars on leave. `base_colors` returns the gradient colors of the bars
    currently on screen.
    """
    trace = widget.data[0]

    def _on_hover(_trace, points, _state):
        if not points.point_inds:
            return
        idx = points.point_inds[0]
        logger.debug("hover bar %d", idx)
        colors, opacities = bar_styles(base_colors(), idx, style)
        _restyle(widget, colors, opacities)

    def _on_unhover(_trace, _points, _state):
        colors, opacities = bar_styles(base_colors(), None, style)
        _restyle(widget, colors, opacities)

    trace.on_hover(_on_hover)
    trace.on_unhover(_on_unhover)


def bind_click_flash(widget, base_colors: Callable[[], Sequence[str]], style: HoverStyle) -> None:
    """Cosmetic two-step flash on the clicked bar; no state changes."""
    trace = widget.data[0]

    def _on_click(_trace, points, _state):
        if not points.point_inds:
            return
        idx = points.point_inds[0]
        logger.debug("click bar %d", idx)
        for color, duration in flash_steps(style.highlight):
            colors, opacities = bar_styles(base_colors(), idx, style)
            colors[idx] = color
            _restyle(widget, colors, opacities, duration=duration)

    trace.on_click(_on_click)

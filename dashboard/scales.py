# dashboard/scales.py — value -> pixel and value -> color mappings
# What it does:
# - LinearScale: numeric axis (domain -> pixel range) plus "nice" tick values
# - BandScale: categorical axis with padding between bands
# - ColorScale: two-point color gradient, interpolated
# - format_tick(): 1500 -> "1K" style axis labels
# A zero-width domain (single value, all zeros) is widened to 1 so nothing
# divides by zero.

from __future__ import annotations
import math
from typing import Sequence

from plotly.colors import find_intermediate_color, hex_to_rgb

DEFAULT_WIDTH = 1.0


def _span(lo: float, hi: float) -> float:
    span = hi - lo
    if not math.isfinite(span) or span == 0:
        return DEFAULT_WIDTH
    return span


def _tick_step(start: float, stop: float, count: int) -> float:
    # 1, 2 or 5 times a power of ten, close to span / count
    raw = (stop - start) / max(count, 1)
    power = 10 ** math.floor(math.log10(raw))
    error = raw / power
    if error >= math.sqrt(50):
        power *= 10
    elif error >= math.sqrt(10):
        power *= 5
    elif error >= math.sqrt(2):
        power *= 2
    return power


class LinearScale:
    """
    Numeric axis. The renderer reads `domain` for the axis range and `ticks()`
    for tick values; Plotly does the pixel mapping itself, so calling the
    scale is only needed for layout arithmetic outside a figure.
    """

    def __init__(self, domain: Sequence[float], range_: Sequence[float]):
        lo, hi = float(domain[0]), float(domain[1])
        if hi - lo == 0 or not math.isfinite(hi - lo):
            hi = lo + DEFAULT_WIDTH
        self.domain = (lo, hi)
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        lo, hi = self.domain
        r0, r1 = self.range
        t = (float(value) - lo) / (hi - lo)
        return r0 + t * (r1 - r0)

    def ticks(self, count: int = 6) -> list[float]:
        """Evenly spaced round values inside the domain (d3 style)."""
        lo, hi = self.domain
        step = _tick_step(lo, hi, count)
        first = math.ceil(lo / step)
        last = math.floor(hi / step)
        return [round(i * step, 10) for i in range(first, last + 1)]


class BandScale:
    """
    Splits a pixel range into equal bands, one per category, with `padding`
    (fraction of the step) between bands and on both outer edges.
    """

    def __init__(self, domain: Sequence[str], range_: Sequence[float], padding: float = 0.0):
        self.domain = list(domain)
        self.range = (float(range_[0]), float(range_[1]))
        self.padding = padding
        n = len(self.domain)
        r0, r1 = self.range
        reverse = r1 < r0
        start, stop = (r1, r0) if reverse else (r0, r1)
        self.step = (stop - start) / max(1.0, n - padding + padding * 2)
        self.bandwidth = self.step * (1 - padding)
        start += (stop - start - self.step * (n - padding)) / 2
        positions = [start + self.step * i for i in range(n)]
        if reverse:
            positions.reverse()
        self._index = dict(zip(self.domain, positions))

    def position(self, category: str) -> float | None:
        return self._index.get(category)

    @property
    def fill(self) -> float:
        """Share of each step covered by its bar, in category-axis units."""
        return self.bandwidth / self.step if self.step else 0.0


class ColorScale:
    def __init__(self, domain: Sequence[float], colors: Sequence[str]):
        lo, hi = float(domain[0]), float(domain[1])
        self.domain = (lo, lo + _span(lo, hi))
        self.low = hex_to_rgb(colors[0])
        self.high = hex_to_rgb(colors[1])

    def __call__(self, value: float) -> str:
        lo, hi = self.domain
        t = (float(value) - lo) / (hi - lo)
        t = min(1.0, max(0.0, t)) if math.isfinite(t) else 0.0
        r, g, b = find_intermediate_color(self.low, self.high, t, colortype="tuple")
        return "#{:02x}{:02x}{:02x}".format(round(r), round(g), round(b))


def format_tick(value: float) -> str:
    """Axis label: thousands become truncated integer 'K' values."""
    if value >= 1000:
        return f"{int(value // 1000)}K"
    return f"{int(value)}" if float(value).is_integer() else f"{value:g}"


def value_scale(values: Sequence[float], length: float, headroom: float = 1.0,
                inverted: bool = False) -> LinearScale:
    """
    [0, max * headroom] -> [0, length] (or [length, 0] for a y axis).
    An empty or all-zero collection maps as if max were 1.
    """
    top = max((float(v) for v in values), default=0.0) or DEFAULT_WIDTH
    range_ = (length, 0.0) if inverted else (0.0, length)
    return LinearScale((0.0, top * headroom), range_)


def gradient(values: Sequence[float], colors: Sequence[str], from_zero: bool = False) -> ColorScale:
    """Color scale over [min, max] of the values (or [0, max])."""
    vals = [float(v) for v in values] or [0.0]
    lo = 0.0 if from_zero else min(vals)
    return ColorScale((lo, max(vals)), colors)


def chart_height(n_rows: int, row_height: float = 35, floor: float = 400) -> float:
    """Plot height that keeps row density constant, never below `floor`."""
    return max(floor, n_rows * row_height)

# dashboard/animate.py — timed, eased transitions
# Bars are animated by Plotly itself (FigureWidget.batch_animate); the stat
# counters are tweened here and redrawn with reactive.invalidate_later().
# Nothing in this file changes a data value, only how it is reached.

from __future__ import annotations
import time
from dataclasses import dataclass, replace

ENTRANCE_MS = 600
HOVER_MS = 200
FLASH_MS = 100

COUNTER_SECONDS = 0.5
FRAME_SECONDS = 1 / 30

EASING = "cubic-out"


def ease_out_cubic(t: float) -> float:
    t = min(1.0, max(0.0, t))
    return 1 - (1 - t) ** 3


@dataclass(frozen=True)
class CounterTween:
    """
    A number counting from `start` to `end` over `duration` seconds,
    starting at `started` (a time.monotonic() reading).
    """

    start: int = 0
    end: int = 0
    started: float = 0.0
    duration: float = COUNTER_SECONDS

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - self.started) / self.duration))

    def value_at(self, now: float) -> int:
        eased = ease_out_cubic(self.progress(now))
        return round(self.start + (self.end - self.start) * eased)

    def done(self, now: float) -> bool:
        return self.progress(now) >= 1.0

    def retarget(self, end: int, now: float | None = None) -> "CounterTween":
        """New tween from whatever is on screen right now to `end`."""
        now = time.monotonic() if now is None else now
        return replace(self, start=self.value_at(now), end=end, started=now)


def animate_to(widget, figure, duration: int = ENTRANCE_MS) -> None:
    """
    Move a live FigureWidget to the state of a freshly drawn figure.
    Traces are matched by position and points by their `ids`, so bars glide
    from where they are instead of being redrawn from scratch.
    """
    with widget.batch_animate(duration=duration, easing=EASING):
        for live, new in zip(widget.data, figure.data):
            props = new.to_plotly_json()
            props.pop("type", None)
            props.pop("uid", None)
            live.update(props, overwrite=True)
        widget.layout.update(figure.layout.to_plotly_json(), overwrite=True)

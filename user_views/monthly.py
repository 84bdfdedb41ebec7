import logging
import time

import plotly.graph_objects as go
from shiny import reactive, render, req, ui
from shinywidgets import output_widget, render_plotly

from dashboard.aggregate import (
    ALL, SORT_COUNT, SORT_MONTH,
    filter_options, monthly_summary, sort_summary, summary_stats,
)
from dashboard.animate import ENTRANCE_MS, FRAME_SECONDS, CounterTween, animate_to
from dashboard.draw_charts import MONTHLY_HIGHLIGHT, bar_colors, bar_monthly
from dashboard.interaction import ChartState, HoverStyle, bind_click_flash, bind_hover
from fetch_311_data import DETAILED_CSV, load_detailed
from user_views.load_state import load_error_ui, load_or_error

logger = logging.getLogger(__name__)

# Neighborhood placeholder that still counts toward "All Neighborhoods"
UNKNOWN_NEIGHBORHOOD = "Unknown"

def select_choices(values, all_label):
    """The 'all' option first, then one option per value."""
    return {ALL: all_label, **{v: v for v in values if v != ALL}}

def _sort_button(input_id, label, active):
    cls = "btn-primary active" if active else "btn-outline-primary"
    return ui.input_action_button(input_id, label, class_=cls)

def _card(label, value):
    return ui.div(
        ui.div(value, class_="metric-value"),
        ui.div(label, class_="metric-label"),
        class_="metric-card",
    )

def panel():
    return ui.page_fluid(
        ui.h4("Boston 311 Complaints by Month (2025)"),
        ui.output_ui("monthly_body"),
    )

def body_ui(records=None, err=None):
    if err is not None:
        return load_error_ui(err)
    reasons = filter_options(records, "reason")
    hoods = filter_options(records, "neighborhood", exclude=[UNKNOWN_NEIGHBORHOOD])
    return ui.TagList(
        ui.row(
            ui.column(4, ui.input_select("reason", "Complaint Type",
                                         select_choices(reasons, "All Types"), selected=ALL)),
            ui.column(4, ui.input_select("neighborhood", "Neighborhood",
                                         select_choices(hoods, "All Neighborhoods"), selected=ALL)),
            ui.column(4, ui.output_ui("sort_buttons")),
        ),
        ui.output_ui("stats"),
        output_widget("plot_monthly", fill=False),
    )

def server_bind(output, input, source: str = DETAILED_CSV):
    state = reactive.Value(ChartState())
    widget = reactive.Value(None)
    tweens = reactive.Value({"total": CounterTween(), "avg": CounterTween()})
    drawn = {"colors": []}

    @reactive.Calc
    def _records():
        # No reactive inputs: runs once per session
        return load_or_error(load_detailed, source)

    @reactive.Calc
    def _summary():
        records, _ = _records()
        req(records is not None)
        st = state.get()
        return sort_summary(monthly_summary(records, st.reason, st.neighborhood), st.sort_by)

    @render.ui
    def monthly_body():
        records, err = _records()
        return body_ui(records, err)

    @render.ui
    def sort_buttons():
        by = state.get().sort_by
        return ui.div(
            _sort_button("sort_month", "Sort by Month", by == SORT_MONTH),
            _sort_button("sort_count", "Sort by Count", by == SORT_COUNT),
            class_="btn-group",
        )

    # ---- stats cards: counters tween, peak/low switch immediately ----
    @reactive.Effect
    def _retarget_counters():
        stats = summary_stats(_summary())
        now = time.monotonic()
        with reactive.isolate():
            cur = tweens.get()
        tweens.set({
            "total": cur["total"].retarget(stats.total, now),
            "avg": cur["avg"].retarget(stats.average, now),
        })

    @render.ui
    def stats():
        stats = summary_stats(_summary())
        current = tweens.get()
        now = time.monotonic()
        if not all(t.done(now) for t in current.values()):
            reactive.invalidate_later(FRAME_SECONDS)
        return ui.row(
            ui.column(3, _card("Total Complaints", f"{current['total'].value_at(now):,}")),
            ui.column(3, _card("Monthly Average", f"{current['avg'].value_at(now):,}")),
            ui.column(3, _card("Peak Month", stats.peak)),
            ui.column(3, _card("Lowest Month", stats.low)),
        )

    # ---- chart ----
    @render_plotly
    def plot_monthly():
        # Built once with zero-height bars; _update_bars animates them in
        with reactive.isolate():
            summary = _summary()
        w = go.FigureWidget(bar_monthly(summary, entering=True))
        style = HoverStyle(MONTHLY_HIGHLIGHT)
        bind_hover(w, lambda: drawn["colors"], style)
        bind_click_flash(w, lambda: drawn["colors"], style)
        widget.set(w)
        return w

    @reactive.Effect
    def _update_bars():
        w = widget.get()
        if w is None:
            return
        st = state.get()
        fig = bar_monthly(_summary(), st.reason, st.neighborhood)
        drawn["colors"] = bar_colors(fig)
        animate_to(w, fig, ENTRANCE_MS)

    # ---- controls ----
    @reactive.Effect
    @reactive.event(input.reason, input.neighborhood)
    def _filters():
        logger.debug("filters reason=%r neighborhood=%r", input.reason(), input.neighborhood())
        state.set(state.get().with_filters(input.reason(), input.neighborhood()))

    @reactive.Effect
    @reactive.event(input.sort_month)
    def _sort_month():
        logger.debug("sort by month")
        state.set(state.get().with_sort(SORT_MONTH))

    @reactive.Effect
    @reactive.event(input.sort_count)
    def _sort_count():
        logger.debug("sort by count")
        state.set(state.get().with_sort(SORT_COUNT))

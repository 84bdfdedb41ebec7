import logging

import plotly.graph_objects as go
from shiny import reactive, render, req, ui
from shinywidgets import output_widget, render_plotly

from dashboard.aggregate import rank_reasons, reason_summary, top_n
from dashboard.animate import ENTRANCE_MS, animate_to
from dashboard.draw_charts import TOP_HIGHLIGHT, bar_colors, bar_top
from dashboard.interaction import ChartState, HoverStyle, bind_hover, toggle_label
from fetch_311_data import REASONS_CSV, load_reasons
from user_views.load_state import load_error_ui, load_or_error

logger = logging.getLogger(__name__)

def panel():
    return ui.page_fluid(
        ui.h4("Boston 311 Calls by Reason (2025)"),
        # Controls + chart, or a single error line if the CSV can't be loaded
        ui.output_ui("top_body"),
    )

def body_ui(err=None):
    if err is not None:
        return load_error_ui(err)
    return ui.TagList(
        ui.input_action_button("toggle", toggle_label(ChartState())),
        output_widget("plot_top", fill=False),
    )

def server_bind(output, input, source: str = REASONS_CSV):
    state = reactive.Value(ChartState())
    widget = reactive.Value(None)
    drawn = {"colors": []}

    @reactive.Calc
    def _ranked():
        # No reactive inputs: runs once per session
        records, err = load_or_error(load_reasons, source)
        if err is not None:
            return None, err
        return rank_reasons(reason_summary(records)), None

    def _visible():
        ranked, _ = _ranked()
        req(ranked is not None)
        return top_n(ranked, show_all=state.get().show_all)

    @render.ui
    def top_body():
        _, err = _ranked()
        return body_ui(err)

    @render_plotly
    def plot_top():
        # Built once with zero-length bars; _update_bars animates them in
        with reactive.isolate():
            summary = _visible()
        w = go.FigureWidget(bar_top(summary, entering=True))
        bind_hover(w, lambda: drawn["colors"], HoverStyle(TOP_HIGHLIGHT))
        widget.set(w)
        return w

    @reactive.Effect
    def _update_bars():
        w = widget.get()
        if w is None:
            return
        fig = bar_top(_visible())
        drawn["colors"] = bar_colors(fig)
        animate_to(w, fig, ENTRANCE_MS)

    @reactive.Effect
    @reactive.event(input.toggle)
    def _toggle():
        new = state.get().toggled()
        logger.debug("toggle show_all=%s", new.show_all)
        state.set(new)
        ui.update_action_button("toggle", label=toggle_label(new))

# app.py — wires the UI and tabs together
# Run with:  shiny run app.py

import logging

from shiny import App, ui

from fetch_311_data import LOG_LEVEL
from user_views import monthly, top_reasons

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

# Only the bits the stats cards and sort buttons need; page styling is left to Bootstrap
CARD_CSS = """
.metric-card { padding: 12px; border-radius: 8px; background: #f8f9fa; text-align: center; }
.metric-value { font-size: 1.6rem; font-weight: 700; color: #0984e3; }
.metric-label { font-size: 0.85rem; color: #6c757d; }
.btn-group .btn { margin-top: 30px; }
"""

app_ui = ui.page_fluid(
    ui.tags.style(CARD_CSS),
    ui.panel_title("Boston 311 Service Requests (2025)"),

    # Two tabs: Top Reasons (horizontal bars) and Monthly Dashboard (vertical bars)
    ui.navset_tab(
        ui.nav_panel("Top Reasons", *top_reasons.panel().children),
        ui.nav_panel("Monthly Dashboard", *monthly.panel().children),
    ),
)

def server(input, output, session):
    # Each tab loads its own CSV; one failing leaves the other untouched
    top_reasons.server_bind(output, input)
    monthly.server_bind(output, input)

app = App(app_ui, server)

import logging

from shiny import ui

from fetch_311_data import LoadError

logger = logging.getLogger(__name__)

def load_or_error(load, source):
    """(data, None) on success, (None, LoadError) if the CSV can't be used."""
    try:
        return load(source), None
    except LoadError as exc:
        logger.exception("Error loading the CSV file")
        return None, exc

def load_error_ui(err: LoadError):
    # The only thing a failed tab shows
    return ui.p(
        f"Failed to load data file. Please ensure {err.source} exists.",
        class_="load-error",
        style="color: red; text-align: center;",
    )

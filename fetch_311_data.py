# fetch_311_data.py — Boston 311 CSV loading with light type coercion
# What this file does:
# - Loads .env (if present) and reads where the two CSV resources live
# - Fetches a CSV from a local path or an http(s) URL (one attempt, no retries)
# - Keeps every cell as text, then coerces declared numeric columns and trims
#   declared text columns
# - Raises LoadError for anything that stops a chart from being drawn

from __future__ import annotations
import io
import logging
import os
from typing import Iterable

import pandas as pd
import requests
from dotenv import load_dotenv
from requests.adapters import HTTPAdapter

logger = logging.getLogger(__name__)

# ------------------ CONFIG ------------------
load_dotenv()  # read .env if present

# Chart A: one row per complaint reason (reason, Count)
REASONS_CSV = os.getenv("BOSTON_311_REASONS_CSV", "boston_311_2025_by_reason.csv")

# Chart B: reason x neighborhood x month breakdown
DETAILED_CSV = os.getenv("BOSTON_311_DETAILED_CSV", "boston_311_detailed.csv")

HTTP_TIMEOUT = float(os.getenv("BOSTON_311_HTTP_TIMEOUT", "30"))
LOG_LEVEL = os.getenv("BOSTON_311_LOG_LEVEL", "INFO").upper()

# Column contracts for the two resources
REASON_COLUMNS = ("reason", "Count")
DETAILED_COLUMNS = ("reason", "neighborhood", "month", "month_name", "count")


class LoadError(RuntimeError):
    """A CSV resource could not be fetched, parsed, or lacks required columns."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source


# ------------------ HTTP SESSION ------------------
def _make_session() -> requests.Session:
    """
    Create a requests.Session with HTTP connection pooling.
    A failed fetch is terminal for the chart, so the adapter never retries.
    """
    sess = requests.Session()
    adapter = HTTPAdapter(max_retries=0, pool_connections=4, pool_maxsize=4)
    sess.mount("https://", adapter)
    sess.mount("http://", adapter)
    sess.headers.update({"User-Agent": "Boston311-Charts/1.0"})
    return sess

SESSION = _make_session()

# ------------------ HELPERS ------------------
def is_url(source: str) -> bool:
    """Return True if the source should be fetched over HTTP."""
    return str(source).lower().startswith(("http://", "https://"))

def _read_text(source: str) -> str:
    if is_url(source):
        r = SESSION.get(source, timeout=HTTP_TIMEOUT)
        r.raise_for_status()
        return r.text
    with open(source, encoding="utf-8-sig") as f:
        return f.read()

def coerce_numeric(df: pd.DataFrame, columns: Iterable[str], source: str = "") -> pd.DataFrame:
    """
    Convert text cells to numbers. Anything unparseable becomes NaN and is
    counted once per column in a warning; summing treats NaN as 0.
    """
    for col in columns:
        values = pd.to_numeric(df[col].str.strip(), errors="coerce")
        bad = int(values.isna().sum())
        if bad:
            logger.warning("%s: %d malformed value(s) in numeric column %r", source, bad, col)
        df[col] = values
    return df

def trim_text(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Strip surrounding whitespace; missing cells become ''."""
    for col in columns:
        df[col] = df[col].fillna("").astype(str).str.strip()
    return df

def read_csv_source(
    source: str,
    numeric: Iterable[str] = (),
    text: Iterable[str] = (),
    required: Iterable[str] = (),
) -> pd.DataFrame:
    """
    Read a header + rows CSV into a DataFrame of typed records.
      - Every cell is read as a string first (no pandas NA guessing)
      - `required` columns must be present in the header
      - `numeric` columns are coerced, `text` columns trimmed
    Any failure is re-raised as LoadError naming the source.
    """
    try:
        raw = _read_text(source)
        df = pd.read_csv(io.StringIO(raw), dtype=str, keep_default_na=False)
    except requests.RequestException as exc:
        raise LoadError(source, f"request failed ({exc})") from exc
    except OSError as exc:
        raise LoadError(source, f"cannot open file ({exc})") from exc
    except UnicodeDecodeError as exc:
        raise LoadError(source, f"cannot decode file ({exc})") from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise LoadError(source, f"cannot parse CSV ({exc})") from exc

    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise LoadError(source, f"missing column(s) {', '.join(missing)}")

    df = coerce_numeric(df, numeric, source)
    df = trim_text(df, text)
    logger.info("Loaded %d record(s) from %s", len(df), source)
    return df

# ------------------ PUBLIC LOADERS ------------------
def load_reasons(source: str = REASONS_CSV) -> pd.DataFrame:
    """Chart A records: reason (text), Count (number)."""
    return read_csv_source(
        source, numeric=["Count"], text=["reason"], required=REASON_COLUMNS
    )

def load_detailed(source: str = DETAILED_CSV) -> pd.DataFrame:
    """
    Chart B records: reason, neighborhood, month_name (text) and
    month, count (numbers). Row order follows the file.
    """
    return read_csv_source(
        source,
        numeric=["count", "month"],
        text=["reason", "neighborhood", "month_name"],
        required=DETAILED_COLUMNS,
    )

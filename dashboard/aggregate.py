# dashboard/aggregate.py — filter, group, sort and summarize 311 records
# What it does:
# - monthly_summary(): filtered records -> one row per calendar month (zero-filled)
# - reason_summary() / rank_reasons() / top_n(): the Top Reasons ordering
# - summary_stats(): total / average / peak / low for the stats cards
# Every summary is a fresh two-column frame: category, value.

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable

import pandas as pd

ALL = "__all__"  # filter sentinel: condition disabled; never a real CSV value

MONTH_ORDER = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

SORT_MONTH = "month"
SORT_COUNT = "count"

TOP_N = 10


def _summary(categories, values) -> pd.DataFrame:
    out = pd.DataFrame({"category": list(categories), "value": list(values)})
    out["value"] = pd.to_numeric(out["value"]).fillna(0).astype("int64")
    return out


def apply_filters(records: pd.DataFrame, reason: str = ALL, neighborhood: str = ALL) -> pd.DataFrame:
    """Keep rows matching every active filter; ALL switches a filter off."""
    mask = pd.Series(True, index=records.index)
    if reason != ALL:
        mask &= records["reason"] == reason
    if neighborhood != ALL:
        mask &= records["neighborhood"] == neighborhood
    return records[mask]


def monthly_summary(records: pd.DataFrame, reason: str = ALL, neighborhood: str = ALL) -> pd.DataFrame:
    """
    Sum `count` per month_name over the filtered rows, then spread the result
    over all twelve months (missing months -> 0). Always exactly 12 rows,
    in calendar order.
    """
    rows = apply_filters(records, reason, neighborhood)
    by_month = rows.groupby("month_name")["count"].sum()
    by_month = by_month.reindex(MONTH_ORDER, fill_value=0)
    return _summary(MONTH_ORDER, by_month.values)


def reason_summary(records: pd.DataFrame) -> pd.DataFrame:
    """
    One row per reason with its summed Count. Duplicate reasons are merged;
    first-appearance order is kept. Malformed counts add nothing.
    """
    grouped = records.groupby("reason", sort=False)["Count"].sum()
    return _summary(grouped.index, grouped.values)


def sort_summary(summary: pd.DataFrame, by: str = SORT_MONTH) -> pd.DataFrame:
    """
    SORT_MONTH keeps the natural (calendar) order.
    SORT_COUNT sorts descending by value; the sort is stable, so equal values
    keep their natural relative order.
    """
    if by == SORT_COUNT:
        return summary.sort_values("value", ascending=False, kind="stable").reset_index(drop=True)
    if by != SORT_MONTH:
        raise ValueError(f"unknown sort mode: {by!r}")
    return summary.reset_index(drop=True)


def rank_reasons(summary: pd.DataFrame) -> pd.DataFrame:
    """Descending by value, ties in original order. Done once per load."""
    return sort_summary(summary, SORT_COUNT)


def top_n(ranked: pd.DataFrame, n: int = TOP_N, show_all: bool = False) -> pd.DataFrame:
    """First min(n, len) ranked rows, or every row when show_all is set."""
    if show_all:
        return ranked.copy()
    return ranked.head(n).reset_index(drop=True)


def for_display(ranked: pd.DataFrame) -> pd.DataFrame:
    """Reverse rows so the largest value ends up drawn topmost."""
    return ranked.iloc[::-1].reset_index(drop=True)


def filter_options(records: pd.DataFrame, column: str, exclude: Iterable[str] = ()) -> list[str]:
    """Distinct non-empty values of a column, alphabetical, minus `exclude`."""
    skip = set(exclude)
    values = {str(v).strip() for v in records[column].dropna()}
    return sorted(v for v in values if v and v not in skip)


@dataclass(frozen=True)
class SummaryStats:
    total: int
    average: int
    peak: str
    low: str


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def summary_stats(summary: pd.DataFrame, months: int = len(MONTH_ORDER)) -> SummaryStats:
    """
    Stats card values for the current summary, in its current order:
      - total: sum of values
      - average: total / months, rounded half up
      - peak / low: first category reaching the max / min ("-" if empty)
    """
    if summary.empty:
        return SummaryStats(0, 0, "-", "-")
    values = summary["value"]
    total = int(values.sum())
    peak = summary.loc[values.idxmax(), "category"]
    low = summary.loc[values.idxmin(), "category"]
    return SummaryStats(total, round_half_up(total / months), str(peak), str(low))

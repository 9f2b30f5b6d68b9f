"""
Shared helpers for the aggregation step: group sums, ranking, and the
wide → long reshape used by the chart builder.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from stormimpact.clean.clean_storm_data import EVENT_TYPE
from stormimpact.logging_config import setup_logger

logger = setup_logger("aggregate.utils")

METRIC_NAME = "metric_name"
METRIC_VALUE = "metric_value"
EVENT_TOTAL = "event_total"

LONG_COLUMNS = [EVENT_TYPE, METRIC_NAME, METRIC_VALUE, EVENT_TOTAL]


def sum_by_event(df: pd.DataFrame, value_columns: list[str]) -> pd.DataFrame:
    """Sum *value_columns* per event type, counting missing values as zero.

    Returns one row per event type in sorted group order, with the event type
    as a regular column.
    """
    n_missing = int(df[value_columns].isna().sum().sum())
    if n_missing:
        logger.debug("  %d missing value(s) in %s summed as zero", n_missing, value_columns)

    return (
        df.groupby(EVENT_TYPE, sort=True)[value_columns]
        .sum(min_count=0)
        .reset_index()
    )


def rank_long_form(wide: pd.DataFrame, metrics: list[str], row_limit: int) -> pd.DataFrame:
    """Reshape *wide* to one row per (event type, metric) and keep the top rows.

    Rows are ordered by descending ``event_total``; ties keep their group
    order. The metric rows of one event type stay adjacent, in *metrics*
    order, so every retained event type keeps its full set of rows.
    """
    ranked = wide.sort_values(EVENT_TOTAL, ascending=False, kind="mergesort")
    n_metrics = len(metrics)

    long = pd.DataFrame({
        EVENT_TYPE: np.repeat(ranked[EVENT_TYPE].to_numpy(dtype=object), n_metrics),
        METRIC_NAME: np.tile(np.array(metrics, dtype=object), len(ranked)),
        METRIC_VALUE: ranked[metrics].to_numpy().ravel(),
        EVENT_TOTAL: np.repeat(ranked[EVENT_TOTAL].to_numpy(), n_metrics),
    }, columns=LONG_COLUMNS)

    return long.head(row_limit).reset_index(drop=True)


def ranked_entries(long: pd.DataFrame):
    """Yield ``(rank, rows)`` for each event type of a ranked long-form table.

    Entries are split by position, since distinct event types can share a
    title-cased label.
    """
    if long.empty:
        return
    n_metrics = long[METRIC_NAME].nunique()
    positions = np.arange(len(long)) // n_metrics
    for rank, (_, rows) in enumerate(long.groupby(positions, sort=False), start=1):
        yield rank, rows


def title_case_events(long: pd.DataFrame) -> pd.DataFrame:
    """Title-case event type labels for presentation."""
    long = long.copy()
    long[EVENT_TYPE] = long[EVENT_TYPE].astype(str).str.title()
    return long

"""
Population Health Impact
========================

Ranks event types by the number of people they killed or injured.
"""

from __future__ import annotations

import pandas as pd

from stormimpact.aggregate._aggregate_utils import (
    EVENT_TOTAL,
    rank_long_form,
    sum_by_event,
    title_case_events,
)
from stormimpact.clean.clean_storm_data import EVENT_TYPE, FATALITIES, INJURIES
from stormimpact.logging_config import setup_logger

logger = setup_logger("aggregate.health")

HEALTH_METRICS = [FATALITIES, INJURIES]
DEFAULT_TOP_N = 10


def aggregate_health(table: pd.DataFrame, top_n: int = DEFAULT_TOP_N) -> pd.DataFrame:
    """Return the top *top_n* event types by fatalities + injuries, long-form.

    Two rows per event type (``fatalities`` then ``injuries``), each carrying
    the event type's ``event_total``. *table* is left untouched.
    """
    if top_n < 1:
        raise ValueError(f"top_n must be positive, got {top_n}")

    wide = sum_by_event(table[[EVENT_TYPE, *HEALTH_METRICS]], HEALTH_METRICS)
    wide[HEALTH_METRICS] = wide[HEALTH_METRICS].round().astype("int64")
    wide[EVENT_TOTAL] = wide[FATALITIES] + wide[INJURIES]

    long = rank_long_form(wide, HEALTH_METRICS, row_limit=len(HEALTH_METRICS) * top_n)
    long = title_case_events(long)

    logger.info("Health impact: %d event types ranked, top %d kept",
                len(wide), len(long) // len(HEALTH_METRICS))
    return long

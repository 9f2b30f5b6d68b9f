"""
Economic Impact
===============

Ranks event types by property and crop damage. NOAA records each damage
amount as a value plus a magnitude code (K, M, B); the code is applied
before summing and the sums are reported in billions.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from stormimpact.aggregate._aggregate_utils import (
    EVENT_TOTAL,
    rank_long_form,
    sum_by_event,
    title_case_events,
)
from stormimpact.clean.clean_storm_data import (
    CROP_DAMAGE_EXPONENT,
    CROP_DAMAGE_VALUE,
    EVENT_TYPE,
    PROPERTY_DAMAGE_EXPONENT,
    PROPERTY_DAMAGE_VALUE,
)
from stormimpact.logging_config import setup_logger

logger = setup_logger("aggregate.economic")

PROPERTY_DAMAGE = "property_damage"
CROP_DAMAGE = "crop_damage"
ECONOMIC_METRICS = [PROPERTY_DAMAGE, CROP_DAMAGE]

DAMAGE_MULTIPLIERS = {
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
}
BILLION = 1e9

DEFAULT_TOP_N = 10
# The economic chart shows twice as many event types as the health chart
DEFAULT_BREADTH = 2

# metric -> (value column, exponent column)
_DAMAGE_COLUMNS = {
    PROPERTY_DAMAGE: (PROPERTY_DAMAGE_VALUE, PROPERTY_DAMAGE_EXPONENT),
    CROP_DAMAGE: (CROP_DAMAGE_VALUE, CROP_DAMAGE_EXPONENT),
}


def normalize_damage(
    values: pd.Series,
    exponents: pd.Series,
    multipliers: dict[str, float] | None = None,
) -> pd.Series:
    """Scale damage *values* to currency units using their exponent codes.

    Codes are looked up as-is; blank, missing, or unrecognized codes leave the
    value unchanged.
    """
    multipliers = DAMAGE_MULTIPLIERS if multipliers is None else multipliers
    factor = exponents.map(multipliers)

    unknown = factor.isna() & exponents.notna() & (exponents.astype(str) != "")
    if unknown.any():
        codes = sorted(exponents[unknown].astype(str).unique())
        logger.debug("  %d value(s) with unrecognized exponent code(s) %s kept unscaled",
                     int(unknown.sum()), codes)

    factor = factor.fillna(1.0).to_numpy(dtype=np.float64)
    return pd.Series(values.to_numpy(dtype=np.float64) * factor,
                     index=values.index, name=values.name)


def aggregate_economy(
    table: pd.DataFrame,
    top_n: int = DEFAULT_TOP_N,
    breadth: int = DEFAULT_BREADTH,
) -> pd.DataFrame:
    """Return the top ``breadth * top_n`` event types by total damage, long-form.

    Two rows per event type (``property_damage`` then ``crop_damage``), values
    and ``event_total`` in billions. *table* is left untouched.
    """
    if top_n < 1 or breadth < 1:
        raise ValueError(f"top_n and breadth must be positive, got {top_n}, {breadth}")

    damages = pd.DataFrame({EVENT_TYPE: table[EVENT_TYPE]})
    for metric, (value_col, exponent_col) in _DAMAGE_COLUMNS.items():
        damages[metric] = normalize_damage(table[value_col], table[exponent_col])

    wide = sum_by_event(damages, ECONOMIC_METRICS)
    wide[ECONOMIC_METRICS] = wide[ECONOMIC_METRICS] / BILLION
    wide[EVENT_TOTAL] = wide[PROPERTY_DAMAGE] + wide[CROP_DAMAGE]

    row_limit = len(ECONOMIC_METRICS) * breadth * top_n
    long = rank_long_form(wide, ECONOMIC_METRICS, row_limit=row_limit)
    long = title_case_events(long)

    logger.info("Economic impact: %d event types ranked, top %d kept",
                len(wide), len(long) // len(ECONOMIC_METRICS))
    return long

"""
Load Storm Event Data
=====================

Makes sure a local copy of the storm dataset exists (downloading it when
absent), then parses it into the canonical event table used by the
aggregation step.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from stormimpact.clean.clean_utils import (
    check_missing_values,
    clean_codes,
    coerce_numeric,
    select_columns,
    standardize_column_names,
)
from stormimpact.errors import ParseError
from stormimpact.fetch._fetch_utils import download_file
from stormimpact.logging_config import setup_logger

logger = setup_logger("clean.storm_data")

EVENT_TYPE = "event_type"
FATALITIES = "fatalities"
INJURIES = "injuries"
PROPERTY_DAMAGE_VALUE = "property_damage_value"
PROPERTY_DAMAGE_EXPONENT = "property_damage_exponent"
CROP_DAMAGE_VALUE = "crop_damage_value"
CROP_DAMAGE_EXPONENT = "crop_damage_exponent"

# Raw NOAA header -> canonical column name
RAW_COLUMN_MAP = {
    "EVTYPE": EVENT_TYPE,
    "FATALITIES": FATALITIES,
    "INJURIES": INJURIES,
    "PROPDMG": PROPERTY_DAMAGE_VALUE,
    "PROPDMGEXP": PROPERTY_DAMAGE_EXPONENT,
    "CROPDMG": CROP_DAMAGE_VALUE,
    "CROPDMGEXP": CROP_DAMAGE_EXPONENT,
}

NUMERIC_COLUMNS = [FATALITIES, INJURIES, PROPERTY_DAMAGE_VALUE, CROP_DAMAGE_VALUE]
CODE_COLUMNS = [PROPERTY_DAMAGE_EXPONENT, CROP_DAMAGE_EXPONENT]

_WANTED = set(RAW_COLUMN_MAP) | set(RAW_COLUMN_MAP.values())


def read_storm_csv(path: Path) -> pd.DataFrame:
    """Parse the (optionally compressed) storm CSV at *path*.

    Compression is inferred from the file extension. Raises ParseError when
    the file is empty, malformed, or lacks one of the required columns.
    """
    try:
        df = pd.read_csv(
            path,
            usecols=lambda c: str(c).strip().strip('"') in _WANTED,
            compression="infer",
            encoding="latin-1",
            low_memory=False,
        )
    except pd.errors.EmptyDataError as exc:
        raise ParseError(f"{path} is empty") from exc
    except (pd.errors.ParserError, UnicodeDecodeError, EOFError, OSError) as exc:
        raise ParseError(f"Could not parse {path}: {exc}") from exc

    df = standardize_column_names(df)
    df = select_columns(df, RAW_COLUMN_MAP)
    df = coerce_numeric(df, NUMERIC_COLUMNS)
    df = clean_codes(df, CODE_COLUMNS)
    df[EVENT_TYPE] = df[EVENT_TYPE].fillna("").astype(str).str.strip()
    return df


def load(path: Path | str, url: str, force: bool = False) -> pd.DataFrame:
    """Return the storm event table stored at *path*, fetching *url* first if needed."""
    path = Path(path)
    if force or not path.exists():
        download_file(url, path, force=force)
    else:
        logger.info("Using cached dataset: %s", path)

    logger.info("Reading %s", path.name)
    df = read_storm_csv(path)

    missing = check_missing_values(df[NUMERIC_COLUMNS])
    for col, info in missing.items():
        logger.debug("  %s: %d missing value(s) (%.2f%%) will sum as zero",
                     col, info["count"], info["pct"])

    logger.info("  Loaded %d events across %d event types",
                len(df), df[EVENT_TYPE].nunique())
    return df

"""
Shared Cleaning Utilities
=========================

Reusable helpers for turning the raw storm CSV into the canonical event table.
"""

from __future__ import annotations

import pandas as pd

from stormimpact.errors import ParseError
from stormimpact.logging_config import setup_logger

logger = setup_logger("clean.utils")


# ---------------------------------------------------------------------------
# check_missing_values
# ---------------------------------------------------------------------------

def check_missing_values(df: pd.DataFrame) -> dict:
    """Return a dict {col_name: {count, pct}} for columns with any nulls."""
    missing: dict = {}
    for col in df.columns:
        n_null = int(df[col].isna().sum())
        if n_null > 0:
            missing[col] = {
                "count": n_null,
                "pct": round(n_null / len(df) * 100, 2) if len(df) > 0 else 0.0,
            }
    return missing


# ---------------------------------------------------------------------------
# standardize_column_names
# ---------------------------------------------------------------------------

def standardize_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """Strip surrounding whitespace and quotes from column names."""
    df = df.copy()
    df.columns = [str(c).strip().strip('"') for c in df.columns]
    return df


# ---------------------------------------------------------------------------
# select_columns
# ---------------------------------------------------------------------------

def select_columns(df: pd.DataFrame, column_map: dict[str, str]) -> pd.DataFrame:
    """Keep the columns named in *column_map* and rename them to canonical names.

    Each canonical name may be present either under its raw name (a key of
    *column_map*) or already under the canonical name (a value). Raises
    ParseError listing every column that is found under neither.
    """
    rename: dict[str, str] = {}
    missing: list[str] = []
    for raw_name, canonical in column_map.items():
        if raw_name in df.columns:
            rename[raw_name] = canonical
        elif canonical in df.columns:
            rename[canonical] = canonical
        else:
            missing.append(raw_name)

    if missing:
        raise ParseError(
            f"Missing required column(s): {', '.join(missing)} "
            f"(found: {', '.join(map(str, df.columns)) or 'none'})"
        )
    return df[list(rename)].rename(columns=rename)


# ---------------------------------------------------------------------------
# coerce_numeric
# ---------------------------------------------------------------------------

def coerce_numeric(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Convert *columns* to numbers; unparseable values become NA."""
    df = df.copy()
    for col in columns:
        converted = pd.to_numeric(df[col], errors="coerce")
        n_bad = int((converted.isna() & df[col].notna()).sum())
        if n_bad:
            logger.debug("  %s: %d non-numeric value(s) treated as missing", col, n_bad)
        df[col] = converted
    return df


# ---------------------------------------------------------------------------
# clean_codes
# ---------------------------------------------------------------------------

def clean_codes(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Turn code columns into stripped strings, with blanks for missing values."""
    df = df.copy()
    for col in columns:
        df[col] = df[col].fillna("").astype(str).str.strip()
    return df

"""
Fetch the NOAA storm event dataset (StormData.csv.bz2).
Downloads to data/raw/.
"""
from __future__ import annotations

import sys

from stormimpact.errors import FetchError
from stormimpact.fetch._fetch_utils import fetch_by_tag, logger

TAG = "noaa_storm_data"


def main(force: bool = False) -> int:
    logger.info("Fetching NOAA storm event data...")
    try:
        result = fetch_by_tag(TAG, force=force)
    except FetchError as exc:
        logger.error("Failed to fetch NOAA storm data: %s", exc)
        return 1
    logger.info("Success: %s", result)
    return 0


if __name__ == "__main__":
    sys.exit(main(force="--force" in sys.argv[1:]))

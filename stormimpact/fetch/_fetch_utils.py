"""
Shared utilities for fetching the storm dataset.
Provides download, caching, URL lookup, and logging helpers.
"""

from __future__ import annotations

import hashlib
import os
import shutil
from http.client import HTTPException
from pathlib import Path
from urllib.error import URLError
from urllib.parse import unquote, urlparse
from urllib.request import urlopen

from stormimpact.config_paths import CONFIG_DIR, RAW_DATA_DIR
from stormimpact.errors import FetchError
from stormimpact.logging_config import setup_logger

logger = setup_logger("fetch.utils")

DEFAULT_STORM_DATA_URL = (
    "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"
)

# ---------------------------------------------------------------------------
# URL registry: maps a keyword tag to a line-match pattern in dataset_sources.txt
# ---------------------------------------------------------------------------
SOURCE_TAGS = {
    "noaa_storm_data": "StormData.csv",
}

DEFAULT_URLS = {
    "noaa_storm_data": DEFAULT_STORM_DATA_URL,
}


def read_sources_file(sources_file: Path | None = None) -> list[str]:
    """Read all non-empty, non-comment lines from dataset_sources.txt."""
    sources_file = sources_file or CONFIG_DIR / "dataset_sources.txt"
    if not sources_file.exists():
        logger.debug("dataset_sources.txt not found at %s", sources_file)
        return []
    urls: list[str] = []
    for line in sources_file.read_text(encoding="utf-8").splitlines():
        cleaned = line.strip()
        if cleaned and not cleaned.startswith("#"):
            urls.append(cleaned)
    return urls


def get_url_for_tag(tag: str, sources_file: Path | None = None) -> str:
    """
    Look up a URL from dataset_sources.txt by matching the tag pattern.
    Falls back to the built-in URL for the tag when no line matches.
    """
    pattern = SOURCE_TAGS.get(tag)
    if not pattern:
        raise KeyError(f"Unknown source tag: {tag}")

    for url in read_sources_file(sources_file):
        if pattern in unquote(url):
            return url

    logger.debug("No configured URL matched tag '%s'; using default", tag)
    return DEFAULT_URLS[tag]


def filename_from_url(url: str) -> str:
    """Extract a clean filename from a URL, stripping query params and %-escapes."""
    parsed = urlparse(url)
    name = os.path.basename(unquote(parsed.path))
    if name:
        return name
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:10]
    return f"download_{digest}.bin"


def download_file(url: str, dest_path: Path | None = None, force: bool = False) -> Path:
    """
    Download *url* to *dest_path* (default: data/raw/<filename from url>).
    Skips the download if the file already exists and *force* is False.
    The body is written byte-for-byte; compressed files stay compressed.

    Raises FetchError on network errors or non-success responses.
    """
    dest_path = Path(dest_path) if dest_path else RAW_DATA_DIR / filename_from_url(url)

    if dest_path.exists() and not force:
        logger.info("Already cached: %s", dest_path.name)
        return dest_path

    dest_path.parent.mkdir(parents=True, exist_ok=True)
    partial_path = dest_path.with_name(dest_path.name + ".part")

    logger.info("Downloading %s ...", url)
    try:
        with urlopen(url) as resp, open(partial_path, "wb") as fh:
            status = getattr(resp, "status", 200)
            if not 200 <= status < 300:
                raise FetchError(f"Failed to download {url}: HTTP {status}")
            shutil.copyfileobj(resp, fh)
    except FetchError:
        partial_path.unlink(missing_ok=True)
        raise
    except (URLError, HTTPException, OSError, ValueError) as exc:
        partial_path.unlink(missing_ok=True)
        raise FetchError(f"Failed to download {url}: {exc}") from exc
    except BaseException:
        partial_path.unlink(missing_ok=True)
        raise

    partial_path.replace(dest_path)
    logger.info("Saved: %s (%d bytes)", dest_path.name, dest_path.stat().st_size)
    return dest_path


def fetch_by_tag(tag: str, force: bool = False) -> Path:
    """Convenience: resolve tag → URL → download."""
    return download_file(get_url_for_tag(tag), force=force)

"""
Settings: read analysis parameters from config/analysis_settings.json.
"""
from __future__ import annotations

import json
from pathlib import Path

from stormimpact.config_paths import CONFIG_DIR
from stormimpact.logging_config import setup_logger

logger = setup_logger("pipeline.settings")

SETTINGS_FILE = CONFIG_DIR / "analysis_settings.json"

DEFAULT_SETTINGS = {
    "health_top_n": 10,
    "economy_top_n": 10,
    # economic chart shows breadth x top_n event types
    "economy_breadth": 2,
    "chart_format": "html",
}

CHART_FORMATS = ("html", "png", "svg")


def load_settings(path: Path | None = None) -> dict:
    """Return DEFAULT_SETTINGS overlaid with the values found in *path*."""
    path = path or SETTINGS_FILE
    settings = dict(DEFAULT_SETTINGS)
    if not path.exists():
        return settings

    overrides = json.loads(path.read_text(encoding="utf-8"))
    for key, value in overrides.items():
        if key not in DEFAULT_SETTINGS:
            logger.warning("Ignoring unknown setting '%s' in %s", key, path.name)
            continue
        settings[key] = value

    if settings["chart_format"] not in CHART_FORMATS:
        raise ValueError(
            f"chart_format must be one of {CHART_FORMATS}, got {settings['chart_format']!r}"
        )
    for key in ("health_top_n", "economy_top_n", "economy_breadth"):
        if not isinstance(settings[key], int) or settings[key] < 1:
            raise ValueError(f"{key} must be a positive integer, got {settings[key]!r}")
    return settings


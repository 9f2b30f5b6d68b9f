"""
Build Storm Impact Report
=========================

Writes a Markdown report to results/reports/ with the ranked health and
economic tables and links to the exported charts.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from stormimpact.aggregate._aggregate_utils import (
    EVENT_TOTAL,
    METRIC_NAME,
    METRIC_VALUE,
    ranked_entries,
)
from stormimpact.clean.clean_storm_data import EVENT_TYPE
from stormimpact.config_paths import REPORTS_DIR
from stormimpact.logging_config import setup_logger

logger = setup_logger("build.report")

REPORT_NAME = "storm_impact_report.md"


def _markdown_table(long: pd.DataFrame, value_format: str) -> list[str]:
    """Render a long-form impact table as a Markdown table, one row per event type."""
    if long.empty:
        return ["_No events to report._"]

    metrics = list(pd.unique(long[METRIC_NAME]))
    header = ["Rank", "Event type", *(m.replace("_", " ").title() for m in metrics), "Total"]
    lines = [
        "| " + " | ".join(header) + " |",
        "|" + "|".join(["---"] * len(header)) + "|",
    ]

    for rank, rows in ranked_entries(long):
        values = dict(zip(rows[METRIC_NAME], rows[METRIC_VALUE]))
        cells = [
            str(rank),
            rows[EVENT_TYPE].iloc[0],
            *(value_format.format(float(values.get(m, 0))) for m in metrics),
            value_format.format(float(rows[EVENT_TOTAL].iloc[0])),
        ]
        lines.append("| " + " | ".join(cells) + " |")
    return lines


def build_report(
    health: pd.DataFrame,
    economy: pd.DataFrame,
    chart_paths: dict[str, Path],
    source_url: str,
    out_path: Path | None = None,
) -> Path:
    """Write the Markdown report and return its path."""
    out_path = Path(out_path) if out_path else REPORTS_DIR / REPORT_NAME
    out_path.parent.mkdir(parents=True, exist_ok=True)

    def chart_link(key: str, caption: str) -> str:
        chart = chart_paths.get(key)
        if chart is None:
            return f"_{caption} chart not generated._"
        chart = Path(chart)
        rel = Path(os.path.relpath(chart, out_path.parent)).as_posix()
        if chart.suffix.lower() == ".html":
            return f"[{caption} chart]({rel})"
        return f"![{caption}]({rel})"

    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    lines = [
        "# Storm Event Impact on Health and Economy",
        "",
        f"Generated: {generated}  ",
        f"Source: <{source_url}>",
        "",
        "## Population health",
        "",
        "Event types ranked by fatalities plus injuries.",
        "",
        *_markdown_table(health, "{:,.0f}"),
        "",
        chart_link("health", "Health impact"),
        "",
        "## Economic consequences",
        "",
        "Event types ranked by property plus crop damage, in billions of USD.",
        "",
        *_markdown_table(economy, "{:,.3f}"),
        "",
        chart_link("economy", "Economic impact"),
        "",
    ]

    out_path.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Report written → %s", out_path)
    return out_path

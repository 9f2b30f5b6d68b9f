#!/usr/bin/env python3
"""Run the full storm impact pipeline: fetch -> clean -> aggregate -> chart -> report."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.table import Table

from stormimpact.aggregate import aggregate_economy, aggregate_health
from stormimpact.aggregate._aggregate_utils import (
    EVENT_TOTAL,
    METRIC_NAME,
    METRIC_VALUE,
    ranked_entries,
)
from stormimpact.build.build_report import build_report
from stormimpact.charts.chart_builder import ECONOMIC_LABELS, HEALTH_LABELS, render, save_chart
from stormimpact.clean.clean_storm_data import EVENT_TYPE, load
from stormimpact.config_paths import FIGURES_DIR, RAW_DATA_DIR, ensure_directories
from stormimpact.errors import FetchError, ParseError
from stormimpact.fetch._fetch_utils import filename_from_url, get_url_for_tag
from stormimpact.fetch.fetch_storm_data import TAG
from stormimpact.logging_config import setup_logger
from stormimpact.settings import CHART_FORMATS, load_settings

logger = setup_logger("pipeline.run")


def run(
    data_path: Path | None = None,
    url: str | None = None,
    health_top_n: int = 10,
    economy_top_n: int = 10,
    economy_breadth: int = 2,
    chart_format: str = "html",
    force: bool = False,
) -> dict:
    """Run every stage and return the aggregated tables and output paths."""
    url = url or get_url_for_tag(TAG)
    data_path = Path(data_path) if data_path else RAW_DATA_DIR / filename_from_url(url)

    logger.info("=" * 60)
    logger.info("STORM IMPACT PIPELINE")
    logger.info("=" * 60)

    events = load(data_path, url, force=force)

    health = aggregate_health(events, top_n=health_top_n)
    economy = aggregate_economy(events, top_n=economy_top_n, breadth=economy_breadth)

    charts = {}
    for key, table, labels, stem in (
        ("health", health, HEALTH_LABELS, "health_impact"),
        ("economy", economy, ECONOMIC_LABELS, "economic_impact"),
    ):
        fig = render(table, EVENT_TYPE, METRIC_VALUE, METRIC_NAME, labels)
        charts[key] = save_chart(fig, FIGURES_DIR / f"{stem}.{chart_format}")

    report = build_report(health, economy, charts, url)

    logger.info("Pipeline complete.")
    return {"health": health, "economy": economy, "charts": charts, "report": report}


def print_summary(console: Console, title: str, long: pd.DataFrame, value_format: str) -> None:
    """Print the ranked event types of one long-form table."""
    table = Table(title=title, show_header=True)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Event type", style="green")
    table.add_column("Total", justify="right", style="yellow")

    for rank, rows in ranked_entries(long):
        table.add_row(str(rank), rows[EVENT_TYPE].iloc[0],
                      value_format.format(float(rows[EVENT_TOTAL].iloc[0])))
    console.print(table)


def build_parser(defaults: dict) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Rank storm event types by health and economic impact.")
    ap.add_argument("--data-path", type=Path, default=None,
                    help="Local copy of the dataset (downloaded if missing)")
    ap.add_argument("--url", default=None,
                    help="Dataset URL (default: config/dataset_sources.txt)")
    ap.add_argument("--top-n", type=int, default=defaults["health_top_n"],
                    help="Event types on the health chart (default %(default)s)")
    ap.add_argument("--economy-top-n", type=int, default=defaults["economy_top_n"],
                    help="Base event-type count for the economic chart (default %(default)s)")
    ap.add_argument("--economy-breadth", type=int, default=defaults["economy_breadth"],
                    help="Multiplier on --economy-top-n (default %(default)s)")
    ap.add_argument("--format", dest="chart_format", choices=CHART_FORMATS,
                    default=defaults["chart_format"],
                    help="Chart file format; png/svg need kaleido (default %(default)s)")
    ap.add_argument("--force", action="store_true",
                    help="Download the dataset even if a cached copy exists")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser(load_settings()).parse_args(argv)
    ensure_directories()

    try:
        result = run(
            data_path=args.data_path,
            url=args.url,
            health_top_n=args.top_n,
            economy_top_n=args.economy_top_n,
            economy_breadth=args.economy_breadth,
            chart_format=args.chart_format,
            force=args.force,
        )
    except (FetchError, ParseError) as exc:
        logger.error("Pipeline failed: %s", exc)
        return 1

    console = Console()
    print_summary(console, "Population health impact", result["health"], "{:,.0f}")
    print_summary(console, "Economic impact (billions USD)", result["economy"], "${:,.2f}B")
    console.print(f"\n[bold green]Report:[/bold green] {result['report']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

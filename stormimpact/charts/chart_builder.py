"""Chart Builder: render aggregated impact tables as stacked Plotly bar charts."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import plotly.graph_objects as go

from stormimpact.logging_config import setup_logger

logger = setup_logger("charts.builder")

HEALTH_LABELS = {
    "title": "Most Harmful Storm Events to Population Health",
    "x_title": "Event type",
    "y_title": "People affected",
    "legend_title": "Impact",
    "total_format": "{:,.0f}",
    "stack_names": {"fatalities": "Fatalities", "injuries": "Injuries"},
}

ECONOMIC_LABELS = {
    "title": "Storm Events with the Greatest Economic Consequences",
    "x_title": "Event type",
    "y_title": "Damage (billions USD)",
    "legend_title": "Damage",
    "total_format": "${:,.1f}B",
    "stack_names": {"property_damage": "Property", "crop_damage": "Crop"},
}

STACK_COLORS = ["#d95f02", "#1b9e77", "#7570b3", "#e7298a"]


def cluster_totals(table: pd.DataFrame, category_column: str, value_column: str) -> pd.Series:
    """Sum *value_column* per category, ordered by descending total.

    Categories with equal totals keep their order of first appearance.
    """
    totals = table.groupby(category_column, sort=False)[value_column].sum()
    return totals.sort_values(ascending=False, kind="mergesort")


def render(
    table: pd.DataFrame,
    category_column: str,
    value_column: str,
    stack_column: str,
    labels: dict,
) -> go.Figure:
    """Build a stacked bar chart with one cluster per category.

    Clusters are ordered by descending total and each one is topped by a
    label showing its total, formatted with ``labels["total_format"]``.
    """
    fig = go.Figure()
    fig.update_layout(
        title=labels.get("title", ""),
        xaxis_title=labels.get("x_title", category_column),
        yaxis_title=labels.get("y_title", value_column),
        legend_title_text=labels.get("legend_title", stack_column),
        barmode="stack",
        template="plotly_white",
        font=dict(family="Inter, sans-serif"),
        margin=dict(t=60, b=120, l=60, r=30),
    )

    if table.empty:
        logger.warning("Nothing to plot for '%s'", labels.get("title", ""))
        return fig

    totals = cluster_totals(table, category_column, value_column)
    order = list(totals.index)
    stack_names = labels.get("stack_names", {})
    total_format = labels.get("total_format", "{:,.0f}")

    for i, stack_value in enumerate(pd.unique(table[stack_column])):
        rows = table[table[stack_column] == stack_value]
        values = rows.groupby(category_column, sort=False)[value_column].sum()
        fig.add_trace(go.Bar(
            x=order,
            y=[float(values.get(cat, 0.0)) for cat in order],
            name=stack_names.get(stack_value, str(stack_value)),
            marker_color=STACK_COLORS[i % len(STACK_COLORS)],
        ))

    for category, total in totals.items():
        fig.add_annotation(
            x=category,
            y=float(total),
            text=total_format.format(float(total)),
            showarrow=False,
            yanchor="bottom",
        )

    fig.update_xaxes(categoryorder="array", categoryarray=order, tickangle=-45)
    logger.info("Rendered '%s' with %d clusters", labels.get("title", ""), len(order))
    return fig


def save_chart(fig: go.Figure, path: Path) -> Path:
    """Write *fig* to *path*: HTML for ``.html``, static image (kaleido) otherwise."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".html":
        fig.write_html(path, include_plotlyjs="cdn")
    else:
        fig.write_image(path, width=1200, height=600, scale=2)
    logger.info("  Saved chart → %s", path.name)
    return path

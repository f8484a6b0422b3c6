"""Shared chart helpers: static Altair charts with no scroll zoom."""

from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

CHART_HEIGHT = 320
BAR_COLOR = "#3B82F6"
GRID_COLOR = "#334155"
LABEL_COLOR = "#94A3B8"
TITLE_COLOR = "#E2E8F0"

_BASE_CONFIG = {
    "background": "#0F172A",
    "font": "Fira Sans, sans-serif",
    "axis": {
        "labelColor": LABEL_COLOR,
        "titleColor": LABEL_COLOR,
        "gridColor": GRID_COLOR,
        "gridOpacity": 0.2,
        "domainColor": GRID_COLOR,
        "tickColor": GRID_COLOR,
        "labelFontSize": 11,
        "titleFontSize": 12,
    },
    "title": {
        "color": TITLE_COLOR,
        "fontSize": 16,
        "fontWeight": 600,
        "anchor": "start",
    },
    "view": {"strokeWidth": 0},
}


def static_bar_chart(
    data: dict[str, int],
    x_label: str = "Category",
    y_label: str = "Count",
    title: str = "",
    height: int = CHART_HEIGHT,
) -> None:
    """Render a static vertical bar chart with share-of-total tooltips."""
    df = pd.DataFrame([{x_label: k, y_label: v} for k, v in data.items()])
    if df.empty:
        st.info("No data to display.")
        return

    total = df[y_label].sum()
    df["Percentage"] = (df[y_label] / total * 100).round(1) if total > 0 else 0

    chart = (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=6, cornerRadiusTopRight=6)
        .encode(
            x=alt.X(
                f"{x_label}:N",
                sort=alt.SortField(field=y_label, order="descending"),
                title=None,
                axis=alt.Axis(labelAngle=0),
            ),
            y=alt.Y(f"{y_label}:Q", title=y_label, axis=alt.Axis(grid=True, tickMinStep=1)),
            color=alt.value(BAR_COLOR),
            tooltip=[
                alt.Tooltip(f"{x_label}:N", title=x_label),
                alt.Tooltip(f"{y_label}:Q", title="Count", format=","),
                alt.Tooltip("Percentage:Q", title="%", format=".1f"),
            ],
        )
        .properties(height=height, **({"title": title} if title else {}))
        .configure(**_BASE_CONFIG)
    )

    st.altair_chart(chart, use_container_width=True)

import math

import pandas as pd
import plotly.graph_objects as go

from .config import ROLLING_WINDOW
from .csv_parser import Table
from .timeseries import average_coordinates, series_for


# ============================================================
# Configuration / constants
# ============================================================

DEFAULT_LINE_COLORS: list[str] = [
    "#1f77b4",
    "#d62728",
    "#2ca02c",
    "#9467bd",
    "#ff7f0e",
    "#8c564b",
    "#e377c2",
    "#17becf",
]

VALUE_LABELS: dict[str, str] = {
    "daily": "Daily new cases",
    "cumulative": "Cumulative cases",
}

HOVER_TEMPLATE_LINE = (
    "Country: %{customdata[0]}<br>"
    "Date: %{x}<br>"
    "Cases: %{y:,}<extra></extra>"
)

HOVER_TEMPLATE_MAP = (
    "%{customdata[0]}<br>"
    "Confirmed: %{customdata[1]:,}<extra></extra>"
)


# ============================================================
# Helper functions
# ============================================================


def _build_palette(line_colors: list[str] | None) -> list[str]:
    """
    User-supplied colors first, defaults after.
    """
    return [*(line_colors or []), *DEFAULT_LINE_COLORS]


def _resolve_color(position: int, palette: list[str]) -> str:
    return palette[position % len(palette)]


def _marker_size(total: int, largest: int) -> float:
    # Area-proportional bubbles, clamped so small countries stay visible
    if largest <= 0:
        return 8.0
    return max(8.0, 60.0 * math.sqrt(total / largest))


# ============================================================
# Main plotting functions
# ============================================================


def create_country_trend_plot(
    df: pd.DataFrame,
    *,
    value_col: str = "daily",
    smooth: bool = True,
    template: str = "plotly_white",
    line_colors: list[str] | None = None,
) -> go.Figure:
    """
    Line chart of one metric per country over the source date labels.

    Parameters
    ----------
    df : pd.DataFrame
        Long-format frame from ``timeseries.to_long_frame`` with columns
        'country', 'date' and value_col.
    value_col : str, default "daily"
        'daily' or 'cumulative'.
    smooth : bool, default True
        Overlay a dashed 7-day rolling mean for daily values.
    template : str, default "plotly_white"
        Plotly template name, see ``ThemeConfig.plotly_template``.
    line_colors : list[str] | None, default None
        Colors used before the default palette.

    Returns
    -------
    go.Figure
    """
    if df.empty:
        return go.Figure()

    palette = _build_palette(line_colors)
    y_label = VALUE_LABELS.get(value_col, value_col)
    fig = go.Figure()

    for i, (country, sub) in enumerate(df.groupby("country", sort=False)):
        color = _resolve_color(i, palette)
        fig.add_trace(
            go.Scatter(
                x=sub["date"],
                y=sub[value_col],
                mode="lines",
                line=dict(width=2, color=color),
                name=country,
                hovertemplate=HOVER_TEMPLATE_LINE,
                customdata=[[country]] * len(sub),
            )
        )

        if smooth and value_col == "daily":
            rolling = sub[value_col].rolling(ROLLING_WINDOW, min_periods=1).mean()
            fig.add_trace(
                go.Scatter(
                    x=sub["date"],
                    y=rolling,
                    mode="lines",
                    line=dict(width=2, color=color, dash="dash"),
                    name=f"{country} ({ROLLING_WINDOW}-day avg)",
                    hoverinfo="skip",
                )
            )

    fig.update_xaxes(title_text="Date", type="category", nticks=12)
    fig.update_yaxes(title_text=y_label, tickformat=",", rangemode="tozero")
    fig.update_layout(
        template=template,
        height=550,
        legend=dict(orientation="h", x=0.5, y=1.02, xanchor="center", yanchor="bottom"),
        margin=dict(t=60, l=50, r=30, b=40),
    )
    return fig


def create_country_map(
    table: Table,
    countries: list[str],
    *,
    template: str = "plotly_white",
) -> go.Figure:
    """
    Bubble map of the latest cumulative total per selected country.

    Countries without usable coordinates are left off the map.
    """
    dates = table.date_columns
    points = []
    for country in countries:
        coords = average_coordinates(table, country)
        if coords is None:
            continue
        series = series_for(table, country, dates)
        points.append((country, coords, series[-1] if series else 0))

    fig = go.Figure()
    if points:
        largest = max(total for _, _, total in points)
        fig.add_trace(
            go.Scattergeo(
                lat=[c.lat for _, c, _ in points],
                lon=[c.lng for _, c, _ in points],
                text=[name for name, _, _ in points],
                customdata=[[name, total] for name, _, total in points],
                hovertemplate=HOVER_TEMPLATE_MAP,
                marker=dict(
                    size=[_marker_size(total, largest) for _, _, total in points],
                    color="#d62728",
                    opacity=0.6,
                    line=dict(width=1, color="#7f1d1d"),
                ),
                mode="markers",
            )
        )

    fig.update_geos(showcountries=True, projection_type="natural earth")
    fig.update_layout(template=template, height=500, margin=dict(t=20, l=0, r=0, b=0))
    return fig

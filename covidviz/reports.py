"""Report builders: turn parsed tables into exportable rows.

Each builder returns a list of rows (header row first), where a row is a
list of string or numeric cells ready for :func:`covidviz.csv_export.to_csv`.
Countries are grouped by exact name here, unlike the case-insensitive
lookup used for charts.

The global summary carries an *estimated* recovered count: the source
stopped publishing recoveries, so ``recovered`` is a fixed share of
closed non-fatal cases and must be labelled as such wherever it is
shown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import pandas as pd

from .config import (
    EXPORT_WINDOW,
    RECOVERY_RATIO,
    ROLLING_WINDOW,
    ROW_TYPE_CONFIRMED,
    ROW_TYPE_DAILY,
    ROW_TYPE_DEATHS,
    TAG_CALCULATED,
    TAG_DATE,
    TAG_ESTIMATED,
    TAG_OFFICIAL,
    TREND_WINDOW,
)
from .csv_parser import Table
from .metrics import (
    classify_trend,
    daily_deltas,
    new_since_previous,
    rolling_average,
    round_half_up,
    trend,
)
from .timeseries import grouped_series, to_int

Cell = Union[str, int, float]
Row = List[Cell]


@dataclass
class GlobalSummary:
    confirmed: int
    deaths: int
    recovered: int
    active: int
    last_update: str
    recovered_estimated: bool = True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _has_data(table: Optional[Table]) -> bool:
    return table is not None and bool(table.headers)


def format_rate(part: float, whole: float) -> str:
    """Percentage with two decimals; ``"0.00"`` when ``whole`` is 0."""
    if not whole:
        return "0.00"
    return f"{part / whole * 100:.2f}"


def _series_row(country: str, label: str, series: List[int], average: int, trend_label: str) -> Row:
    return [
        country,
        label,
        *series[-EXPORT_WINDOW:],
        series[-1] if series else 0,
        average,
        trend_label,
    ]


# ---------------------------------------------------------------------------
# Global summary
# ---------------------------------------------------------------------------


def summarize_global(
    confirmed: Optional[Table],
    deaths: Optional[Table],
    recovery_ratio: float = RECOVERY_RATIO,
) -> Optional[GlobalSummary]:
    """Worldwide totals at the latest date column.

    Parameters
    ----------
    confirmed, deaths : Table or None
        Parsed confirmed-case and death tables.
    recovery_ratio : float, optional
        Share of ``confirmed - deaths`` assumed recovered.

    Returns
    -------
    GlobalSummary or None
        ``None`` when either table is missing or has no columns.  A
        table with metadata columns only gives zero totals and an empty
        ``last_update``.
    """
    if not _has_data(confirmed) or not _has_data(deaths):
        return None

    dates = confirmed.date_columns
    if not dates:
        return GlobalSummary(confirmed=0, deaths=0, recovered=0, active=0, last_update="")

    last_date = dates[-1]
    total_confirmed = sum(to_int(row.get(last_date)) for row in confirmed.rows)
    total_deaths = sum(to_int(row.get(last_date)) for row in deaths.rows)

    recovered = round_half_up((total_confirmed - total_deaths) * recovery_ratio)
    return GlobalSummary(
        confirmed=total_confirmed,
        deaths=total_deaths,
        recovered=recovered,
        active=total_confirmed - total_deaths - recovered,
        last_update=last_date,
    )


# ---------------------------------------------------------------------------
# Report shapes
# ---------------------------------------------------------------------------


def full_export_rows(
    confirmed: Optional[Table],
    deaths: Optional[Table],
    countries: Sequence[str],
) -> List[Row]:
    """Detailed per-country export covering the last 30 dates.

    Up to three rows per country: cumulative confirmed, cumulative
    deaths (only when a deaths table is given) and daily new cases.
    Each row ends with the latest value, the 7-day average of daily
    deltas and the classified 14-day trend.
    """
    if confirmed is None or not countries:
        return []

    dates = confirmed.date_columns
    rows: List[Row] = [
        ["Country", "Type", *dates[-EXPORT_WINDOW:], "Current_Total", "Average_7d", "Trend"]
    ]

    for country in countries:
        confirmed_values = grouped_series(confirmed, country, dates)
        daily_cases = daily_deltas(confirmed_values)
        avg_daily = rolling_average(daily_cases, ROLLING_WINDOW)
        case_trend = str(classify_trend(trend(daily_cases[-TREND_WINDOW:])))

        rows.append(_series_row(country, ROW_TYPE_CONFIRMED, confirmed_values, avg_daily, case_trend))

        if deaths is not None:
            death_values = grouped_series(deaths, country, dates)
            daily_deaths = daily_deltas(death_values)
            rows.append(
                _series_row(
                    country,
                    ROW_TYPE_DEATHS,
                    death_values,
                    rolling_average(daily_deaths, ROLLING_WINDOW),
                    str(classify_trend(trend(daily_deaths[-TREND_WINDOW:]))),
                )
            )

        rows.append(_series_row(country, ROW_TYPE_DAILY, daily_cases, avg_daily, case_trend))

    return rows


def country_summary_rows(
    confirmed: Optional[Table],
    deaths: Optional[Table],
    countries: Sequence[str],
) -> List[Row]:
    """One summary line per country: totals, yesterday's increase, mortality."""
    if confirmed is None:
        return []

    dates = confirmed.date_columns
    rows: List[Row] = [
        [
            "Country",
            "Total_Confirmed",
            "Total_Deaths",
            "New_Cases_Yesterday",
            "New_Deaths_Yesterday",
            "Mortality_Rate_%",
            "Last_Update",
        ]
    ]

    for country in countries:
        confirmed_values = grouped_series(confirmed, country, dates)
        death_values = grouped_series(deaths, country, dates) if deaths is not None else []

        total_confirmed = confirmed_values[-1] if confirmed_values else 0
        total_deaths = death_values[-1] if death_values else 0

        rows.append(
            [
                country,
                total_confirmed,
                total_deaths,
                new_since_previous(confirmed_values),
                new_since_previous(death_values),
                format_rate(total_deaths, total_confirmed),
                dates[-1] if dates else "",
            ]
        )

    return rows


def global_stats_rows(summary: Optional[GlobalSummary]) -> List[Row]:
    if summary is None:
        return []

    return [
        ["Statistic", "Value", "Type"],
        ["Total confirmed cases", summary.confirmed, TAG_OFFICIAL],
        ["Total deaths", summary.deaths, TAG_OFFICIAL],
        ["Estimated recoveries", summary.recovered, TAG_ESTIMATED],
        ["Estimated active cases", summary.active, TAG_ESTIMATED],
        ["Mortality rate (%)", format_rate(summary.deaths, summary.confirmed), TAG_CALCULATED],
        ["Recovery rate (%)", format_rate(summary.recovered, summary.confirmed), TAG_ESTIMATED],
        ["Last update", summary.last_update, TAG_DATE],
    ]


def rows_to_frame(rows: Sequence[Row]) -> pd.DataFrame:
    """Header row becomes the columns; an empty report gives an empty frame."""
    if not rows:
        return pd.DataFrame()
    header, *body = rows
    return pd.DataFrame([list(r) for r in body], columns=[str(h) for h in header])

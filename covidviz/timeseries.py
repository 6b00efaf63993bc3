"""Per-country numeric series extracted from a parsed time-series table.

Two country matching rules coexist on purpose:

* :func:`country_rows` matches a user-supplied name case-insensitively
  and backs :func:`series_for`, :func:`average_coordinates` and the
  long-format frame used for charts.
* :func:`group_rows` uses exact string equality and backs the export
  reports (:func:`grouped_series`).

Sub-national rows (``Province/State``) are summed into their country.
"""

from __future__ import annotations

import math
import re
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

import pandas as pd

from .config import COUNTRY_COL, LAT_COL, LONG_COL
from .csv_parser import Table
from .metrics import daily_deltas

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class Coordinates(NamedTuple):
    lat: float
    lng: float


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------


def to_int(value: Optional[str]) -> int:
    """Parse the leading integer of ``value``; anything else is 0."""
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _to_float(value: Optional[str]) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return math.nan


# ---------------------------------------------------------------------------
# Row selection
# ---------------------------------------------------------------------------


def country_rows(table: Table, name: str) -> List[Dict[str, str]]:
    """Rows whose country equals ``name``, ignoring case."""
    wanted = name.lower()
    return [row for row in table.rows if row.get(COUNTRY_COL, "").lower() == wanted]


def group_rows(table: Table, name: str) -> List[Dict[str, str]]:
    """Rows whose country is exactly ``name``."""
    return [row for row in table.rows if row.get(COUNTRY_COL) == name]


def _sum_columns(rows: Sequence[Dict[str, str]], date_columns: Sequence[str]) -> List[int]:
    return [sum(to_int(row.get(col)) for row in rows) for col in date_columns]


# ---------------------------------------------------------------------------
# Series
# ---------------------------------------------------------------------------


def series_for(table: Table, country: str, date_columns: Sequence[str]) -> List[int]:
    """Summed cumulative counts for ``country``, one per date column.

    Unknown countries produce an all-zero series of the same length.
    """
    return _sum_columns(country_rows(table, country), date_columns)


def grouped_series(table: Table, country: str, date_columns: Sequence[str]) -> List[int]:
    return _sum_columns(group_rows(table, country), date_columns)


def list_countries(table: Table) -> List[str]:
    countries = {row.get(COUNTRY_COL, "") for row in table.rows}
    countries.discard("")
    return sorted(countries)


def average_coordinates(table: Table, country: str) -> Optional[Coordinates]:
    """Mean latitude/longitude over the country's rows.

    Pairs where either coordinate is missing or non-numeric are
    skipped.  Returns ``None`` when no valid pair remains.
    """
    total_lat = 0.0
    total_lng = 0.0
    count = 0
    for row in country_rows(table, country):
        lat = _to_float(row.get(LAT_COL))
        lng = _to_float(row.get(LONG_COL))
        if math.isnan(lat) or math.isnan(lng):
            continue
        total_lat += lat
        total_lng += lng
        count += 1

    if count == 0:
        return None
    return Coordinates(total_lat / count, total_lng / count)


# ---------------------------------------------------------------------------
# Long format
# ---------------------------------------------------------------------------


def to_long_frame(
    table: Table,
    countries: Iterable[str],
    date_columns: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Reshape the wide date columns into one row per country and date.

    Parameters
    ----------
    table : Table
        Parsed time-series table.
    countries : Iterable[str]
        Country names to include (matched case-insensitively).
    date_columns : Sequence[str], optional
        Date labels to use; defaults to ``table.date_columns``.

    Returns
    -------
    pd.DataFrame
        Columns ``country``, ``date``, ``cumulative`` and ``daily``.
        Dates keep their source order and are not parsed.
    """
    dates = list(table.date_columns if date_columns is None else date_columns)
    frames = []
    for country in countries:
        cumulative = series_for(table, country, dates)
        frames.append(
            pd.DataFrame(
                {
                    "country": country,
                    "date": dates,
                    "cumulative": cumulative,
                    "daily": daily_deltas(cumulative),
                }
            )
        )

    if not frames:
        return pd.DataFrame(columns=["country", "date", "cumulative", "daily"])
    return pd.concat(frames, ignore_index=True)

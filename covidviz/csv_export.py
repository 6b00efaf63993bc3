"""
CSV serialization and export bundles for the report builders.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import CSV_BOM, DATASET_COUNTRIES, DATASET_FULL, DATASET_GLOBAL
from .csv_parser import Table
from .reports import (
    GlobalSummary,
    country_summary_rows,
    full_export_rows,
    global_stats_rows,
)

_NEEDS_QUOTES = (",", '"', "\n", "\r")


def format_cell(value: object) -> str:
    text = "" if value is None else str(value)
    if any(ch in text for ch in _NEEDS_QUOTES):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(rows: Iterable[Sequence[object]]) -> str:
    """Join rows with ``\\n`` (no trailing newline), quoting where needed."""
    return "\n".join(",".join(format_cell(cell) for cell in row) for row in rows)


def with_bom(text: str) -> str:
    # Spreadsheet apps need the BOM to detect UTF-8
    return CSV_BOM + text


def export_filename(dataset: str, today: Optional[date] = None) -> str:
    return f"{dataset}-{(today or date.today()).isoformat()}.csv"


# ---------------------------------------------------------------------------
# Export bundles: (filename, content) pairs handed to the download layer
# ---------------------------------------------------------------------------


def export_covid_data(
    confirmed: Optional[Table],
    deaths: Optional[Table],
    countries: List[str],
    today: Optional[date] = None,
) -> Tuple[str, str]:
    rows = full_export_rows(confirmed, deaths, countries)
    return export_filename(DATASET_FULL, today), with_bom(to_csv(rows))


def export_country_data(
    confirmed: Optional[Table],
    deaths: Optional[Table],
    countries: List[str],
    today: Optional[date] = None,
) -> Tuple[str, str]:
    rows = country_summary_rows(confirmed, deaths, countries)
    return export_filename(DATASET_COUNTRIES, today), with_bom(to_csv(rows))


def export_global_stats(
    summary: Optional[GlobalSummary],
    today: Optional[date] = None,
) -> Tuple[str, str]:
    rows = global_stats_rows(summary)
    return export_filename(DATASET_GLOBAL, today), with_bom(to_csv(rows))

"""Lenient CSV parsing for the CSSE time-series files.

The parser is intentionally forgiving: it never raises on malformed
input.  Blank lines are skipped, rows shorter than the header are
dropped and surplus trailing fields are ignored.  Quote handling is
simplified: every ``"`` toggles the in-quotes state, so commas inside a
quoted field are kept as data but a doubled ``""`` is *not* read back as
a literal quote.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import DATE_OFFSET

logger = logging.getLogger(__name__)


@dataclass
class Table:
    """Parsed CSV: ordered header names plus one mapping per data row."""

    headers: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "Table":
        return cls([], [])

    @property
    def date_columns(self) -> List[str]:
        """Header labels after the metadata columns, in source order."""
        return self.headers[DATE_OFFSET:]

    def __len__(self) -> int:
        return len(self.rows)


def split_line(line: str, sep: str = ",") -> List[str]:
    # Split one CSV line; quotes toggle state and are not kept
    out = []
    cur = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
            continue
        if ch == sep and not in_quotes:
            out.append("".join(cur))
            cur = []
            continue
        cur.append(ch)

    out.append("".join(cur))
    return out


def parse(text: Optional[str]) -> Table:
    """Parse CSV text into a :class:`Table`.

    Parameters
    ----------
    text : str or None
        Raw CSV content.  ``None`` or blank text yields an empty table.

    Returns
    -------
    Table
        Headers from the first non-blank line, and one row per remaining
        line that carries at least as many fields as there are headers.
    """
    if not text:
        return Table.empty()

    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return Table.empty()

    headers = [h.strip() for h in split_line(lines[0])]
    rows: List[Dict[str, str]] = []
    dropped = 0

    for line in lines[1:]:
        values = split_line(line)
        if len(values) < len(headers):
            dropped += 1
            continue
        rows.append({h: values[i].strip() for i, h in enumerate(headers)})

    if dropped:
        logger.debug("Dropped %d truncated CSV rows", dropped)
    return Table(headers, rows)

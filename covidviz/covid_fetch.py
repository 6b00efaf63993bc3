"""
Handles retrieval of the CSSE time-series CSV files.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Tuple

import requests

from .config import CONFIRMED_URL, DEATHS_URL, FETCH_TIMEOUT
from .csv_parser import Table, parse

logger = logging.getLogger(__name__)

TextFetcher = Callable[[str], str]


class FetchError(Exception):
    """Raised when a dataset cannot be downloaded."""


def fetch_text(
    url: str,
    timeout: float = FETCH_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> str:
    """GET ``url`` and return the body as text; HTTP errors raise ``FetchError``."""
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Failed to fetch %s: %s", url, exc)
        raise FetchError(str(exc)) from exc
    return response.text


def fetch_table(url: str, fetch: TextFetcher = fetch_text) -> Table:
    logger.info("Fetching %s", url)
    table = parse(fetch(url))
    logger.info("Parsed %d rows x %d columns from %s", len(table), len(table.headers), url)
    return table


def fetch_all_data(
    fetch: TextFetcher = fetch_text,
    confirmed_url: str = CONFIRMED_URL,
    deaths_url: str = DEATHS_URL,
) -> Tuple[Table, Table]:
    """Fetch confirmed and death tables concurrently.

    Both downloads must succeed; the first failure propagates as a
    single :class:`FetchError` and any completed result is discarded.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        confirmed_future = pool.submit(fetch_table, confirmed_url, fetch)
        deaths_future = pool.submit(fetch_table, deaths_url, fetch)
        try:
            return confirmed_future.result(), deaths_future.result()
        except FetchError:
            raise
        except Exception as exc:
            logger.error("Data fetch failed: %s", exc)
            raise FetchError(str(exc)) from exc

"""Session state for the dashboard.

This module holds the two parsed tables (confirmed cases and deaths)
for the lifetime of a session, together with the user's country
selection.  Nothing is written to disk: tables are replaced wholesale on
every fetch, and derived values (country list, global summary, export
files) are recomputed from them on each access.

A failed fetch never raises out of :meth:`CovidStore.fetch_all_data`.
The error message is stored on the instance for the UI to display and
the previously loaded tables are left untouched.
"""

import logging
from datetime import date
from typing import Callable, List, Optional, Tuple

from .config import DEFAULT_COUNTRIES, RECOVERY_RATIO
from .covid_fetch import FetchError, fetch_all_data
from .csv_export import export_country_data, export_covid_data, export_global_stats
from .csv_parser import Table
from .reports import GlobalSummary, summarize_global
from .timeseries import list_countries

logger = logging.getLogger(__name__)

Loader = Callable[[], Tuple[Table, Table]]


class CovidStore:
    """Loaded tables, selection and derived views for one session.

    Parameters
    ----------
    loader : callable, optional
        Zero-argument callable returning ``(confirmed, deaths)`` tables.
        Defaults to :func:`covidviz.covid_fetch.fetch_all_data`.
    selected_countries : list of str, optional
        Initial selection; defaults to ``config.DEFAULT_COUNTRIES``.
    recovery_ratio : float, optional
        Passed to :func:`covidviz.reports.summarize_global`.
    """

    def __init__(
        self,
        loader: Optional[Loader] = None,
        selected_countries: Optional[List[str]] = None,
        recovery_ratio: float = RECOVERY_RATIO,
    ) -> None:
        self._loader = loader or fetch_all_data
        self.recovery_ratio = recovery_ratio
        self.confirmed: Optional[Table] = None
        self.deaths: Optional[Table] = None
        self.loading: bool = False
        self.error: Optional[str] = None
        self.selected_countries: List[str] = list(
            DEFAULT_COUNTRIES if selected_countries is None else selected_countries
        )

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def countries(self) -> List[str]:
        if self.confirmed is None:
            return []
        return list_countries(self.confirmed)

    @property
    def global_stats(self) -> Optional[GlobalSummary]:
        return summarize_global(self.confirmed, self.deaths, self.recovery_ratio)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def fetch_all_data(self) -> bool:
        """Load both tables; return ``True`` on success.

        On failure ``self.error`` holds the message and neither table
        is replaced.
        """
        self.loading = True
        self.error = None
        try:
            confirmed, deaths = self._loader()
        except FetchError as exc:
            logger.warning("Data load failed: %s", exc)
            self.error = str(exc)
            return False
        finally:
            self.loading = False

        self.confirmed = confirmed
        self.deaths = deaths
        logger.info(
            "Loaded %d confirmed rows and %d death rows", len(confirmed), len(deaths)
        )
        return True

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def add_selected_country(self, country: str) -> None:
        if country not in self.selected_countries:
            self.selected_countries.append(country)

    def remove_selected_country(self, country: str) -> None:
        if country in self.selected_countries:
            self.selected_countries.remove(country)

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------
    def export_covid_data(self, today: Optional[date] = None) -> Tuple[str, str]:
        return export_covid_data(self.confirmed, self.deaths, self.selected_countries, today)

    def export_country_data(self, today: Optional[date] = None) -> Tuple[str, str]:
        return export_country_data(self.confirmed, self.deaths, self.selected_countries, today)

    def export_global_stats(self, today: Optional[date] = None) -> Tuple[str, str]:
        return export_global_stats(self.global_stats, today)

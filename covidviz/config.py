"""
Configuration constants for the COVID-19 time-series pipeline.
"""

from typing import List, Literal, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
BASE_URL: str = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/csse_covid_19_time_series"
)

CONFIRMED_URL: str = f"{BASE_URL}/time_series_covid19_confirmed_global.csv"
DEATHS_URL: str = f"{BASE_URL}/time_series_covid19_deaths_global.csv"

# Seconds, passed straight to requests
FETCH_TIMEOUT: float = 30.0

# Metadata columns precede the date columns (order matters)
PROVINCE_COL: str = "Province/State"
COUNTRY_COL: str = "Country/Region"
LAT_COL: str = "Lat"
LONG_COL: str = "Long"
METADATA_COLUMNS: Tuple[str, str, str, str] = (
    PROVINCE_COL,
    COUNTRY_COL,
    LAT_COL,
    LONG_COL,
)
DATE_OFFSET: int = len(METADATA_COLUMNS)

# ======================================================
#  ANALYSIS CONSTANTS
# ======================================================
EXPORT_WINDOW: int = 30
ROLLING_WINDOW: int = 7
TREND_WINDOW: int = 14
TREND_THRESHOLD: int = 5

# Share of closed (non-fatal) cases assumed recovered; not sourced data
RECOVERY_RATIO: float = 0.975

# ======================================================
#  EXPORT LABELS
# ======================================================
ROW_TYPE_CONFIRMED: str = "Confirmed"
ROW_TYPE_DEATHS: str = "Deaths"
ROW_TYPE_DAILY: str = "Daily_New_Cases"

TAG_OFFICIAL: str = "Official"
TAG_ESTIMATED: str = "Estimated"
TAG_CALCULATED: str = "Calculated"
TAG_DATE: str = "Date"

DATASET_FULL: str = "covid19-data"
DATASET_COUNTRIES: str = "covid19-countries"
DATASET_GLOBAL: str = "covid19-global-stats"

CSV_BOM: str = "\ufeff"

# ======================================================
#  UI DEFAULTS
# ======================================================
DEFAULT_COUNTRIES: List[str] = ["US", "Italy", "France", "Germany"]

THEME_STORAGE_KEY: str = "covid-dataviz-theme"
THEME_STATE_FILE: str = "preferences.json"
ThemeName = Literal["light", "dark"]

# Browser <-> server names used by the theme script
SYSTEM_THEME_INPUT: str = "system_prefers_dark"
THEME_MESSAGE: str = "apply-theme"

METRIC_OPTIONS: List[Tuple[str, str]] = [
    ("Daily new cases", "daily"),
    ("Cumulative cases", "cumulative"),
]
DEFAULT_METRIC: str = "daily"

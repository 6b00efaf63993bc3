"""covidviz package initializer.

This package contains the COVID-19 time-series pipeline used by the
Shiny application.  Modules include CSV parsing, per-country series
extraction, derived metrics, report building, CSV export, data
fetching, session state and plotting helpers.  See individual module
docstrings for details.
"""

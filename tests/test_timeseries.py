from covidviz.csv_parser import Table
from covidviz.metrics import daily_deltas, rolling_average
from covidviz.timeseries import (
    Coordinates,
    average_coordinates,
    country_rows,
    group_rows,
    grouped_series,
    list_countries,
    series_for,
    to_int,
    to_long_frame,
)


def test_to_int_parses_leading_integer() -> None:
    assert to_int("42") == 42
    assert to_int("12.7") == 12
    assert to_int("-3") == -3
    assert to_int("") == 0
    assert to_int("abc") == 0
    assert to_int(None) == 0


def test_series_for_sums_subregions(confirmed: Table) -> None:
    assert series_for(confirmed, "Testland", confirmed.date_columns) == [10, 10, 15, 15, 20]


def test_series_for_is_case_insensitive(confirmed: Table) -> None:
    assert series_for(confirmed, "testLAND", confirmed.date_columns) == [10, 10, 15, 15, 20]
    assert len(country_rows(confirmed, "TESTLAND")) == 3


def test_series_for_unknown_country_is_all_zero(confirmed: Table) -> None:
    assert series_for(confirmed, "Atlantis", confirmed.date_columns) == [0, 0, 0, 0, 0]


def test_grouped_series_uses_exact_names(confirmed: Table) -> None:
    assert grouped_series(confirmed, "testland", confirmed.date_columns) == [0] * 5
    assert grouped_series(confirmed, "Testland", confirmed.date_columns) == [10, 10, 15, 15, 20]
    assert len(group_rows(confirmed, "Korea, South")) == 1


def test_end_to_end_daily_average(confirmed: Table) -> None:
    daily = daily_deltas(series_for(confirmed, "Testland", confirmed.date_columns))

    assert daily == [0, 0, 5, 0, 5]
    assert rolling_average(daily, window=3) == 3


def test_list_countries_sorted_distinct(confirmed: Table) -> None:
    assert list_countries(confirmed) == ["Korea, South", "Testland", "Zeroland"]
    assert list_countries(Table.empty()) == []


def test_average_coordinates_skips_missing_pairs(confirmed: Table) -> None:
    assert average_coordinates(confirmed, "Testland") == Coordinates(15.0, 30.0)
    assert average_coordinates(confirmed, "Zeroland") == Coordinates(0.0, 0.0)
    assert average_coordinates(confirmed, "Atlantis") is None


def test_average_coordinates_none_without_valid_pairs() -> None:
    table = Table(
        ["Province/State", "Country/Region", "Lat", "Long"],
        [{"Province/State": "", "Country/Region": "Nowhere", "Lat": "", "Long": "x"}],
    )
    assert average_coordinates(table, "Nowhere") is None


def test_to_long_frame_reshapes_per_country(confirmed: Table) -> None:
    frame = to_long_frame(confirmed, ["Testland", "Zeroland"])

    assert list(frame.columns) == ["country", "date", "cumulative", "daily"]
    assert len(frame) == 10
    testland = frame[frame["country"] == "Testland"]
    assert testland["cumulative"].tolist() == [10, 10, 15, 15, 20]
    assert testland["daily"].tolist() == [0, 0, 5, 0, 5]
    assert testland["date"].tolist() == confirmed.date_columns


def test_to_long_frame_empty_selection(confirmed: Table) -> None:
    frame = to_long_frame(confirmed, [])

    assert frame.empty
    assert list(frame.columns) == ["country", "date", "cumulative", "daily"]

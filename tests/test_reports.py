from covidviz.csv_parser import Table, parse
from covidviz.reports import (
    GlobalSummary,
    country_summary_rows,
    format_rate,
    full_export_rows,
    global_stats_rows,
    rows_to_frame,
    summarize_global,
)


def test_summarize_global_estimates_recoveries(confirmed: Table, deaths: Table) -> None:
    summary = summarize_global(confirmed, deaths)

    assert summary == GlobalSummary(
        confirmed=36, deaths=3, recovered=32, active=1, last_update="1/5/20"
    )
    assert summary.recovered_estimated is True


def test_summarize_global_custom_ratio(confirmed: Table, deaths: Table) -> None:
    summary = summarize_global(confirmed, deaths, recovery_ratio=1.0)

    assert summary.recovered == 33
    assert summary.active == 0


def test_summarize_global_requires_both_tables(confirmed: Table) -> None:
    assert summarize_global(confirmed, None) is None
    assert summarize_global(None, confirmed) is None
    assert summarize_global(confirmed, Table.empty()) is None


def test_summarize_global_without_date_columns() -> None:
    table = parse("Province/State,Country/Region,Lat,Long\n,Italy,41.9,12.6")

    summary = summarize_global(table, table)

    assert summary == GlobalSummary(confirmed=0, deaths=0, recovered=0, active=0, last_update="")


def test_format_rate() -> None:
    assert format_rate(0, 0) == "0.00"
    assert format_rate(1, 3) == "33.33"
    assert format_rate(3, 36) == "8.33"


def test_full_export_rows_layout(confirmed: Table, deaths: Table) -> None:
    rows = full_export_rows(confirmed, deaths, ["Testland"])

    assert rows[0] == [
        "Country", "Type", "1/1/20", "1/2/20", "1/3/20", "1/4/20", "1/5/20",
        "Current_Total", "Average_7d", "Trend",
    ]
    assert rows[1] == ["Testland", "Confirmed", 10, 10, 15, 15, 20, 20, 2, "Stable"]
    assert rows[2] == ["Testland", "Deaths", 0, 0, 1, 2, 2, 2, 0, "Stable"]
    assert rows[3] == ["Testland", "Daily_New_Cases", 0, 0, 5, 0, 5, 5, 2, "Stable"]
    assert len(rows) == 4


def test_full_export_rows_without_deaths(confirmed: Table) -> None:
    rows = full_export_rows(confirmed, None, ["Testland", "Zeroland"])

    assert [row[1] for row in rows[1:]] == [
        "Confirmed", "Daily_New_Cases", "Confirmed", "Daily_New_Cases",
    ]


def test_full_export_rows_empty_cases(confirmed: Table) -> None:
    assert full_export_rows(None, None, ["Testland"]) == []
    assert full_export_rows(confirmed, None, []) == []


def test_full_export_keeps_last_thirty_dates_and_trend() -> None:
    dates = [f"d{i}" for i in range(40)]
    # 26 quiet days, then 14 days where the last 7 jump
    values = [0] * 26 + [i * 10 for i in range(1, 8)] + [70 + i * 100 for i in range(1, 8)]
    header = "Province/State,Country/Region,Lat,Long," + ",".join(dates)
    line = ",Surgeland,1,1," + ",".join(str(v) for v in values)
    table = parse(header + "\n" + line)

    rows = full_export_rows(table, None, ["Surgeland"])

    assert rows[0][2:32] == dates[-30:]
    confirmed_row = rows[1]
    assert confirmed_row[2:32] == values[-30:]
    assert confirmed_row[32] == values[-1]
    assert confirmed_row[33] == 100
    assert confirmed_row[34] == "Rising"


def test_country_summary_rows(confirmed: Table, deaths: Table) -> None:
    rows = country_summary_rows(confirmed, deaths, ["Testland", "Zeroland", "Korea, South"])

    assert rows[0][0] == "Country"
    assert rows[1] == ["Testland", 20, 2, 5, 0, "10.00", "1/5/20"]
    assert rows[2] == ["Zeroland", 0, 0, 0, 0, "0.00", "1/5/20"]
    assert rows[3] == ["Korea, South", 16, 1, 8, 1, "6.25", "1/5/20"]


def test_country_summary_without_deaths(confirmed: Table) -> None:
    rows = country_summary_rows(confirmed, None, ["Testland"])

    assert rows[1] == ["Testland", 20, 0, 5, 0, "0.00", "1/5/20"]
    assert country_summary_rows(None, None, ["Testland"]) == []


def test_global_stats_rows_tags() -> None:
    summary = GlobalSummary(confirmed=1000, deaths=20, recovered=956, active=24, last_update="3/9/23")
    rows = global_stats_rows(summary)

    assert rows[0] == ["Statistic", "Value", "Type"]
    assert len(rows) == 8
    assert [row[2] for row in rows[1:]] == [
        "Official", "Official", "Estimated", "Estimated", "Calculated", "Estimated", "Date",
    ]
    assert rows[5][1] == "2.00"
    assert rows[6][1] == "95.60"
    assert rows[7][1] == "3/9/23"


def test_global_stats_rows_zero_confirmed() -> None:
    rows = global_stats_rows(GlobalSummary(0, 0, 0, 0, "1/1/20"))

    assert rows[5][1] == "0.00"
    assert rows[6][1] == "0.00"
    assert global_stats_rows(None) == []


def test_rows_to_frame(confirmed: Table, deaths: Table) -> None:
    frame = rows_to_frame(country_summary_rows(confirmed, deaths, ["Testland"]))

    assert list(frame.columns)[:2] == ["Country", "Total_Confirmed"]
    assert frame.loc[0, "Total_Confirmed"] == 20
    assert rows_to_frame([]).empty

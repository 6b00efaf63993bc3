import logging

from shiny import reactive, render
from shiny.express import input, session, ui
from shinywidgets import render_plotly

# Import organized modules
from covidviz.config import (
    DATASET_COUNTRIES,
    DATASET_FULL,
    DATASET_GLOBAL,
    DEFAULT_METRIC,
    METRIC_OPTIONS,
    SYSTEM_THEME_INPUT,
    THEME_MESSAGE,
)
from covidviz.csv_export import export_filename
from covidviz.csv_parser import Table
from covidviz.data_manager import CovidStore
from covidviz.plotting import create_country_map, create_country_trend_plot
from covidviz.reports import country_summary_rows, global_stats_rows, rows_to_frame
from covidviz.theme import (
    THEME_SCRIPT,
    JsonFileStore,
    apply_theme,
    follow_system_theme,
    init_theme,
    toggle_theme,
)
from covidviz.timeseries import to_long_frame

logging.basicConfig(level=logging.INFO)

METRIC_MAPPING = {value: label for label, value in METRIC_OPTIONS}

# ======================================================
#  SESSION STATE
# ======================================================
# Tables live for the session only; "Reload data" replaces them.
store = CovidStore()
store.fetch_all_data()
data_version = reactive.value(0)

theme_store = JsonFileStore()
initial_theme = init_theme(theme_store)
theme = reactive.value(initial_theme)
system_prefers_dark = reactive.value(None)


@reactive.effect
@reactive.event(input.reload)
def _reload_data():
    if store.fetch_all_data():
        data_version.set(data_version.get() + 1)
    else:
        ui.notification_show(f"Data load failed: {store.error}", type="error")


@reactive.effect
@reactive.event(input[SYSTEM_THEME_INPUT])
def _follow_system_theme():
    prefers_dark = bool(input[SYSTEM_THEME_INPUT]())
    if system_prefers_dark.get() is None:
        theme.set(init_theme(theme_store, prefers_dark=prefers_dark))
    else:
        theme.set(follow_system_theme(theme.get(), theme_store, prefers_dark))
    system_prefers_dark.set(prefers_dark)


@reactive.effect
@reactive.event(input.toggle_theme)
def _toggle_theme():
    theme.set(toggle_theme(theme.get(), theme_store))


@reactive.effect
async def _apply_theme():
    await session.send_custom_message(THEME_MESSAGE, apply_theme(theme.get()))


@reactive.effect
def _sync_selection():
    wanted = list(input.countries() or [])
    for country in list(store.selected_countries):
        if country not in wanted:
            store.remove_selected_country(country)
    for country in wanted:
        store.add_selected_country(country)


@reactive.effect
def _sync_country_choices():
    data_version.get()
    ui.update_selectize(
        "countries",
        choices=store.countries,
        selected=list(store.selected_countries),
    )


@reactive.calc
def selected_countries():
    data_version.get()
    return list(input.countries() or [])


@reactive.calc
def long_frame():
    data_version.get()
    if store.confirmed is None:
        return to_long_frame(Table.empty(), [])
    return to_long_frame(store.confirmed, selected_countries())


# ======================================================
#  UI LAYOUT
# ======================================================
ui.page_opts(title="COVID-19 Data Visualization", fillable=False, full_width=True)

ui.tags.head(ui.tags.script(THEME_SCRIPT))

with ui.sidebar(open="always", position="right"):
    ui.input_selectize(
        "countries",
        "Countries",
        choices=list(store.selected_countries),
        selected=list(store.selected_countries),
        multiple=True,
    )
    ui.input_select("metric", "Metric", METRIC_MAPPING, selected=DEFAULT_METRIC)
    ui.input_action_button("toggle_theme", "Toggle dark mode", class_="mt-3")
    ui.input_action_button("reload", "Reload data", class_="btn-primary mt-3")

    ui.hr()

    @render.download(filename=lambda: export_filename(DATASET_FULL))
    def download_full():
        _name, content = store.export_covid_data()
        yield content

    @render.download(filename=lambda: export_filename(DATASET_COUNTRIES))
    def download_countries():
        _name, content = store.export_country_data()
        yield content

    @render.download(filename=lambda: export_filename(DATASET_GLOBAL))
    def download_global():
        _name, content = store.export_global_stats()
        yield content


with ui.navset_tab(id="main_tabs"):
    with ui.nav_panel("Charts"):

        @render.text
        def load_error():
            data_version.get()
            return f"Data unavailable: {store.error}" if store.error else ""

        @render_plotly
        def trend_plot():
            return create_country_trend_plot(
                long_frame(),
                value_col=input.metric(),
                template=theme.get().plotly_template,
            )

    with ui.nav_panel("Map"):

        @render_plotly
        def case_map():
            data_version.get()
            if store.confirmed is None:
                return None
            return create_country_map(
                store.confirmed,
                selected_countries(),
                template=theme.get().plotly_template,
            )

    with ui.nav_panel("Data"):

        @render.data_frame
        def country_table():
            data_version.get()
            rows = country_summary_rows(store.confirmed, store.deaths, selected_countries())
            return render.DataGrid(rows_to_frame(rows), height=400)

        @render.data_frame
        def global_table():
            data_version.get()
            return render.DataGrid(rows_to_frame(global_stats_rows(store.global_stats)))

        ui.p("Recoveries and active cases are estimates, not reported figures.")

"""KPI dashboard view: filter selectors and collapsible KPI tables grouped by category."""
from dash import html
import dash_mantine_components as dmc

from cascade.flows import KPI_FLOW
from cascade.grouping import (
    format_kpi_value,
    format_unit,
    group_by_category,
    sorted_categories,
    sorted_rows,
)
from core.models import CascadeState
from gateway_app.components.selectors import CHIPS, make_selector_panel, region_id, toggle_type

# Tier key -> control kind for the KPI selector panel
KPI_CONTROL_KINDS = {"source": CHIPS}


def make_kpi_view():
    """Return the KPI dashboard view (hidden until navigation selects it)."""
    return html.Div(
        id="kpi-view",
        className="page page--kpi",
        style={"display": "none"},
        children=[
            html.H1("Health KPI Dashboard", className="page__title"),
            make_selector_panel(KPI_FLOW, "Select Filters", KPI_CONTROL_KINDS),
            html.Section(
                className="kpi-results",
                children=[
                    html.H2("KPI Data", className="kpi-results__title"),
                    html.Div(id=region_id(KPI_FLOW.name, "results")),
                ],
            ),
        ],
    )


def _kpi_table(rows: list) -> html.Table:
    """Table of KPI rows, sorted by KPI name."""
    return html.Table(
        className="kpi-table",
        children=[
            html.Thead(
                html.Tr([
                    html.Th("KPI Name", scope="col"),
                    html.Th("Value", scope="col"),
                    html.Th("Unit", scope="col"),
                ])
            ),
            html.Tbody([
                html.Tr(
                    children=[
                        html.Td(row.get("kpi_name"), className="kpi-table__name"),
                        html.Td(format_kpi_value(row.get("kpi_value"))),
                        html.Td(format_unit(row.get("unit"))),
                    ],
                )
                for row in sorted_rows(rows)
            ]),
        ],
    )


def _category_card(category: str, rows: list, expanded: bool) -> html.Div:
    """Collapsible card for one category; the header button toggles it."""
    return html.Div(
        className="kpi-category",
        children=[
            html.Button(
                id={"type": toggle_type(KPI_FLOW.name), "index": category},
                className="kpi-category__header",
                n_clicks=0,
                **{"aria-expanded": "true" if expanded else "false"},
                children=[
                    html.Span(category, className="kpi-category__name"),
                    dmc.Badge(str(len(rows)), variant="light", size="sm"),
                    html.Span("▲" if expanded else "▼", className="kpi-category__chevron"),
                ],
            ),
            _kpi_table(rows) if expanded else None,
        ],
    )


def render_kpi_results(state: CascadeState) -> list:
    """Build the grouped KPI display from the current state.

    Grouping and sorting are recomputed from the Result Set on every call.
    """
    rows = state.results or []

    if not rows:
        if state.is_loading:
            text = "Loading data..."
        elif state.value("year"):
            text = "No data found for the selected filters."
        else:
            text = "Select filters above to display KPI data."
        return [html.Div(text, className="kpi-results__placeholder")]

    groups = group_by_category(rows)
    return [
        _category_card(category, groups[category], state.is_expanded(category))
        for category in sorted_categories(groups)
    ]

"""Dash application entry point with layout root and per-flow state stores."""
from dash import Dash, html, dcc
import dash_mantine_components as dmc

from cascade.flows import KPI_FLOW, REFERRAL_FLOW
from gateway_app.components.header import make_header
from gateway_app.components.footer import make_footer
from gateway_app.components.home import make_home_view, make_not_found_view
from gateway_app.components.referral_page import make_referral_view
from gateway_app.components.kpi_page import make_kpi_view
from gateway_app.components.selectors import make_cascade_stores

app = Dash(
    __name__,
    title="Public Health Gateway",
    suppress_callback_exceptions=True,
)

app.layout = dmc.MantineProvider(
    children=[
        # State stores (controller state, pending request, fetch outcome per flow)
        *make_cascade_stores(REFERRAL_FLOW),
        *make_cascade_stores(KPI_FLOW),
        dcc.Location(id="url", refresh=False),

        # Page structure
        make_header(),
        html.Main(
            className="main",
            children=[
                # View container, switched by the URL pathname
                html.Div(
                    id="view-container",
                    children=[
                        make_home_view(),
                        make_referral_view(),
                        make_kpi_view(),
                        make_not_found_view(),
                    ],
                ),
            ],
        ),
        make_footer(),
    ],
)

from gateway_app.callbacks import register_callbacks

register_callbacks(app)

server = app.server

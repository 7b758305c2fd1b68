"""Landing and not-found views."""
from dash import html, dcc


def make_home_view():
    """Welcome view with shortcuts to both tools."""
    return html.Div(
        id="home-view",
        className="home",
        children=[
            html.H2("Welcome to Public Health Gateway!", className="home__title"),
            html.P(
                "Navigate through the Healthcare Referral System or explore the "
                "Health KPI Dashboard using the links below.",
                className="home__desc",
            ),
            html.Div(
                className="home__actions",
                children=[
                    dcc.Link("Go to Referral System", href="/referral",
                             className="home__button home__button--referral"),
                    dcc.Link("Go to KPI Dashboard", href="/kpi-dashboard",
                             className="home__button home__button--kpi"),
                ],
            ),
        ],
    )


def make_not_found_view():
    """404 view for unknown paths (hidden until navigation selects it)."""
    return html.Div(
        id="not-found-view",
        className="not-found",
        style={"display": "none"},
        children=[
            html.H2("404 - Page Not Found", className="not-found__title"),
            html.P("The page you are looking for does not exist."),
            dcc.Link("Go to Home", href="/", className="not-found__link"),
        ],
    )

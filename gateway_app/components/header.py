"""Top header bar component with gateway branding and page navigation."""
from dash import html, dcc

# (pathname, label, nav link id)
NAV_ITEMS = [
    ("/referral", "Referral System", "nav-referral"),
    ("/kpi-dashboard", "KPI Dashboard", "nav-kpi-dashboard"),
]


def make_header():
    """Return the fixed top header with brand link and navigation links."""
    return html.Header(
        className="top-header",
        children=[
            # Left: brand, links home
            dcc.Link(
                "Public Health Gateway",
                href="/",
                className="top-header__brand",
            ),
            # Right: page links
            html.Nav(
                className="top-header__nav",
                **{"aria-label": "Main navigation"},
                children=[
                    dcc.Link(label, href=href, id=link_id, className="top-header__link")
                    for href, label, link_id in NAV_ITEMS
                ],
            ),
        ],
    )

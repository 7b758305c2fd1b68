"""Page footer component."""
from dash import html


def make_footer():
    """Build the global page footer shown on every view."""
    return html.Footer(
        className="page-footer",
        children="Public Health Gateway \u2014 Referral System and Health KPI Dashboard",
    )

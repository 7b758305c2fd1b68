"""Callbacks for view switching between Home, Referral, KPI Dashboard and 404."""
from dash import Input, Output

from gateway_app.components.header import NAV_ITEMS

# pathname -> view id; anything else is a 404
VIEWS = {
    "/": "home-view",
    "/referral": "referral-view",
    "/kpi-dashboard": "kpi-view",
}
NOT_FOUND_VIEW = "not-found-view"
VIEW_ORDER = ["home-view", "referral-view", "kpi-view", NOT_FOUND_VIEW]


def resolve_view(pathname):
    """Map a URL pathname onto the id of the view to show."""
    if not pathname:
        return VIEWS["/"]
    normalized = pathname.rstrip("/") or "/"
    return VIEWS.get(normalized, NOT_FOUND_VIEW)


def register_navigation_callbacks(app):
    """Register view switching callbacks."""

    @app.callback(
        *[Output(view_id, "style") for view_id in VIEW_ORDER],
        *[Output(link_id, "className") for _, _, link_id in NAV_ITEMS],
        Input("url", "pathname"),
    )
    def switch_view(pathname):
        """Show the view for the current path and mark its nav link active."""
        show = {}
        hide = {"display": "none"}
        active_cls = "top-header__link top-header__link--active"
        inactive_cls = "top-header__link"

        view = resolve_view(pathname)
        styles = [show if view_id == view else hide for view_id in VIEW_ORDER]
        normalized = (pathname or "/").rstrip("/") or "/"
        classes = [
            active_cls if href == normalized else inactive_cls
            for href, _, _ in NAV_ITEMS
        ]
        return (*styles, *classes)

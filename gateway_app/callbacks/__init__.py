"""Callback registration: wires every callback module to the app."""


def register_callbacks(app):
    """Register all Dash callbacks with the app instance."""
    from cascade.flows import KPI_FLOW, REFERRAL_FLOW
    from gateway_app.callbacks.cascade import register_cascade_callbacks
    from gateway_app.callbacks.navigation import register_navigation_callbacks
    from gateway_app.components.kpi_page import KPI_CONTROL_KINDS, render_kpi_results
    from gateway_app.components.referral_page import render_referral_results

    register_navigation_callbacks(app)
    register_cascade_callbacks(app, REFERRAL_FLOW, render_referral_results)
    register_cascade_callbacks(app, KPI_FLOW, render_kpi_results, KPI_CONTROL_KINDS)

"""Referral view with facility selectors and the next-level referral result cards."""
from dash import html

from cascade.facilities import next_level
from cascade.flows import REFERRAL_FLOW
from cascade.grouping import format_coordinate, format_distance
from core.models import CascadeState
from gateway_app.components.selectors import make_selector_panel, region_id


def make_referral_view():
    """Return the referral view (hidden until navigation selects it)."""
    return html.Div(
        id="referral-view",
        className="page page--referral",
        style={"display": "none"},
        children=[
            html.H1("Healthcare Referral Navigator", className="page__title"),
            make_selector_panel(REFERRAL_FLOW, "Select Facility"),
            html.Section(
                id=region_id(REFERRAL_FLOW.name, "results"),
                className="referral-results",
                **{"aria-live": "polite"},
            ),
        ],
    )


def _facility_heading(facility: dict) -> list:
    return [
        html.Span(facility.get("Facility Name", "Unknown facility"), className="facility-card__name"),
        f" ({facility.get('Facility Type', 'N/A')})",
    ]


def _lat_lon(facility: dict) -> html.P:
    return html.P(
        f"Lat: {format_coordinate(facility.get('Latitude'))}, "
        f"Lon: {format_coordinate(facility.get('Longitude'))}",
        className="facility-card__coords",
    )


def _start_card(facility: dict) -> html.Div:
    facility_type = facility.get("Facility Type")
    refers_to = next_level(facility_type)
    children = [
        html.H2("Starting Facility:", className="facility-card__title"),
        html.P(
            [
                html.Span(facility.get("Facility Name", "Unknown facility"), className="facility-card__name"),
                f" ({facility_type or 'N/A'} - {facility.get('District Name', 'N/A')})",
            ]
        ),
        _lat_lon(facility),
    ]
    if refers_to:
        children.append(html.P(f"Refers to: {refers_to}", className="facility-card__level"))
    return html.Div(className="facility-card facility-card--start", children=children)


def _closest_card(facility: dict) -> html.Div:
    return html.Div(
        className="facility-card facility-card--closest",
        children=[
            html.H2("Closest Next-Level Facility in Same District:", className="facility-card__title"),
            html.P(_facility_heading(facility)),
            html.P(
                f"Distance: {format_distance(facility.get('Distance (km)'))} km",
                className="facility-card__distance",
            ),
            _lat_lon(facility),
        ],
    )


def _all_facilities_card(facilities: list) -> html.Div:
    return html.Div(
        className="facility-card facility-card--all",
        children=[
            html.H2(
                "All Next-Level Facilities in Same District (by Distance):",
                className="facility-card__title",
            ),
            html.Ul(
                className="facility-list",
                children=[
                    html.Li(
                        className="facility-list__item",
                        children=[
                            html.Span(_facility_heading(facility)),
                            html.Span(
                                f"{format_distance(facility.get('Distance (km)'))} km",
                                className="facility-list__distance",
                            ),
                        ],
                    )
                    for facility in facilities
                ],
            ),
        ],
    )


def render_referral_results(state: CascadeState) -> list:
    """Build the result cards from the referral Result Set (empty list if none).

    The backend already orders allNextLevelFacilities by ascending distance.
    """
    results = state.results
    if not isinstance(results, dict):
        return []

    cards = []
    if results.get("startFacility"):
        cards.append(_start_card(results["startFacility"]))
    if results.get("closestNextLevelFacility"):
        cards.append(_closest_card(results["closestNextLevelFacility"]))
    if results.get("allNextLevelFacilities"):
        cards.append(_all_facilities_card(results["allNextLevelFacilities"]))
    return cards

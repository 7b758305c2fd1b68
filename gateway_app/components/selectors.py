"""Cascading selector panel shared by the referral and KPI pages.

Builds the stores, tier controls and status regions for one flow, and the
pure helpers the render callback uses to turn a CascadeState into component
properties. Component ids are derived from the flow name so both pages can
live in one layout.
"""
from dash import html, dcc
import dash_mantine_components as dmc

from cascade.flows import CascadeFlow, TierSpec
from core.models import CascadeState

DROPDOWN = "dropdown"
CHIPS = "chips"

SHOW = {}
HIDE = {"display": "none"}


def control_id(flow_name: str, tier_key: str) -> str:
    return f"{flow_name}-{tier_key}-select"


def hint_id(flow_name: str, tier_key: str) -> str:
    return f"{flow_name}-{tier_key}-hint"


def store_id(flow_name: str, kind: str) -> str:
    """Store ids: kind is "cascade", "request" or "outcome"."""
    return f"{flow_name}-{kind}-store"


def region_id(flow_name: str, region: str) -> str:
    """Region ids: region is "status", "error", "loading" or "results"."""
    return f"{flow_name}-{region}"


def toggle_type(flow_name: str) -> str:
    """Pattern-matching id type of the category toggle buttons."""
    return f"{flow_name}-category-toggle"


def make_cascade_stores(flow: CascadeFlow) -> list:
    """Per-flow state stores: controller state, pending request, fetch outcome."""
    return [
        dcc.Store(id=store_id(flow.name, kind), storage_type="memory")
        for kind in ("cascade", "request", "outcome")
    ]


def _hint_text(flow: CascadeFlow, tier: TierSpec) -> str:
    position = flow.index(tier.key)
    if position == 0:
        return f"No {tier.label.lower()} options available."
    upstream = flow.tiers[position - 1]
    return f"Select a {upstream.label.lower()} first."


def make_tier_control(flow: CascadeFlow, tier: TierSpec, kind: str = DROPDOWN):
    """Labelled control for one tier: a dropdown, or a single-choice chip group."""
    cid = control_id(flow.name, tier.key)

    if kind == CHIPS:
        return html.Div(
            className="selector",
            children=[
                html.Span(f"Select {tier.label}:", className="selector__label"),
                dmc.ChipGroup(
                    id=cid,
                    multiple=False,
                    value=None,
                    children=[],
                ),
                html.Span(
                    _hint_text(flow, tier),
                    id=hint_id(flow.name, tier.key),
                    className="selector__hint",
                ),
            ],
        )

    return html.Div(
        className="selector",
        children=[
            html.Label(f"Select {tier.label}:", htmlFor=cid, className="selector__label"),
            dcc.Dropdown(
                id=cid,
                options=[],
                value=None,
                placeholder=f"-- Choose {tier.label} --",
                disabled=True,
                clearable=True,
                className="selector__dropdown",
            ),
        ],
    )


def make_selector_panel(flow: CascadeFlow, title: str, control_kinds: dict = None):
    """Return the filter section: status regions above one control per tier.

    Args:
        flow: Flow whose tiers get controls
        title: Section heading
        control_kinds: Optional tier key -> DROPDOWN / CHIPS (default DROPDOWN)
    """
    control_kinds = control_kinds or {}
    return html.Section(
        className="selector-panel",
        **{"aria-label": title},
        children=[
            html.H2(title, className="selector-panel__title"),
            html.Div(
                id=region_id(flow.name, "loading"),
                className="selector-panel__loading",
                style=HIDE,
                children=[dmc.Loader(size="sm"), html.Span("Loading data...")],
            ),
            html.Div(
                id=region_id(flow.name, "error"),
                className="alert alert--error",
                role="alert",
                style=HIDE,
            ),
            html.Div(
                id=region_id(flow.name, "status"),
                className="alert alert--info",
                role="status",
                style=HIDE,
            ),
            html.Div(
                className="selector-panel__grid",
                children=[
                    make_tier_control(flow, tier, control_kinds.get(tier.key, DROPDOWN))
                    for tier in flow.tiers
                ],
            ),
        ],
    )


# --- Render helpers ---


def tier_disabled(state: CascadeState, tier: TierSpec) -> bool:
    """A control is locked while loading, before its dependencies, or without options."""
    if state.is_loading:
        return True
    if any(not state.value(key) for key in tier.depends_on):
        return True
    return not state.options_for(tier.key)


def tier_properties(state: CascadeState, tier: TierSpec, kind: str = DROPDOWN) -> tuple:
    """Two render outputs for one tier control.

    Dropdowns get (options, disabled); chip groups get (chip children, hint style).
    """
    disabled = tier_disabled(state, tier)
    options = state.options_for(tier.key)

    if kind == CHIPS:
        chips = [
            dmc.Chip(option.label, value=option.value, disabled=disabled, size="sm")
            for option in options
        ]
        return chips, (HIDE if options else SHOW)

    return [option.to_dict() for option in options], disabled


def control_value(state: CascadeState, tier_key: str):
    """Value to push into a control: None for an unselected tier."""
    return state.value(tier_key) or None


def status_properties(state: CascadeState) -> tuple:
    """Render outputs for the status regions.

    Returns:
        (status children, status style, error children, error style, loading style)
    """
    if state.error:
        error_children = [html.Strong("Error! "), html.Span(state.error)]
        error_style = SHOW
    else:
        error_children = None
        error_style = HIDE

    show_message = bool(state.message) and not state.error and not state.is_loading
    return (
        state.message if show_message else None,
        SHOW if show_message else HIDE,
        error_children,
        error_style,
        SHOW if state.is_loading else HIDE,
    )

"""Callbacks driving one cascading flow: transitions, fetches and rendering.

register_cascade_callbacks() wires three callbacks per flow:

1. transition: tier control changes, fetch outcomes and category toggles are
   applied to the controller store through cascade.controller. It also writes
   the tier control values so cleared tiers are reset in the browser.
2. fetch: every new request in the request store is executed against the
   backend and its outcome written to the outcome store.
3. render: the controller store is projected onto options, status regions
   and the result panel.

The fetch callback is not cancelled when the selection moves on; its outcome
carries the request generation and the transition drops it if stale.

The callback bodies are the module-level functions transition_outputs(),
fetch_outcome() and render_outputs(); the registered callbacks only unpack
the Dash callback context.
"""

from dash import ALL, Input, Output, State, ctx, no_update

from cascade.controller import apply_fetch_outcome, select_value, start, toggle_category
from cascade.flows import CascadeFlow
from core.logging_config import get_logger
from core.models import CascadeState, FetchOutcome, FetchRequest
from gateway_app.components.selectors import (
    DROPDOWN,
    control_id,
    control_value,
    hint_id,
    region_id,
    status_properties,
    store_id,
    tier_properties,
    toggle_type,
)
from gateway_app.data.api_client import get_client, resolve_request

log = get_logger(__name__)


def _control_outputs(flow: CascadeFlow, kinds: dict) -> list:
    outputs = []
    for tier in flow.tiers:
        cid = control_id(flow.name, tier.key)
        if kinds.get(tier.key, DROPDOWN) == DROPDOWN:
            outputs.append(Output(cid, "options"))
            outputs.append(Output(cid, "disabled"))
        else:
            outputs.append(Output(cid, "children"))
            outputs.append(Output(hint_id(flow.name, tier.key), "style"))
    return outputs


def transition_outputs(flow: CascadeFlow, current, triggered, trigger_value,
                       control_values: list, outcome_data) -> list:
    """Apply one triggering event to the stored controller state.

    Args:
        flow: Flow the callback belongs to
        current: Controller store data (None on first load)
        triggered: ctx.triggered_id (control id, outcome store id or toggle id dict)
        trigger_value: Value of the triggering property (n_clicks for toggles)
        control_values: Current value of every tier control, in tier order
        outcome_data: Outcome store data

    Returns:
        [controller store, request store, *tier control values]
    """
    tier_count = len(flow.tiers)
    unchanged = [no_update] * (2 + tier_count)

    if current is None:
        state, request = start(flow)
        return [state.to_dict(), request.to_dict(), *[None] * tier_count]

    state = CascadeState.from_dict(current)
    control_ids = [control_id(flow.name, key) for key in flow.keys]

    if triggered == store_id(flow.name, "outcome"):
        if not outcome_data:
            return unchanged
        new_state = apply_fetch_outcome(state, FetchOutcome.from_dict(outcome_data))
        if new_state is state:
            return unchanged
        return [new_state.to_dict(), no_update, *[no_update] * tier_count]

    if isinstance(triggered, dict) and triggered.get("type") == toggle_type(flow.name):
        # New toggle buttons fire once with n_clicks=0 when the results re-render
        if not trigger_value:
            return unchanged
        new_state = toggle_category(state, triggered["index"])
        return [new_state.to_dict(), no_update, *[no_update] * tier_count]

    if triggered in control_ids:
        position = control_ids.index(triggered)
        tier_key = flow.keys[position]
        try:
            new_state, request = select_value(state, tier_key, control_values[position])
        except ValueError as exc:
            log.warning("Rejected %s selection: %s", flow.name, exc)
            return [no_update, no_update, *[control_value(state, key) for key in flow.keys]]
        if new_state is state:
            return unchanged
        return [
            new_state.to_dict(),
            request.to_dict() if request is not None else no_update,
            *[control_value(new_state, key) for key in flow.keys],
        ]

    return unchanged


def fetch_outcome(request_data):
    """Execute a stored request against the backend; returns outcome store data."""
    if not request_data:
        return no_update
    request = FetchRequest.from_dict(request_data)
    return resolve_request(get_client(), request).to_dict()


def render_outputs(flow: CascadeFlow, data, render_results, kinds: dict = None) -> list:
    """Project stored controller state onto the page outputs."""
    kinds = kinds or {}
    if not data:
        return [no_update] * (2 * len(flow.tiers) + 6)
    state = CascadeState.from_dict(data)
    outputs = []
    for tier in flow.tiers:
        outputs.extend(tier_properties(state, tier, kinds.get(tier.key, DROPDOWN)))
    outputs.extend(status_properties(state))
    outputs.append(render_results(state))
    return outputs


def register_cascade_callbacks(app, flow: CascadeFlow, render_results, control_kinds: dict = None):
    """Register the transition, fetch and render callbacks for ``flow``.

    Args:
        app: Dash application
        flow: Flow definition (REFERRAL_FLOW or KPI_FLOW)
        render_results: Callable(CascadeState) -> children of the results region
        control_kinds: Optional tier key -> DROPDOWN / CHIPS
    """
    kinds = control_kinds or {}
    tier_count = len(flow.tiers)
    cascade_store = store_id(flow.name, "cascade")
    request_store = store_id(flow.name, "request")
    outcome_store = store_id(flow.name, "outcome")
    control_ids = [control_id(flow.name, key) for key in flow.keys]

    inputs = [Input(cid, "value") for cid in control_ids]
    inputs.append(Input(outcome_store, "data"))
    if flow.expandable:
        inputs.append(Input({"type": toggle_type(flow.name), "index": ALL}, "n_clicks"))

    @app.callback(
        output=[
            Output(cascade_store, "data"),
            Output(request_store, "data"),
            *[Output(cid, "value") for cid in control_ids],
        ],
        inputs=inputs,
        state=[State(cascade_store, "data")],
    )
    def transition(*args):
        """Apply the triggering event to the controller state."""
        trigger_value = ctx.triggered[0]["value"] if ctx.triggered else None
        return transition_outputs(
            flow,
            current=args[-1],
            triggered=ctx.triggered_id,
            trigger_value=trigger_value,
            control_values=list(args[:tier_count]),
            outcome_data=args[tier_count],
        )

    @app.callback(
        Output(outcome_store, "data"),
        Input(request_store, "data"),
        prevent_initial_call=True,
    )
    def fetch(request_data):
        """Execute the pending request against the backend."""
        return fetch_outcome(request_data)

    @app.callback(
        output=[
            *_control_outputs(flow, kinds),
            Output(region_id(flow.name, "status"), "children"),
            Output(region_id(flow.name, "status"), "style"),
            Output(region_id(flow.name, "error"), "children"),
            Output(region_id(flow.name, "error"), "style"),
            Output(region_id(flow.name, "loading"), "style"),
            Output(region_id(flow.name, "results"), "children"),
        ],
        inputs=[Input(cascade_store, "data")],
    )
    def render(data):
        """Project the controller state onto the page."""
        return render_outputs(flow, data, render_results, kinds)

"""
Cascading selector controller.

Pure transition functions over CascadeState. Each function takes the current
state and returns a new one; callers execute any FetchRequest returned and
feed the FetchOutcome back through apply_fetch_outcome().

Every fetch target (each tier plus the terminal "results" target) has a
generation counter. A cascade reset bumps the counters of every target it
clears, so outcomes of requests issued before the reset no longer match and
are dropped.
"""

from dataclasses import replace
from typing import Optional

from cascade.flows import CascadeFlow, get_flow
from core.logging_config import get_logger
from core.models import (
    CascadeState,
    FetchOutcome,
    FetchRequest,
    RESULTS_EMPTY,
    RESULTS_ERROR,
    RESULTS_LOADED,
    RESULTS_TARGET,
)

logger = get_logger(__name__)


def _error_message(prefix: str, values: dict, detail: Optional[str]) -> str:
    message = prefix.format_map(values)
    if detail:
        message = f"{message} Error: {detail}"
    return message


def start(flow: CascadeFlow) -> tuple[CascadeState, FetchRequest]:
    """
    Create a fresh state for ``flow`` and the request for its first tier.

    Returns:
        Tuple of (initial state, options request for the first tier)
    """
    first = flow.tiers[0]
    values = flow.empty_values()
    request = first.build_request(flow.name, values, 1)
    state = CascadeState(
        flow=flow.name,
        values=values,
        generations={first.key: 1},
        in_flight={first.key: 1},
    )
    logger.debug("Started %s flow", flow.name)
    return state, request


def select_value(
    state: CascadeState, tier_key: str, value: Optional[str]
) -> tuple[CascadeState, Optional[FetchRequest]]:
    """
    Set the value of one tier and reset everything downstream of it.

    Downstream tiers lose their values and options, the Result Set and the
    expanded categories are cleared, and the generation of every cleared
    target is bumped. A non-empty value issues the request for the next
    tier's options, or the terminal request when ``tier_key`` is the last
    tier. An empty value issues nothing and restores the tier's prompt.

    Re-selecting the current value returns ``state`` unchanged and no request.

    Raises:
        KeyError: If the flow has no tier ``tier_key``.
        ValueError: If a non-empty value is selected while an upstream
            dependency is still unselected.
    """
    flow = get_flow(state.flow)
    tier = flow.tier(tier_key)
    value = "" if value is None else str(value)

    if value == state.value(tier_key):
        return state, None

    if value:
        missing = [key for key in tier.depends_on if not state.value(key)]
        if missing:
            raise ValueError(
                f"Cannot select {tier_key}={value!r} before selecting {', '.join(missing)}"
            )

    cleared = flow.downstream(tier_key)
    reset_targets = cleared + (RESULTS_TARGET,)

    values = dict(state.values)
    values[tier_key] = value
    for key in cleared:
        values[key] = ""

    options = {key: opts for key, opts in state.options.items() if key not in cleared}

    generations = dict(state.generations)
    for target in reset_targets:
        generations[target] = generations.get(target, 0) + 1

    in_flight = {
        target: generation
        for target, generation in state.in_flight.items()
        if target not in reset_targets
    }

    request = None
    if value:
        next_tier = flow.next_tier(tier_key)
        if next_tier is not None:
            request = next_tier.build_request(flow.name, values, generations[next_tier.key])
        else:
            request = flow.terminal.build_request(flow.name, values, generations[RESULTS_TARGET])
        in_flight[request.target] = request.generation
        message = ""
    else:
        message = tier.prompt.format_map(values)

    logger.debug(
        "%s: %s=%r, cleared %s", flow.name, tier_key, value, ", ".join(cleared) or "nothing"
    )

    new_state = replace(
        state,
        values=values,
        options=options,
        generations=generations,
        in_flight=in_flight,
        message=message,
        error=None,
        results=None,
        results_status=None,
        expanded=(),
    )
    return new_state, request


def is_stale(state: CascadeState, outcome: FetchOutcome) -> bool:
    """True if ``outcome`` was issued for a selection that has since changed."""
    request = outcome.request
    return state.generation(request.target) != request.generation


def apply_fetch_outcome(state: CascadeState, outcome: FetchOutcome) -> CascadeState:
    """
    Apply the outcome of a fetch issued by start() or select_value().

    Stale outcomes are discarded and ``state`` is returned unchanged. An
    empty option list or an empty result set is informational, not an error.

    Raises:
        ValueError: If the outcome belongs to a different flow.
    """
    request = outcome.request
    if request.flow != state.flow:
        raise ValueError(f"Outcome for flow '{request.flow}' applied to flow '{state.flow}'")

    if is_stale(state, outcome):
        logger.debug(
            "%s: discarding stale %s response (generation %d, current %d)",
            state.flow, request.target, request.generation, state.generation(request.target),
        )
        return state

    flow = get_flow(state.flow)
    in_flight = {
        target: generation
        for target, generation in state.in_flight.items()
        if target != request.target
    }

    if request.is_terminal:
        return _apply_terminal_outcome(flow, replace(state, in_flight=in_flight), outcome)

    tier = flow.tier(request.target)
    options = {key: opts for key, opts in state.options.items() if key != tier.key}

    if not outcome.ok:
        logger.warning("%s: %s fetch failed: %s", flow.name, tier.key, outcome.error)
        return replace(
            state,
            in_flight=in_flight,
            options=options,
            message="",
            error=_error_message(tier.error_prefix, state.values, outcome.error),
        )

    try:
        loaded = tier.to_options(outcome.payload)
    except ValueError as exc:
        logger.warning("%s: unexpected %s payload: %s", flow.name, tier.key, exc)
        return replace(
            state,
            in_flight=in_flight,
            options=options,
            message="",
            error=_error_message(tier.error_prefix, state.values, str(exc)),
        )

    options[tier.key] = loaded
    template = tier.prompt if loaded else tier.empty_message
    return replace(
        state,
        in_flight=in_flight,
        options=options,
        message=template.format_map(state.values),
        error=None,
    )


def _apply_terminal_outcome(
    flow: CascadeFlow, state: CascadeState, outcome: FetchOutcome
) -> CascadeState:
    terminal = flow.terminal

    if not outcome.ok:
        logger.warning("%s: terminal fetch failed: %s", flow.name, outcome.error)
        return replace(
            state,
            results=None,
            results_status=RESULTS_ERROR,
            message="",
            error=_error_message(terminal.error_prefix, state.values, outcome.error),
        )

    try:
        payload = terminal.to_results(outcome.payload)
    except ValueError as exc:
        logger.warning("%s: unexpected terminal payload: %s", flow.name, exc)
        return replace(
            state,
            results=None,
            results_status=RESULTS_ERROR,
            message="",
            error=_error_message(terminal.error_prefix, state.values, str(exc)),
        )

    if terminal.is_empty(payload):
        return replace(
            state,
            results=payload,
            results_status=RESULTS_EMPTY,
            message=terminal.empty_message.format_map(state.values),
            error=None,
        )

    return replace(
        state,
        results=payload,
        results_status=RESULTS_LOADED,
        message=terminal.loaded_message(state.values, payload),
        error=None,
    )


def toggle_category(state: CascadeState, category: str) -> CascadeState:
    """Expand or collapse one result category. No-op without a Result Set."""
    if not state.has_results:
        return state
    expanded = set(state.expanded)
    expanded ^= {category}
    return replace(state, expanded=tuple(sorted(expanded)))


def phase(state: CascadeState) -> str:
    """
    Name the state-machine phase of ``state``.

    Returns:
        "empty", "<tier>_selected" for the deepest selected tier, or
        "results_loaded" / "results_empty" / "results_error" once the
        terminal fetch has completed.
    """
    if state.results_status:
        return f"results_{state.results_status}"
    flow = get_flow(state.flow)
    selected = [key for key in flow.keys if state.value(key)]
    return f"{selected[-1]}_selected" if selected else "empty"

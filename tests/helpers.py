"""Shared helpers for driving a flow through successful fetches."""

from cascade.controller import apply_fetch_outcome, select_value, start
from core.models import FetchOutcome


def succeed(state, request, payload):
    """Apply a successful outcome for ``request``."""
    return apply_fetch_outcome(state, FetchOutcome.success(request, payload))


def fail(state, request, kind="http", message="HTTP error! status: 500. Details: boom"):
    """Apply a failed outcome for ``request``."""
    return apply_fetch_outcome(state, FetchOutcome.failure(request, kind, message))


def choose(state, tier_key, value, payload):
    """Select a value and immediately resolve the request it issues."""
    state, request = select_value(state, tier_key, value)
    return succeed(state, request, payload)


def started(flow, first_options):
    """Start ``flow`` and load its first tier with ``first_options``."""
    state, request = start(flow)
    return succeed(state, request, first_options)

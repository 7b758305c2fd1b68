"""
Data models for the Public Health Gateway.

Contains immutable dataclasses for the cascading selection state, the fetch
request descriptors derived from it and the outcomes applied back to it.
Every model round-trips through ``to_dict()``/``from_dict()`` so it can live
in a ``dcc.Store``.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


# Terminal fetch target key (referral search / KPI data)
RESULTS_TARGET = "results"

RESULTS_LOADED = "loaded"
RESULTS_EMPTY = "empty"
RESULTS_ERROR = "error"


@dataclass(frozen=True)
class Option:
    """A single selectable entry of a tier."""

    label: str
    value: str

    def to_dict(self) -> dict:
        return {"label": self.label, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Option":
        return cls(label=data["label"], value=data["value"])


@dataclass(frozen=True)
class FetchRequest:
    """
    Descriptor of one backend call, derived purely from selection state.

    Attributes:
        flow: Name of the flow that issued the request
        target: Tier key whose options are fetched, or RESULTS_TARGET
        generation: Generation of ``target`` at issue time
        method: HTTP method
        path: Resolved path with upstream values already URL-quoted
        query: Query-string parameters
        body: JSON body for POST requests
    """

    flow: str
    target: str
    generation: int
    method: str = "GET"
    path: str = ""
    query: dict = field(default_factory=dict)
    body: Optional[dict] = None

    @property
    def is_terminal(self) -> bool:
        return self.target == RESULTS_TARGET

    def to_dict(self) -> dict:
        return {
            "flow": self.flow,
            "target": self.target,
            "generation": self.generation,
            "method": self.method,
            "path": self.path,
            "query": dict(self.query),
            "body": dict(self.body) if self.body is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FetchRequest":
        return cls(
            flow=data["flow"],
            target=data["target"],
            generation=data["generation"],
            method=data.get("method", "GET"),
            path=data.get("path", ""),
            query=dict(data.get("query") or {}),
            body=data.get("body"),
        )


@dataclass(frozen=True)
class FetchOutcome:
    """
    Result of executing a FetchRequest.

    Exactly one of ``payload`` (when ``ok``) or ``error`` (otherwise) is
    meaningful. ``error_kind`` names the failure category: "transport",
    "timeout", "http" or "invalid_response".
    """

    request: FetchRequest
    ok: bool
    payload: Any = None
    error_kind: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, request: FetchRequest, payload: Any) -> "FetchOutcome":
        return cls(request=request, ok=True, payload=payload)

    @classmethod
    def failure(cls, request: FetchRequest, kind: str, message: str) -> "FetchOutcome":
        return cls(request=request, ok=False, error_kind=kind, error=message)

    def to_dict(self) -> dict:
        return {
            "request": self.request.to_dict(),
            "ok": self.ok,
            "payload": self.payload,
            "error_kind": self.error_kind,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FetchOutcome":
        return cls(
            request=FetchRequest.from_dict(data["request"]),
            ok=data["ok"],
            payload=data.get("payload"),
            error_kind=data.get("error_kind"),
            error=data.get("error"),
        )


@dataclass(frozen=True)
class CascadeState:
    """
    Selection state of one cascading flow.

    Never mutated in place: transitions in ``cascade.controller`` build a new
    instance with fresh mappings.

    Attributes:
        flow: Name of the owning flow
        values: Tier key -> selected value ("" = unselected)
        options: Tier key -> loaded options
        generations: Fetch target -> current generation counter
        in_flight: Fetch target -> generation of the outstanding request
        message: Informational status message
        error: Error message of the last failed fetch, if any
        results: Payload of the terminal fetch (None = no Result Set)
        results_status: RESULTS_LOADED, RESULTS_EMPTY, RESULTS_ERROR or None
        expanded: Expanded category names (KPI flow)
    """

    flow: str
    values: dict = field(default_factory=dict)
    options: dict = field(default_factory=dict)
    generations: dict = field(default_factory=dict)
    in_flight: dict = field(default_factory=dict)
    message: str = ""
    error: Optional[str] = None
    results: Any = None
    results_status: Optional[str] = None
    expanded: tuple = ()

    @property
    def is_loading(self) -> bool:
        """True while any current request of this flow is outstanding."""
        return bool(self.in_flight)

    @property
    def has_results(self) -> bool:
        return self.results is not None

    def value(self, tier_key: str) -> str:
        return self.values.get(tier_key, "")

    def options_for(self, tier_key: str) -> tuple:
        return self.options.get(tier_key, ())

    def generation(self, target: str) -> int:
        return self.generations.get(target, 0)

    def is_expanded(self, category: str) -> bool:
        return category in self.expanded

    def to_dict(self) -> dict:
        return {
            "flow": self.flow,
            "values": dict(self.values),
            "options": {
                key: [option.to_dict() for option in options]
                for key, options in self.options.items()
            },
            "generations": dict(self.generations),
            "in_flight": dict(self.in_flight),
            "message": self.message,
            "error": self.error,
            "results": self.results,
            "results_status": self.results_status,
            "expanded": list(self.expanded),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CascadeState":
        return cls(
            flow=data["flow"],
            values=dict(data.get("values") or {}),
            options={
                key: tuple(Option.from_dict(option) for option in options)
                for key, options in (data.get("options") or {}).items()
            },
            generations=dict(data.get("generations") or {}),
            in_flight=dict(data.get("in_flight") or {}),
            message=data.get("message", ""),
            error=data.get("error"),
            results=data.get("results"),
            results_status=data.get("results_status"),
            expanded=tuple(data.get("expanded") or ()),
        )

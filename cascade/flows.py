"""
Flow definitions for the cascading selectors.

A flow is an ordered chain of tiers (State -> District -> ...) plus one
terminal fetch. Each tier knows which endpoint lists its options, how to turn
the payload into options and which messages describe it. The two flows used
by the application, REFERRAL_FLOW and KPI_FLOW, are defined at the bottom.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from urllib.parse import quote

from core.models import FetchRequest, Option, RESULTS_TARGET


def _quoted(values: dict) -> dict:
    """URL-quote every value for substitution into a path template."""
    return {key: quote(str(value), safe="") for key, value in values.items()}


@dataclass(frozen=True)
class TierSpec:
    """
    One stage of a selection chain.

    Attributes:
        key: Unique tier key, also the placeholder name in templates
        label: Human readable name ("District")
        path: Options endpoint; ``{tier}`` placeholders are filled from upstream values
        prompt: Message shown once options are loaded (or the tier is cleared)
        empty_message: Message shown when the options endpoint returns nothing
        error_prefix: Leading sentence of the error message on fetch failure
        depends_on: Upstream tier keys that must all be selected first
        query: Query parameter name -> tier key
        label_field: For object payloads, the field holding the display label
        value_field: For object payloads, the field holding the value
    """

    key: str
    label: str
    path: str
    prompt: str
    empty_message: str
    error_prefix: str
    depends_on: tuple = ()
    query: dict = field(default_factory=dict)
    label_field: Optional[str] = None
    value_field: Optional[str] = None

    def build_request(self, flow: str, values: dict, generation: int) -> FetchRequest:
        """Build the options request for this tier from the current values."""
        return FetchRequest(
            flow=flow,
            target=self.key,
            generation=generation,
            method="GET",
            path=self.path.format_map(_quoted(values)),
            query={param: values[tier] for param, tier in self.query.items()},
        )

    def to_options(self, payload: Any) -> tuple:
        """
        Convert an options payload into Option tuples.

        Raises:
            ValueError: If the payload is not a list, or an object entry
                lacks the configured fields.
        """
        if not isinstance(payload, list):
            raise ValueError(f"Expected a list of {self.label.lower()} options, got {type(payload).__name__}")

        options = []
        for item in payload:
            if self.label_field is None:
                options.append(Option(label=str(item), value=str(item)))
                continue
            try:
                label = item[self.label_field]
                value = item[self.value_field or self.label_field]
            except (KeyError, TypeError) as exc:
                raise ValueError(f"Malformed {self.label.lower()} option: {item!r}") from exc
            options.append(Option(label=str(label), value=str(value)))
        return tuple(options)


@dataclass(frozen=True)
class TerminalSpec:
    """
    The final data fetch of a flow, issued once every tier is selected.

    Attributes:
        path: Endpoint path (placeholders filled like TierSpec.path)
        error_prefix: Leading sentence of the error message on failure
        empty_message: Message template when ``is_empty(payload)`` holds
        is_empty: Predicate deciding whether the payload holds no matches
        loaded_message: Callable (values, payload) -> message for non-empty payloads
        check_payload: Callable raising ValueError when the payload has the wrong shape
        method: HTTP method
        query: Query parameter name -> tier key
        body: JSON body field -> tier key (POST only)
    """

    path: str
    error_prefix: str
    empty_message: str
    is_empty: Callable[[Any], bool]
    loaded_message: Callable[[dict, Any], str]
    check_payload: Optional[Callable[[Any], None]] = None
    method: str = "GET"
    query: dict = field(default_factory=dict)
    body: dict = field(default_factory=dict)

    def build_request(self, flow: str, values: dict, generation: int) -> FetchRequest:
        """Build the terminal request from a fully populated selection."""
        return FetchRequest(
            flow=flow,
            target=RESULTS_TARGET,
            generation=generation,
            method=self.method,
            path=self.path.format_map(_quoted(values)),
            query={param: values[tier] for param, tier in self.query.items()},
            body={name: values[tier] for name, tier in self.body.items()} if self.body else None,
        )

    def to_results(self, payload: Any) -> Any:
        """
        Return the payload as a Result Set after checking its shape.

        Raises:
            ValueError: If ``check_payload`` rejects the payload.
        """
        if self.check_payload is not None:
            self.check_payload(payload)
        return payload


@dataclass(frozen=True)
class CascadeFlow:
    """An ordered chain of tiers and its terminal fetch."""

    name: str
    tiers: tuple
    terminal: TerminalSpec
    expandable: bool = False

    def __post_init__(self):
        seen = set()
        for tier in self.tiers:
            unknown = set(tier.depends_on) - seen
            if unknown:
                raise ValueError(
                    f"Tier '{tier.key}' of flow '{self.name}' depends on "
                    f"tiers that are not upstream: {sorted(unknown)}"
                )
            seen.add(tier.key)

    @property
    def keys(self) -> tuple:
        return tuple(tier.key for tier in self.tiers)

    def tier(self, key: str) -> TierSpec:
        for tier in self.tiers:
            if tier.key == key:
                return tier
        raise KeyError(f"Flow '{self.name}' has no tier '{key}'")

    def index(self, key: str) -> int:
        try:
            return self.keys.index(key)
        except ValueError:
            raise KeyError(f"Flow '{self.name}' has no tier '{key}'") from None

    def downstream(self, key: str) -> tuple:
        """Keys of every tier strictly after ``key``."""
        return self.keys[self.index(key) + 1:]

    def next_tier(self, key: str) -> Optional[TierSpec]:
        position = self.index(key) + 1
        return self.tiers[position] if position < len(self.tiers) else None

    def empty_values(self) -> dict:
        return {key: "" for key in self.keys}


# --- Referral flow ---


def _referral_is_empty(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return True
    return not payload.get("closestNextLevelFacility") and not payload.get("allNextLevelFacilities")


def _referral_loaded_message(values: dict, payload: Any) -> str:
    return f"Showing referral options for {values['facility']}."


def _check_referral_payload(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a referral object, got {type(payload).__name__}")
    for key in ("startFacility", "closestNextLevelFacility"):
        facility = payload.get(key)
        if facility is not None and not isinstance(facility, dict):
            raise ValueError(f"Malformed {key}: {facility!r}")
    facilities = payload.get("allNextLevelFacilities")
    if facilities is None:
        return
    if not isinstance(facilities, list):
        raise ValueError(f"Expected a list of next-level facilities, got {type(facilities).__name__}")
    for facility in facilities:
        if not isinstance(facility, dict):
            raise ValueError(f"Malformed next-level facility: {facility!r}")


REFERRAL_FLOW = CascadeFlow(
    name="referral",
    tiers=(
        TierSpec(
            key="state",
            label="State",
            path="/api/states",
            prompt="Please select a State.",
            empty_message="No states available.",
            error_prefix="Failed to load states.",
        ),
        TierSpec(
            key="district",
            label="District",
            path="/api/districts/{state}",
            prompt="Please select a District in {state}.",
            empty_message="No districts available for {state}.",
            error_prefix="Failed to load districts for {state}.",
            depends_on=("state",),
        ),
        TierSpec(
            key="subdistrict",
            label="Subdistrict",
            path="/api/subdistricts/{state}/{district}",
            prompt="Please select a Subdistrict in {district}.",
            empty_message="No subdistricts available for {district}.",
            error_prefix="Failed to load subdistricts for {district}.",
            depends_on=("state", "district"),
        ),
        TierSpec(
            key="facility",
            label="Facility",
            path="/api/facilities/{state}/{district}/{subdistrict}",
            prompt="Please select a Facility in {subdistrict}.",
            empty_message="No facilities available for {subdistrict}.",
            error_prefix="Failed to load facility names for {subdistrict}.",
            depends_on=("state", "district", "subdistrict"),
        ),
    ),
    terminal=TerminalSpec(
        path="/api/referral",
        method="POST",
        body={
            "selectedState": "state",
            "selectedDistrict": "district",
            "selectedSubdistrict": "subdistrict",
            "selectedFacilityName": "facility",
        },
        error_prefix="Failed to perform referral search.",
        empty_message="No next-level facility found in {district}.",
        is_empty=_referral_is_empty,
        loaded_message=_referral_loaded_message,
        check_payload=_check_referral_payload,
    ),
)


# --- KPI flow ---


def _kpi_is_empty(payload: Any) -> bool:
    return not payload


def _check_kpi_rows(payload: Any) -> None:
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of KPI rows, got {type(payload).__name__}")
    for row in payload:
        if not isinstance(row, dict):
            raise ValueError(f"Malformed KPI row: {row!r}")


def _kpi_loaded_message(values: dict, payload: Any) -> str:
    # The backend echoes geography names on every row; the first one is enough
    first = payload[0]
    return (
        f"Displaying data for {first.get('state_name')} > {first.get('district_name')}"
        f" > {values['source']} > {values['year']}"
    )


KPI_FLOW = CascadeFlow(
    name="kpi",
    expandable=True,
    tiers=(
        TierSpec(
            key="state",
            label="State",
            path="/api/kpi/states",
            prompt="Please select a State.",
            empty_message="No states available.",
            error_prefix="Failed to load states.",
            label_field="state_name",
        ),
        TierSpec(
            key="district",
            label="District",
            path="/api/kpi/districts",
            query={"state": "state"},
            prompt="Please select a District in {state}.",
            empty_message="No districts available for {state}.",
            error_prefix="Failed to load districts for {state}.",
            depends_on=("state",),
            label_field="district_name",
            value_field="district_id",
        ),
        TierSpec(
            key="source",
            label="Data Source",
            path="/api/kpi/available-sources",
            query={"districtId": "district"},
            prompt="Please select a Data Source.",
            empty_message="No data sources available for this district.",
            error_prefix="Failed to load available sources for selected district.",
            depends_on=("state", "district"),
        ),
        TierSpec(
            key="year",
            label="Year",
            path="/api/kpi/available-years",
            query={"districtId": "district", "source": "source"},
            prompt="Please select a Year.",
            empty_message="No years available for {source} in this district.",
            error_prefix="Failed to load available years for {source}.",
            depends_on=("state", "district", "source"),
        ),
    ),
    terminal=TerminalSpec(
        path="/api/kpi/kpi-data",
        query={"districtId": "district", "source": "source", "year": "year"},
        error_prefix="Failed to load KPI data.",
        empty_message="No KPI data found for the selected criteria.",
        is_empty=_kpi_is_empty,
        loaded_message=_kpi_loaded_message,
        check_payload=_check_kpi_rows,
    ),
)


FLOWS = {flow.name: flow for flow in (REFERRAL_FLOW, KPI_FLOW)}


def get_flow(name: str) -> CascadeFlow:
    """Look up a flow by name."""
    try:
        return FLOWS[name]
    except KeyError:
        raise KeyError(f"Unknown flow: {name}") from None

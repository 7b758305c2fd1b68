"""
Tests for core/models.py - selection state and fetch descriptors.

Tests cover:
- Option, FetchRequest and FetchOutcome construction
- CascadeState accessors and derived flags
- Store round-trips through to_dict()/from_dict()
"""

from core.models import (
    CascadeState,
    FetchOutcome,
    FetchRequest,
    Option,
    RESULTS_LOADED,
    RESULTS_TARGET,
)


class TestFetchRequest:
    """Test FetchRequest."""

    def test_defaults(self):
        request = FetchRequest(flow="kpi", target="state", generation=1)

        assert request.method == "GET"
        assert request.query == {}
        assert request.body is None
        assert not request.is_terminal

    def test_terminal_target(self):
        assert FetchRequest(flow="kpi", target=RESULTS_TARGET, generation=3).is_terminal

    def test_store_round_trip(self):
        request = FetchRequest(
            flow="referral", target=RESULTS_TARGET, generation=5, method="POST",
            path="/api/referral", body={"selectedState": "Bihar"},
        )

        assert FetchRequest.from_dict(request.to_dict()) == request


class TestFetchOutcome:
    """Test FetchOutcome constructors."""

    def test_success(self):
        request = FetchRequest(flow="kpi", target="year", generation=2)
        outcome = FetchOutcome.success(request, [2020])

        assert outcome.ok
        assert outcome.payload == [2020]
        assert outcome.error is None

    def test_failure_round_trip(self):
        request = FetchRequest(flow="kpi", target="year", generation=2)
        outcome = FetchOutcome.failure(request, "timeout", "Request timed out after 10s.")

        restored = FetchOutcome.from_dict(outcome.to_dict())
        assert restored == outcome
        assert not restored.ok
        assert restored.error_kind == "timeout"


class TestCascadeState:
    """Test CascadeState accessors."""

    def test_empty_state(self):
        state = CascadeState(flow="referral")

        assert state.value("state") == ""
        assert state.options_for("state") == ()
        assert state.generation("state") == 0
        assert not state.is_loading
        assert not state.has_results

    def test_loading_follows_in_flight(self):
        assert CascadeState(flow="kpi", in_flight={"district": 2}).is_loading

    def test_empty_result_set_counts_as_results(self):
        """An empty list is a Result Set; None is not."""
        assert CascadeState(flow="kpi", results=[]).has_results

    def test_expanded(self):
        state = CascadeState(flow="kpi", expanded=("Nutrition",))

        assert state.is_expanded("Nutrition")
        assert not state.is_expanded("Maternal Health")

    def test_store_round_trip(self, kpi_rows):
        """A state written to a dcc.Store should restore equal, with tuples intact."""
        state = CascadeState(
            flow="kpi",
            values={"state": "Bihar", "district": "7", "source": "NFHS", "year": "2020"},
            options={"district": (Option("Patna", "7"),), "year": (Option("2020", "2020"),)},
            generations={"state": 1, "district": 1, "source": 1, "year": 1, RESULTS_TARGET: 1},
            in_flight={},
            message="Displaying data for Bihar > Patna > NFHS > 2020",
            results=kpi_rows,
            results_status=RESULTS_LOADED,
            expanded=("Maternal Health",),
        )

        data = state.to_dict()
        assert data["options"]["district"] == [{"label": "Patna", "value": "7"}]
        assert data["expanded"] == ["Maternal Health"]

        assert CascadeState.from_dict(data) == state

    def test_to_dict_copies_mappings(self):
        values = {"state": "Bihar"}
        state = CascadeState(flow="referral", values=values)

        state.to_dict()["values"]["state"] = "Goa"
        assert state.value("state") == "Bihar"

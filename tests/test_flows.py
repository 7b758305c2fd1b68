"""
Tests for cascade/flows.py - flow definitions and request descriptors.

Tests cover:
- Options endpoints with URL-quoted upstream values
- Query parameters of the KPI tiers
- Terminal requests (POST body / GET query)
- Payload to Option conversion
- Flow validation and lookup
"""

import pytest

from cascade.flows import (
    FLOWS,
    KPI_FLOW,
    REFERRAL_FLOW,
    CascadeFlow,
    TerminalSpec,
    TierSpec,
    get_flow,
)
from core.models import Option, RESULTS_TARGET


class TestTierRequests:
    """Test TierSpec.build_request()."""

    def test_referral_paths_use_upstream_values(self):
        """Facility names path should include all three upstream values."""
        values = {"state": "Bihar", "district": "Patna", "subdistrict": "Danapur", "facility": ""}
        request = REFERRAL_FLOW.tier("facility").build_request("referral", values, 4)

        assert request.path == "/api/facilities/Bihar/Patna/Danapur"
        assert request.target == "facility"
        assert request.generation == 4
        assert request.method == "GET"
        assert request.query == {}

    def test_path_values_are_url_quoted(self):
        """Spaces and slashes in names must not break the path."""
        values = {"state": "Jammu & Kashmir", "district": "Leh/Ladakh", "subdistrict": "", "facility": ""}
        request = REFERRAL_FLOW.tier("subdistrict").build_request("referral", values, 1)

        assert request.path == "/api/subdistricts/Jammu%20%26%20Kashmir/Leh%2FLadakh"

    def test_kpi_years_query(self):
        """The years request should carry districtId and source as query parameters."""
        values = {"state": "Bihar", "district": "7", "source": "NFHS", "year": ""}
        request = KPI_FLOW.tier("year").build_request("kpi", values, 2)

        assert request.path == "/api/kpi/available-years"
        assert request.query == {"districtId": "7", "source": "NFHS"}

    def test_kpi_districts_query(self):
        """The districts request should pass the state name as a query parameter."""
        values = {"state": "Tamil Nadu", "district": "", "source": "", "year": ""}
        request = KPI_FLOW.tier("district").build_request("kpi", values, 1)

        assert request.path == "/api/kpi/districts"
        assert request.query == {"state": "Tamil Nadu"}


class TestTerminalRequests:
    """Test TerminalSpec.build_request()."""

    def test_referral_terminal_is_post(self):
        """The referral search should POST every selection in the body."""
        values = {"state": "Bihar", "district": "Patna", "subdistrict": "Danapur", "facility": "PHC X"}
        request = REFERRAL_FLOW.terminal.build_request("referral", values, 3)

        assert request.target == RESULTS_TARGET
        assert request.is_terminal
        assert request.method == "POST"
        assert request.body["selectedFacilityName"] == "PHC X"
        assert request.query == {}

    def test_kpi_terminal_has_no_body(self):
        """The KPI data fetch should be a GET with no body."""
        values = {"state": "Bihar", "district": "7", "source": "NFHS", "year": "2020"}
        request = KPI_FLOW.terminal.build_request("kpi", values, 1)

        assert request.method == "GET"
        assert request.body is None
        assert request.query == {"districtId": "7", "source": "NFHS", "year": "2020"}


class TestToOptions:
    """Test TierSpec.to_options()."""

    def test_string_list(self):
        """Plain string lists should map label and value to the string."""
        options = REFERRAL_FLOW.tier("state").to_options(["Bihar", "Goa"])

        assert options == (Option("Bihar", "Bihar"), Option("Goa", "Goa"))

    def test_numbers_become_strings(self):
        """Numeric years should be converted to strings."""
        options = KPI_FLOW.tier("year").to_options([2019, 2021])

        assert options == (Option("2019", "2019"), Option("2021", "2021"))

    def test_object_list_uses_label_and_value_fields(self):
        """KPI districts should use district_name as label and district_id as value."""
        payload = [{"district_id": 12, "district_name": "Gaya"}]

        assert KPI_FLOW.tier("district").to_options(payload) == (Option("Gaya", "12"),)

    def test_label_field_only(self):
        """KPI states should use state_name for both label and value."""
        payload = [{"state_name": "Bihar", "state_id": 10}]

        assert KPI_FLOW.tier("state").to_options(payload) == (Option("Bihar", "Bihar"),)

    def test_empty_list(self):
        assert REFERRAL_FLOW.tier("district").to_options([]) == ()

    def test_non_list_payload_raises(self):
        """Object payloads should be rejected."""
        with pytest.raises(ValueError, match="Expected a list of district options"):
            REFERRAL_FLOW.tier("district").to_options({"districts": []})

    def test_missing_field_raises(self):
        """Object entries without the label field should be rejected."""
        with pytest.raises(ValueError, match="Malformed district option"):
            KPI_FLOW.tier("district").to_options([{"district_id": 3}])


class TestTerminalPayloadShape:
    """Test TerminalSpec.to_results()."""

    def test_kpi_rows_accepted(self, kpi_rows):
        assert KPI_FLOW.terminal.to_results(kpi_rows) is kpi_rows
        assert KPI_FLOW.terminal.to_results([]) == []

    def test_kpi_object_rejected(self):
        with pytest.raises(ValueError, match="Expected a list of KPI rows, got dict"):
            KPI_FLOW.terminal.to_results({"error": "db down"})

    def test_kpi_scalar_row_rejected(self):
        with pytest.raises(ValueError, match="Malformed KPI row"):
            KPI_FLOW.terminal.to_results(["oops"])

    def test_referral_payload_accepted(self, referral_payload):
        assert REFERRAL_FLOW.terminal.to_results(referral_payload) is referral_payload
        assert REFERRAL_FLOW.terminal.to_results({"startFacility": {}}) == {"startFacility": {}}

    def test_referral_non_object_rejected(self):
        with pytest.raises(ValueError, match="Expected a referral object"):
            REFERRAL_FLOW.terminal.to_results(None)

    def test_referral_facility_list_entries_checked(self):
        with pytest.raises(ValueError, match="Malformed next-level facility"):
            REFERRAL_FLOW.terminal.to_results({"allNextLevelFacilities": ["x"]})

    def test_referral_facility_list_must_be_list(self):
        with pytest.raises(ValueError, match="Expected a list of next-level facilities"):
            REFERRAL_FLOW.terminal.to_results({"allNextLevelFacilities": {"a": 1}})


class TestTerminalEmptiness:
    """Test the empty-result predicates."""

    def test_referral_empty_without_next_level(self):
        assert REFERRAL_FLOW.terminal.is_empty({"startFacility": {}})
        assert REFERRAL_FLOW.terminal.is_empty({"allNextLevelFacilities": []})
        assert REFERRAL_FLOW.terminal.is_empty(None)

    def test_referral_not_empty_with_closest(self, referral_payload):
        assert not REFERRAL_FLOW.terminal.is_empty(referral_payload)

    def test_kpi_empty(self, kpi_rows):
        assert KPI_FLOW.terminal.is_empty([])
        assert not KPI_FLOW.terminal.is_empty(kpi_rows)


class TestCascadeFlow:
    """Test CascadeFlow navigation and validation."""

    def test_keys_and_downstream(self):
        assert REFERRAL_FLOW.keys == ("state", "district", "subdistrict", "facility")
        assert REFERRAL_FLOW.downstream("district") == ("subdistrict", "facility")
        assert REFERRAL_FLOW.downstream("facility") == ()

    def test_next_tier(self):
        assert KPI_FLOW.next_tier("source").key == "year"
        assert KPI_FLOW.next_tier("year") is None

    def test_unknown_tier(self):
        with pytest.raises(KeyError):
            REFERRAL_FLOW.tier("village")
        with pytest.raises(KeyError):
            REFERRAL_FLOW.index("village")

    def test_only_kpi_is_expandable(self):
        assert KPI_FLOW.expandable
        assert not REFERRAL_FLOW.expandable

    def test_dependency_must_be_upstream(self):
        """A tier depending on a later tier should be rejected."""
        terminal = TerminalSpec(
            path="/x",
            error_prefix="Failed.",
            empty_message="None.",
            is_empty=lambda payload: not payload,
            loaded_message=lambda values, payload: "Loaded.",
        )
        first = TierSpec(
            key="a", label="A", path="/a", prompt="", empty_message="", error_prefix="",
            depends_on=("b",),
        )
        second = TierSpec(key="b", label="B", path="/b", prompt="", empty_message="", error_prefix="")

        with pytest.raises(ValueError, match="not upstream"):
            CascadeFlow(name="broken", tiers=(first, second), terminal=terminal)

    def test_get_flow(self):
        assert get_flow("kpi") is KPI_FLOW
        assert set(FLOWS) == {"referral", "kpi"}
        with pytest.raises(KeyError, match="Unknown flow"):
            get_flow("pathways")

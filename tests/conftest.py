"""
Pytest configuration and fixtures for the test suite.

This module provides shared fixtures used across multiple test modules.
"""

import tempfile
from pathlib import Path
from typing import Generator
from unittest import mock

import pytest
import requests



@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def kpi_rows() -> list[dict]:
    """Return KPI rows as served by /api/kpi/kpi-data for one district."""
    return [
        {
            "kpi_id": 3,
            "kpi_name": "Institutional births",
            "kpi_value": "88.4",
            "unit": "%",
            "category": "Maternal Health",
            "state_name": "Bihar",
            "district_name": "Patna",
        },
        {
            "kpi_id": 1,
            "kpi_name": "Anaemic women",
            "kpi_value": 1234.5,
            "unit": None,
            "category": "Maternal Health",
            "state_name": "Bihar",
            "district_name": "Patna",
        },
        {
            "kpi_id": 7,
            "kpi_name": "Households surveyed",
            "kpi_value": None,
            "unit": "count",
            "category": None,
            "state_name": "Bihar",
            "district_name": "Patna",
        },
    ]


@pytest.fixture
def referral_payload() -> dict:
    """Return a /api/referral response with a closest and two next-level facilities."""
    closest = {
        "Facility Name": "CHC Danapur",
        "Facility Type": "CHC",
        "District Name": "Patna",
        "Latitude": 25.6341,
        "Longitude": 85.0462,
        "Distance (km)": 4.219,
    }
    return {
        "startFacility": {
            "Facility Name": "PHC Phulwari",
            "Facility Type": "PHC",
            "District Name": "Patna",
            "Latitude": 25.5736123,
            "Longitude": 85.0823456,
        },
        "closestNextLevelFacility": closest,
        "allNextLevelFacilities": [
            closest,
            {
                "Facility Name": "CHC Bihta",
                "Facility Type": "CHC",
                "District Name": "Patna",
                "Latitude": 25.5623,
                "Longitude": 84.8702,
                "Distance (km)": 21.5,
            },
        ],
    }


@pytest.fixture
def mock_response():
    """Factory for fake requests.Response objects."""

    def _make(status=200, json_data=None, text="", reason="OK"):
        response = mock.Mock(spec=requests.Response)
        response.status_code = status
        response.ok = status < 400
        response.reason = reason
        response.text = text
        if json_data is None:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        else:
            response.json.return_value = json_data
        return response

    return _make

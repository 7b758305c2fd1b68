"""
Test suite for the Public Health Gateway.

This package contains unit tests for:
- Configuration and logging (config/, core/logging_config.py)
- State models (core/models.py)
- Cascading selector flows, transitions and grouping (cascade/)
- REST client error taxonomy (gateway_app/data/api_client.py)
- Dash render helpers and navigation (gateway_app/)
"""

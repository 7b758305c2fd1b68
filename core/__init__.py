"""
Core module for the Public Health Gateway.

Contains the state models and logging utilities shared across the application.
"""

from core.models import (
    CascadeState,
    FetchOutcome,
    FetchRequest,
    Option,
    RESULTS_TARGET,
    RESULTS_LOADED,
    RESULTS_EMPTY,
    RESULTS_ERROR,
)
from core.logging_config import setup_logging, get_logger

__all__ = [
    "CascadeState",
    "FetchOutcome",
    "FetchRequest",
    "Option",
    "RESULTS_TARGET",
    "RESULTS_LOADED",
    "RESULTS_EMPTY",
    "RESULTS_ERROR",
    "setup_logging",
    "get_logger",
]

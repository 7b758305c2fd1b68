"""
Cascading selection package.

This package contains the dependent-dropdown logic shared by both pages:
- flows: tier chains and terminal fetches for the referral and KPI pages
- controller: pure state transitions (select, apply outcome, toggle category)
- grouping: category grouping and value formatting for result sets
- facilities: facility-type hierarchy used for referral labels
"""

from cascade.flows import (
    CascadeFlow,
    TierSpec,
    TerminalSpec,
    REFERRAL_FLOW,
    KPI_FLOW,
    FLOWS,
    get_flow,
)

from cascade.controller import (
    start,
    select_value,
    apply_fetch_outcome,
    toggle_category,
    is_stale,
    phase,
)

from cascade.grouping import (
    UNCATEGORIZED,
    group_by_category,
    sorted_categories,
    sorted_rows,
    format_kpi_value,
    format_unit,
    format_coordinate,
    format_distance,
)

from cascade.facilities import FACILITY_LEVELS, NEXT_LEVEL, next_level, level_rank

__all__ = [
    # Flow definitions
    "CascadeFlow",
    "TierSpec",
    "TerminalSpec",
    "REFERRAL_FLOW",
    "KPI_FLOW",
    "FLOWS",
    "get_flow",
    # Transitions
    "start",
    "select_value",
    "apply_fetch_outcome",
    "toggle_category",
    "is_stale",
    "phase",
    # Result presentation
    "UNCATEGORIZED",
    "group_by_category",
    "sorted_categories",
    "sorted_rows",
    "format_kpi_value",
    "format_unit",
    "format_coordinate",
    "format_distance",
    # Facility hierarchy
    "FACILITY_LEVELS",
    "NEXT_LEVEL",
    "next_level",
    "level_rank",
]

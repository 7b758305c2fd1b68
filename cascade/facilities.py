"""Facility hierarchy used to label referral levels.

The actual next-level search is done by the backend; this only names the
level a facility type refers up to.
"""
from typing import Optional

FACILITY_LEVELS = (
    "SUB_CEN",
    "PHC",
    "CHC",
    "S_T_H",
    "District Hospital",
    "Medical College",
)

NEXT_LEVEL = {
    lower: upper for lower, upper in zip(FACILITY_LEVELS, FACILITY_LEVELS[1:])
}


def next_level(facility_type: Optional[str]) -> Optional[str]:
    """Return the facility type one level up, or None at the top / for unknown types."""
    if not facility_type:
        return None
    return NEXT_LEVEL.get(facility_type.strip())


def level_rank(facility_type: Optional[str]) -> Optional[int]:
    """Position of a facility type in the hierarchy (0 = SUB_CEN)."""
    if not facility_type:
        return None
    try:
        return FACILITY_LEVELS.index(facility_type.strip())
    except ValueError:
        return None

"""Category grouping and display formatting for terminal result sets."""
import math
from typing import Any, Iterable, Optional

UNCATEGORIZED = "Uncategorized"
NOT_AVAILABLE = "N/A"


def group_by_category(rows: Iterable[dict], field: str = "category") -> dict[str, list[dict]]:
    """Group rows by category, keeping their original relative order.

    Rows whose category is missing, null or empty fall into UNCATEGORIZED.
    The result is a fresh mapping on every call; nothing is cached.
    """
    groups: dict[str, list[dict]] = {}
    for row in rows:
        category = row.get(field) or UNCATEGORIZED
        groups.setdefault(category, []).append(row)
    return groups


def sorted_categories(groups: dict) -> list[str]:
    """Category names in lexicographic order."""
    return sorted(groups)


def sorted_rows(rows: Iterable[dict], name_field: str = "kpi_name") -> list[dict]:
    """Rows sorted lexicographically by their name field (missing names first)."""
    return sorted(rows, key=lambda row: row.get(name_field) or "")


def format_kpi_value(value: Any) -> str:
    """Format a KPI value with thousands separators and at most three decimals.

    None becomes "N/A"; values that are not numeric are shown unchanged.
    """
    if value is None:
        return NOT_AVAILABLE
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if math.isnan(number) or math.isinf(number):
        return str(value)
    text = f"{number:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_unit(unit: Optional[str]) -> str:
    return unit or NOT_AVAILABLE


def _format_fixed(value: Any, digits: int) -> str:
    if value is None:
        return NOT_AVAILABLE
    try:
        return f"{float(value):.{digits}f}"
    except (TypeError, ValueError):
        return NOT_AVAILABLE


def format_coordinate(value: Any) -> str:
    """Latitude/longitude with 5 decimals."""
    return _format_fixed(value, 5)


def format_distance(value: Any) -> str:
    """Distance in km with 2 decimals."""
    return _format_fixed(value, 2)

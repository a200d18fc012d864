"""Specification extraction for components and peripherals.

Turns a component's sub-record into an ordered ``label -> value`` mapping for
display. Field order and units come from the SPEC_FIELDS registry.
"""

from typing import Any, Dict, Optional, Tuple

from catalog.config import BOOL, get_spec_fields
from catalog.models import Component, SpecRecord

__all__ = ["CPU_SERIES", "derive_cpu_series", "extract_specifications", "format_spec_value"]

# name substring -> series label, first match wins
CPU_SERIES: Tuple[Tuple[str, str], ...] = (
    ("core i3", "Core i3"),
    ("core i5", "Core i5"),
    ("core i7", "Core i7"),
    ("core i9", "Core i9"),
    ("ryzen 3", "Ryzen 3"),
    ("ryzen 5", "Ryzen 5"),
    ("ryzen 7", "Ryzen 7"),
    ("ryzen 9", "Ryzen 9"),
)


def derive_cpu_series(name: str) -> Optional[str]:
    """Guess a CPU series from its product name, e.g. "Core i7" or "Ryzen 5"."""
    lowered = name.lower()
    for needle, series in CPU_SERIES:
        if needle in lowered:
            return series
    return None


def _format_number(value: Any) -> str:
    """Render numbers as plain literals (8, 3.6, 1000), never as 8.0."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_spec_value(value: Any, unit: str) -> str:
    """Format a single spec value with its unit suffix.

    Args:
        value: Raw column value (not None).
        unit: Literal suffix, empty string, or BOOL.
    """
    if unit == BOOL:
        if isinstance(value, str):
            return "Yes" if value.strip().lower() in ("1", "true", "yes") else "No"
        return "Yes" if value else "No"
    if isinstance(value, bool):
        text = "Yes" if value else "No"
    elif isinstance(value, (int, float)):
        text = _format_number(value)
    else:
        text = str(value)
    return f"{text}{unit}"


def _extract_from_record(record: SpecRecord, derived: Dict[str, Any]) -> Dict[str, str]:
    fields = get_spec_fields(record.kind) or []
    specifications: Dict[str, str] = {}
    for column, label, unit in fields:
        value = record.get(column)
        if (value is None or value == "") and column in derived:
            value = derived[column]
        if value is None:
            continue
        specifications[label] = format_spec_value(value, unit)
    return specifications


def extract_specifications(component: Component, derive_series: bool = False) -> Dict[str, str]:
    """Extract display specifications from a component's sub-record.

    Args:
        component: Component with its sub-record joined in.
        derive_series: Fill an empty CPU series from the product name.
            Series stays omitted when the name has no recognizable one.

    Returns:
        Ordered label -> value mapping; empty when there is no sub-record.
    """
    detail: Optional[SpecRecord] = component.detail
    if detail is None:
        return {}

    derived: Dict[str, Any] = {}
    if derive_series and detail.kind == "cpu":
        derived["series"] = derive_cpu_series(component.name)
    return _extract_from_record(detail, derived)

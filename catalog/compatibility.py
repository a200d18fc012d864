"""Configurator compatibility checks and power estimates.

All checks are name heuristics kept behind the lists below, so they can be
swapped for structured attribute comparisons without touching callers.
"""

import math
import re
from typing import Dict, Iterable, List, Optional

from catalog.models import Component

__all__ = [
    "INTEL_BOARD_MARKERS",
    "AMD_BOARD_MARKERS",
    "extract_wattage",
    "is_intel_cpu",
    "is_amd_cpu",
    "is_intel_board",
    "is_amd_board",
    "motherboard_matches_cpu",
    "form_factor_compatible",
    "estimate_power_draw",
    "recommended_psu_wattage",
    "compatibility_issues",
]

INTEL_BOARD_MARKERS = ("intel", "z690", "z790", "b660", "b760", "lga1700")
AMD_BOARD_MARKERS = ("amd", "am4", "am5", "b550", "x570", "b650", "x670")

_WATTAGE_RE = re.compile(r"(\d+)\s*w")
_DIGITS_RE = re.compile(r"(\d+)")

POWER_OVERHEAD = 1.1

# First matching marker wins, in order
CPU_POWER = (
    ("i9", 125), ("i7", 95), ("i5", 65), ("i3", 50),
    ("ryzen 9", 105), ("ryzen 7", 95), ("ryzen 5", 65), ("ryzen 3", 45),
)
DEFAULT_CPU_POWER = 75

GPU_POWER = (
    ("rtx 40", 320), ("rtx 30", 260), ("rtx 20", 200), ("gtx 16", 120),
    ("rx 7", 300), ("rx 6", 230),
)
DEFAULT_GPU_POWER = 150

FIXED_POWER = {"motherboard": 50, "ram": 10, "storage": 10}

# (upper bound of power draw in W, recommended PSU)
PSU_RECOMMENDATIONS = (
    (300, "450W"),
    (400, "550W"),
    (500, "650W"),
    (650, "750W"),
    (800, "850W"),
)


def extract_wattage(name: str) -> int:
    """Wattage from a PSU name such as "Corsair RM850x 850W", 0 if absent."""
    match = _WATTAGE_RE.search(name.lower())
    return int(match.group(1)) if match else 0


def is_intel_cpu(cpu_name: str) -> bool:
    name = cpu_name.lower()
    return "intel" in name or "core i" in name


def is_amd_cpu(cpu_name: str) -> bool:
    name = cpu_name.lower()
    return "ryzen" in name or "amd" in name


def is_intel_board(board_name: str) -> bool:
    name = board_name.lower()
    return any(marker in name for marker in INTEL_BOARD_MARKERS)


def is_amd_board(board_name: str) -> bool:
    name = board_name.lower()
    return any(marker in name for marker in AMD_BOARD_MARKERS)


def motherboard_matches_cpu(board_name: str, cpu_name: str) -> bool:
    """Whether a motherboard looks like it fits the CPU's vendor.

    CPUs of unknown vendor match every board.
    """
    if is_amd_cpu(cpu_name):
        return is_amd_board(board_name)
    if is_intel_cpu(cpu_name):
        return is_intel_board(board_name)
    return True


def _board_form(board_name: str) -> str:
    name = board_name.lower()
    if "micro-atx" in name or "matx" in name or "m-atx" in name:
        return "micro-atx"
    if "mini-itx" in name or "itx" in name:
        return "mini-itx"
    return "atx"


def _case_form(case_name: str) -> Optional[str]:
    name = case_name.lower()
    if "mini-itx" in name or "itx" in name:
        return "mini-itx"
    if "micro-atx" in name or "matx" in name:
        return "micro-atx"
    return None


def _case_issue(case_name: str, board_name: str) -> Optional[str]:
    if _board_form(board_name) != "atx":
        return None
    case_form = _case_form(case_name)
    if case_form == "mini-itx":
        return (
            "Case is too small for the selected motherboard. "
            "ATX motherboards need at least a mid-tower case."
        )
    if case_form == "micro-atx" and "atx support" not in case_name.lower():
        return (
            "Case may be too small for the ATX motherboard. "
            "Check if it supports ATX form factor."
        )
    return None


def form_factor_compatible(case_name: str, board_name: str) -> bool:
    """Whether a case can hold the motherboard, judged from their names."""
    return _case_issue(case_name, board_name) is None


def _category_key(component: Component) -> str:
    return component.category.slug.lower()


def _component_power(component: Component) -> int:
    if component.detail is not None:
        tdp = component.detail.get("tdp")
        if tdp is not None:
            match = _DIGITS_RE.search(str(tdp))
            if match:
                return int(match.group(1))

    name = component.name.lower()
    category = _category_key(component)
    if category == "cpu":
        return next((watts for marker, watts in CPU_POWER if marker in name), DEFAULT_CPU_POWER)
    if category == "gpu":
        return next((watts for marker, watts in GPU_POWER if marker in name), DEFAULT_GPU_POWER)
    if category == "cooling":
        return 15 if "aio" in name else 5
    return FIXED_POWER.get(category, 0)


def estimate_power_draw(components: Iterable[Component]) -> int:
    """Estimated system power draw in watts, including 10% overhead."""
    total = sum(_component_power(component) for component in components)
    return math.ceil(round(total * POWER_OVERHEAD, 6))


def recommended_psu_wattage(power_draw: int) -> str:
    if power_draw <= 0:
        return "N/A"
    for upper_bound, recommendation in PSU_RECOMMENDATIONS:
        if power_draw <= upper_bound:
            return recommendation
    return "1000W+"


def _by_category(components: Iterable[Component]) -> Dict[str, Component]:
    selected: Dict[str, Component] = {}
    for component in components:
        selected.setdefault(_category_key(component), component)
    return selected


def compatibility_issues(
    components: Iterable[Component],
    power_draw: Optional[int] = None,
) -> List[str]:
    """Human-readable warnings for a set of selected components.

    Args:
        components: Selected components; the first of each category is checked.
        power_draw: Estimated draw in watts. Computed when omitted.
    """
    components = list(components)
    selected = _by_category(components)
    if power_draw is None:
        power_draw = estimate_power_draw(components)

    issues: List[str] = []

    cpu = selected.get("cpu")
    board = selected.get("motherboard")
    if cpu and board:
        if is_amd_cpu(cpu.name) and not is_amd_board(board.name):
            issues.append(
                "CPU and motherboard may be incompatible. "
                "AMD CPUs require AMD compatible motherboards."
            )
        if is_intel_cpu(cpu.name) and not is_intel_board(board.name):
            issues.append(
                "CPU and motherboard may be incompatible. "
                "Intel CPUs require Intel compatible motherboards."
            )

    case = selected.get("case")
    if case and board:
        issue = _case_issue(case.name, board.name)
        if issue:
            issues.append(issue)

    psu = selected.get("psu")
    if psu and power_draw > 0:
        wattage = extract_wattage(psu.name)
        if 0 < wattage < power_draw:
            issues.append(
                f"PSU wattage ({wattage}W) may be insufficient for your system. "
                f"Recommended: at least {power_draw}W."
            )

    return issues

"""In-memory search, tag filtering, price range and sorting of products.

Everything here is pure: it takes a list of products and returns a new
list, never touching the database.

Tag predicates are looked up in ``TAG_PREDICATES`` by the active category.
Within one category the active tags are ORed; search, tags and price range
are ANDed together.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from catalog.compatibility import (
    AMD_BOARD_MARKERS,
    INTEL_BOARD_MARKERS,
    extract_wattage,
    is_amd_board,
    is_amd_cpu,
    is_intel_board,
    is_intel_cpu,
    motherboard_matches_cpu,
)
from catalog.pricing import effective_price
from catalog.products import ComponentProduct, ConfigurationProduct, Product

__all__ = [
    "SORT_KEYS",
    "TAG_PREDICATES",
    "FilterContext",
    "FilterState",
    "matches_search",
    "matches_tag",
    "matches_tags",
    "in_price_range",
    "sort_products",
    "apply_filters",
    "paginate",
]


@dataclass(frozen=True)
class FilterContext:
    """Configurator state some predicates depend on.

    Attributes:
        selected_cpu_name: Name of the CPU already picked, if any.
        power_draw: Estimated system draw in watts (0 when unknown).
        compatible_only: Hide motherboards and PSUs that don't fit the
            current selection.
    """

    selected_cpu_name: Optional[str] = None
    power_draw: int = 0
    compatible_only: bool = False


_EMPTY_CONTEXT = FilterContext()

TagPredicate = Callable[[Product, FilterContext], bool]


# =============================================================================
# Product accessors
# =============================================================================


def _name(product: Product) -> str:
    return product.name.lower()


def _description(product: Product) -> str:
    return (product.description or "").lower()


def _spec(product: Product, label: str) -> str:
    specifications = getattr(product, "specifications", None) or {}
    return specifications.get(label, "")


def _text(product: Product) -> str:
    return f"{_name(product)} {_description(product)}"


def _name_has(*needles: str) -> TagPredicate:
    def predicate(product: Product, context: FilterContext) -> bool:
        name = _name(product)
        return any(needle in name for needle in needles)
    return predicate


def _text_has(*needles: str) -> TagPredicate:
    def predicate(product: Product, context: FilterContext) -> bool:
        text = _text(product)
        return any(needle in text for needle in needles)
    return predicate


# =============================================================================
# Predicate tables
# =============================================================================


def _board_atx(product: Product, context: FilterContext) -> bool:
    name = _name(product)
    return "atx" in name and "micro" not in name and "m-atx" not in name


_board_micro_atx = _name_has("micro-atx", "matx", "m-atx")
_board_mini_itx = _name_has("mini-itx", "itx")


def _vendor_tag(markers: Tuple[str, ...], board_check: Callable[[str], bool],
                cpu_check: Callable[[str], bool],
                other_cpu_check: Callable[[str], bool]) -> Callable[[str], TagPredicate]:
    """Chipset tag predicate widened to the whole vendor when the CPU matches.

    A selected CPU from the other vendor rules the tag out entirely.
    """
    def build(tag: str) -> TagPredicate:
        def predicate(product: Product, context: FilterContext) -> bool:
            cpu_name = context.selected_cpu_name
            if cpu_name and cpu_check(cpu_name):
                return board_check(product.name)
            if cpu_name and other_cpu_check(cpu_name):
                return False
            if tag in markers:
                return tag in _name(product)
            return board_check(product.name)
        return predicate
    return build


_intel_tag = _vendor_tag(INTEL_BOARD_MARKERS, is_intel_board, is_intel_cpu, is_amd_cpu)
_amd_tag = _vendor_tag(AMD_BOARD_MARKERS, is_amd_board, is_amd_cpu, is_intel_cpu)


def _case_support(*markers: str) -> Callable[[Product], bool]:
    def check(product: Product) -> bool:
        support = _spec(product, "Motherboard Support")
        form = _spec(product, "Form Factor")
        return any(marker in support or marker in form for marker in markers)
    return check


def _case_atx(product: Product, context: FilterContext) -> bool:
    return (
        _board_atx(product, context)
        or "atx" in _description(product)
        or _case_support("ATX")(product)
    )


def _case_micro_atx(product: Product, context: FilterContext) -> bool:
    return _board_micro_atx(product, context) or _case_support("M-ATX")(product)


def _case_mini_itx(product: Product, context: FilterContext) -> bool:
    return _board_mini_itx(product, context) or _case_support("ITX")(product)


def _wattage_between(low: int, high: Optional[int] = None) -> TagPredicate:
    def predicate(product: Product, context: FilterContext) -> bool:
        wattage = extract_wattage(product.name)
        return wattage >= low and (high is None or wattage < high)
    return predicate


def _psu_recommended(product: Product, context: FilterContext) -> bool:
    if context.power_draw <= 0:
        return False
    return extract_wattage(product.name) >= context.power_draw


def _cooling_type(*needles: str) -> TagPredicate:
    def predicate(product: Product, context: FilterContext) -> bool:
        cooling_type = _spec(product, "Type").lower()
        text = _text(product)
        return any(needle in text or needle in cooling_type for needle in needles)
    return predicate


def _radiator(size: int) -> TagPredicate:
    def predicate(product: Product, context: FilterContext) -> bool:
        name = _name(product)
        return (
            f"{size}mm" in name
            or f"{size} mm" in name
            or _spec(product, "Radiator Size") == f"{size} mm"
        )
    return predicate


def _ram_type(memory_type: str) -> TagPredicate:
    def predicate(product: Product, context: FilterContext) -> bool:
        return memory_type in _name(product) or memory_type in _spec(product, "Memory Type").lower()
    return predicate


def _ram_capacity(gigabytes: int) -> TagPredicate:
    def predicate(product: Product, context: FilterContext) -> bool:
        name = _name(product).replace(" ", "")
        return f"{gigabytes}gb" in name or _spec(product, "Capacity") == f"{gigabytes} GB"
    return predicate


def _storage_nvme(product: Product, context: FilterContext) -> bool:
    return (
        "nvme" in _text(product)
        or _spec(product, "NVMe") == "Yes"
        or "nvme" in _spec(product, "Type").lower()
    )


def _storage_sata_ssd(product: Product, context: FilterContext) -> bool:
    if _storage_nvme(product, context):
        return False
    return "ssd" in _text(product) or "ssd" in _spec(product, "Type").lower()


def _storage_hdd(product: Product, context: FilterContext) -> bool:
    return "hdd" in _text(product) or "hdd" in _spec(product, "Type").lower()


_INTEL_CHIPSETS = ("z790", "z690", "b760", "b660")
_AMD_CHIPSETS = ("x670", "b650", "x570", "b550")

TAG_PREDICATES: Dict[str, Dict[str, TagPredicate]] = {
    "cpu": {
        "intel-core-i9": _name_has("i9", "intel core i9"),
        "intel-core-i7": _name_has("i7", "intel core i7"),
        "intel-core-i5": _name_has("i5", "intel core i5"),
        "intel-core-i3": _name_has("i3", "intel core i3"),
        "amd-ryzen-9": _name_has("ryzen 9"),
        "amd-ryzen-7": _name_has("ryzen 7"),
        "amd-ryzen-5": _name_has("ryzen 5"),
        "amd-ryzen-3": _name_has("ryzen 3"),
        "amd-threadripper": _name_has("threadripper"),
    },
    "gpu": {
        "nvidia-rtx-40": _name_has("rtx 40", "rtx40"),
        "nvidia-rtx-30": _name_has("rtx 30", "rtx30"),
        "nvidia-rtx-20": _name_has("rtx 20", "rtx20"),
        "nvidia-gtx-16": _name_has("gtx 16", "gtx16"),
        "amd-rx-7000": _name_has("rx 7", "radeon rx 7"),
        "amd-rx-6000": _name_has("rx 6", "radeon rx 6"),
        "intel-arc": _name_has("intel arc", "arc"),
    },
    "motherboard": {
        "atx": _board_atx,
        "micro-atx": _board_micro_atx,
        "mini-itx": _board_mini_itx,
        "intel-compatible": _intel_tag("intel-compatible"),
        "amd-compatible": _amd_tag("amd-compatible"),
        **{chipset: _intel_tag(chipset) for chipset in _INTEL_CHIPSETS},
        **{chipset: _amd_tag(chipset) for chipset in _AMD_CHIPSETS},
    },
    "case": {
        "atx": _case_atx,
        "micro-atx": _case_micro_atx,
        "mini-itx": _case_mini_itx,
        "e-atx": _text_has("e-atx", "eatx"),
        "full-tower": _text_has("full tower", "full-tower"),
        "mid-tower": _text_has("mid tower", "mid-tower"),
    },
    "psu": {
        "1000w+": _wattage_between(1000),
        "850w-999w": _wattage_between(850, 1000),
        "750w-849w": _wattage_between(750, 850),
        "650w-749w": _wattage_between(650, 750),
        "below-650w": lambda product, context: extract_wattage(product.name) < 650,
        "650w+": _wattage_between(650),
        "750w+": _wattage_between(750),
        "850w+": _wattage_between(850),
        "recommended-wattage": _psu_recommended,
    },
    "cooling": {
        "air": _cooling_type("air"),
        "aio": _cooling_type("aio", "liquid"),
        "liquid": _cooling_type("aio", "liquid"),
        "custom-loop": _text_has("custom loop", "custom-loop"),
        "240mm": _radiator(240),
        "280mm": _radiator(280),
        "360mm": _radiator(360),
    },
    "ram": {
        "ddr4": _ram_type("ddr4"),
        "ddr5": _ram_type("ddr5"),
        **{f"{size}gb": _ram_capacity(size) for size in (8, 16, 32, 64, 128)},
    },
    "storage": {
        "nvme": _storage_nvme,
        "sata-ssd": _storage_sata_ssd,
        "hdd": _storage_hdd,
    },
}


# =============================================================================
# Matching
# =============================================================================


def matches_search(product: Product, query: str) -> bool:
    """Case-insensitive substring search over the product's text fields."""
    query = query.strip().lower()
    if not query:
        return True
    if query in _name(product) or query in _description(product):
        return True
    if isinstance(product, ComponentProduct):
        return any(query in value.lower() for value in product.specifications.values())
    if isinstance(product, ConfigurationProduct):
        return any(query in line.name.lower() for line in product.components)
    return False


def _category_key(product: Product, category: Optional[str]) -> str:
    """Slug selecting the predicate table: the active category, else the product's own."""
    if category:
        return category.lower()
    return (getattr(product, "category_slug", None) or "").lower()


def matches_tag(
    product: Product,
    tag: str,
    category: Optional[str] = None,
    context: FilterContext = _EMPTY_CONTEXT,
) -> bool:
    """Evaluate one tag against a product.

    Categories with a predicate table fail closed on unknown tags. Other
    categories fall back to a plain name/description substring check.
    """
    tag = tag.strip().lower()
    table = TAG_PREDICATES.get(_category_key(product, category))
    if table is None:
        return tag in _text(product)
    predicate = table.get(tag)
    if predicate is None:
        return False
    return predicate(product, context)


def matches_tags(
    product: Product,
    tags: Iterable[str],
    category: Optional[str] = None,
    context: FilterContext = _EMPTY_CONTEXT,
) -> bool:
    """True when no tags are active or any single tag matches."""
    tags = [tag for tag in tags if tag and tag.strip()]
    if not tags:
        return True
    return any(matches_tag(product, tag, category, context) for tag in tags)


def in_price_range(product: Product, price_range: Optional[Tuple[Optional[float], Optional[float]]]) -> bool:
    """Inclusive range check on the discounted-or-base price."""
    if not price_range:
        return True
    low, high = price_range
    price = effective_price(product)
    if low is not None and price < low:
        return False
    if high is not None and price > high:
        return False
    return True


def _compatible(product: Product, category: Optional[str], context: FilterContext) -> bool:
    key = _category_key(product, category)
    if key == "motherboard" and context.selected_cpu_name:
        return motherboard_matches_cpu(product.name, context.selected_cpu_name)
    if key == "psu" and context.power_draw > 0:
        return extract_wattage(product.name) >= context.power_draw
    return True


# =============================================================================
# Sorting
# =============================================================================

SORT_KEYS: Dict[str, Tuple[Callable[[Product], Any], bool]] = {
    "price-asc": (effective_price, False),
    "price-desc": (effective_price, True),
    "name-asc": (lambda product: product.name.lower(), False),
    "name-desc": (lambda product: product.name.lower(), True),
    "rating-desc": (lambda product: product.ratings.average, True),
}


def sort_products(products: Sequence[Product], sort: Optional[str]) -> List[Product]:
    """Stable sort by a named key; unknown or empty keys keep input order."""
    spec = SORT_KEYS.get(sort or "")
    if spec is None:
        return list(products)
    key, reverse = spec
    return sorted(products, key=key, reverse=reverse)


def apply_filters(
    products: Iterable[Product],
    search_query: str = "",
    active_tags: Iterable[str] = (),
    category: Optional[str] = None,
    price_range: Optional[Tuple[Optional[float], Optional[float]]] = None,
    sort: Optional[str] = None,
    context: Optional[FilterContext] = None,
) -> List[Product]:
    """Filter and optionally sort a product list.

    Args:
        products: Products to filter; not modified.
        search_query: Free-text search.
        active_tags: Tags evaluated against the category's predicate table.
        category: Active category slug selecting the predicate table. When
            omitted each product's own category slug is used.
        price_range: (min, max) inclusive; either bound may be None.
        sort: One of SORT_KEYS, or None to keep input order.
        context: Configurator state for compatibility-aware tags.

    Returns:
        A new list of matching products.
    """
    context = context or _EMPTY_CONTEXT
    active_tags = list(active_tags)

    result = [
        product for product in products
        if matches_search(product, search_query)
        and matches_tags(product, active_tags, category, context)
        and in_price_range(product, price_range)
        and (not context.compatible_only or _compatible(product, category, context))
    ]
    return sort_products(result, sort)


# =============================================================================
# Request state
# =============================================================================


def _parse_price(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or math.isinf(price):
        return None
    return price


@dataclass
class FilterState:
    """Filter inputs as carried by the product listing query string."""

    category: Optional[str] = None
    search: str = ""
    tags: List[str] = field(default_factory=list)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort: Optional[str] = None

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "FilterState":
        """Parse ``category``, ``search``, ``tags``, ``minPrice``, ``maxPrice`` and ``sort``.

        Malformed prices are ignored rather than rejected.
        """
        raw_tags = args.get("tags") or ""
        return cls(
            category=args.get("category") or None,
            search=args.get("search") or "",
            tags=[tag.strip() for tag in raw_tags.split(",") if tag.strip()],
            min_price=_parse_price(args.get("minPrice")),
            max_price=_parse_price(args.get("maxPrice")),
            sort=args.get("sort") or None,
        )

    @property
    def price_range(self) -> Optional[Tuple[Optional[float], Optional[float]]]:
        if self.min_price is None and self.max_price is None:
            return None
        return (self.min_price, self.max_price)

    def apply(self, products: Iterable[Product], context: Optional[FilterContext] = None) -> List[Product]:
        return apply_filters(
            products,
            search_query=self.search,
            active_tags=self.tags,
            category=self.category,
            price_range=self.price_range,
            sort=self.sort,
            context=context,
        )


def paginate(products: Sequence[Product], page: int = 1, limit: int = 12) -> Dict[str, Any]:
    """Slice a product list into one page plus paging metadata."""
    limit = max(1, int(limit))
    total = len(products)
    total_pages = math.ceil(total / limit) if total else 0
    page = max(1, int(page))
    start = (page - 1) * limit
    return {
        "products": list(products[start:start + limit]),
        "total": total,
        "page": page,
        "totalPages": total_pages,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }

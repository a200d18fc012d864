"""Data models for catalog entities.

Components carry at most one category-specific sub-record. It is stored as a
single tagged ``SpecRecord`` rather than one nullable attribute per kind, and
is built by one constructor at the data-access boundary.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from catalog.config import SPEC_FIELDS, SUB_RECORD_ALIASES, SUB_RECORD_PRIORITY

__all__ = [
    "DataIntegrityError",
    "Category",
    "SpecRecord",
    "Component",
    "ConfigurationItem",
    "Configuration",
    "build_spec_record",
    "build_component",
    "component_from_record",
]

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


class DataIntegrityError(ValueError):
    """Stored catalog data violates an invariant the engine relies on."""


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    slug: str
    type: str


@dataclass(frozen=True)
class SpecRecord:
    """Category-specific sub-record of a component (CPU, monitor, ...)."""

    kind: str
    values: Dict[str, Any] = field(default_factory=dict)

    def get(self, column: str) -> Any:
        return self.values.get(column)


@dataclass
class Component:
    """A catalog row: a PC component or a peripheral."""

    id: str
    name: str
    price: float
    category: Category
    description: str = ""
    discount_price: Optional[float] = None
    image_url: Optional[str] = None
    stock: int = 0
    detail: Optional[SpecRecord] = None
    view_count: int = 0


@dataclass
class ConfigurationItem:
    component: Component
    quantity: int = 1


@dataclass
class Configuration:
    """A template (staff-authored) or user-owned PC build."""

    id: str
    name: str
    total_price: float
    description: str = ""
    image_url: Optional[str] = None
    is_template: bool = False
    is_public: bool = False
    status: str = "DRAFT"
    items: List[ConfigurationItem] = field(default_factory=list)
    view_count: int = 0


def _snake(key: str) -> str:
    return _CAMEL_RE.sub(r"_\1", key).lower()


def build_spec_record(kind: str, values: Mapping[str, Any]) -> SpecRecord:
    """Build a sub-record, keeping only the columns known for its kind.

    Keys may be camelCase (``maxRamCapacity``) or snake_case.

    Raises:
        DataIntegrityError: If ``kind`` is not a known sub-record kind.
    """
    fields = SPEC_FIELDS.get(kind)
    if fields is None:
        raise DataIntegrityError(f"Unknown sub-record kind: {kind!r}")
    known = {column for column, _, _ in fields}
    cleaned = {}
    for key, value in values.items():
        column = _snake(key)
        if column in known:
            cleaned[column] = value
    return SpecRecord(kind=kind, values=cleaned)


def build_component(
    row: Mapping[str, Any],
    category: Category,
    sub_records: Optional[Mapping[str, Optional[Mapping[str, Any]]]] = None,
) -> Component:
    """Construct a Component from a row plus its joined sub-records.

    Args:
        row: Core component columns.
        category: The component's category.
        sub_records: Mapping of kind -> sub-record values (or None when absent).

    Raises:
        DataIntegrityError: If more than one sub-record is populated.
    """
    populated = [
        (kind, values) for kind, values in (sub_records or {}).items() if values is not None
    ]
    if len(populated) > 1:
        kinds = ", ".join(kind for kind, _ in populated)
        raise DataIntegrityError(
            f"Component {row.get('id')!r} has multiple sub-records: {kinds}"
        )
    detail = build_spec_record(*populated[0]) if populated else None

    discount = row.get("discount_price")
    return Component(
        id=str(row["id"]),
        name=row["name"],
        price=float(row["price"]),
        category=category,
        description=row.get("description") or "",
        discount_price=float(discount) if discount is not None else None,
        image_url=row.get("image_url"),
        stock=int(row.get("stock") or 0),
        detail=detail,
        view_count=int(row.get("view_count") or 0),
    )


def _raw_sub_records(record: Mapping[str, Any]) -> Dict[str, Optional[Mapping[str, Any]]]:
    """Collect sub-record values from a raw record in priority order."""
    found: Dict[str, Optional[Mapping[str, Any]]] = {}
    for kind in SUB_RECORD_PRIORITY:
        for key in (kind,) + SUB_RECORD_ALIASES.get(kind, ()):
            value = record.get(key)
            if value is not None:
                found[kind] = value
                break
    return found


def component_from_record(
    record: Mapping[str, Any],
    category: Optional[Category] = None,
) -> Component:
    """Build a Component from a raw nested record.

    The record looks like the joined shape handed over by an ORM, e.g.::

        {"id": "c1", "name": "Core i7", "price": 399.99,
         "category": {"id": "k1", "name": "CPU", "slug": "cpu", "type": "component"},
         "cpu": {"brand": "Intel", "cores": 8}}

    Missing core fields get neutral defaults so partial records (as in tests
    or ad-hoc scripts) still normalize.
    """
    if category is None:
        raw_category = record.get("category") or {}
        category = Category(
            id=str(raw_category.get("id", "")),
            name=raw_category.get("name", ""),
            slug=raw_category.get("slug", ""),
            type=raw_category.get("type", ""),
        )

    row = {
        "id": record.get("id", ""),
        "name": record.get("name", ""),
        "price": record.get("price", 0),
        "description": record.get("description"),
        "discount_price": record.get("discount_price", record.get("discountPrice")),
        "image_url": record.get("image_url", record.get("imageUrl")),
        "stock": record.get("stock", record.get("quantity", 0)),
        "view_count": record.get("view_count", record.get("viewCount", 0)),
    }
    return build_component(row, category, _raw_sub_records(record))

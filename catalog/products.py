"""Unified product view over configurations, components and peripherals.

Every sellable thing in the shop is presented as a ``Product``: either a
``ConfigurationProduct`` (a PC build with its component breakdown) or a
``ComponentProduct`` (a single component or peripheral with display
specifications). Products are derived on demand and never persisted.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from catalog import db
from catalog.config import (
    CONFIGURATION_STOCK,
    MAX_CATALOG_ROWS,
    PLACEHOLDER_RATINGS,
    RELATED_LIMIT,
)
from catalog.families import family_of
from catalog.models import Component, Configuration
from catalog.pricing import configuration_discount_price, component_discount_price
from catalog.specs import extract_specifications

__all__ = [
    "Ratings",
    "ComponentLine",
    "ConfigurationProduct",
    "ComponentProduct",
    "Product",
    "placeholder_ratings",
    "normalize_configuration",
    "normalize_component",
    "get_product_by_id",
    "list_products",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ratings:
    average: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"average": self.average, "count": self.count}


@dataclass(frozen=True)
class ComponentLine:
    """One row of a configuration's component breakdown."""

    id: str
    name: str
    category: str
    price: float
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price": self.price,
            "quantity": self.quantity,
        }


def _base_dict(product: "Product") -> Dict[str, Any]:
    return {
        "id": product.id,
        "type": product.type,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "discountPrice": product.discount_price,
        "imageUrl": product.image_url,
        "stock": product.stock,
        "ratings": product.ratings.to_dict(),
    }


def _finish_dict(product: "Product", data: Dict[str, Any]) -> Dict[str, Any]:
    if product.related is not None:
        data["related"] = [item.to_dict() for item in product.related]
    if product.long_description:
        data["longDescription"] = product.long_description
    return data


@dataclass
class ConfigurationProduct:
    id: str
    name: str
    description: str
    price: float
    discount_price: Optional[float]
    image_url: Optional[str]
    stock: int
    ratings: Ratings
    components: List[ComponentLine] = field(default_factory=list)
    long_description: Optional[str] = None
    related: Optional[List["Product"]] = None
    type: str = "configuration"

    def to_dict(self) -> Dict[str, Any]:
        data = _base_dict(self)
        data["components"] = [line.to_dict() for line in self.components]
        return _finish_dict(self, data)


@dataclass
class ComponentProduct:
    id: str
    type: str
    name: str
    description: str
    price: float
    discount_price: Optional[float]
    image_url: Optional[str]
    stock: int
    ratings: Ratings
    category: str
    specifications: Dict[str, str] = field(default_factory=dict)
    long_description: Optional[str] = None
    related: Optional[List["Product"]] = None
    # Selects the tag predicate table; not part of the JSON shape.
    category_slug: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = _base_dict(self)
        data["category"] = self.category
        data["specifications"] = dict(self.specifications)
        return _finish_dict(self, data)


Product = Union[ConfigurationProduct, ComponentProduct]


def placeholder_ratings(context: str) -> Ratings:
    """Fixed display ratings for a presentation context (no review data yet)."""
    average, count = PLACEHOLDER_RATINGS[context]
    return Ratings(average=average, count=count)


def _configuration_stock(configuration: Configuration) -> int:
    if configuration.is_template:
        return CONFIGURATION_STOCK
    return CONFIGURATION_STOCK if configuration.status == "APPROVED" else 0


def normalize_configuration(
    configuration: Configuration,
    related: Optional[List[Product]] = None,
) -> ConfigurationProduct:
    """Build the product view of a template or user-owned configuration."""
    rating_key = "configuration" if configuration.is_template else "user_configuration"
    return ConfigurationProduct(
        id=configuration.id,
        name=configuration.name,
        description=configuration.description,
        price=configuration.total_price,
        discount_price=configuration_discount_price(configuration),
        image_url=configuration.image_url,
        stock=_configuration_stock(configuration),
        ratings=placeholder_ratings(rating_key),
        components=[
            ComponentLine(
                id=item.component.id,
                name=item.component.name,
                category=item.component.category.name,
                price=item.component.price,
                quantity=item.quantity,
            )
            for item in configuration.items
        ],
        long_description=configuration.description or None,
        related=related,
    )


def normalize_component(
    component: Component,
    related: Optional[List[Product]] = None,
    rating_context: str = "component_detail",
) -> ComponentProduct:
    """Build the product view of a component or peripheral.

    Raises:
        DataIntegrityError: If the component's category type is unrecognized.
    """
    return ComponentProduct(
        id=component.id,
        type=family_of(component.category),
        name=component.name,
        description=component.description,
        price=component.price,
        discount_price=component_discount_price(component),
        image_url=component.image_url,
        stock=component.stock,
        ratings=placeholder_ratings(rating_context),
        category=component.category.name,
        specifications=extract_specifications(component, derive_series=True),
        related=related,
        category_slug=component.category.slug,
    )


# =============================================================================
# Lookup
# =============================================================================


def _related_templates(db_path: str, configuration: Configuration) -> List[Product]:
    others = db.list_configurations(
        db_path, is_template=True, exclude_id=configuration.id, limit=RELATED_LIMIT
    )
    return [normalize_configuration(other) for other in others]


def _related_components(db_path: str, component: Component) -> List[Product]:
    others = db.list_components(
        db_path,
        category_id=component.category.id,
        exclude_id=component.id,
        limit=RELATED_LIMIT,
    )
    return [normalize_component(other, rating_context="component_listing") for other in others]


def _find_template(db_path: str, product_id: str) -> Optional[Product]:
    configuration = db.get_configuration(db_path, product_id, is_template=True)
    if configuration is None:
        return None
    return normalize_configuration(configuration, related=_related_templates(db_path, configuration))


def _find_component(db_path: str, product_id: str) -> Optional[Product]:
    component = db.get_component(db_path, product_id)
    if component is None:
        return None
    return normalize_component(component, related=_related_components(db_path, component))


def _find_user_configuration(db_path: str, product_id: str) -> Optional[Product]:
    configuration = db.get_configuration(db_path, product_id, is_template=False)
    if configuration is None:
        return None
    return normalize_configuration(configuration)


# (source name, kinds it can satisfy, finder), tried in order
_LOOKUP_CHAIN: Tuple[Tuple[str, Tuple[str, ...], Callable[[str, str], Optional[Product]]], ...] = (
    ("template", ("configuration",), _find_template),
    ("catalog", ("component", "peripheral"), _find_component),
    ("user_configuration", ("configuration",), _find_user_configuration),
)


def get_product_by_id(
    db_path: str,
    product_id: str,
    kind: Optional[str] = None,
) -> Optional[Product]:
    """Resolve an id to a product, trying each source in turn.

    Args:
        db_path: Path to SQLite database.
        product_id: Id of a configuration or component.
        kind: Optional hint ("configuration", "component", "peripheral")
            restricting which sources are consulted. A product whose family
            differs from the hint is not returned.

    Returns:
        The normalized product, or None when no source knows the id.

    Raises:
        DataIntegrityError: If the stored row violates catalog invariants.
    """
    for source, kinds, finder in _LOOKUP_CHAIN:
        if kind is not None and kind not in kinds:
            continue
        product = finder(db_path, product_id)
        if product is None:
            continue
        if kind is not None and product.type != kind:
            logger.debug("Resolved %s from %s as %s, expected %s", product_id, source, product.type, kind)
            continue
        logger.debug("Resolved %s from %s", product_id, source)
        return product
    return None


def list_products(
    db_path: str,
    product_type: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = MAX_CATALOG_ROWS,
) -> List[Product]:
    """Build the product list consumed by the filter engine.

    Args:
        db_path: Path to SQLite database.
        product_type: "configuration", "component", "peripheral" or None for all.
        category: Category id or slug; restricts the list to components of
            that category. An unknown category yields an empty list.
        limit: Maximum rows fetched per source table.
    """
    products: List[Product] = []

    if category:
        resolved = db.find_category(db_path, category)
        if resolved is None:
            logger.debug("Unknown category %r", category)
            return products
        category = resolved.slug

    if product_type in (None, "configuration") and not category:
        templates = db.list_configurations(db_path, is_template=True, limit=limit)
        products.extend(normalize_configuration(t) for t in templates)

    if product_type in (None, "component", "peripheral"):
        components = db.list_components(
            db_path,
            category_slug=category,
            family=product_type,
            limit=limit,
        )
        products.extend(
            normalize_component(c, rating_context="component_listing") for c in components
        )

    return products

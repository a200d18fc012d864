"""Price derivation for catalog products."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Tuple, Union

from catalog.config import PUBLIC_TEMPLATE_DISCOUNT
from catalog.models import Component, Configuration

__all__ = [
    "round_price",
    "configuration_discount_price",
    "component_discount_price",
    "discount_price",
    "configuration_total",
    "effective_price",
]

_CENT = Decimal("0.01")


def round_price(value: Union[float, int, Decimal]) -> float:
    """Round half-up to 2 decimal places.

    Goes through the decimal string representation so that e.g. 0.125
    becomes 0.13 rather than binary float's 0.12.
    """
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def configuration_discount_price(configuration: Configuration) -> Optional[float]:
    """Discounted price of a configuration.

    Public templates get a flat 10% off. Private templates and user-owned
    configurations never get a discount.
    """
    if not configuration.is_template or not configuration.is_public:
        return None
    discounted = Decimal(str(configuration.total_price)) * Decimal(str(PUBLIC_TEMPLATE_DISCOUNT))
    return round_price(discounted)


def component_discount_price(component: Component) -> Optional[float]:
    """Stored discount of a component or peripheral, passed through as-is."""
    return component.discount_price


def discount_price(entity: Union[Component, Configuration]) -> Optional[float]:
    if isinstance(entity, Configuration):
        return configuration_discount_price(entity)
    return component_discount_price(entity)


def configuration_total(lines: Iterable[Tuple[float, int]]) -> float:
    """Sum of unit price x quantity, rounded to cents.

    Args:
        lines: (unit_price, quantity) pairs.
    """
    total = sum(
        (Decimal(str(price)) * quantity for price, quantity in lines),
        Decimal("0"),
    )
    return round_price(total)


def effective_price(product) -> float:
    """Price a customer pays: the discount when present, else the base price."""
    if product.discount_price is not None:
        return product.discount_price
    return product.price

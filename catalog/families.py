"""Resolve which product family a component belongs to."""

import logging

from catalog.config import PRODUCT_FAMILIES
from catalog.models import Category, DataIntegrityError

__all__ = ["resolve_family", "family_of"]

logger = logging.getLogger(__name__)


def resolve_family(category_type: str) -> str:
    """Return the product family for a category type discriminator.

    The family is the category's stored type, never inferred from the
    component itself.

    Raises:
        DataIntegrityError: If the type is not "component" or "peripheral".
    """
    if category_type in PRODUCT_FAMILIES:
        return category_type
    logger.error("Unrecognized category type %r", category_type)
    raise DataIntegrityError(f"Unrecognized category type: {category_type!r}")


def family_of(category: Category) -> str:
    return resolve_family(category.type)

"""PC shop catalog: product normalization and filtering."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from catalog.config import DB_PATH, PRODUCT_FAMILIES, SPEC_FIELDS, get_spec_fields
from catalog.db import init_db
from catalog.families import resolve_family
from catalog.filters import FilterContext, FilterState, apply_filters, paginate
from catalog.models import (
    Category,
    Component,
    Configuration,
    ConfigurationItem,
    DataIntegrityError,
    SpecRecord,
    component_from_record,
)
from catalog.pricing import discount_price, effective_price
from catalog.products import (
    ComponentProduct,
    ConfigurationProduct,
    get_product_by_id,
    list_products,
    normalize_component,
    normalize_configuration,
)
from catalog.specs import extract_specifications

__all__ = [
    # Version
    "__version__",
    # Config
    "DB_PATH",
    "PRODUCT_FAMILIES",
    "SPEC_FIELDS",
    "get_spec_fields",
    # Models
    "Category",
    "Component",
    "Configuration",
    "ConfigurationItem",
    "DataIntegrityError",
    "SpecRecord",
    "component_from_record",
    # Products
    "ComponentProduct",
    "ConfigurationProduct",
    "normalize_component",
    "normalize_configuration",
    "get_product_by_id",
    "list_products",
    # Core functions
    "extract_specifications",
    "resolve_family",
    "discount_price",
    "effective_price",
    "apply_filters",
    "paginate",
    "FilterContext",
    "FilterState",
    "init_db",
]

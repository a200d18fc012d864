"""API endpoints for the product catalog.

Product listing and detail views go through the catalog's normalizer and
filter engine; everything returned is the unified product JSON shape.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from flask import Blueprint, Response, current_app, jsonify, request

from catalog.compatibility import compatibility_issues, estimate_power_draw, recommended_psu_wattage
from catalog.db import (
    create_configuration,
    find_category,
    get_categories,
    get_component,
    increment_view_count,
    reset_view_counts,
)
from catalog.filters import FilterContext, FilterState, paginate
from catalog.models import DataIntegrityError
from catalog.products import get_product_by_id, list_products

from .config import DEFAULT_PAGE_SIZE, MAX_CATALOG_ROWS, MAX_PAGE_SIZE, RESET_VIEWS_API_KEY
from .logging_utils import log_interaction

__all__ = ["api"]

logger = logging.getLogger(__name__)

# Create blueprint for API
api = Blueprint("api", __name__, url_prefix="/api")

PRODUCT_TYPES = ("configuration", "component", "peripheral")

ApiResponse = Union[Response, Tuple[Response, int]]


def _db_path() -> str:
    return current_app.config["CATALOG_DB_PATH"]


def _error(message: str, status: int) -> Tuple[Response, int]:
    return jsonify({"error": message}), status


def _int_arg(name: str, default: int) -> Optional[int]:
    """Parse a positive integer query parameter; None when malformed."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _is_true(value: Optional[str]) -> bool:
    return (value or "").lower() in ("1", "true", "yes")


def _filter_context() -> Optional[FilterContext]:
    selected_cpu = request.args.get("selectedCpu") or None
    try:
        power_draw = int(request.args.get("powerDraw") or 0)
    except ValueError:
        power_draw = 0
    if not selected_cpu and not power_draw:
        return None
    return FilterContext(
        selected_cpu_name=selected_cpu,
        power_draw=power_draw,
        compatible_only=_is_true(request.args.get("compatibleOnly")),
    )


@api.route("/health", methods=["GET"])
def health() -> Response:
    return jsonify({"status": "ok"})


@api.route("/categories", methods=["GET"])
def list_categories() -> ApiResponse:
    """List product categories, optionally only one family (?type=component)."""
    category_type = request.args.get("type") or None
    if category_type and category_type not in ("component", "peripheral"):
        return _error(f"Invalid type: {category_type}", 400)

    categories = get_categories(_db_path(), category_type=category_type)
    return jsonify({
        "categories": [
            {"id": c.id, "name": c.name, "slug": c.slug, "type": c.type}
            for c in categories
        ]
    })


@api.route("/products", methods=["GET"])
def products() -> ApiResponse:
    """Filtered, sorted and paginated product listing.

    Query parameters:
        type: configuration | component | peripheral
        category: category id or slug
        search, tags (comma-separated), minPrice, maxPrice, sort
        page, limit, inStock
        selectedCpu, powerDraw, compatibleOnly: configurator context
    """
    product_type = request.args.get("type") or None
    if product_type and product_type not in PRODUCT_TYPES:
        return _error(f"Invalid type: {product_type}. Must be one of {list(PRODUCT_TYPES)}", 400)

    page = _int_arg("page", 1)
    limit = _int_arg("limit", DEFAULT_PAGE_SIZE)
    if page is None or limit is None:
        return _error("page and limit must be positive integers", 400)
    limit = min(limit, MAX_PAGE_SIZE)

    state = FilterState.from_args(request.args)
    if state.category:
        category = find_category(_db_path(), state.category)
        if category is not None:
            state.category = category.slug

    try:
        items = list_products(
            _db_path(),
            product_type=product_type,
            category=state.category,
            limit=MAX_CATALOG_ROWS,
        )
    except DataIntegrityError as e:
        logger.exception("Catalog data integrity error while listing products")
        return _error(str(e), 500)

    if _is_true(request.args.get("inStock")):
        items = [item for item in items if item.stock > 0]

    filtered = state.apply(items, context=_filter_context())
    result = paginate(filtered, page=page, limit=limit)
    result["products"] = [product.to_dict() for product in result["products"]]

    log_interaction("product_list", {
        "type": product_type,
        "category": state.category,
        "search": state.search,
        "tags": state.tags,
        "sort": state.sort,
        "total": result["total"],
    })
    return jsonify(result)


@api.route("/products/<product_id>", methods=["GET"])
def product_detail(product_id: str) -> ApiResponse:
    """Single product with related items; ?kind= narrows the lookup."""
    kind = request.args.get("kind") or None
    if kind and kind not in PRODUCT_TYPES:
        return _error(f"Invalid kind: {kind}", 400)

    try:
        product = get_product_by_id(_db_path(), product_id, kind=kind)
    except DataIntegrityError as e:
        logger.exception("Catalog data integrity error for product %s", product_id)
        return _error(str(e), 500)

    if product is None:
        return _error("Product not found", 404)
    return jsonify(product.to_dict())


@api.route("/products/view", methods=["POST"])
def record_view() -> ApiResponse:
    """Increment a product's view counter.

    Request JSON:
        {"productId": "...", "productType": "configuration" | "component" | "peripheral"}
    """
    data = request.get_json(silent=True) or {}
    product_id = data.get("productId")
    product_type = data.get("productType")

    if not product_id or not isinstance(product_id, str):
        return _error("productId is required", 400)
    if product_type not in PRODUCT_TYPES:
        return _error(f"Invalid productType. Must be one of {list(PRODUCT_TYPES)}", 400)

    if not increment_view_count(_db_path(), product_id, product_type):
        return _error("Product not found", 404)

    log_interaction("product_view", {"product_id": product_id, "product_type": product_type})
    return jsonify({"success": True})


@api.route("/products/view", methods=["PUT"])
def reset_views() -> ApiResponse:
    """Reset all view counters. Requires ?apiKey= matching RESET_VIEWS_API_KEY."""
    expected = current_app.config.get("RESET_VIEWS_API_KEY", RESET_VIEWS_API_KEY)
    if not expected or request.args.get("apiKey") != expected:
        return _error("Unauthorized", 401)

    counts = reset_view_counts(_db_path())
    logger.info("View counters reset: %s", counts)
    return jsonify({"success": True, "reset": counts})


def _parse_items(raw: Any) -> Optional[List[Tuple[str, int]]]:
    if not isinstance(raw, list) or not raw:
        return None
    items = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
            return None
        quantity = entry.get("quantity", 1)
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            return None
        items.append((entry["id"], quantity))
    return items


@api.route("/configurations", methods=["POST"])
def create_user_configuration() -> ApiResponse:
    """Save a user build as a DRAFT configuration.

    Request JSON:
        {"name": "My build", "description": "...", "components": [{"id": "...", "quantity": 1}]}

    The total price is recomputed from current component prices.
    """
    data = request.get_json(silent=True) or {}

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return _error("name is required", 400)

    description = data.get("description") or ""
    if not isinstance(description, str):
        return _error("description must be a string", 400)

    items = _parse_items(data.get("components"))
    if items is None:
        return _error("components must be a non-empty list of {id, quantity}", 400)

    try:
        configuration_id = create_configuration(
            _db_path(), name.strip(), items, description=description
        )
    except ValueError as e:
        return _error(str(e), 400)

    product = get_product_by_id(_db_path(), configuration_id, kind="configuration")
    log_interaction("configuration_created", {
        "configuration_id": configuration_id,
        "components": len(items),
        "total_price": product.price,
    })
    return jsonify(product.to_dict()), 201


@api.route("/configurator/compatibility", methods=["POST"])
def check_compatibility() -> ApiResponse:
    """Compatibility warnings and power estimate for selected components.

    Request JSON:
        {"components": ["<component id>", ...]}
    """
    data = request.get_json(silent=True) or {}
    component_ids = data.get("components")
    if not isinstance(component_ids, list) or not all(isinstance(i, str) for i in component_ids):
        return _error("components must be a list of component ids", 400)

    try:
        selected = [get_component(_db_path(), component_id) for component_id in component_ids]
    except DataIntegrityError as e:
        logger.exception("Catalog data integrity error during compatibility check")
        return _error(str(e), 500)

    missing = [cid for cid, component in zip(component_ids, selected) if component is None]
    if missing:
        return _error(f"Unknown components: {', '.join(missing)}", 404)

    power_draw = estimate_power_draw(selected)
    result: Dict[str, Any] = {
        "issues": compatibility_issues(selected, power_draw),
        "powerDraw": power_draw,
        "recommendedPsu": recommended_psu_wattage(power_draw),
    }
    return jsonify(result)

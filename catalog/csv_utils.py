"""CSV export and catalog statistics built on pandas."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from catalog.db import get_connection, list_components, list_configurations
from catalog.pricing import configuration_discount_price
from catalog.specs import extract_specifications

__all__ = [
    "component_to_row",
    "export_components_to_csv",
    "export_configurations_to_csv",
    "catalog_stats",
]

logger = logging.getLogger(__name__)


def component_to_row(component) -> Dict[str, Any]:
    """Flatten a component into a CSV row.

    Specifications are spread into ``spec_<label>`` columns so every
    category can share one file.
    """
    row: Dict[str, Any] = {
        "id": component.id,
        "name": component.name,
        "category": component.category.name,
        "family": component.category.type,
        "price": component.price,
        "discount_price": component.discount_price,
        "stock": component.stock,
        "view_count": component.view_count,
    }
    for label, value in extract_specifications(component).items():
        row[f"spec_{label}"] = value
    return row


def export_components_to_csv(
    db_path: str,
    path: str,
    category_slug: Optional[str] = None,
) -> int:
    """Export components (optionally one category) to CSV.

    Returns:
        Number of rows written.
    """
    components = list_components(db_path, category_slug=category_slug)
    df = pd.DataFrame([component_to_row(c) for c in components])

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info("Exported %d components to %s", len(df), path)
    return len(df)


def export_configurations_to_csv(db_path: str, path: str) -> int:
    """Export configurations with their derived discount to CSV."""
    rows: List[Dict[str, Any]] = []
    for configuration in list_configurations(db_path):
        rows.append({
            "id": configuration.id,
            "name": configuration.name,
            "is_template": configuration.is_template,
            "is_public": configuration.is_public,
            "status": configuration.status,
            "total_price": configuration.total_price,
            "discount_price": configuration_discount_price(configuration),
            "components": "; ".join(
                f"{item.quantity}x {item.component.name}" for item in configuration.items
            ),
        })

    df = pd.DataFrame(rows)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info("Exported %d configurations to %s", len(df), path)
    return len(df)


def catalog_stats(db_path: str) -> pd.DataFrame:
    """Per-category counts, price range and stock as a DataFrame."""
    with get_connection(db_path) as conn:
        df = pd.read_sql_query(
            """
            SELECT cat.name AS category, cat.type AS family,
                   c.price, c.discount_price, c.stock
            FROM components c
            JOIN categories cat ON cat.id = c.category_id
            """,
            conn,
        )

    if df.empty:
        return pd.DataFrame(
            columns=["category", "family", "products", "min_price", "max_price", "avg_price", "stock", "discounted"]
        )

    stats = (
        df.groupby(["category", "family"])
        .agg(
            products=("price", "size"),
            min_price=("price", "min"),
            max_price=("price", "max"),
            avg_price=("price", "mean"),
            stock=("stock", "sum"),
            discounted=("discount_price", "count"),
        )
        .reset_index()
    )
    stats["avg_price"] = stats["avg_price"].round(2)
    return stats.sort_values(["family", "category"]).reset_index(drop=True)

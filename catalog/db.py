"""SQLite database schema and helpers for the catalog."""

import sqlite3
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, List, Optional, Sequence, Tuple

from catalog.config import (
    BOOL,
    CONFIGURATION_STATUSES,
    DB_PATH,
    PRODUCT_FAMILIES,
    SPEC_FIELDS,
    get_spec_table,
)
from catalog.models import (
    Category,
    Component,
    Configuration,
    ConfigurationItem,
    SpecRecord,
    build_component,
)
from catalog.pricing import configuration_total

__all__ = [
    "DEFAULT_DB_PATH",
    "get_connection",
    "init_db",
    "upsert_category",
    "get_categories",
    "get_category",
    "get_category_by_slug",
    "find_category",
    "insert_component",
    "upsert_spec_record",
    "get_component",
    "list_components",
    "create_configuration",
    "update_configuration_items",
    "get_configuration",
    "list_configurations",
    "increment_view_count",
    "reset_view_counts",
]

# Default database path
DEFAULT_DB_PATH = DB_PATH

_COMPONENT_SELECT = """
    SELECT c.*, cat.name AS category_name, cat.slug AS category_slug,
           cat.type AS category_type
    FROM components c
    JOIN categories cat ON cat.id = c.category_id
"""


def _get_valid_spec_tables() -> frozenset:
    """Whitelist of spec table names generated from the SPEC_FIELDS registry.

    Table names are interpolated into SQL, so they are always validated
    against this set first.
    """
    return frozenset(get_spec_table(kind) for kind in SPEC_FIELDS)


def _new_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def get_connection(db_path: str = DEFAULT_DB_PATH) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections."""
    # Ensure directory exists
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema."""
    with get_connection(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS categories (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                slug TEXT UNIQUE NOT NULL,
                type TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS components (
                id TEXT PRIMARY KEY,
                category_id TEXT NOT NULL,
                name TEXT NOT NULL,
                description TEXT,
                price REAL NOT NULL,
                discount_price REAL,
                image_url TEXT,
                stock INTEGER DEFAULT 0,
                view_count INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (category_id) REFERENCES categories(id)
            )
        """)

        # One spec table per sub-record kind; untyped columns keep values as inserted
        for kind, fields in SPEC_FIELDS.items():
            columns = ",\n".join(
                f"    {column} INTEGER" if unit == BOOL else f"    {column}"
                for column, _, unit in fields
            )
            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {get_spec_table(kind)} (
                    component_id TEXT PRIMARY KEY,
                {columns},
                    FOREIGN KEY (component_id) REFERENCES components(id) ON DELETE CASCADE
                )
            """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS configurations (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                image_url TEXT,
                total_price REAL NOT NULL DEFAULT 0,
                is_template INTEGER NOT NULL DEFAULT 0,
                is_public INTEGER NOT NULL DEFAULT 0,
                status TEXT NOT NULL DEFAULT 'DRAFT',
                view_count INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS configuration_items (
                configuration_id TEXT NOT NULL,
                component_id TEXT NOT NULL,
                quantity INTEGER NOT NULL DEFAULT 1,
                position INTEGER NOT NULL,
                PRIMARY KEY (configuration_id, component_id),
                FOREIGN KEY (configuration_id) REFERENCES configurations(id) ON DELETE CASCADE,
                FOREIGN KEY (component_id) REFERENCES components(id)
            )
        """)

        # Indexes for common queries
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_components_category ON components(category_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_configurations_template ON configurations(is_template)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_configuration_items_config ON configuration_items(configuration_id)")

        conn.commit()


# =============================================================================
# Categories
# =============================================================================


def _category_from_row(row: sqlite3.Row) -> Category:
    return Category(id=row["id"], name=row["name"], slug=row["slug"], type=row["type"])


def upsert_category(db_path: str, name: str, slug: str, category_type: str) -> str:
    """Insert or update a category by slug, returning its ID."""
    if category_type not in PRODUCT_FAMILIES:
        raise ValueError(f"Invalid category type: {category_type}. Must be one of {PRODUCT_FAMILIES}")

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id FROM categories WHERE slug = ?", (slug,))
        existing = cursor.fetchone()

        if existing:
            cursor.execute(
                "UPDATE categories SET name = ?, type = ? WHERE slug = ?",
                (name, category_type, slug),
            )
            category_id = existing["id"]
        else:
            category_id = _new_id()
            cursor.execute(
                "INSERT INTO categories (id, name, slug, type) VALUES (?, ?, ?, ?)",
                (category_id, name, slug, category_type),
            )

        conn.commit()
        return category_id


def get_categories(db_path: str = DEFAULT_DB_PATH, category_type: Optional[str] = None) -> List[Category]:
    """Get all categories, optionally restricted to one family."""
    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        if category_type:
            cursor.execute("SELECT * FROM categories WHERE type = ? ORDER BY name", (category_type,))
        else:
            cursor.execute("SELECT * FROM categories ORDER BY type, name")
        return [_category_from_row(row) for row in cursor.fetchall()]


def get_category(db_path: str, category_id: str) -> Optional[Category]:
    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM categories WHERE id = ?", (category_id,))
        row = cursor.fetchone()
        return _category_from_row(row) if row else None


def find_category(db_path: str, id_or_slug: str) -> Optional[Category]:
    """Look up a category by ID first, then by slug."""
    return get_category(db_path, id_or_slug) or get_category_by_slug(db_path, id_or_slug)


def get_category_by_slug(db_path: str, slug: str) -> Optional[Category]:
    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM categories WHERE slug = ?", (slug,))
        row = cursor.fetchone()
        return _category_from_row(row) if row else None


# =============================================================================
# Components
# =============================================================================


def _write_spec_record(cursor: sqlite3.Cursor, component_id: str, spec: SpecRecord) -> None:
    table_name = get_spec_table(spec.kind)

    # Validate table name against whitelist to prevent SQL injection
    valid_tables = _get_valid_spec_tables()
    if table_name not in valid_tables:
        raise ValueError(f"Invalid table name: {table_name}. Must be one of {sorted(valid_tables)}")

    cursor.execute(f"PRAGMA table_info({table_name})")
    columns = [row["name"] for row in cursor.fetchall() if row["name"] != "component_id"]

    valid_specs = {k: v for k, v in spec.values.items() if k in columns}

    # A component holds at most one sub-record: clear any other kind first
    for other in valid_tables - {table_name}:
        cursor.execute(f"DELETE FROM {other} WHERE component_id = ?", (component_id,))

    cols = ["component_id"] + list(valid_specs.keys())
    placeholders = ", ".join("?" for _ in cols)
    col_names = ", ".join(cols)
    values = [component_id] + list(valid_specs.values())
    cursor.execute(f"INSERT OR REPLACE INTO {table_name} ({col_names}) VALUES ({placeholders})", values)


def insert_component(
    db_path: str,
    category_id: str,
    name: str,
    price: float,
    description: str = "",
    discount_price: Optional[float] = None,
    image_url: Optional[str] = None,
    stock: int = 0,
    spec: Optional[SpecRecord] = None,
    component_id: Optional[str] = None,
) -> str:
    """Insert a component with its optional sub-record, returning its ID."""
    component_id = component_id or _new_id()

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO components (id, category_id, name, description, price,
                                    discount_price, image_url, stock)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (component_id, category_id, name, description, price,
              discount_price, image_url, stock))

        if spec is not None:
            _write_spec_record(cursor, component_id, spec)

        conn.commit()
        return component_id


def upsert_spec_record(db_path: str, component_id: str, spec: SpecRecord) -> None:
    """Insert or replace the sub-record of a component."""
    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        _write_spec_record(cursor, component_id, spec)
        conn.commit()


def _load_sub_records(
    cursor: sqlite3.Cursor, component_ids: Sequence[str]
) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Fetch sub-records for many components: id -> {kind: values}."""
    found: Dict[str, Dict[str, Dict[str, Any]]] = {cid: {} for cid in component_ids}
    if not component_ids:
        return found

    placeholders = ",".join("?" for _ in component_ids)
    for kind in SPEC_FIELDS:
        table_name = get_spec_table(kind)
        cursor.execute(
            f"SELECT * FROM {table_name} WHERE component_id IN ({placeholders})",
            list(component_ids),
        )
        for spec_row in cursor.fetchall():
            spec_dict = dict(spec_row)
            component_id = spec_dict.pop("component_id")
            found[component_id][kind] = spec_dict
    return found


def _components_from_rows(cursor: sqlite3.Cursor, rows: List[sqlite3.Row]) -> List[Component]:
    sub_records = _load_sub_records(cursor, [row["id"] for row in rows])
    components = []
    for row in rows:
        category = Category(
            id=row["category_id"],
            name=row["category_name"],
            slug=row["category_slug"],
            type=row["category_type"],
        )
        components.append(build_component(dict(row), category, sub_records[row["id"]]))
    return components


def get_component(db_path: str, component_id: str) -> Optional[Component]:
    """Get a single component with its category and sub-record joined in."""
    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(_COMPONENT_SELECT + " WHERE c.id = ?", (component_id,))
        row = cursor.fetchone()
        if not row:
            return None
        return _components_from_rows(cursor, [row])[0]


def list_components(
    db_path: str = DEFAULT_DB_PATH,
    category_id: Optional[str] = None,
    category_slug: Optional[str] = None,
    family: Optional[str] = None,
    exclude_id: Optional[str] = None,
    in_stock: bool = False,
    limit: Optional[int] = None,
) -> List[Component]:
    """List components with optional filters.

    Args:
        db_path: Path to SQLite database.
        category_id: Restrict to one category.
        category_slug: Restrict to one category by slug.
        family: Restrict to "component" or "peripheral" categories.
        exclude_id: Leave out one component (e.g. the one being viewed).
        in_stock: Only components with stock > 0.
        limit: Maximum number of rows.
    """
    query = _COMPONENT_SELECT + " WHERE 1=1"
    params: List[Any] = []

    if category_id:
        query += " AND c.category_id = ?"
        params.append(category_id)
    if category_slug:
        query += " AND cat.slug = ?"
        params.append(category_slug)
    if family:
        query += " AND cat.type = ?"
        params.append(family)
    if exclude_id:
        query += " AND c.id != ?"
        params.append(exclude_id)
    if in_stock:
        query += " AND c.stock > 0"

    query += " ORDER BY c.created_at, c.rowid"
    if limit:
        query += f" LIMIT {int(limit)}"

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(query, params)
        return _components_from_rows(cursor, cursor.fetchall())


# =============================================================================
# Configurations
# =============================================================================


def _normalize_items(items: Iterable[Tuple[str, int]]) -> List[Tuple[str, int]]:
    """Merge duplicate component ids and validate quantities."""
    merged: Dict[str, int] = {}
    for component_id, quantity in items:
        quantity = int(quantity)
        if quantity < 1:
            raise ValueError(f"Invalid quantity {quantity} for component {component_id}")
        merged[component_id] = merged.get(component_id, 0) + quantity
    return list(merged.items())


def _write_items(cursor: sqlite3.Cursor, configuration_id: str, items: List[Tuple[str, int]]) -> float:
    """Replace configuration items and return the recomputed total."""
    lines = []
    for component_id, quantity in items:
        cursor.execute("SELECT price FROM components WHERE id = ?", (component_id,))
        row = cursor.fetchone()
        if row is None:
            raise ValueError(f"Unknown component: {component_id}")
        lines.append((row["price"], quantity))

    cursor.execute("DELETE FROM configuration_items WHERE configuration_id = ?", (configuration_id,))
    for position, (component_id, quantity) in enumerate(items):
        cursor.execute("""
            INSERT INTO configuration_items (configuration_id, component_id, quantity, position)
            VALUES (?, ?, ?, ?)
        """, (configuration_id, component_id, quantity, position))

    return configuration_total(lines)


def create_configuration(
    db_path: str,
    name: str,
    items: Iterable[Tuple[str, int]],
    description: str = "",
    image_url: Optional[str] = None,
    is_template: bool = False,
    is_public: bool = False,
    status: str = "DRAFT",
    configuration_id: Optional[str] = None,
) -> str:
    """Create a configuration, storing its total price at creation time.

    Args:
        items: (component_id, quantity) pairs in display order.

    Raises:
        ValueError: On unknown components, bad quantities or status.
    """
    if status not in CONFIGURATION_STATUSES:
        raise ValueError(f"Invalid status: {status}. Must be one of {CONFIGURATION_STATUSES}")

    configuration_id = configuration_id or _new_id()
    items = _normalize_items(items)

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO configurations (id, name, description, image_url, total_price,
                                        is_template, is_public, status)
            VALUES (?, ?, ?, ?, 0, ?, ?, ?)
        """, (configuration_id, name, description, image_url,
              int(is_template), int(is_public), status))

        total = _write_items(cursor, configuration_id, items)
        cursor.execute(
            "UPDATE configurations SET total_price = ? WHERE id = ?",
            (total, configuration_id),
        )
        conn.commit()
        return configuration_id


def update_configuration_items(
    db_path: str,
    configuration_id: str,
    items: Iterable[Tuple[str, int]],
) -> float:
    """Replace a configuration's components and recompute its stored total."""
    items = _normalize_items(items)

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id FROM configurations WHERE id = ?", (configuration_id,))
        if cursor.fetchone() is None:
            raise ValueError(f"Unknown configuration: {configuration_id}")

        total = _write_items(cursor, configuration_id, items)
        cursor.execute("""
            UPDATE configurations SET total_price = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        """, (total, configuration_id))
        conn.commit()
        return total


def _configurations_from_rows(cursor: sqlite3.Cursor, rows: List[sqlite3.Row]) -> List[Configuration]:
    configurations = []
    for row in rows:
        cursor.execute("""
            SELECT component_id, quantity FROM configuration_items
            WHERE configuration_id = ?
            ORDER BY position
        """, (row["id"],))
        item_rows = cursor.fetchall()

        component_ids = [item["component_id"] for item in item_rows]
        components: Dict[str, Component] = {}
        if component_ids:
            placeholders = ",".join("?" for _ in component_ids)
            cursor.execute(_COMPONENT_SELECT + f" WHERE c.id IN ({placeholders})", component_ids)
            components = {c.id: c for c in _components_from_rows(cursor, cursor.fetchall())}

        configurations.append(Configuration(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            image_url=row["image_url"],
            total_price=row["total_price"],
            is_template=bool(row["is_template"]),
            is_public=bool(row["is_public"]),
            status=row["status"],
            view_count=row["view_count"] or 0,
            items=[
                ConfigurationItem(component=components[item["component_id"]], quantity=item["quantity"])
                for item in item_rows
            ],
        ))
    return configurations


def get_configuration(
    db_path: str,
    configuration_id: str,
    is_template: Optional[bool] = None,
) -> Optional[Configuration]:
    """Get a configuration with its components joined in.

    Args:
        is_template: When set, only match templates (True) or user-owned
            configurations (False).
    """
    query = "SELECT * FROM configurations WHERE id = ?"
    params: List[Any] = [configuration_id]
    if is_template is not None:
        query += " AND is_template = ?"
        params.append(int(is_template))

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(query, params)
        row = cursor.fetchone()
        if not row:
            return None
        return _configurations_from_rows(cursor, [row])[0]


def list_configurations(
    db_path: str = DEFAULT_DB_PATH,
    is_template: Optional[bool] = None,
    exclude_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Configuration]:
    """List configurations, optionally only templates or only user builds."""
    query = "SELECT * FROM configurations WHERE 1=1"
    params: List[Any] = []
    if is_template is not None:
        query += " AND is_template = ?"
        params.append(int(is_template))
    if exclude_id:
        query += " AND id != ?"
        params.append(exclude_id)

    query += " ORDER BY created_at, rowid"
    if limit:
        query += f" LIMIT {int(limit)}"

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(query, params)
        return _configurations_from_rows(cursor, cursor.fetchall())


# =============================================================================
# View Counts
# =============================================================================

_VIEW_TABLES = {
    "configuration": "configurations",
    "component": "components",
    "peripheral": "components",
}


def increment_view_count(db_path: str, product_id: str, product_type: str) -> bool:
    """Increment the view counter of a product.

    Returns:
        True if a row was updated.

    Raises:
        ValueError: If the product type is unknown.
    """
    table_name = _VIEW_TABLES.get(product_type)
    if table_name is None:
        raise ValueError(f"Invalid product type: {product_type}")

    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"UPDATE {table_name} SET view_count = view_count + 1 WHERE id = ?",
            (product_id,),
        )
        conn.commit()
        return cursor.rowcount > 0


def reset_view_counts(db_path: str = DEFAULT_DB_PATH) -> Dict[str, int]:
    """Reset all view counters, returning the number of rows touched per table."""
    with get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("UPDATE configurations SET view_count = 0")
        configurations = cursor.rowcount
        cursor.execute("UPDATE components SET view_count = 0")
        components = cursor.rowcount
        conn.commit()
        return {"configurations": configurations, "components": components}

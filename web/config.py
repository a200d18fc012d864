"""Centralized configuration for the catalog web app."""

import os
from pathlib import Path

# Determine project root (parent of 'web' directory)
_THIS_DIR = Path(__file__).parent
_PROJECT_ROOT = _THIS_DIR.parent

# Catalog database (created with `python -m catalog.cli --init-db --seed`)
CATALOG_DB_PATH = os.getenv("CATALOG_DB_PATH", str(_PROJECT_ROOT / "data" / "catalog.db"))

# Flask app settings (allow env overrides; default debug off for safety)
# Render sets PORT dynamically; fall back to FLASK_PORT or 5000 for local.
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", os.getenv("PORT", "5000")))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"

# Rows fetched per source table when building a product listing
MAX_CATALOG_ROWS = int(os.getenv("MAX_CATALOG_ROWS", "50"))

# Listing page size
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "12"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

# Key required to reset view counters (PUT /api/products/view); unset disables reset
RESET_VIEWS_API_KEY = os.getenv("RESET_VIEWS_API_KEY")

# Seed the demo catalog on startup when the database is empty
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "False").lower() == "true"

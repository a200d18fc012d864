"""Shared test fixtures for the web test suite."""

import pytest

from catalog.db import list_components, list_configurations
from catalog.seed import seed_catalog


@pytest.fixture
def db_path(tmp_path):
    """Temporary database loaded with the demo catalog."""
    path = str(tmp_path / "catalog.db")
    seed_catalog(path)
    return path


@pytest.fixture
def app(db_path, tmp_path, monkeypatch):
    """Flask app bound to the temporary database."""
    import web.logging_utils

    monkeypatch.setattr(web.logging_utils, "LOG_DIR", tmp_path / "logs")
    monkeypatch.delenv("DEMO_USER", raising=False)
    monkeypatch.delenv("DEMO_PASS", raising=False)

    from web.app import create_app

    flask_app = create_app({
        "TESTING": True,
        "CATALOG_DB_PATH": db_path,
        "RESET_VIEWS_API_KEY": "test-key",
        "SEED_DEMO_DATA": False,
    })
    return flask_app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def component_ids(db_path):
    """Component ids by name from the seeded catalog."""
    return {c.name: c.id for c in list_components(db_path)}


@pytest.fixture
def template_ids(db_path):
    return {c.name: c.id for c in list_configurations(db_path, is_template=True)}

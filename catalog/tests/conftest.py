"""Shared fixtures for the catalog test suite."""

from typing import Any, Dict, Optional

import pytest

from catalog.db import init_db, insert_component, upsert_category
from catalog.models import Category, Component, Configuration, build_spec_record
from catalog.seed import seed_catalog


def make_category(slug: str = "cpu", type: str = "component", name: Optional[str] = None) -> Category:
    return Category(id=f"cat-{slug}", name=name or slug.upper(), slug=slug, type=type)


def make_component(
    name: str,
    price: float = 100.0,
    slug: str = "cpu",
    type: str = "component",
    spec: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Component:
    """Build an in-memory component; ``spec`` becomes a sub-record of kind ``slug``."""
    return Component(
        id=kwargs.pop("id", f"id-{name.lower().replace(' ', '-')}"),
        name=name,
        price=price,
        category=make_category(slug, type),
        detail=build_spec_record(slug, spec) if spec is not None else None,
        **kwargs,
    )


def make_configuration(total_price: float = 1000.0, **kwargs: Any) -> Configuration:
    kwargs.setdefault("id", "cfg-1")
    kwargs.setdefault("name", "Test Build")
    return Configuration(total_price=total_price, **kwargs)


@pytest.fixture
def temp_db(tmp_path):
    """Empty database with the schema in place."""
    db_path = str(tmp_path / "catalog.db")
    init_db(db_path)
    return db_path


@pytest.fixture
def seeded_db(temp_db):
    """Database loaded with the demo catalog."""
    seed_catalog(temp_db)
    return temp_db


@pytest.fixture
def cpu_category(temp_db):
    return upsert_category(temp_db, "CPU", "cpu", "component")


@pytest.fixture
def add_cpu(temp_db, cpu_category):
    """Factory inserting CPUs into the temp database."""
    def _add(name: str, price: float = 200.0, **kwargs: Any) -> str:
        spec = kwargs.pop("spec", {"brand": "Intel", "cores": 8})
        return insert_component(
            temp_db, cpu_category, name, price,
            spec=build_spec_record("cpu", spec), **kwargs
        )
    return _add


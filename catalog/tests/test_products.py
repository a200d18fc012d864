"""Tests for product normalization and lookup."""

import pytest

from catalog.db import (
    create_configuration,
    get_category_by_slug,
    get_configuration,
    get_connection,
    insert_component,
    list_components,
    list_configurations,
    upsert_category,
)
from catalog.models import ConfigurationItem, DataIntegrityError
from catalog.products import (
    ComponentProduct,
    ConfigurationProduct,
    get_product_by_id,
    list_products,
    normalize_component,
    normalize_configuration,
)
from catalog.tests.conftest import make_component, make_configuration


class TestNormalizeConfiguration:
    """Tests for normalize_configuration."""

    def test_public_template(self):
        """Test price, discount, stock and breakdown of a public template."""
        cpu = make_component("Ryzen 5 7600", price=229.99)
        config = make_configuration(
            1000.00, is_template=True, is_public=True, description="Solid build",
            items=[ConfigurationItem(cpu, 2)],
        )

        product = normalize_configuration(config)

        assert product.type == "configuration"
        assert product.discount_price == 900.00
        assert product.stock == 10
        assert product.long_description == "Solid build"
        assert product.ratings.average == 4.5 and product.ratings.count == 15
        assert product.components[0].name == "Ryzen 5 7600"
        assert product.components[0].category == "CPU"
        assert product.components[0].quantity == 2

    def test_user_draft_configuration(self):
        """Test that a user draft has no discount, no stock and no ratings."""
        config = make_configuration(1000.00, is_template=False, is_public=True, status="DRAFT")
        product = normalize_configuration(config)

        assert product.discount_price is None
        assert "discountPrice" in product.to_dict()
        assert product.to_dict()["discountPrice"] is None
        assert product.stock == 0
        assert product.ratings.count == 0

    def test_approved_user_configuration_is_in_stock(self):
        """Test that an approved user configuration shows the flat stock."""
        config = make_configuration(500.0, status="APPROVED")
        assert normalize_configuration(config).stock == 10

    def test_idempotent(self):
        """Test that normalizing twice yields equal products."""
        config = make_configuration(1000.00, is_template=True, is_public=True)
        assert normalize_configuration(config) == normalize_configuration(config)


class TestNormalizeComponent:
    """Tests for normalize_component."""

    def test_peripheral_family_from_category(self):
        """Test type, category name, specs and ratings of a peripheral."""
        mouse = make_component("DeathAdder", slug="mouse", type="peripheral", spec={"brand": "Razer"})
        product = normalize_component(mouse)

        assert product.type == "peripheral"
        assert product.category == "MOUSE"
        assert product.specifications == {"Brand": "Razer"}
        assert product.ratings.average == 4.3

    @pytest.mark.parametrize("kind", ["cpu", "gpu", "keyboard", "mouse"])
    @pytest.mark.parametrize("family", ["component", "peripheral"])
    def test_family_follows_category_not_sub_record(self, kind, family):
        """Test that the product type comes from the category type alone."""
        component = make_component("Odd Part", slug=kind, type=family, spec={"brand": "Acme"})
        product = normalize_component(component)

        assert component.detail.kind == kind
        assert product.type == family

    def test_unknown_category_type_raises(self):
        """Test that an unrecognized category type is a data integrity error."""
        broken = make_component("Widget", type="gadget")
        with pytest.raises(DataIntegrityError):
            normalize_component(broken)

    def test_category_slug_carried_but_not_serialized(self):
        """Test that the category slug is kept for filtering only."""
        psu = make_component("Corsair RM1000x 1000W", slug="psu")
        product = normalize_component(psu)

        assert product.category_slug == "psu"
        assert "category_slug" not in product.to_dict()
        assert "categorySlug" not in product.to_dict()

    def test_cpu_series_derived_from_name(self):
        """Test that an empty CPU series is filled in from the product name."""
        cpu = make_component("Intel Core i7-13700K", spec={"brand": "Intel", "cores": 16})
        assert list(normalize_component(cpu).specifications.items()) == [
            ("Brand", "Intel"), ("Series", "Core i7"), ("Cores", "16"),
        ]

    def test_cpu_series_omitted_when_name_has_none(self):
        """Test that Series stays absent when the name gives no hint."""
        cpu = make_component("Engineering Sample", spec={"brand": "Intel"})
        assert normalize_component(cpu).specifications == {"Brand": "Intel"}

    def test_to_dict_shape(self):
        """Test the camelCase JSON shape of a component product."""
        gpu = make_component(
            "ASUS ROG Strix RTX 4090", price=1999.99, slug="gpu",
            spec={"brand": "ASUS"}, discount_price=1899.99, stock=3,
        )
        data = normalize_component(gpu).to_dict()

        assert data["type"] == "component"
        assert data["discountPrice"] == 1899.99
        assert data["imageUrl"] is None
        assert data["ratings"] == {"average": 4.3, "count": 18}
        assert data["specifications"] == {"Brand": "ASUS"}
        assert "related" not in data
        assert "longDescription" not in data


class TestGetProductById:
    """Lookup against the seeded demo catalog."""

    def test_template_lookup(self, seeded_db):
        """Test that a template resolves with related templates."""
        template = list_configurations(seeded_db, is_template=True)[0]
        product = get_product_by_id(seeded_db, template.id)

        assert isinstance(product, ConfigurationProduct)
        assert product.price == template.total_price
        assert product.discount_price == pytest.approx(round(template.total_price * 0.9, 2))
        assert 0 < len(product.related) <= 3
        assert all(related.id != template.id for related in product.related)

    def test_component_lookup_with_related(self, seeded_db):
        """Test that a component resolves with up to three same-category items."""
        cpu = list_components(seeded_db, category_slug="cpu")[0]
        product = get_product_by_id(seeded_db, cpu.id)

        assert isinstance(product, ComponentProduct)
        assert product.type == "component"
        assert product.specifications["Brand"] == "Intel"
        assert len(product.related) == 3
        assert all(related.id != cpu.id for related in product.related)
        assert all(related.category == "CPU" for related in product.related)
        assert all(related.ratings.average == 4.2 for related in product.related)

    def test_user_configuration_lookup(self, seeded_db):
        """Test that a user configuration resolves last, without related items."""
        cpu = list_components(seeded_db, category_slug="cpu")[0]
        config_id = create_configuration(seeded_db, "My Build", [(cpu.id, 1)])
        product = get_product_by_id(seeded_db, config_id)

        assert product.type == "configuration"
        assert product.discount_price is None
        assert product.price == cpu.price
        assert product.related is None

    def test_not_found(self, seeded_db):
        """Test that an unknown ID returns None."""
        assert get_product_by_id(seeded_db, "does-not-exist") is None

    def test_kind_hint_restricts_sources(self, seeded_db):
        """Test that a configuration hint skips the component source."""
        cpu = list_components(seeded_db, category_slug="cpu")[0]
        assert get_product_by_id(seeded_db, cpu.id, kind="configuration") is None
        assert get_product_by_id(seeded_db, cpu.id, kind="component").id == cpu.id

    def test_kind_hint_must_match_family(self, seeded_db):
        """Test that a component is not returned for a peripheral hint and vice versa."""
        cpu = list_components(seeded_db, category_slug="cpu")[0]
        headset = list_components(seeded_db, category_slug="headphones")[0]

        assert get_product_by_id(seeded_db, cpu.id, kind="peripheral") is None
        assert get_product_by_id(seeded_db, headset.id, kind="component") is None
        assert get_product_by_id(seeded_db, headset.id, kind="peripheral").type == "peripheral"

    def test_invalid_category_type_surfaces(self, temp_db):
        """Test that a corrupted category type raises instead of defaulting."""
        category_id = upsert_category(temp_db, "CPU", "cpu", "component")
        component_id = insert_component(temp_db, category_id, "Broken", 10.0)
        with get_connection(temp_db) as conn:
            conn.execute("UPDATE categories SET type = 'gadget' WHERE id = ?", (category_id,))
            conn.commit()

        with pytest.raises(DataIntegrityError):
            get_product_by_id(temp_db, component_id)

    def test_lookup_is_idempotent(self, seeded_db):
        """Test that looking up the same ID twice yields equal products."""
        template = list_configurations(seeded_db, is_template=True)[0]
        assert get_product_by_id(seeded_db, template.id) == get_product_by_id(seeded_db, template.id)


class TestListProducts:
    """Tests for list_products."""

    def test_all_products(self, seeded_db):
        """Test that the unfiltered list mixes all three product types."""
        products = list_products(seeded_db)
        types = {p.type for p in products}
        assert types == {"configuration", "component", "peripheral"}

    def test_by_type(self, seeded_db):
        """Test restricting the list to peripherals."""
        products = list_products(seeded_db, product_type="peripheral")
        assert products
        assert all(p.type == "peripheral" for p in products)

    def test_by_category(self, seeded_db):
        """Test restricting the list to one category slug."""
        products = list_products(seeded_db, category="psu")
        assert [p.category for p in products] == ["PSU"] * len(products)
        assert len(products) == 3

    def test_by_category_id(self, seeded_db):
        """Test that a category ID selects the same products as its slug."""
        category = get_category_by_slug(seeded_db, "psu")
        by_id = list_products(seeded_db, category=category.id)
        assert [p.id for p in by_id] == [p.id for p in list_products(seeded_db, category="psu")]
        assert all(p.category_slug == "psu" for p in by_id)

    def test_unknown_category(self, seeded_db):
        """Test that an unknown category gives an empty list."""
        assert list_products(seeded_db, category="toaster") == []

    def test_limit(self, seeded_db):
        """Test that limit caps the rows fetched."""
        assert len(list_products(seeded_db, product_type="component", limit=5)) == 5

    def test_stored_total_is_used(self, seeded_db):
        """Test that the stored total, not a recomputed one, is the price."""
        template = list_configurations(seeded_db, is_template=True)[0]
        stored = get_configuration(seeded_db, template.id)
        product = normalize_configuration(stored)
        assert product.price == stored.total_price

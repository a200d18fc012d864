"""Tests for model construction at the data-access boundary."""

import pytest

from catalog.models import (
    Category,
    DataIntegrityError,
    build_component,
    build_spec_record,
    component_from_record,
)


CPU = Category(id="k1", name="CPU", slug="cpu", type="component")


class TestBuildSpecRecord:
    """Tests for build_spec_record."""

    def test_keeps_known_columns_only(self):
        """Test that columns outside the registry are dropped."""
        record = build_spec_record("cpu", {"brand": "AMD", "cores": 8, "bogus": 1})
        assert record.kind == "cpu"
        assert record.values == {"brand": "AMD", "cores": 8}

    def test_converts_camel_case(self):
        """Test that camelCase keys are stored as snake_case columns."""
        record = build_spec_record("gpu", {"videoMemoryCapacity": 12, "hasHdmi": True})
        assert record.values == {"video_memory_capacity": 12, "has_hdmi": True}

    def test_unknown_kind_raises(self):
        """Test that an unknown sub-record kind is a data integrity error."""
        with pytest.raises(DataIntegrityError):
            build_spec_record("toaster", {"brand": "X"})


class TestBuildComponent:
    """A component carries zero or one sub-record."""

    ROW = {"id": "c1", "name": "Ryzen 5 7600", "price": 229.99, "stock": 4}

    def test_without_sub_record(self):
        """Test a component row with no spec rows."""
        component = build_component(self.ROW, CPU, {})
        assert component.detail is None
        assert component.stock == 4
        assert component.discount_price is None

    def test_single_sub_record(self):
        """Test that the one populated spec row becomes the detail."""
        component = build_component(self.ROW, CPU, {"cpu": {"brand": "AMD"}, "gpu": None})
        assert component.detail.kind == "cpu"
        assert component.detail.get("brand") == "AMD"

    def test_multiple_sub_records_raise(self):
        """Test that two populated spec rows are rejected."""
        with pytest.raises(DataIntegrityError, match="multiple sub-records"):
            build_component(self.ROW, CPU, {"cpu": {"brand": "AMD"}, "gpu": {"brand": "AMD"}})

    def test_numeric_fields_are_coerced(self):
        """Test that string prices and a NULL stock are normalized."""
        row = dict(self.ROW, price="229.99", discount_price="199.99", stock=None)
        component = build_component(row, CPU)
        assert component.price == 229.99
        assert component.discount_price == 199.99
        assert component.stock == 0


class TestComponentFromRecord:
    """Tests for building components from camelCase records."""

    def test_nested_category(self):
        """Test a full record with a nested category and sub-record."""
        component = component_from_record({
            "id": "p1", "name": "G915", "price": 229.99,
            "discountPrice": 199.99, "imageUrl": "/img/g915.png", "quantity": 9,
            "category": {"id": "k9", "name": "Keyboard", "slug": "keyboard", "type": "peripheral"},
            "keyboard": {"brand": "Logitech"},
        })
        assert component.category.type == "peripheral"
        assert component.discount_price == 199.99
        assert component.image_url == "/img/g915.png"
        assert component.stock == 9
        assert component.detail.kind == "keyboard"

    def test_mouse_pad_alias(self):
        """Test that a mousePad record is read as the mouse_pad sub-record."""
        component = component_from_record({
            "id": "p2", "name": "QcK", "price": 14.99,
            "category": {"type": "peripheral"},
            "mousePad": {"brand": "SteelSeries", "thickness": 3},
        })
        assert component.detail.kind == "mouse_pad"
        assert component.detail.get("thickness") == 3

    def test_two_sub_records_raise(self):
        """Test that a record with two sub-records is rejected."""
        with pytest.raises(DataIntegrityError):
            component_from_record({
                "id": "p3", "name": "Hybrid", "price": 1,
                "category": {"type": "component"},
                "cpu": {"brand": "Intel"}, "caseModel": {"brand": "NZXT"},
            })

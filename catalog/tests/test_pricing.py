"""Tests for price derivation."""

import pytest

from catalog.families import resolve_family
from catalog.models import DataIntegrityError
from catalog.pricing import (
    configuration_discount_price,
    configuration_total,
    discount_price,
    effective_price,
    round_price,
)
from catalog.tests.conftest import make_component, make_configuration


class TestRoundPrice:
    """Tests for round_price."""

    @pytest.mark.parametrize("value,expected", [
        (0.125, 0.13),
        (2.675, 2.68),
        (899.995, 900.0),
        (10, 10.0),
    ])
    def test_half_up(self, value, expected):
        """Test that halves round away from zero at the cent."""
        assert round_price(value) == expected


class TestConfigurationDiscount:
    """Tests for configuration_discount_price."""

    def test_public_template_gets_ten_percent_off(self):
        """Test the 10% discount on a public template."""
        config = make_configuration(1000.00, is_template=True, is_public=True)
        assert configuration_discount_price(config) == 900.00

    def test_rounds_to_cents(self):
        """Test that the discounted price is rounded to cents."""
        config = make_configuration(1234.57, is_template=True, is_public=True)
        assert configuration_discount_price(config) == 1111.11

    def test_private_template_has_no_discount(self):
        """Test that a private template is not discounted."""
        config = make_configuration(1000.00, is_template=True, is_public=False)
        assert configuration_discount_price(config) is None

    def test_user_configuration_never_discounted(self):
        """Test that a user configuration is not discounted even when public."""
        config = make_configuration(1000.00, is_template=False, is_public=True, status="DRAFT")
        assert configuration_discount_price(config) is None

    def test_discount_never_exceeds_price(self):
        """Verify the discounted price stays at or below the total."""
        for total in (0.01, 9.99, 1000.0, 4321.99):
            config = make_configuration(total, is_template=True, is_public=True)
            assert configuration_discount_price(config) <= total


class TestComponentDiscount:
    """Tests for component discount prices."""

    def test_stored_discount_passthrough(self):
        """Test that a stored discount price is returned as is."""
        component = make_component("RM850x", price=149.99, discount_price=134.99)
        assert discount_price(component) == 134.99

    def test_missing_discount(self):
        """Test that a component without a stored discount has none."""
        assert discount_price(make_component("RM850x", price=149.99)) is None


class TestTotals:
    """Tests for totals and effective prices."""

    def test_configuration_total(self):
        """Test summing price times quantity."""
        assert configuration_total([(129.99, 2), (589.99, 1)]) == 849.97

    def test_empty_total(self):
        """Test that no items give a zero total."""
        assert configuration_total([]) == 0.0

    def test_effective_price_prefers_discount(self):
        """Test that the discount price is used when present."""
        assert effective_price(make_component("A", price=100.0, discount_price=80.0)) == 80.0
        assert effective_price(make_component("B", price=100.0)) == 100.0


class TestResolveFamily:
    """Tests for resolve_family."""

    @pytest.mark.parametrize("category_type", ["component", "peripheral"])
    def test_known_types_pass_through(self, category_type):
        """Test that valid category types are their own family."""
        assert resolve_family(category_type) == category_type

    @pytest.mark.parametrize("category_type", ["", "accessory", "Component", None])
    def test_unknown_types_raise(self, category_type):
        """Test that anything else is a data integrity error."""
        with pytest.raises(DataIntegrityError):
            resolve_family(category_type)

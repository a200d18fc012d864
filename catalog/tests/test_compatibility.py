"""Tests for configurator compatibility checks."""

import pytest

from catalog.compatibility import (
    compatibility_issues,
    estimate_power_draw,
    extract_wattage,
    form_factor_compatible,
    motherboard_matches_cpu,
    recommended_psu_wattage,
)
from catalog.tests.conftest import make_component


class TestWattage:
    """Tests for PSU wattage parsing and recommendations."""

    @pytest.mark.parametrize("name,expected", [
        ("Corsair RM1000x 1000W", 1000),
        ("Corsair RM850x 850W", 850),
        ("Seasonic Focus 750 W", 750),
        ("Mystery PSU", 0),
    ])
    def test_extract_wattage(self, name, expected):
        """Test reading the wattage from a PSU name."""
        assert extract_wattage(name) == expected

    @pytest.mark.parametrize("draw,expected", [
        (0, "N/A"), (300, "450W"), (301, "550W"), (500, "650W"),
        (650, "750W"), (800, "850W"), (801, "1000W+"),
    ])
    def test_recommended_psu(self, draw, expected):
        """Test the recommended PSU bucket for a power draw."""
        assert recommended_psu_wattage(draw) == expected


class TestPowerDraw:
    """Tests for estimate_power_draw."""

    def test_tdp_spec_wins_over_name(self):
        """Test that a stored TDP is used before name heuristics."""
        cpu = make_component("Intel Core i9-13900K", spec={"tdp": 150})
        assert estimate_power_draw([cpu]) == 165

    def test_name_heuristics(self):
        """Test the per-category estimates derived from names."""
        parts = [
            make_component("AMD Ryzen 5 7600"),
            make_component("RTX 3060", slug="gpu"),
            make_component("B650 Board", slug="motherboard"),
            make_component("DDR5 Kit", slug="ram"),
            make_component("Some AIO", slug="cooling"),
        ]
        # 65 + 260 + 50 + 10 + 15 = 400, plus 10%
        assert estimate_power_draw(parts) == 440

    def test_empty_selection(self):
        """Test that nothing selected draws nothing."""
        assert estimate_power_draw([]) == 0


class TestMotherboardMatching:
    """Tests for board and case matching."""

    def test_vendor_rules(self):
        """Test CPU vendor against board chipset markers."""
        assert motherboard_matches_cpu("MSI B650 Tomahawk", "AMD Ryzen 7 7700X")
        assert not motherboard_matches_cpu("ASUS Z790-P", "AMD Ryzen 7 7700X")
        assert motherboard_matches_cpu("ASUS Z790-P", "Intel Core i7-13700K")
        assert motherboard_matches_cpu("Any Board", "Unknown CPU")

    def test_form_factor(self):
        """Test that small cases reject larger boards."""
        assert not form_factor_compatible("Cooler Master NR200 Mini-ITX", "ASUS Z790 ATX")
        assert form_factor_compatible("Cooler Master NR200 Mini-ITX", "ASRock B650I Mini-ITX")
        assert form_factor_compatible("Fractal North Mid Tower", "ASUS Z790 ATX")
        assert form_factor_compatible("Compact mATX with ATX support", "ASUS Z790 ATX")


class TestCompatibilityIssues:
    """Tests for compatibility_issues."""

    def test_clean_build(self):
        """Test that a matching build has no issues."""
        parts = [
            make_component("Intel Core i5-13600K"),
            make_component("ASUS Z790 ATX", slug="motherboard"),
            make_component("Fractal North Mid Tower", slug="case"),
            make_component("Corsair RM850x 850W", slug="psu"),
        ]
        assert compatibility_issues(parts) == []

    def test_vendor_mismatch(self):
        """Test the warning for an AMD CPU on an Intel board."""
        parts = [
            make_component("AMD Ryzen 7 7700X"),
            make_component("ASUS Z790 ATX", slug="motherboard"),
        ]
        assert compatibility_issues(parts) == [
            "CPU and motherboard may be incompatible. AMD CPUs require AMD compatible motherboards."
        ]

    def test_small_case(self):
        """Test the warning for an ATX board in a Mini-ITX case."""
        parts = [
            make_component("ASUS Z790 ATX", slug="motherboard"),
            make_component("NR200 Mini-ITX", slug="case"),
        ]
        issues = compatibility_issues(parts)
        assert len(issues) == 1
        assert issues[0].startswith("Case is too small")

    def test_weak_psu(self):
        """Test the warning for a PSU below the estimated draw."""
        parts = [
            make_component("ASUS ROG Strix RTX 4090", slug="gpu", spec={"tdp": 450}),
            make_component("be quiet! 450W", slug="psu"),
        ]
        issues = compatibility_issues(parts)
        assert issues == [
            "PSU wattage (450W) may be insufficient for your system. Recommended: at least 495W."
        ]

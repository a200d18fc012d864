"""Demo catalog data for local development and the web app."""

import logging
from typing import Dict, List, Optional, Tuple

from catalog.db import (
    create_configuration,
    init_db,
    insert_component,
    list_components,
    upsert_category,
)
from catalog.logging_config import log_catalog_event
from catalog.models import build_spec_record
from catalog.pricing import round_price

__all__ = ["CATEGORIES", "COMPONENTS", "TEMPLATES", "shop_price", "seed_catalog"]

logger = logging.getLogger(__name__)

# slug -> (display name, family)
CATEGORIES: Dict[str, Tuple[str, str]] = {
    "cpu": ("CPU", "component"),
    "gpu": ("GPU", "component"),
    "motherboard": ("Motherboard", "component"),
    "ram": ("RAM", "component"),
    "storage": ("Storage", "component"),
    "psu": ("PSU", "component"),
    "cooling": ("Cooling", "component"),
    "case": ("Case", "component"),
    "keyboard": ("Keyboard", "peripheral"),
    "mouse": ("Mouse", "peripheral"),
    "monitor": ("Monitor", "peripheral"),
    "headphones": ("Headphones", "peripheral"),
}

# (slug, name, base price, discount, stock, spec values)
COMPONENTS: List[Tuple[str, str, float, Optional[float], int, Dict]] = [
    ("cpu", "Intel Core i9-13900K", 589, None, 8,
     {"brand": "Intel", "series": "Core i9", "cores": 24, "multithreading": True,
      "socket": "LGA1700", "frequency": 3.0, "tdp": 125, "integrated_gpu": True}),
    ("cpu", "Intel Core i5-13600K", 319, 299.99, 15,
     {"brand": "Intel", "series": "Core i5", "cores": 14, "multithreading": True,
      "socket": "LGA1700", "frequency": 3.5, "tdp": 125}),
    ("cpu", "AMD Ryzen 7 7800X3D", 449, None, 12,
     {"brand": "AMD", "series": "Ryzen 7", "cores": 8, "multithreading": True,
      "socket": "AM5", "frequency": 4.2, "tdp": 120, "integrated_gpu": True}),
    ("cpu", "AMD Ryzen 5 7600", 229, 209.99, 20,
     {"brand": "AMD", "series": "Ryzen 5", "cores": 6, "multithreading": True,
      "socket": "AM5", "frequency": 3.8, "tdp": 65}),
    ("gpu", "ASUS ROG Strix RTX 4090", 1999, None, 3,
     {"brand": "ASUS", "sub_brand": "ROG Strix", "chip_type": "GeForce 4090",
      "video_memory_capacity": 24, "memory_type": "GDDR6X", "fan_count": 3, "tdp": 450,
      "has_display_port": True, "has_hdmi": True}),
    ("gpu", "MSI GeForce RTX 3060 Ventus", 329, 289.99, 10,
     {"brand": "MSI", "chip_type": "GeForce 3060", "video_memory_capacity": 12,
      "memory_type": "GDDR6", "fan_count": 2, "tdp": 170}),
    ("gpu", "Sapphire Pulse Radeon RX 7800 XT", 549, None, 6,
     {"brand": "Sapphire", "chip_type": "Radeon 7800 XT", "video_memory_capacity": 16,
      "memory_type": "GDDR6", "fan_count": 2, "tdp": 263}),
    ("motherboard", "ASUS TUF Gaming Z790-Plus ATX", 279, None, 7,
     {"brand": "ASUS", "socket": "LGA1700", "form": "ATX", "chipset": "Z790",
      "memory_slots": 4, "memory_type_supported": "DDR5", "m2_slots": 4,
      "wifi_bluetooth": True, "nvme_support": True}),
    ("motherboard", "MSI MAG B650M Mortar Micro-ATX", 209, None, 9,
     {"brand": "MSI", "socket": "AM5", "form": "Micro-ATX", "chipset": "B650",
      "memory_slots": 4, "memory_type_supported": "DDR5", "m2_slots": 2}),
    ("ram", "Corsair Vengeance 32GB DDR5-6000", 129, 114.99, 25,
     {"brand": "Corsair", "gb": 32, "module_count": 2, "memory_type": "DDR5",
      "max_frequency": 6000, "voltage": 1.35, "backlighting": False}),
    ("ram", "Kingston Fury Beast 16GB DDR4-3200", 49, None, 30,
     {"brand": "Kingston", "gb": 16, "module_count": 2, "memory_type": "DDR4",
      "max_frequency": 3200, "voltage": 1.35}),
    ("storage", "Samsung 990 Pro 2TB NVMe SSD", 179, None, 18,
     {"brand": "Samsung", "volume": 2000, "type": "NVMe SSD", "size": "M.2 2280",
      "compatibility": "PCIe 4.0", "read_speed": 7450, "write_speed": 6900, "nvme": True}),
    ("storage", "Seagate BarraCuda 4TB HDD", 89, None, 14,
     {"brand": "Seagate", "volume": 4000, "type": "HDD", "size": "3.5\"",
      "compatibility": "SATA III"}),
    ("psu", "Corsair RM1000x 1000W", 189, None, 5,
     {"brand": "Corsair", "power": 1000, "efficiency": "80+ Gold", "modular": True}),
    ("psu", "Corsair RM850x 850W", 149, 134.99, 11,
     {"brand": "Corsair", "power": 850, "efficiency": "80+ Gold", "modular": True}),
    ("psu", "be quiet! System Power 10 550W", 69, None, 16,
     {"brand": "be quiet!", "power": 550, "efficiency": "80+ Bronze", "modular": False}),
    ("cooling", "Arctic Liquid Freezer II 360 AIO", 129, None, 8,
     {"brand": "Arctic", "type": "Liquid", "socket": "LGA1700, AM5", "radiator_size": 360,
      "fan_diameter": 120, "noise_level": 22.5}),
    ("cooling", "Noctua NH-D15 Air Cooler", 109, None, 10,
     {"brand": "Noctua", "type": "Air", "socket": "LGA1700, AM5", "fan_diameter": 140,
      "fan_speed": 1500, "noise_level": 24.6}),
    ("case", "Fractal Design North Mid Tower", 139, None, 6,
     {"brand": "Fractal Design", "form": "Mid Tower", "motherboard_support": "ATX, M-ATX, ITX",
      "color": "Black", "material": "Steel, Walnut"}),
    ("case", "Cooler Master NR200 Mini-ITX", 89, None, 4,
     {"brand": "Cooler Master", "form": "Mini Tower", "motherboard_support": "ITX",
      "color": "White"}),
    ("keyboard", "Logitech G915 TKL", 229, 199.99, 9,
     {"brand": "Logitech", "switch_type": "GL Tactile", "form": "TKL",
      "connection": "Wireless", "rgb": True}),
    ("mouse", "Razer DeathAdder V3 Pro", 149, None, 13,
     {"brand": "Razer", "dpi": 30000, "connection": "Wireless", "buttons": 5}),
    ("monitor", "Dell S2721DGF 27\" QHD 165Hz", 349, 299.99, 7,
     {"brand": "Dell", "size": 27, "resolution": "2560x1440", "refresh_rate": 165,
      "panel_type": "IPS"}),
    ("headphones", "HyperX Cloud II", 99, None, 22,
     {"brand": "HyperX", "type": "Over-ear", "connection": "USB", "impedance": 60,
      "microphone": True}),
]

# (name, description, public, [(component name, quantity)])
TEMPLATES: List[Tuple[str, str, bool, List[Tuple[str, int]]]] = [
    ("Intel Creator Pro", "High-end Intel workstation for rendering and gaming.", True, [
        ("Intel Core i9-13900K", 1),
        ("ASUS TUF Gaming Z790-Plus ATX", 1),
        ("Corsair Vengeance 32GB DDR5-6000", 2),
        ("ASUS ROG Strix RTX 4090", 1),
        ("Samsung 990 Pro 2TB NVMe SSD", 1),
        ("Corsair RM1000x 1000W", 1),
        ("Arctic Liquid Freezer II 360 AIO", 1),
        ("Fractal Design North Mid Tower", 1),
    ]),
    ("AMD Gaming Starter", "Balanced 1440p gaming build on AM5.", True, [
        ("AMD Ryzen 5 7600", 1),
        ("MSI MAG B650M Mortar Micro-ATX", 1),
        ("Corsair Vengeance 32GB DDR5-6000", 1),
        ("MSI GeForce RTX 3060 Ventus", 1),
        ("Samsung 990 Pro 2TB NVMe SSD", 1),
        ("be quiet! System Power 10 550W", 1),
        ("Noctua NH-D15 Air Cooler", 1),
        ("Fractal Design North Mid Tower", 1),
    ]),
    ("AMD X3D Enthusiast", "Staff pick, not yet published.", False, [
        ("AMD Ryzen 7 7800X3D", 1),
        ("MSI MAG B650M Mortar Micro-ATX", 1),
        ("Corsair Vengeance 32GB DDR5-6000", 1),
        ("Sapphire Pulse Radeon RX 7800 XT", 1),
        ("Corsair RM850x 850W", 1),
        ("Cooler Master NR200 Mini-ITX", 1),
    ]),
]


def shop_price(amount: float) -> float:
    """Round a list price to the shop's .99 ending (589 -> 589.99)."""
    return round_price(int(amount) + 0.99)


def seed_catalog(db_path: str) -> Dict[str, int]:
    """Populate an empty database with the demo catalog.

    Seeding is skipped when components already exist.

    Returns:
        Counts of inserted categories, components and templates.
    """
    init_db(db_path)
    if list_components(db_path, limit=1):
        logger.info("Catalog already seeded, skipping")
        return {"categories": 0, "components": 0, "templates": 0}

    category_ids = {
        slug: upsert_category(db_path, name, slug, family)
        for slug, (name, family) in CATEGORIES.items()
    }

    component_ids: Dict[str, str] = {}
    for slug, name, price, discount, stock, values in COMPONENTS:
        component_ids[name] = insert_component(
            db_path,
            category_ids[slug],
            name,
            shop_price(price),
            description=f"{CATEGORIES[slug][0]}: {name}",
            discount_price=discount,
            stock=stock,
            spec=build_spec_record(slug, values),
        )

    for name, description, public, items in TEMPLATES:
        create_configuration(
            db_path,
            name,
            [(component_ids[component], quantity) for component, quantity in items],
            description=description,
            is_template=True,
            is_public=public,
            status="APPROVED",
        )

    counts = {
        "categories": len(category_ids),
        "components": len(component_ids),
        "templates": len(TEMPLATES),
    }
    log_catalog_event("seed_complete", {"message": "Seeded demo catalog", "db_path": db_path, **counts},
                      logger_name="seed")
    return counts

"""Configuration and constants for the catalog engine."""

from typing import Dict, List, Optional, Tuple

__all__ = [
    "DB_PATH",
    "EXPORT_PATH",
    "COMPONENT_FAMILY",
    "PERIPHERAL_FAMILY",
    "PRODUCT_FAMILIES",
    "BOOL",
    "SPEC_FIELDS",
    "SUB_RECORD_PRIORITY",
    "SUB_RECORD_ALIASES",
    "CONFIGURATION_STATUSES",
    "PUBLIC_TEMPLATE_DISCOUNT",
    "CONFIGURATION_STOCK",
    "PLACEHOLDER_RATINGS",
    "RELATED_LIMIT",
    "MAX_CATALOG_ROWS",
    "get_spec_fields",
    "get_spec_table",
]

# Output paths
DB_PATH = "data/catalog.db"
EXPORT_PATH = "data/catalog_export.csv"

# Product families (the category "type" discriminator)
COMPONENT_FAMILY = "component"
PERIPHERAL_FAMILY = "peripheral"
PRODUCT_FAMILIES = (COMPONENT_FAMILY, PERIPHERAL_FAMILY)


# =============================================================================
# Sub-record Spec Field Definitions
# =============================================================================
# Each sub-record kind maps to an ordered list of (column, label, unit):
#   - column: attribute name on the sub-record and column in its spec table
#   - label: human-readable specification label
#   - unit: literal suffix appended to the value, or BOOL for Yes/No fields
# Order is display order: brand first, capacity/spec fields, then flags.

BOOL = "bool"

SpecField = Tuple[str, str, str]

SPEC_FIELDS: Dict[str, List[SpecField]] = {
    "cpu": [
        ("brand", "Brand", ""),
        ("series", "Series", ""),
        ("cores", "Cores", ""),
        ("multithreading", "Multithreading", BOOL),
        ("socket", "Socket", ""),
        ("frequency", "Base Frequency", " GHz"),
        ("max_ram_capacity", "Max RAM Capacity", " GB"),
        ("max_ram_frequency", "Max RAM Frequency", " MHz"),
        ("tdp", "TDP", " W"),
        ("integrated_gpu", "Integrated GPU", BOOL),
    ],
    "gpu": [
        ("brand", "Brand", ""),
        ("sub_brand", "Sub Brand", ""),
        ("chip_type", "Chip Type", ""),
        ("video_memory_capacity", "Video Memory", " GB"),
        ("memory_type", "Memory Type", ""),
        ("fan_count", "Fan Count", ""),
        ("tdp", "TDP", " W"),
        ("has_dvi", "DVI Port", BOOL),
        ("has_vga", "VGA Port", BOOL),
        ("has_display_port", "DisplayPort", BOOL),
        ("has_hdmi", "HDMI Port", BOOL),
    ],
    "ram": [
        ("brand", "Brand", ""),
        ("gb", "Capacity", " GB"),
        ("module_count", "Module Count", ""),
        ("memory_type", "Memory Type", ""),
        ("max_frequency", "Max Frequency", " MHz"),
        ("voltage", "Voltage", " V"),
        ("backlighting", "RGB Lighting", BOOL),
    ],
    "storage": [
        ("brand", "Brand", ""),
        ("volume", "Capacity", " GB"),
        ("type", "Type", ""),
        ("size", "Form Factor", ""),
        ("compatibility", "Interface", ""),
        ("read_speed", "Read Speed", " MB/s"),
        ("write_speed", "Write Speed", " MB/s"),
        ("nvme", "NVMe", BOOL),
    ],
    "psu": [
        ("brand", "Brand", ""),
        ("power", "Power", " W"),
        ("efficiency", "Efficiency", ""),
        ("sata_connections", "SATA Connections", ""),
        ("pcie_connections", "PCIe Connections", ""),
        ("molex_pata_connections", "Molex/PATA Connections", ""),
        ("modular", "Modular", BOOL),
        ("pfc", "PFC", BOOL),
        ("has_fan", "Fan", BOOL),
    ],
    "motherboard": [
        ("brand", "Brand", ""),
        ("socket", "Socket", ""),
        ("form", "Form Factor", ""),
        ("chipset", "Chipset", ""),
        ("processor_support", "Processor Support", ""),
        ("memory_slots", "Memory Slots", ""),
        ("memory_type_supported", "Memory Type", ""),
        ("max_ram_capacity", "Max RAM Capacity", " GB"),
        ("max_memory_frequency", "Max Memory Frequency", " MHz"),
        ("max_video_cards", "Max Video Cards", ""),
        ("sata_ports", "SATA Ports", ""),
        ("m2_slots", "M.2 Slots", ""),
        ("sli_crossfire_support", "SLI/Crossfire", BOOL),
        ("wifi_bluetooth", "WiFi/Bluetooth", BOOL),
        ("nvme_support", "NVMe Support", BOOL),
    ],
    "cooling": [
        ("brand", "Brand", ""),
        ("type", "Type", ""),
        ("socket", "Socket", ""),
        ("radiator_size", "Radiator Size", " mm"),
        ("fan_diameter", "Fan Diameter", " mm"),
        ("fan_speed", "Fan Speed", " RPM"),
        ("noise_level", "Noise Level", " dB"),
    ],
    "case": [
        ("brand", "Brand", ""),
        ("form", "Form Factor", ""),
        ("motherboard_support", "Motherboard Support", ""),
        ("color", "Color", ""),
        ("material", "Material", ""),
        ("usb2", "USB 2.0 Ports", ""),
        ("usb3", "USB 3.0 Ports", ""),
        ("usb32", "USB 3.2 Ports", ""),
        ("usb_type_c", "USB Type-C Ports", ""),
        ("slots_525", '5.25" Slots', ""),
        ("slots_35", '3.5" Slots', ""),
        ("slots_25", '2.5" Slots', ""),
        ("power_supply_included", "PSU Included", BOOL),
        ("audio_in", "Audio In", BOOL),
        ("audio_out", "Audio Out", BOOL),
        ("water_cooling_support", "Water Cooling", BOOL),
    ],
    "keyboard": [
        ("brand", "Brand", ""),
        ("switch_type", "Switch Type", ""),
        ("layout", "Layout", ""),
        ("form", "Form Factor", ""),
        ("connection", "Connection", ""),
        ("rgb", "RGB Lighting", BOOL),
        ("numpad", "Numpad", BOOL),
    ],
    "mouse": [
        ("brand", "Brand", ""),
        ("color", "Color", ""),
        ("category", "Category", ""),
        ("dpi", "DPI", ""),
        ("buttons", "Buttons", ""),
        ("connection", "Connection", ""),
        ("weight", "Weight", " g"),
        ("sensor", "Sensor", ""),
        ("battery_type", "Battery Type", ""),
        ("battery_life", "Battery Life", " hours"),
        ("rgb", "RGB Lighting", BOOL),
    ],
    "mouse_pad": [
        ("brand", "Brand", ""),
        ("dimensions", "Dimensions", ""),
        ("thickness", "Thickness", " mm"),
        ("material", "Material", ""),
        ("surface", "Surface", ""),
        ("rgb", "RGB Lighting", BOOL),
    ],
    "monitor": [
        ("brand", "Brand", ""),
        ("size", "Size", '"'),
        ("resolution", "Resolution", ""),
        ("refresh_rate", "Refresh Rate", " Hz"),
        ("panel_type", "Panel Type", ""),
        ("response_time", "Response Time", " ms"),
        ("brightness", "Brightness", " nits"),
        ("ports", "Ports", ""),
        ("hdr", "HDR", BOOL),
        ("speakers", "Speakers", BOOL),
        ("curved", "Curved", BOOL),
    ],
    "headphones": [
        ("brand", "Brand", ""),
        ("type", "Type", ""),
        ("connection", "Connection", ""),
        ("impedance", "Impedance", " Ω"),
        ("frequency", "Frequency", ""),
        ("weight", "Weight", " g"),
        ("microphone", "Microphone", BOOL),
        ("noise_cancelling", "Noise Cancelling", BOOL),
        ("rgb", "RGB Lighting", BOOL),
    ],
    "microphone": [
        ("brand", "Brand", ""),
        ("type", "Type", ""),
        ("pattern", "Pattern", ""),
        ("frequency", "Frequency", " Hz"),
        ("sensitivity", "Sensitivity", " dB"),
        ("interface", "Interface", ""),
        ("stand", "Stand", BOOL),
    ],
    "camera": [
        ("brand", "Brand", ""),
        ("resolution", "Resolution", ""),
        ("fps", "FPS", " fps"),
        ("fov", "FOV", "°"),
        ("connection", "Connection", ""),
        ("microphone", "Microphone", BOOL),
        ("autofocus", "Autofocus", BOOL),
    ],
    "speakers": [
        ("brand", "Brand", ""),
        ("type", "Type", ""),
        ("total_wattage", "Total Wattage", " W"),
        ("frequency", "Frequency", ""),
        ("connections", "Connections", ""),
        ("bluetooth", "Bluetooth", BOOL),
        ("remote", "Remote", BOOL),
    ],
    "gamepad": [
        ("brand", "Brand", ""),
        ("connection", "Connection", ""),
        ("platform", "Platform", ""),
        ("layout", "Layout", ""),
        ("battery_life", "Battery Life", " hours"),
        ("vibration", "Vibration", BOOL),
        ("programmable", "Programmable", BOOL),
        ("rgb", "RGB Lighting", BOOL),
    ],
}

# Order in which sub-record keys are checked on a raw component record
SUB_RECORD_PRIORITY: Tuple[str, ...] = (
    "cpu",
    "gpu",
    "ram",
    "storage",
    "psu",
    "motherboard",
    "cooling",
    "case",
    "keyboard",
    "mouse",
    "mouse_pad",
    "monitor",
    "headphones",
    "microphone",
    "camera",
    "speakers",
    "gamepad",
)

# Raw record keys that name a sub-record differently from its kind
SUB_RECORD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "case": ("caseModel", "case_model"),
    "mouse_pad": ("mousePad",),
}


# =============================================================================
# Configurations and Pricing
# =============================================================================

CONFIGURATION_STATUSES = ("DRAFT", "SUBMITTED", "APPROVED", "REJECTED")

# Public templates are listed at 10% off their component total
PUBLIC_TEMPLATE_DISCOUNT = 0.9

# Template configurations report a flat stock, not min(component stock)
CONFIGURATION_STOCK = 10

# Placeholder ratings (average, count). There is no review aggregation yet;
# these are fixed per normalization branch and carry no signal.
PLACEHOLDER_RATINGS: Dict[str, Tuple[float, int]] = {
    "configuration": (4.5, 15),
    "user_configuration": (0.0, 0),
    "component_detail": (4.3, 18),
    "component_listing": (4.2, 12),
}

# Related items attached to a product detail view
RELATED_LIMIT = 3

# Rows fetched per source table when building a product listing
MAX_CATALOG_ROWS = 50


def get_spec_fields(kind: str) -> Optional[List[SpecField]]:
    """Get the ordered spec field table for a sub-record kind."""
    return SPEC_FIELDS.get(kind)


def get_spec_table(kind: str) -> str:
    """Map a sub-record kind to its SQLite table name."""
    return f"{kind}_specs"

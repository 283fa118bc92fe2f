"""
Enumerated types shared across the movement engine.
"""

from enum import Enum


class ZoneType(str, Enum):
    """Physical zone types, plus the terminal removal pseudo-type."""

    DOCK = "dock"
    INSPECTION_STATION = "inspection-station"
    STORAGE_BIN = "storage-bin"
    RACK_SLOT = "rack-slot"
    RECYCLE_SINK = "recycle-sink"
    REMOVED = "removed"  # sink pseudo-transition, never a zone instance


class ItemCategory(str, Enum):
    """Hardware categories handled by the facility."""

    COMPUTE_ACCELERATOR = "compute-accelerator"
    FAST_STORAGE = "fast-storage"
    SPINNING_DISK = "spinning-disk"
    PROCESSOR = "processor"
    MEMORY_MODULE = "memory-module"
    POWER_SUPPLY = "power-supply"
    LOGIC_BOARD = "logic-board"


class Location(str, Enum):
    """Coarse location label derived from the containing zone."""

    INTAKE = "intake"
    INSPECTION = "inspection"
    STORAGE = "storage"
    INSTALLED = "installed"
    RECYCLING = "recycling"
    REMOVED = "removed"


class ItemStatus(str, Enum):
    """Lifecycle status, independent of location."""

    AVAILABLE = "available"
    RESERVED = "reserved"
    INSTALLED = "installed"
    IN_TRANSIT = "in-transit"
    FAILED = "failed"
    RECYCLED = "recycled"


class Verdict(str, Enum):
    """Inspection verdict, only meaningful while an item is inspected."""

    UNSET = "unset"
    VERIFIED = "verified"
    DEFECTIVE = "defective"


class Severity(str, Enum):
    """Severity of a rack failure."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


LOCATION_BY_ZONE_TYPE: dict[ZoneType, Location] = {
    ZoneType.DOCK: Location.INTAKE,
    ZoneType.INSPECTION_STATION: Location.INSPECTION,
    ZoneType.STORAGE_BIN: Location.STORAGE,
    ZoneType.RACK_SLOT: Location.INSTALLED,
    ZoneType.RECYCLE_SINK: Location.RECYCLING,
    ZoneType.REMOVED: Location.REMOVED,
}

# Status an item takes on when it arrives in a zone of the given type.
# Zone types missing here leave the status untouched.
STATUS_ON_ARRIVAL: dict[ZoneType, ItemStatus] = {
    ZoneType.STORAGE_BIN: ItemStatus.AVAILABLE,
    ZoneType.RACK_SLOT: ItemStatus.INSTALLED,
    ZoneType.RECYCLE_SINK: ItemStatus.RECYCLED,
}

# Serial number prefixes, one per category
SERIAL_PREFIXES: dict[ItemCategory, str] = {
    ItemCategory.COMPUTE_ACCELERATOR: "GPU",
    ItemCategory.FAST_STORAGE: "SSD",
    ItemCategory.SPINNING_DISK: "HDD",
    ItemCategory.PROCESSOR: "CPU",
    ItemCategory.MEMORY_MODULE: "RAM",
    ItemCategory.POWER_SUPPLY: "PSU",
    ItemCategory.LOGIC_BOARD: "MBD",
}

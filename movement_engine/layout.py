"""
Default facility layout.
NO UI DEPENDENCIES - origins are only used for slot positions.
"""

from movement_engine.config import Settings
from movement_engine.constants import SLOT_MARGIN, SLOT_WIDTH
from movement_engine.models.types import ZoneType
from movement_engine.registry import ZoneRegistry

# Columns of slots per zone row, by zone type
ZONE_COLUMNS: dict[ZoneType, int] = {
    ZoneType.DOCK: 5,
    ZoneType.INSPECTION_STATION: 5,
    ZoneType.STORAGE_BIN: 10,
    ZoneType.RACK_SLOT: 1,
    ZoneType.RECYCLE_SINK: 10,
}

# Zone id prefixes, by zone type
ZONE_PREFIXES: dict[ZoneType, str] = {
    ZoneType.DOCK: "dock",
    ZoneType.INSPECTION_STATION: "qc",
    ZoneType.STORAGE_BIN: "bin",
    ZoneType.RACK_SLOT: "rack",
    ZoneType.RECYCLE_SINK: "recycle",
}


def _zone_width(zone_type: ZoneType) -> int:
    return SLOT_MARGIN + ZONE_COLUMNS[zone_type] * (SLOT_WIDTH + SLOT_MARGIN)


def create_default_layout(settings: Settings, registry: ZoneRegistry | None = None) -> ZoneRegistry:
    """
    Build the facility: docks, inspection stations, storage bins,
    rack slots and a recycle sink, laid out left to right.
    """
    if registry is None:
        registry = ZoneRegistry()

    plan = [
        (ZoneType.DOCK, settings.dock_count, settings.dock_capacity),
        (ZoneType.INSPECTION_STATION, settings.inspection_station_count, settings.inspection_capacity),
        (ZoneType.STORAGE_BIN, settings.storage_bin_count, settings.storage_capacity),
        (ZoneType.RACK_SLOT, settings.rack_slot_count, settings.rack_slot_capacity),
        (ZoneType.RECYCLE_SINK, settings.recycle_sink_count, settings.recycle_capacity),
    ]

    x = 0
    for zone_type, count, capacity in plan:
        width = _zone_width(zone_type)
        for index in range(count):
            registry.create_zone(
                zone_id=f"{ZONE_PREFIXES[zone_type]}-{index + 1}",
                zone_type=zone_type,
                capacity=capacity,
                origin=(x, index * 200),
                columns=ZONE_COLUMNS[zone_type],
            )
        x += width + 50

    return registry

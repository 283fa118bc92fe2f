"""
Zone registry: every zone and every tracked item of one simulation.

An explicit object, passed to each operation, so several simulations
can run side by side and tests can build one in isolation.
"""

import logging
from collections.abc import Iterator
from uuid import UUID

from movement_engine.models.item import Item
from movement_engine.models.types import ItemCategory, ItemStatus, ZoneType
from movement_engine.models.zone import Zone

logger = logging.getLogger(__name__)


class ZoneRegistry:
    """
    Holds zones (created once at setup) and the items currently in play.

    attach/detach are the only code paths that bind an item to a zone.
    The MovementExecutor is their sole caller after ingestion.
    """

    def __init__(self) -> None:
        self._zones: dict[str, Zone] = {}
        self._items: dict[UUID, Item] = {}

    # =========================================================================
    # ZONES
    # =========================================================================

    def add_zone(self, zone: Zone) -> Zone:
        """Register a zone. Raises ValueError on a duplicate id."""
        if zone.id in self._zones:
            raise ValueError(f"Zone id already registered: {zone.id}")
        self._zones[zone.id] = zone
        return zone

    def create_zone(
        self,
        zone_id: str,
        zone_type: ZoneType,
        capacity: int = 1,
        origin: tuple[int, int] = (0, 0),
        columns: int = 1,
    ) -> Zone:
        """Create and register a zone."""
        return self.add_zone(
            Zone(id=zone_id, zone_type=zone_type, capacity=capacity, origin=origin, columns=columns)
        )

    def get_zone(self, zone_id: str) -> Zone | None:
        return self._zones.get(zone_id)

    def iter_zones(self) -> Iterator[Zone]:
        yield from self._zones.values()

    def zones_of_type(self, zone_type: ZoneType) -> list[Zone]:
        return [zone for zone in self._zones.values() if zone.zone_type == zone_type]

    def find_available_zone(self, zone_type: ZoneType) -> Zone | None:
        """First zone of the type with spare capacity, in registration order."""
        for zone in self._zones.values():
            if zone.zone_type == zone_type and zone.has_room():
                return zone
        return None

    # =========================================================================
    # ITEMS
    # =========================================================================

    def track(self, item: Item) -> None:
        """Start tracking an item without placing it anywhere."""
        self._items[item.id] = item

    def get_item(self, item_id: UUID) -> Item | None:
        return self._items.get(item_id)

    def is_tracked(self, item: Item) -> bool:
        return self._items.get(item.id) is item

    def iter_items(self) -> Iterator[Item]:
        yield from self._items.values()

    def items_by_status(self, status: ItemStatus) -> list[Item]:
        return [item for item in self._items.values() if item.status == status]

    def items_by_category(self, category: ItemCategory) -> list[Item]:
        return [item for item in self._items.values() if item.category == category]

    def find_zone_of(self, item: Item) -> Zone | None:
        """
        Zone currently holding the item, or None if it is untracked.
        The bound zone is trusted only if it really lists the item.
        """
        zone = item.zone
        if zone is not None and self._zones.get(zone.id) is zone and zone.contains(item):
            return zone
        for candidate in self._zones.values():
            if candidate.contains(item):
                return candidate
        return None

    # =========================================================================
    # OCCUPANCY
    # =========================================================================

    def attach(self, item: Item, zone: Zone) -> bool:
        """
        Place an item into a zone and track it.
        Returns False if the zone is full, unregistered, or the item is
        already held by a zone.
        """
        if self._zones.get(zone.id) is not zone:
            logger.warning(f"Refusing attach of {item.serial_number}: zone {zone.id} not registered")
            return False
        if item.is_removed:
            return False
        if self.find_zone_of(item) is not None:
            return False
        slot = zone.free_slot_index()
        if slot is None:
            return False

        item.position = zone.slot_position(slot)
        zone.occupants.append(item)
        item._zone = zone
        self._items[item.id] = item
        return True

    def detach(self, item: Item) -> Zone | None:
        """Remove an item from its zone. Returns the zone it left, if any."""
        zone = self.find_zone_of(item)
        if zone is None:
            item._zone = None
            return None
        zone.occupants = [occupant for occupant in zone.occupants if occupant is not item]
        item._zone = None
        return zone

    def forget(self, item: Item) -> bool:
        """
        Detach and stop tracking an item for good.
        Returns False if the item was already gone.
        """
        was_known = self._items.pop(item.id, None) is not None
        left = self.detach(item)
        item._removed = True
        return was_known or left is not None

    def occupancy_snapshot(self) -> dict[str, tuple[UUID, ...]]:
        """Momentary copy of every zone's occupant ids."""
        return {
            zone.id: tuple(item.id for item in zone.occupants)
            for zone in self._zones.values()
        }

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ZoneRegistry({len(self._zones)} zones, {len(self._items)} items)"

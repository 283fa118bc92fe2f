"""
Tests for the movement executor.
"""
import logging

from conftest import build_registry, place
from movement_engine.executor import MoveFailure
from movement_engine.models.item import Item
from movement_engine.models.types import ItemCategory, ItemStatus, Location, ZoneType


class TestLegalMoves:
    """Single legal hops."""

    def test_dock_to_inspection(self, executor):
        """A docked item moves into the station."""
        registry = build_registry(dock_capacity=1)
        item = place(registry, Item(ItemCategory.PROCESSOR), "dock-1")

        result = executor.execute(item, ZoneType.INSPECTION_STATION, registry)

        assert result.ok
        assert item.location == Location.INSPECTION
        assert registry.get_zone("dock-1").is_empty()
        assert registry.get_zone("qc-1").occupants == [item]

    def test_storage_to_rack(self, executor, clock):
        """Installing sets the install time."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.COMPUTE_ACCELERATOR), "bin-1")
        clock.advance(120.0)

        result = executor.execute(item, ZoneType.RACK_SLOT, registry)

        assert result.ok
        assert result.source_type == ZoneType.STORAGE_BIN
        assert result.zone_id == "rack-1"
        assert item.location == Location.INSTALLED
        assert item.status == ItemStatus.INSTALLED
        assert item.install_time == 120.0
        assert registry.get_zone("bin-1").is_empty()

    def test_second_rack_slot_used_when_first_taken(self, executor):
        """The next free rack slot is used."""
        registry = build_registry(racks=2)
        first = place(registry, Item(ItemCategory.PROCESSOR), "bin-1")
        second = place(registry, Item(ItemCategory.PROCESSOR), "bin-1")

        assert executor.execute(first, ZoneType.RACK_SLOT, registry).zone_id == "rack-1"
        assert executor.execute(second, ZoneType.RACK_SLOT, registry).zone_id == "rack-2"

    def test_arrival_in_storage_makes_item_available(self, executor):
        """Storage arrival makes the item available."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.MEMORY_MODULE), "qc-1")
        item.status = ItemStatus.IN_TRANSIT

        assert executor.execute(item, ZoneType.STORAGE_BIN, registry)
        assert item.status == ItemStatus.AVAILABLE

    def test_arrival_in_recycle_sink(self, executor):
        """Sink arrival marks the item recycled."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.POWER_SUPPLY), "rack-1")

        assert executor.execute(item, ZoneType.RECYCLE_SINK, registry)
        assert item.status == ItemStatus.RECYCLED
        assert item.location == Location.RECYCLING

    def test_dock_to_dock_transfer(self, executor):
        """Dock transfers go to another dock."""
        registry = build_registry(docks=2)
        item = place(registry, Item(ItemCategory.FAST_STORAGE), "dock-1")

        result = executor.execute(item, ZoneType.DOCK, registry)

        assert result.ok
        assert result.zone_id == "dock-2"
        assert registry.get_zone("dock-1").is_empty()

    def test_dock_to_dock_needs_another_dock(self, executor):
        """A lone dock cannot transfer to itself."""
        registry = build_registry(docks=1, dock_capacity=4)
        item = place(registry, Item(ItemCategory.FAST_STORAGE), "dock-1")

        result = executor.execute(item, ZoneType.DOCK, registry)

        assert not result.ok
        assert result.reason == MoveFailure.CAPACITY_EXHAUSTED
        assert item.zone.id == "dock-1"


class TestRefusedMoves:
    """Refused moves leave every zone untouched."""

    def test_rack_to_storage_is_illegal(self, executor, caplog):
        """Illegal moves are logged and refused."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.MEMORY_MODULE), "rack-1")
        before = registry.occupancy_snapshot()

        with caplog.at_level(logging.WARNING):
            result = executor.execute(item, ZoneType.STORAGE_BIN, registry)

        assert not result.ok
        assert result.reason == MoveFailure.ILLEGAL_TRANSITION
        assert registry.occupancy_snapshot() == before
        assert item.location == Location.INSTALLED
        assert "Movement not allowed" in caplog.text

    def test_full_station_exhausts_capacity(self, executor):
        """A full station refuses the move."""
        registry = build_registry(dock_capacity=1, station_capacity=1)
        place(registry, Item(ItemCategory.PROCESSOR), "qc-1")
        item = place(registry, Item(ItemCategory.PROCESSOR), "dock-1")
        before = registry.occupancy_snapshot()

        result = executor.execute(item, ZoneType.INSPECTION_STATION, registry)

        assert not result.ok
        assert result.reason == MoveFailure.CAPACITY_EXHAUSTED
        assert registry.occupancy_snapshot() == before
        assert item.location == Location.INTAKE

    def test_full_dock_exhausts_capacity(self, executor):
        """Full docks refuse transfers."""
        registry = build_registry(docks=2, dock_capacity=1)
        place(registry, Item(ItemCategory.PROCESSOR), "dock-1")
        item = place(registry, Item(ItemCategory.PROCESSOR), "dock-2")
        before = registry.occupancy_snapshot()

        result = executor.execute(item, ZoneType.DOCK, registry)

        assert not result.ok
        assert result.reason == MoveFailure.CAPACITY_EXHAUSTED
        assert registry.occupancy_snapshot() == before

    def test_skip_ahead_is_illegal(self, executor):
        """Skipping zones is illegal."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.PROCESSOR), "dock-1")

        result = executor.execute(item, ZoneType.RACK_SLOT, registry)

        assert result.reason == MoveFailure.ILLEGAL_TRANSITION
        assert item.zone.id == "dock-1"
        assert item.install_time is None

    def test_untracked_item_has_unknown_zone(self, executor, caplog):
        """Untracked items report an unknown zone."""
        registry = build_registry()
        item = Item(ItemCategory.PROCESSOR)

        with caplog.at_level(logging.ERROR):
            result = executor.execute(item, ZoneType.INSPECTION_STATION, registry)

        assert result.reason == MoveFailure.UNKNOWN_ZONE
        assert registry.get_zone("qc-1").is_empty()
        assert "Unknown zone" in caplog.text


class TestRemoval:
    """The terminal removal transition."""

    def test_removal_from_recycle_sink(self, executor):
        """Removal takes the item out of the simulation."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.SPINNING_DISK), "recycle-1")

        result = executor.execute(item, ZoneType.REMOVED, registry)

        assert result.ok
        assert not result.already_removed
        assert result.source_type == ZoneType.RECYCLE_SINK
        assert item.location == Location.REMOVED
        assert registry.get_item(item.id) is None
        assert registry.get_zone("recycle-1").is_empty()

    def test_removal_is_idempotent(self, executor):
        """Removing twice is a no-op."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.SPINNING_DISK), "recycle-1")
        executor.execute(item, ZoneType.REMOVED, registry)
        before = registry.occupancy_snapshot()

        result = executor.execute(item, ZoneType.REMOVED, registry)

        assert result.ok
        assert result.already_removed
        assert registry.occupancy_snapshot() == before

    def test_removal_from_any_zone(self, executor):
        """Removal works from any zone."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.PROCESSOR), "bin-1")

        assert executor.execute(item, ZoneType.REMOVED, registry)
        assert registry.get_zone("bin-1").is_empty()

    def test_removed_item_cannot_come_back(self, executor):
        """Removed items cannot re-enter."""
        registry = build_registry()
        item = place(registry, Item(ItemCategory.PROCESSOR), "recycle-1")
        executor.execute(item, ZoneType.REMOVED, registry)

        assert not registry.attach(item, registry.get_zone("dock-1"))
        result = executor.execute(item, ZoneType.INSPECTION_STATION, registry)
        assert result.reason == MoveFailure.UNKNOWN_ZONE


class TestInvariants:
    """Occupancy stays exclusive and within capacity across many moves."""

    def test_every_item_in_at_most_one_zone(self, executor):
        """Items never sit in two zones."""
        registry = build_registry(docks=2, dock_capacity=3, station_capacity=2, racks=3)
        items = [place(registry, Item(ItemCategory.PROCESSOR), "dock-1") for _ in range(3)]

        for item in items:
            executor.execute(item, ZoneType.DOCK, registry)
        for item in items:
            executor.execute(item, ZoneType.INSPECTION_STATION, registry)
        for item in items:
            executor.execute(item, ZoneType.STORAGE_BIN, registry)

        for item in items:
            holders = [zone for zone in registry.iter_zones() if zone.contains(item)]
            assert len(holders) <= 1
        for zone in registry.iter_zones():
            assert len(zone.occupants) <= zone.capacity

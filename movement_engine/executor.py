"""
Movement executor: the single writer of zone occupancy.

Every check runs before any mutation, so a failed move leaves the
registry exactly as it found it. Failures are returned, not raised:
"dock full" is a business outcome, not an exceptional condition.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from movement_engine.hierarchy.rules import HierarchyRules
from movement_engine.models.item import Item
from movement_engine.models.types import STATUS_ON_ARRIVAL, ZoneType
from movement_engine.models.zone import Zone
from movement_engine.registry import ZoneRegistry
from movement_engine.scheduler import SimulationClock

logger = logging.getLogger(__name__)


class MoveFailure(str, Enum):
    """Why a movement request was refused."""

    ILLEGAL_TRANSITION = "illegal-transition"
    CAPACITY_EXHAUSTED = "capacity-exhausted"
    ROUTE_NOT_FOUND = "route-not-found"
    UNKNOWN_ZONE = "unknown-zone"
    UNKNOWN_ITEM = "unknown-item"


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a movement request."""

    ok: bool
    destination_type: ZoneType
    source_type: ZoneType | None = None
    zone_id: str | None = None
    reason: MoveFailure | None = None
    message: str = ""
    already_removed: bool = False

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(
        cls,
        source_type: ZoneType | None,
        destination_type: ZoneType,
        zone_id: str | None = None,
        already_removed: bool = False,
    ) -> "MoveResult":
        return cls(
            ok=True,
            source_type=source_type,
            destination_type=destination_type,
            zone_id=zone_id,
            already_removed=already_removed,
        )

    @classmethod
    def failure(
        cls,
        reason: MoveFailure,
        source_type: ZoneType | None,
        destination_type: ZoneType,
        message: str,
    ) -> "MoveResult":
        return cls(
            ok=False,
            source_type=source_type,
            destination_type=destination_type,
            reason=reason,
            message=message,
        )


class MovementExecutor:
    """
    Performs approved transitions between zones.

    Only single legal hops are executed; a destination that needs
    intermediate zones is refused as an illegal transition.
    """

    def __init__(self, rules: HierarchyRules, clock: SimulationClock) -> None:
        self._rules = rules
        self._clock = clock

    @property
    def rules(self) -> HierarchyRules:
        return self._rules

    def execute(self, item: Item, destination: ZoneType, registry: ZoneRegistry) -> MoveResult:
        """Move an item one hop toward `destination`."""
        current_zone = registry.find_zone_of(item)
        current_type = current_zone.zone_type if current_zone is not None else None

        if destination == ZoneType.REMOVED:
            return self._remove(item, current_type, registry)

        if current_zone is None:
            logger.error(
                f"Unknown zone for {item.serial_number}: cannot move to {destination.value}"
            )
            return MoveResult.failure(
                MoveFailure.UNKNOWN_ZONE,
                None,
                destination,
                f"{item.serial_number} is not held by any zone",
            )

        if not self._rules.is_transition_allowed(current_type, destination):
            logger.warning(
                f"Movement not allowed: {current_type.value} -> {destination.value} "
                f"for {item.serial_number}"
            )
            return MoveResult.failure(
                MoveFailure.ILLEGAL_TRANSITION,
                current_type,
                destination,
                f"{current_type.value} cannot feed {destination.value}",
            )

        target = self._find_target(registry, destination, exclude=current_zone)
        if target is None:
            logger.warning(f"No available {destination.value} for {item.serial_number}")
            return MoveResult.failure(
                MoveFailure.CAPACITY_EXHAUSTED,
                current_type,
                destination,
                f"every {destination.value} is full",
            )

        # Detach then attach; target was checked for room, so attach cannot fail
        registry.detach(item)
        if not registry.attach(item, target):
            raise RuntimeError(f"Attach to {target.id} failed after capacity check")

        arrival_status = STATUS_ON_ARRIVAL.get(destination)
        if arrival_status is not None:
            item.status = arrival_status
        if destination == ZoneType.RACK_SLOT:
            item.install_time = self._clock.now

        logger.info(f"Moved {item.serial_number} from {current_zone.id} to {target.id}")
        return MoveResult.success(current_type, destination, zone_id=target.id)

    def _find_target(
        self,
        registry: ZoneRegistry,
        destination: ZoneType,
        exclude: Zone | None,
    ) -> Zone | None:
        """First zone of the destination type with room, skipping the source zone."""
        for zone in registry.zones_of_type(destination):
            if zone is not exclude and zone.has_room():
                return zone
        return None

    def _remove(
        self,
        item: Item,
        current_type: ZoneType | None,
        registry: ZoneRegistry,
    ) -> MoveResult:
        """Terminal escape hatch: always succeeds, a second call is a no-op."""
        if item.is_removed and not registry.is_tracked(item):
            logger.debug(f"{item.serial_number} already removed")
            return MoveResult.success(current_type, ZoneType.REMOVED, already_removed=True)

        if current_type is None and registry.is_tracked(item):
            logger.error(f"Unknown zone for tracked item {item.serial_number}; removing anyway")

        registry.forget(item)
        logger.info(f"Removed {item.serial_number} from simulation")
        return MoveResult.success(current_type, ZoneType.REMOVED)

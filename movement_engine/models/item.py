"""
Item model for the movement engine.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from movement_engine.models.types import (
    ItemCategory,
    ItemStatus,
    Location,
    LOCATION_BY_ZONE_TYPE,
    SERIAL_PREFIXES,
    Verdict,
)

if TYPE_CHECKING:
    from movement_engine.models.zone import Zone


@dataclass(eq=False)
class Item:
    """
    A discrete hardware unit moving through the facility.

    The containing zone is bound only by the ZoneRegistry; `location`
    is derived from it and never set directly.
    """

    category: ItemCategory
    id: UUID = field(default_factory=uuid4)
    status: ItemStatus = ItemStatus.AVAILABLE
    verdict: Verdict = Verdict.UNSET
    install_time: float | None = None
    inspection_started: float | None = None
    defect_reason: str | None = None
    position: tuple[int, int] = (0, 0)
    serial_number: str = ""

    _zone: "Zone | None" = field(default=None, init=False, repr=False)
    _removed: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.serial_number:
            self.serial_number = f"{SERIAL_PREFIXES[self.category]}{self.id.int % 1_000_000:06d}"

    @property
    def zone(self) -> "Zone | None":
        """Zone currently holding this item, if any."""
        return self._zone

    @property
    def is_removed(self) -> bool:
        return self._removed

    @property
    def location(self) -> Location:
        """Coarse location label derived from the containing zone."""
        if self._removed:
            return Location.REMOVED
        if self._zone is None:
            return Location.INTAKE
        return LOCATION_BY_ZONE_TYPE[self._zone.zone_type]

    def reserve(self) -> bool:
        """Reserve an available item. Returns False from any other status."""
        if self.status != ItemStatus.AVAILABLE:
            return False
        self.status = ItemStatus.RESERVED
        return True

    def unreserve(self) -> bool:
        """Release a reservation. Returns False if the item was not reserved."""
        if self.status != ItemStatus.RESERVED:
            return False
        self.status = ItemStatus.AVAILABLE
        return True

    def to_dict(self) -> dict:
        """Plain-data view for the status surface."""
        return {
            "id": str(self.id),
            "serial_number": self.serial_number,
            "category": self.category.value,
            "status": self.status.value,
            "location": self.location.value,
            "verdict": self.verdict.value,
            "defect_reason": self.defect_reason,
            "zone_id": self._zone.id if self._zone is not None else None,
            "position": list(self.position),
            "install_time": self.install_time,
        }

    def __repr__(self) -> str:
        return f"Item({self.serial_number}, {self.category.name}, {self.location.name})"

"""
Zone model for the movement engine.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from movement_engine.constants import SLOT_HEIGHT, SLOT_MARGIN, SLOT_WIDTH
from movement_engine.models.types import ZoneType

if TYPE_CHECKING:
    from movement_engine.models.item import Item


@dataclass(eq=False)
class Zone:
    """
    A capacity-bounded container of a single zone type.

    Occupants are kept in arrival order. Slot positions are laid out
    row-major, `columns` slots per row, starting at `origin`.
    """

    id: str
    zone_type: ZoneType
    capacity: int = 1
    origin: tuple[int, int] = (0, 0)
    columns: int = 1
    occupants: list["Item"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.zone_type == ZoneType.REMOVED:
            raise ValueError("'removed' is a pseudo-type and cannot back a zone")
        if self.capacity < 1:
            raise ValueError(f"Zone {self.id} capacity must be >= 1, got {self.capacity}")
        if self.columns < 1:
            raise ValueError(f"Zone {self.id} columns must be >= 1, got {self.columns}")

    def has_room(self) -> bool:
        return len(self.occupants) < self.capacity

    def is_full(self) -> bool:
        return len(self.occupants) >= self.capacity

    def is_empty(self) -> bool:
        return not self.occupants

    def contains(self, item: "Item") -> bool:
        return any(occupant is item for occupant in self.occupants)

    @property
    def occupancy(self) -> float:
        """Return fill level as 0.0 to 1.0."""
        return len(self.occupants) / self.capacity

    def slot_position(self, index: int) -> tuple[int, int]:
        """Grid position of the slot at `index` (row-major)."""
        row, col = divmod(index, self.columns)
        x0, y0 = self.origin
        return (
            x0 + SLOT_MARGIN + col * (SLOT_WIDTH + SLOT_MARGIN),
            y0 + SLOT_MARGIN + row * (SLOT_HEIGHT + SLOT_MARGIN),
        )

    def free_slot_index(self) -> int | None:
        """
        First slot index not held by a current occupant.
        Returns None if the zone is full.
        """
        if self.is_full():
            return None
        taken = {occupant.position for occupant in self.occupants}
        for index in range(self.capacity):
            if self.slot_position(index) not in taken:
                return index
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "zone_type": self.zone_type.value,
            "capacity": self.capacity,
            "occupants": [str(item.id) for item in self.occupants],
            "occupancy": self.occupancy,
        }

    def __repr__(self) -> str:
        return f"Zone({self.id}, {self.zone_type.name}, {len(self.occupants)}/{self.capacity})"

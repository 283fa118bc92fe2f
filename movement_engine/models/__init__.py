"""
Data models for the movement engine.
"""

from movement_engine.models.types import (
    ItemCategory,
    ItemStatus,
    Location,
    Severity,
    Verdict,
    ZoneType,
)
from movement_engine.models.item import Item
from movement_engine.models.zone import Zone

__all__ = [
    "Item",
    "ItemCategory",
    "ItemStatus",
    "Location",
    "Severity",
    "Verdict",
    "Zone",
    "ZoneType",
]

"""
Zone query API routes.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from movement_engine.api.utils import get_simulation
from movement_engine.models.types import ZoneType
from movement_engine.models.zone import Zone
from movement_engine.tick_engine import SimulationEngine

router = APIRouter()


# Response schemas
class ZoneResponse(BaseModel):
    """Response schema for zone info."""

    id: str
    zone_type: ZoneType
    capacity: int
    occupants: list[UUID]
    occupancy: float


class ZoneListResponse(BaseModel):
    """Response schema for zone list."""

    zones: list[ZoneResponse]


def _zone_response(zone: Zone) -> ZoneResponse:
    return ZoneResponse(
        id=zone.id,
        zone_type=zone.zone_type,
        capacity=zone.capacity,
        occupants=[item.id for item in zone.occupants],
        occupancy=zone.occupancy,
    )


# Routes
@router.get("", response_model=ZoneListResponse)
async def list_zones(
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
    zone_type: Annotated[ZoneType | None, Query()] = None,
) -> ZoneListResponse:
    """
    List all zones, optionally filtered by type.
    Occupant lists are a snapshot; they may change on the next tick.
    """
    if zone_type is None:
        zones = list(engine.registry.iter_zones())
    else:
        zones = engine.registry.zones_of_type(zone_type)
    return ZoneListResponse(zones=[_zone_response(zone) for zone in zones])


@router.get("/{zone_id}", response_model=ZoneResponse)
async def get_zone(
    zone_id: str,
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> ZoneResponse:
    """
    Get a specific zone by ID.
    """
    zone = engine.registry.get_zone(zone_id)
    if zone is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Zone not found",
        )
    return _zone_response(zone)

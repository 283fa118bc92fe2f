"""
Item API routes: deliveries, movement requests and inspection requests.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from movement_engine.api.routes import RouteResponse, route_response
from movement_engine.api.utils import FAILURE_STATUS, get_simulation
from movement_engine.models.item import Item
from movement_engine.models.types import ItemCategory, ItemStatus, Location, Verdict, ZoneType
from movement_engine.tick_engine import SimulationEngine

router = APIRouter()


# Request/Response schemas
class DeliveryRequest(BaseModel):
    """Request schema for a delivery at a dock."""

    category: ItemCategory
    dock_id: str | None = None


class MoveRequest(BaseModel):
    """Request schema for a movement."""

    destination: ZoneType


class ItemResponse(BaseModel):
    """Response schema for item info."""

    id: UUID
    serial_number: str
    category: ItemCategory
    status: ItemStatus
    location: Location
    verdict: Verdict
    defect_reason: str | None
    zone_id: str | None
    position: tuple[int, int]
    install_time: float | None


class ItemListResponse(BaseModel):
    items: list[ItemResponse]


class MoveResponse(BaseModel):
    """Response schema for a successful movement."""

    item: ItemResponse
    source_type: ZoneType | None
    destination_type: ZoneType
    zone_id: str | None


class InspectionQueuedResponse(BaseModel):
    item_id: UUID
    queue_length: int


def _item_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=item.id,
        serial_number=item.serial_number,
        category=item.category,
        status=item.status,
        location=item.location,
        verdict=item.verdict,
        defect_reason=item.defect_reason,
        zone_id=item.zone.id if item.zone is not None else None,
        position=item.position,
        install_time=item.install_time,
    )


def _get_item_or_404(engine: SimulationEngine, item_id: UUID) -> Item:
    item = engine.registry.get_item(item_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found",
        )
    return item


# Routes
@router.get("", response_model=ItemListResponse)
async def list_items(
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
    item_status: Annotated[ItemStatus | None, Query(alias="status")] = None,
) -> ItemListResponse:
    """List tracked items, optionally filtered by lifecycle status."""
    if item_status is None:
        items = list(engine.registry.iter_items())
    else:
        items = engine.registry.items_by_status(item_status)
    return ItemListResponse(items=[_item_response(item) for item in items])


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def deliver_item(
    request: DeliveryRequest,
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> ItemResponse:
    """
    Deliver a new item to a dock.
    Picks the first dock with room unless dock_id is given.
    """
    if request.dock_id is not None and engine.registry.get_zone(request.dock_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dock not found",
        )

    item = engine.deliver(request.category, request.dock_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No dock can accept the delivery",
        )
    return _item_response(item)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: UUID,
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> ItemResponse:
    """Get a specific item by ID."""
    return _item_response(_get_item_or_404(engine, item_id))


@router.post("/{item_id}/move", response_model=MoveResponse)
async def move_item(
    item_id: UUID,
    request: MoveRequest,
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> MoveResponse:
    """
    Request a one-hop move.
    A refused move leaves the item where it was.
    """
    item = _get_item_or_404(engine, item_id)
    result = engine.request_move(item_id, request.destination)
    if not result:
        raise HTTPException(
            status_code=FAILURE_STATUS[result.reason],
            detail={"reason": result.reason.value, "message": result.message},
        )

    return MoveResponse(
        item=_item_response(item),
        source_type=result.source_type,
        destination_type=result.destination_type,
        zone_id=result.zone_id,
    )


@router.post(
    "/{item_id}/inspect",
    response_model=InspectionQueuedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def queue_inspection(
    item_id: UUID,
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> InspectionQueuedResponse:
    """Queue a docked item for quality inspection."""
    _get_item_or_404(engine, item_id)
    if not engine.queue_inspection(item_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Item is already queued for inspection",
        )
    return InspectionQueuedResponse(
        item_id=item_id,
        queue_length=engine.inspection.queue_length,
    )


@router.get("/{item_id}/route", response_model=RouteResponse)
async def plan_item_route(
    item_id: UUID,
    destination: Annotated[ZoneType, Query()],
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> RouteResponse:
    """Preview the route from an item's current zone. Never moves anything."""
    _get_item_or_404(engine, item_id)
    return route_response(engine.plan(item_id, destination))


@router.post("/{item_id}/reserve", response_model=ItemResponse)
async def reserve_item(
    item_id: UUID,
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> ItemResponse:
    """Reserve an available item, e.g. for a planned install."""
    item = _get_item_or_404(engine, item_id)
    if not item.reserve():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Item is {item.status.value}, not available",
        )
    return _item_response(item)


@router.post("/{item_id}/unreserve", response_model=ItemResponse)
async def unreserve_item(
    item_id: UUID,
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> ItemResponse:
    """Release a reservation."""
    item = _get_item_or_404(engine, item_id)
    if not item.unreserve():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Item is not reserved",
        )
    return _item_response(item)

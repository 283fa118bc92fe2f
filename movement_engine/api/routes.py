"""
Route planning API: type-level previews over the hierarchy.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from movement_engine.api.utils import get_simulation
from movement_engine.hierarchy.planner import MovementPlan, RouteNotFound, find_route
from movement_engine.models.types import ZoneType
from movement_engine.tick_engine import SimulationEngine

router = APIRouter()


class RouteResponse(BaseModel):
    """A planned route, or found=False when the topology forbids it."""

    found: bool
    source: ZoneType | None
    destination: ZoneType
    path: list[ZoneType] = []
    direct: bool = False
    same_type: bool = False
    estimated_time: float | None = None


def route_response(plan: MovementPlan | RouteNotFound) -> RouteResponse:
    if isinstance(plan, RouteNotFound):
        return RouteResponse(found=False, source=plan.source, destination=plan.destination)
    return RouteResponse(
        found=True,
        source=plan.source,
        destination=plan.destination,
        path=list(plan.path),
        direct=plan.direct,
        same_type=plan.same_type,
        estimated_time=plan.estimated_time,
    )


@router.get("", response_model=RouteResponse)
async def plan_type_route(
    source: Annotated[ZoneType, Query()],
    destination: Annotated[ZoneType, Query()],
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> RouteResponse:
    """Plan between two zone types."""
    return route_response(find_route(source, destination, engine.rules))

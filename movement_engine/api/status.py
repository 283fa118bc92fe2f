"""
Status API routes for the dashboard.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from movement_engine.api.utils import get_simulation
from movement_engine.tick_engine import SimulationEngine

router = APIRouter()


class StatusResponse(BaseModel):
    """Aggregate counters and queue lengths."""

    items_inspected: int
    items_passed: int
    pass_rate: float
    defects_detected: int
    failures_detected: int
    items_recycled: int
    items_removed: int
    inspection_queue: int
    recycling_queue: int
    pending_tasks: int
    pending_removals: int
    tick_number: int
    simulated_time: float
    items_tracked: int


@router.get("", response_model=StatusResponse)
async def get_status(
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> StatusResponse:
    """Read-only metrics for the dashboard."""
    return StatusResponse(**engine.status())

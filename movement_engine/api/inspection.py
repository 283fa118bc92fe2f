"""
Inspection API routes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from movement_engine.api.utils import get_simulation
from movement_engine.tick_engine import SimulationEngine

router = APIRouter()


class QueueDockedResponse(BaseModel):
    """Response schema for a bulk inspection request."""

    queued: int
    queue_length: int


@router.post(
    "/queue-docked",
    response_model=QueueDockedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def queue_docked_items(
    engine: Annotated[SimulationEngine, Depends(get_simulation)],
) -> QueueDockedResponse:
    """Queue the first item of every dock for inspection."""
    queued = engine.queue_docked_items()
    return QueueDockedResponse(queued=queued, queue_length=engine.inspection.queue_length)

"""
Utility functions for the API module.
"""

from fastapi import HTTPException, status

from movement_engine.executor import MoveFailure
from movement_engine.tick_engine import SimulationEngine, get_engine

# HTTP status for each refused movement
FAILURE_STATUS: dict[MoveFailure, int] = {
    MoveFailure.CAPACITY_EXHAUSTED: status.HTTP_409_CONFLICT,
    MoveFailure.ILLEGAL_TRANSITION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MoveFailure.ROUTE_NOT_FOUND: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MoveFailure.UNKNOWN_ZONE: status.HTTP_409_CONFLICT,
    MoveFailure.UNKNOWN_ITEM: status.HTTP_404_NOT_FOUND,
}


def get_simulation() -> SimulationEngine:
    """
    Dependency returning the running simulation.
    Raises 503 if the engine has not been started.
    """
    engine = get_engine()
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Simulation engine is not running",
        )
    return engine

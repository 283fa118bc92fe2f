"""
Tick engine for the movement engine.
"""

from movement_engine.tick_engine.engine import (
    SimulationEngine,
    TickStats,
    get_engine,
    set_engine,
)

__all__ = ["SimulationEngine", "TickStats", "get_engine", "set_engine"]

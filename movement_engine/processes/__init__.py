"""
Background processes driven by the tick engine.
"""

from movement_engine.processes.inspection import InspectionProcess, InspectionVerdict
from movement_engine.processes.recycling import FailureReport, RecyclingProcess
from movement_engine.processes.removal import RemovalScheduler

__all__ = [
    "FailureReport",
    "InspectionProcess",
    "InspectionVerdict",
    "RecyclingProcess",
    "RemovalScheduler",
]

"""
Movement hierarchy: rule table and route planning.
"""

from movement_engine.hierarchy.rules import (
    DEFAULT_HIERARCHY,
    DEFAULT_TRANSITION_TIMES,
    HierarchyRules,
)
from movement_engine.hierarchy.planner import (
    MovementPlan,
    RouteNotFound,
    find_route,
    plan_route,
)

__all__ = [
    "DEFAULT_HIERARCHY",
    "DEFAULT_TRANSITION_TIMES",
    "HierarchyRules",
    "MovementPlan",
    "RouteNotFound",
    "find_route",
    "plan_route",
]

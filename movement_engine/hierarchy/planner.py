"""
Route planning over the hierarchy rule table.
NO STATE CHANGES - the planner only reads.
"""

from collections import deque
from dataclasses import dataclass

from movement_engine.hierarchy.rules import HierarchyRules
from movement_engine.models.item import Item
from movement_engine.models.types import ZoneType
from movement_engine.registry import ZoneRegistry


@dataclass(frozen=True)
class MovementPlan:
    """An ordered zone-type path from source to destination."""

    path: tuple[ZoneType, ...]
    direct: bool
    estimated_time: float
    same_type: bool = False

    @property
    def source(self) -> ZoneType:
        return self.path[0]

    @property
    def destination(self) -> ZoneType:
        return self.path[-1]

    @property
    def hops(self) -> int:
        return len(self.path) - 1


@dataclass(frozen=True)
class RouteNotFound:
    """
    No route exists: the move is not part of the designed workflow.
    Callers must not attempt it.
    """

    source: ZoneType | None
    destination: ZoneType
    reason: str = "no route"

    def __bool__(self) -> bool:
        return False


def find_route(
    from_type: ZoneType,
    to_type: ZoneType,
    rules: HierarchyRules,
) -> MovementPlan | RouteNotFound:
    """
    Type-level route search.
    Direct edges win; otherwise breadth-first search over the rule graph.
    """
    if rules.is_transition_allowed(from_type, to_type):
        return MovementPlan(
            path=(from_type, to_type),
            direct=True,
            estimated_time=rules.transition_time(from_type, to_type),
            same_type=from_type == to_type,
        )

    frontier: deque[tuple[ZoneType, tuple[ZoneType, ...], float]] = deque(
        [(from_type, (from_type,), 0.0)]
    )
    visited = {from_type}

    while frontier:
        current, path, elapsed = frontier.popleft()
        # Sorted by value so equal-length routes resolve the same way every run
        for next_type in sorted(rules.allowed_destinations(current), key=lambda t: t.value):
            step = elapsed + rules.transition_time(current, next_type)
            if next_type == to_type:
                return MovementPlan(path=path + (next_type,), direct=False, estimated_time=step)
            if next_type not in visited:
                visited.add(next_type)
                frontier.append((next_type, path + (next_type,), step))

    return RouteNotFound(source=from_type, destination=to_type)


def plan_route(
    item: Item,
    destination: ZoneType,
    registry: ZoneRegistry,
    rules: HierarchyRules,
) -> MovementPlan | RouteNotFound:
    """Plan a route for an item from the zone currently holding it."""
    zone = registry.find_zone_of(item)
    if zone is None:
        return RouteNotFound(source=None, destination=destination, reason="item is not in any zone")
    return find_route(zone.zone_type, destination, rules)

"""
Hierarchy rule table: which zone types may feed which.
NO SIDE EFFECTS - the table is immutable once built.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from movement_engine.constants import DEFAULT_TRANSITION_TIME
from movement_engine.models.types import ZoneType


# Strict topology: every item flows forward, docks may rebalance among themselves
DEFAULT_HIERARCHY: dict[ZoneType, frozenset[ZoneType]] = {
    ZoneType.DOCK: frozenset({ZoneType.DOCK, ZoneType.INSPECTION_STATION}),
    ZoneType.INSPECTION_STATION: frozenset({ZoneType.STORAGE_BIN, ZoneType.RECYCLE_SINK}),
    ZoneType.STORAGE_BIN: frozenset({ZoneType.RACK_SLOT}),
    ZoneType.RACK_SLOT: frozenset({ZoneType.RECYCLE_SINK}),
    ZoneType.RECYCLE_SINK: frozenset({ZoneType.REMOVED}),
}

# Zone types allowed to transfer to another zone of the same type
SAME_TYPE_TRANSFERS: frozenset[ZoneType] = frozenset({ZoneType.DOCK})

# Estimated seconds per edge
DEFAULT_TRANSITION_TIMES: dict[tuple[ZoneType, ZoneType], float] = {
    (ZoneType.DOCK, ZoneType.INSPECTION_STATION): 45.0,
    (ZoneType.INSPECTION_STATION, ZoneType.STORAGE_BIN): 30.0,
    (ZoneType.INSPECTION_STATION, ZoneType.RECYCLE_SINK): 20.0,
    (ZoneType.STORAGE_BIN, ZoneType.RACK_SLOT): 60.0,
    (ZoneType.RACK_SLOT, ZoneType.RECYCLE_SINK): 40.0,
}


class HierarchyRules:
    """
    Directed graph of allowed zone-type transitions.

    The graph must be acyclic apart from self-loops on whitelisted
    types, and the REMOVED sink has no outgoing edges. Violations
    raise ValueError at construction.
    """

    def __init__(
        self,
        edges: Mapping[ZoneType, Iterable[ZoneType]] | None = None,
        transition_times: Mapping[tuple[ZoneType, ZoneType], float] | None = None,
        same_type_transfers: Iterable[ZoneType] = SAME_TYPE_TRANSFERS,
    ) -> None:
        source = DEFAULT_HIERARCHY if edges is None else edges
        self._same_type = frozenset(same_type_transfers)
        self._edges = MappingProxyType(
            {zone_type: frozenset(targets) for zone_type, targets in source.items()}
        )
        self._times = MappingProxyType(
            dict(DEFAULT_TRANSITION_TIMES if transition_times is None else transition_times)
        )
        self._validate()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "HierarchyRules":
        """Build a rule table from plain strings (e.g. configuration)."""
        edges = {
            ZoneType(source): [ZoneType(target) for target in targets]
            for source, targets in mapping.items()
        }
        return cls(edges)

    def _validate(self) -> None:
        if self._edges.get(ZoneType.REMOVED):
            raise ValueError("The 'removed' sink cannot have outgoing transitions")

        for zone_type, targets in self._edges.items():
            if zone_type in targets and zone_type not in self._same_type:
                raise ValueError(f"Same-type transfer not whitelisted for {zone_type.value}")

        # Depth-first cycle check, ignoring whitelisted self-loops
        visiting: set[ZoneType] = set()
        done: set[ZoneType] = set()

        def visit(node: ZoneType) -> None:
            visiting.add(node)
            for target in self._edges.get(node, ()):
                if target == node:
                    continue
                if target in visiting:
                    raise ValueError(
                        f"Hierarchy contains a cycle through {node.value} -> {target.value}"
                    )
                if target not in done:
                    visit(target)
            visiting.discard(node)
            done.add(node)

        for node in self._edges:
            if node not in done:
                visit(node)

    def is_transition_allowed(self, from_type: ZoneType | None, to_type: ZoneType) -> bool:
        """True iff `to_type` is a direct destination of `from_type`."""
        if from_type is None:
            return False
        if from_type == to_type and from_type not in self._same_type:
            return False
        return to_type in self._edges.get(from_type, frozenset())

    def allowed_destinations(self, from_type: ZoneType | None) -> frozenset[ZoneType]:
        if from_type is None:
            return frozenset()
        return self._edges.get(from_type, frozenset())

    def allows_same_type(self, zone_type: ZoneType) -> bool:
        return zone_type in self._same_type and self.is_transition_allowed(zone_type, zone_type)

    def transition_time(self, from_type: ZoneType, to_type: ZoneType) -> float:
        """Estimated seconds for one hop; untabulated edges use the default."""
        return self._times.get((from_type, to_type), DEFAULT_TRANSITION_TIME)

    def zone_types(self) -> frozenset[ZoneType]:
        """Every zone type mentioned by the table."""
        types = set(self._edges)
        for targets in self._edges.values():
            types.update(targets)
        return frozenset(types)

    def __repr__(self) -> str:
        return f"HierarchyRules({len(self._edges)} sources)"

"""
Quality inspection: queue docked items, inspect them, route the verdicts.

Per item: queued -> in-inspection -> verified | defective.
Verified items go on to storage, defective ones to the recycle sink.
"""

import logging
from collections import deque
from dataclasses import dataclass

from movement_engine.constants import INSPECTION_DURATION, INSPECTION_PASS_PROBABILITY
from movement_engine.executor import MovementExecutor
from movement_engine.metrics import EngineMetrics
from movement_engine.models.item import Item
from movement_engine.models.types import Verdict, ZoneType
from movement_engine.processes.removal import RemovalScheduler
from movement_engine.random_source import RandomSource
from movement_engine.registry import ZoneRegistry
from movement_engine.scheduler import SimulationClock

logger = logging.getLogger(__name__)


DEFECT_REASONS = (
    "Physical damage detected",
    "Component failure",
    "Specification mismatch",
    "Manufacturing defect",
    "Compatibility issue",
)

ROUTE_BY_VERDICT = {
    Verdict.VERIFIED: ZoneType.STORAGE_BIN,
    Verdict.DEFECTIVE: ZoneType.RECYCLE_SINK,
}


@dataclass(frozen=True)
class InspectionVerdict:
    """Outcome of inspecting one item. Discarded once routed."""

    item: Item
    passed: bool
    duration: float
    reason: str | None = None

    @property
    def verdict(self) -> Verdict:
        return Verdict.VERIFIED if self.passed else Verdict.DEFECTIVE


class InspectionProcess:
    """
    FIFO inspection queue feeding the inspection station.

    drain() moves at most one item per call into the station;
    resolve() routes every item whose processing time has elapsed.
    """

    def __init__(
        self,
        executor: MovementExecutor,
        clock: SimulationClock,
        rng: RandomSource,
        metrics: EngineMetrics,
        removals: RemovalScheduler,
        pass_probability: float = INSPECTION_PASS_PROBABILITY,
        duration: float = INSPECTION_DURATION,
    ) -> None:
        self._executor = executor
        self._clock = clock
        self._rng = rng
        self._metrics = metrics
        self._removals = removals
        self.pass_probability = pass_probability
        self.duration = duration
        self._queue: deque[Item] = deque()

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    def queued_items(self) -> list[Item]:
        return list(self._queue)

    def enqueue(self, item: Item) -> bool:
        """
        Append an item to the inspection queue.
        Returns False if it is already queued or has left the simulation.
        """
        if item.is_removed or any(queued is item for queued in self._queue):
            return False
        self._queue.append(item)
        logger.debug(f"Queued {item.serial_number} for inspection")
        return True

    def drain(self, registry: ZoneRegistry) -> Item | None:
        """
        Move the head of the queue into an inspection station.
        Returns the item moved, or None if nothing moved.
        """
        if not registry.zones_of_type(ZoneType.INSPECTION_STATION):
            logger.warning("No inspection station configured; inspection queue is idle")
            return None
        if not self._queue:
            return None
        if registry.find_available_zone(ZoneType.INSPECTION_STATION) is None:
            logger.debug("Inspection station at capacity, waiting")
            return None

        item = self._queue.popleft()
        zone = registry.find_zone_of(item)
        if zone is None or zone.zone_type != ZoneType.DOCK:
            # Docks are the only source that feeds inspection
            logger.warning(f"Dropping {item.serial_number} from inspection queue: not at a dock")
            return None

        result = self._executor.execute(item, ZoneType.INSPECTION_STATION, registry)
        if not result:
            self._queue.appendleft(item)
            return None

        item.verdict = Verdict.UNSET
        item.defect_reason = None
        item.inspection_started = self._clock.now
        logger.info(f"{item.serial_number} moved to {result.zone_id} for inspection")
        return item

    def resolve(self, registry: ZoneRegistry) -> list[InspectionVerdict]:
        """
        Route every inspected item whose processing time has elapsed.
        Items that cannot move yet keep their verdict and stay put.
        """
        routed: list[InspectionVerdict] = []

        for station in registry.zones_of_type(ZoneType.INSPECTION_STATION):
            # Copy: routing mutates the occupant list
            for item in list(station.occupants):
                verdict = self._judge(item)
                if verdict is None:
                    continue

                destination = ROUTE_BY_VERDICT[verdict.verdict]
                result = self._executor.execute(item, destination, registry)
                if not result:
                    logger.warning(
                        f"Inspection of {item.serial_number} complete but {destination.value} "
                        f"unavailable ({result.reason.value}); retrying later"
                    )
                    continue

                self._metrics.record_inspection(verdict.passed)
                item.verdict = Verdict.UNSET
                item.inspection_started = None
                if destination == ZoneType.RECYCLE_SINK:
                    self._removals.schedule_removal(item, registry)
                routed.append(verdict)
                logger.info(
                    f"Inspection complete: {item.serial_number} {verdict.verdict.value} "
                    f"-> {destination.value}"
                )

        return routed

    def _judge(self, item: Item) -> InspectionVerdict | None:
        """
        Verdict for an item, drawing one if its time is up.
        A verdict assigned beforehand is honoured as-is. The defect
        reason is drawn once and kept on the item across retries.
        """
        if item.verdict == Verdict.UNSET:
            started = item.inspection_started
            if started is None:
                # Entered the station without drain(); start the timer now
                item.inspection_started = self._clock.now
                return None
            if self._clock.now - started < self.duration:
                return None
            passed = self._rng.random() < self.pass_probability
            item.verdict = Verdict.VERIFIED if passed else Verdict.DEFECTIVE

        passed = item.verdict == Verdict.VERIFIED
        if not passed and item.defect_reason is None:
            item.defect_reason = self._rng.choice(DEFECT_REASONS)
        return InspectionVerdict(
            item=item,
            passed=passed,
            duration=self.duration,
            reason=item.defect_reason,
        )

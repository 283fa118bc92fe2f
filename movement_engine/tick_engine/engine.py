"""
Tick engine for the movement engine.
Owns one simulation and drives its background processes on a fixed tick.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from uuid import UUID

from movement_engine.config import Settings, get_settings
from movement_engine.executor import MoveFailure, MovementExecutor, MoveResult
from movement_engine.hierarchy.planner import MovementPlan, RouteNotFound, plan_route
from movement_engine.hierarchy.rules import HierarchyRules
from movement_engine.layout import create_default_layout
from movement_engine.metrics import EngineMetrics
from movement_engine.models.item import Item
from movement_engine.models.types import ItemCategory, ZoneType
from movement_engine.processes.inspection import InspectionProcess
from movement_engine.processes.recycling import RecyclingProcess
from movement_engine.processes.removal import RemovalScheduler
from movement_engine.random_source import RandomSource, make_random_source
from movement_engine.registry import ZoneRegistry
from movement_engine.scheduler import DeferredTaskQueue, SimulationClock

logger = logging.getLogger(__name__)

# Global engine instance
_engine: "SimulationEngine | None" = None


def get_engine() -> "SimulationEngine | None":
    """Get the global engine instance."""
    return _engine


def set_engine(engine: "SimulationEngine | None") -> None:
    """Set the global engine instance."""
    global _engine
    _engine = engine


@dataclass
class TickStats:
    """Statistics for one tick."""

    tick_number: int
    duration_ms: float
    simulated_time: float
    items_queued: int = 0
    items_drained: int = 0
    items_resolved: int = 0
    failures_detected: int = 0
    items_recycled: int = 0
    tasks_fired: int = 0


class SimulationEngine:
    """
    Owns one simulation: registry, rules, processes, clock and tasks.

    Every tick optionally queues docked items for inspection, then runs,
    in this order and each on its own cadence:
    1. drain the inspection queue
    2. resolve inspection verdicts
    3. scan rack slots for failures
    4. process the recycling queue
    then fires deferred tasks that have come due.

    All operations are synchronous and run to completion on the event
    loop thread, so movements never interleave.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        registry: ZoneRegistry | None = None,
        rules: HierarchyRules | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.clock = SimulationClock()
        self.rules = rules if rules is not None else HierarchyRules(self.settings.hierarchy)
        self.registry = registry if registry is not None else create_default_layout(self.settings)
        self.rng = rng if rng is not None else make_random_source(self.settings.random_seed)
        self.metrics = EngineMetrics()
        self.tasks = DeferredTaskQueue(self.clock)
        self.executor = MovementExecutor(self.rules, self.clock)
        self.removals = RemovalScheduler(
            executor=self.executor,
            tasks=self.tasks,
            metrics=self.metrics,
            delay=self.settings.removal_delay_seconds,
        )

        self.inspection = InspectionProcess(
            executor=self.executor,
            clock=self.clock,
            rng=self.rng,
            metrics=self.metrics,
            removals=self.removals,
            pass_probability=self.settings.inspection_pass_probability,
            duration=self.settings.inspection_duration_seconds,
        )
        self.recycling = RecyclingProcess(
            executor=self.executor,
            removals=self.removals,
            rng=self.rng,
            metrics=self.metrics,
            base_rate_per_hour=self.settings.base_failure_rate_per_hour,
            risk_factors=dict(self.settings.risk_factors),
        )

        self._tick_number = 0
        self._is_running = False
        self._is_paused = False
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

        # Tick statistics
        self._recent_stats: list[TickStats] = []
        self._max_stats_history = 100

    @property
    def tick_number(self) -> int:
        """Current tick number."""
        return self._tick_number

    @property
    def is_running(self) -> bool:
        """Whether the loop is actively running (not paused)."""
        return self._is_running and not self._is_paused

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    # =========================================================================
    # TICK
    # =========================================================================

    def tick(self, dt: float | None = None) -> TickStats:
        """Advance the simulation by one tick of dt simulated seconds."""
        tick_start = time.perf_counter()
        self._tick_number += 1
        self.clock.advance(self.settings.seconds_per_tick if dt is None else dt)
        n = self._tick_number
        s = self.settings

        stats = TickStats(tick_number=n, duration_ms=0.0, simulated_time=self.clock.now)

        if s.auto_queue_every_ticks and n % s.auto_queue_every_ticks == 0:
            stats.items_queued = self.queue_docked_items()
        if n % s.drain_every_ticks == 0:
            if self.inspection.drain(self.registry) is not None:
                stats.items_drained = 1
        if n % s.resolve_every_ticks == 0:
            stats.items_resolved = len(self.inspection.resolve(self.registry))
        if n % s.scan_every_ticks == 0:
            stats.failures_detected = len(
                self.recycling.scan_for_failures(self.registry, self.clock.now)
            )
        if n % s.recycle_every_ticks == 0:
            stats.items_recycled = self.recycling.process_recycling_queue(self.registry)

        stats.tasks_fired = self.tasks.run_due()

        stats.duration_ms = (time.perf_counter() - tick_start) * 1000
        self._recent_stats.append(stats)
        if len(self._recent_stats) > self._max_stats_history:
            self._recent_stats.pop(0)

        if stats.duration_ms > s.frame_budget_ms:
            logger.warning(
                f"Tick {n} took {stats.duration_ms:.1f}ms (budget: {s.frame_budget_ms}ms)"
            )
        return stats

    def run_ticks(self, count: int, dt: float | None = None) -> list[TickStats]:
        """Run `count` ticks back to back. Useful for testing."""
        return [self.tick(dt) for _ in range(count)]

    def get_recent_stats(self) -> list[TickStats]:
        """Get recent tick statistics."""
        return list(self._recent_stats)

    # =========================================================================
    # COMMANDS (for collaborators)
    # =========================================================================

    def deliver(self, category: ItemCategory, dock_id: str | None = None) -> Item | None:
        """
        Create a new item at a dock (truck delivery).
        This is the only path that places an item without a source zone.
        Returns None if no dock has room.
        """
        if dock_id is None:
            dock = self.registry.find_available_zone(ZoneType.DOCK)
        else:
            dock = self.registry.get_zone(dock_id)
            if dock is not None and dock.zone_type != ZoneType.DOCK:
                logger.warning(f"Delivery refused: {dock_id} is not a dock")
                return None

        if dock is None:
            logger.warning(f"Delivery of {category.value} refused: no dock with room")
            return None

        item = Item(category=category)
        if not self.registry.attach(item, dock):
            logger.warning(f"Delivery of {category.value} refused: {dock.id} is full")
            return None

        logger.info(f"Delivered {item.serial_number} to {dock.id}")
        return item

    def request_move(self, item_id: UUID, destination: ZoneType) -> MoveResult:
        """
        Move requested by the UI.
        Unreachable destinations are refused without touching state.
        """
        item = self.registry.get_item(item_id)
        if item is None:
            return MoveResult.failure(
                MoveFailure.UNKNOWN_ITEM, None, destination, f"no item with id {item_id}"
            )

        plan = plan_route(item, destination, self.registry, self.rules)
        if isinstance(plan, RouteNotFound) and self.registry.find_zone_of(item) is not None:
            return MoveResult.failure(
                MoveFailure.ROUTE_NOT_FOUND,
                plan.source,
                destination,
                f"no route from {plan.source.value} to {destination.value}",
            )
        if isinstance(plan, MovementPlan) and not plan.direct:
            via = " -> ".join(t.value for t in plan.path)
            logger.warning(f"Multi-hop move requested for {item.serial_number}: {via}")
            return MoveResult.failure(
                MoveFailure.ILLEGAL_TRANSITION,
                plan.source,
                destination,
                f"not a direct move; route is {via}",
            )

        result = self.executor.execute(item, destination, self.registry)
        if result.ok and destination == ZoneType.RECYCLE_SINK:
            self.removals.schedule_removal(item, self.registry)
        return result

    def plan(self, item_id: UUID, destination: ZoneType) -> MovementPlan | RouteNotFound | None:
        """Route preview for an item. None if the item is unknown."""
        item = self.registry.get_item(item_id)
        if item is None:
            return None
        return plan_route(item, destination, self.registry, self.rules)

    def queue_inspection(self, item_id: UUID) -> bool:
        item = self.registry.get_item(item_id)
        if item is None:
            return False
        return self.inspection.enqueue(item)

    def queue_docked_items(self) -> int:
        """Queue the first item of every dock for inspection."""
        queued = 0
        for dock in self.registry.zones_of_type(ZoneType.DOCK):
            if dock.occupants and self.inspection.enqueue(dock.occupants[0]):
                queued += 1
        if queued:
            logger.info(f"{queued} items queued for inspection")
        return queued

    # =========================================================================
    # STATE QUERIES
    # =========================================================================

    def status(self) -> dict:
        """Read-only counters and queue lengths for the dashboard."""
        data = self.metrics.snapshot(
            inspection_queue=self.inspection.queue_length,
            recycling_queue=self.recycling.queue_length,
            pending_tasks=len(self.tasks),
            pending_removals=self.removals.pending_count,
        )
        data["tick_number"] = self._tick_number
        data["simulated_time"] = self.clock.now
        data["items_tracked"] = len(self.registry)
        return data

    # =========================================================================
    # LOOP
    # =========================================================================

    async def start(self) -> None:
        """Start the tick loop."""
        if self._task is not None:
            return

        self._is_running = True
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"Tick engine started (rate: {self.settings.tick_rate_ms}ms)")

    async def stop(self) -> None:
        """Stop the tick loop."""
        if self._task is None:
            return

        self._is_running = False
        self._stop_event.set()

        try:
            await asyncio.wait_for(self._task, timeout=5.0)
        except asyncio.TimeoutError:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self._task = None
        logger.info("Tick engine stopped")

    def pause(self) -> None:
        self._is_paused = True
        logger.info(f"Tick engine paused at tick {self._tick_number}")

    def resume(self) -> None:
        self._is_paused = False
        logger.info(f"Tick engine resumed at tick {self._tick_number}")

    async def step(self) -> None:
        """Execute a single tick (when paused)."""
        if not self._is_paused:
            return

        self.tick()
        logger.info(f"Manual tick step executed: {self._tick_number}")

    async def _run_loop(self) -> None:
        """
        Main tick loop.
        Fail-fast: internal errors propagate.
        """
        rate_ms = self.settings.tick_rate_ms
        while self._is_running:
            tick_start = time.perf_counter()

            if not self._is_paused:
                self.tick()

            # Sleep off the rest of the tick interval
            tick_duration = (time.perf_counter() - tick_start) * 1000
            sleep_time = max(0, (rate_ms - tick_duration) / 1000)

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=sleep_time)
                break
            except asyncio.TimeoutError:
                pass

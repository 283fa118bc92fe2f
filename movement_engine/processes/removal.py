"""
Deferred removal of items that have reached the recycle sink.
"""

import logging
from uuid import UUID

from movement_engine.constants import REMOVAL_DELAY
from movement_engine.executor import MovementExecutor
from movement_engine.metrics import EngineMetrics
from movement_engine.models.item import Item
from movement_engine.models.types import ZoneType
from movement_engine.registry import ZoneRegistry
from movement_engine.scheduler import DeferredTaskQueue

logger = logging.getLogger(__name__)


class RemovalScheduler:
    """
    Schedules the terminal removal of recycled items.

    Every arrival in the recycle sink, whichever path it took, goes
    through schedule_removal() so the sink keeps draining.
    """

    def __init__(
        self,
        executor: MovementExecutor,
        tasks: DeferredTaskQueue,
        metrics: EngineMetrics,
        delay: float = REMOVAL_DELAY,
    ) -> None:
        self._executor = executor
        self._tasks = tasks
        self._metrics = metrics
        self.delay = delay
        self._scheduled: set[UUID] = set()

    @property
    def pending_count(self) -> int:
        return len(self._scheduled)

    def is_scheduled(self, item: Item) -> bool:
        return item.id in self._scheduled

    def schedule_removal(self, item: Item, registry: ZoneRegistry) -> bool:
        """
        Remove the item after the delay.
        Returns False if it is already gone or already scheduled.
        """
        if item.is_removed or item.id in self._scheduled:
            return False
        self._scheduled.add(item.id)
        self._tasks.schedule_in(
            self.delay,
            lambda: self._remove(item, registry),
            label=f"remove {item.serial_number}",
        )
        return True

    def _remove(self, item: Item, registry: ZoneRegistry) -> None:
        """Deferred removal; a no-op if the item is already gone."""
        self._scheduled.discard(item.id)
        result = self._executor.execute(item, ZoneType.REMOVED, registry)
        if result.ok and not result.already_removed:
            self._metrics.record_removed()

"""
Rack failure detection and forced recycling.

Installed items fail stochastically with a probability that grows with
time in the rack and with the category's risk factor. Failed items are
forced to the recycle sink, then removed after a fixed delay.
"""

import logging
from dataclasses import dataclass, field

from movement_engine.constants import (
    BASE_FAILURE_RATE_PER_HOUR,
    SECONDS_PER_HOUR,
    SEVERITY_THRESHOLDS,
)
from movement_engine.executor import MovementExecutor
from movement_engine.metrics import EngineMetrics
from movement_engine.models.item import Item
from movement_engine.models.types import ItemCategory, ItemStatus, Severity, ZoneType
from movement_engine.processes.removal import RemovalScheduler
from movement_engine.random_source import RandomSource
from movement_engine.registry import ZoneRegistry

logger = logging.getLogger(__name__)


# Multiplier on the base hourly failure rate
DEFAULT_RISK_FACTORS: dict[ItemCategory, float] = {
    ItemCategory.POWER_SUPPLY: 1.5,
    ItemCategory.SPINNING_DISK: 2.0,
    ItemCategory.FAST_STORAGE: 0.5,
    ItemCategory.MEMORY_MODULE: 0.8,
    ItemCategory.PROCESSOR: 0.7,
    ItemCategory.COMPUTE_ACCELERATOR: 1.2,
    ItemCategory.LOGIC_BOARD: 1.0,
}

FAILURE_REASONS: dict[ItemCategory, tuple[str, ...]] = {
    ItemCategory.POWER_SUPPLY: ("Power output instability", "Capacitor failure", "Overheating"),
    ItemCategory.SPINNING_DISK: ("Bad sectors detected", "Mechanical failure", "Read/write errors"),
    ItemCategory.FAST_STORAGE: (
        "Flash memory degradation",
        "Controller failure",
        "Wear leveling issues",
    ),
    ItemCategory.MEMORY_MODULE: ("Memory corruption", "Timing errors", "Physical damage"),
    ItemCategory.PROCESSOR: ("Thermal shutdown", "Cache errors", "Instruction pipeline failure"),
    ItemCategory.COMPUTE_ACCELERATOR: ("VRAM failure", "Shader unit malfunction", "Thermal throttling"),
    ItemCategory.LOGIC_BOARD: ("Trace damage", "Component failure", "BIOS corruption"),
}

GENERIC_FAILURE_REASON = "General hardware failure"


@dataclass(frozen=True)
class FailureReport:
    """A rack occupant judged failed by a scan."""

    item: Item
    detected_at: float
    hours_installed: float
    probability: float
    reason: str
    severity: Severity

    @property
    def category(self) -> ItemCategory:
        return self.item.category


def classify_severity(draw: float) -> Severity:
    """Map a uniform draw onto the ordered severity distribution."""
    low, medium, high = SEVERITY_THRESHOLDS
    if draw < low:
        return Severity.LOW
    if draw < medium:
        return Severity.MEDIUM
    if draw < high:
        return Severity.HIGH
    return Severity.CRITICAL


@dataclass
class RecyclingProcess:
    """
    Scans rack slots for failures and forces failed items out.

    Removal after recycling is handed to the RemovalScheduler, a
    deferred task on the simulated clock.
    """

    executor: MovementExecutor
    removals: RemovalScheduler
    rng: RandomSource
    metrics: EngineMetrics
    base_rate_per_hour: float = BASE_FAILURE_RATE_PER_HOUR
    risk_factors: dict[ItemCategory, float] = field(
        default_factory=lambda: dict(DEFAULT_RISK_FACTORS)
    )
    _queue: list[FailureReport] = field(default_factory=list, init=False, repr=False)

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    def queued_reports(self) -> list[FailureReport]:
        return list(self._queue)

    def failure_probability(self, item: Item, now: float) -> tuple[float, float]:
        """
        (hours installed, failure probability) for one rack occupant.
        An occupant without an install time counts as installed now.
        """
        installed = item.install_time if item.install_time is not None else now
        hours = max(0.0, now - installed) / SECONDS_PER_HOUR
        risk = self.risk_factors.get(item.category, 1.0)
        return hours, self.base_rate_per_hour * hours * risk

    def scan_for_failures(self, registry: ZoneRegistry, now: float) -> list[FailureReport]:
        """Draw a failure trial for every rack occupant; queue the failures."""
        reports: list[FailureReport] = []
        queued = {report.item.id for report in self._queue}

        for rack in registry.zones_of_type(ZoneType.RACK_SLOT):
            for item in list(rack.occupants):
                if item.id in queued:
                    continue
                hours, probability = self.failure_probability(item, now)
                if probability <= 0.0 or self.rng.random() >= probability:
                    continue

                reasons = FAILURE_REASONS.get(item.category, (GENERIC_FAILURE_REASON,))
                report = FailureReport(
                    item=item,
                    detected_at=now,
                    hours_installed=hours,
                    probability=min(1.0, probability),
                    reason=self.rng.choice(reasons),
                    severity=classify_severity(self.rng.random()),
                )
                item.status = ItemStatus.FAILED
                self.metrics.record_failure()
                self._queue.append(report)
                queued.add(item.id)
                reports.append(report)
                logger.warning(
                    f"Rack failure: {item.serial_number} in {rack.id} "
                    f"({report.reason}, {report.severity.value})"
                )

        return reports

    def process_recycling_queue(self, registry: ZoneRegistry) -> int:
        """
        Force every queued failure into the recycle sink.
        Items that cannot move stay queued for the next call; reports
        whose item already left the rack are dropped.
        Returns the number recycled.
        """
        pending, self._queue = self._queue, []
        recycled = 0

        for report in pending:
            item = report.item
            zone = registry.find_zone_of(item)
            if zone is None or zone.zone_type != ZoneType.RACK_SLOT:
                if zone is not None and zone.zone_type == ZoneType.RECYCLE_SINK:
                    self.removals.schedule_removal(item, registry)
                logger.info(f"Dropping failure report for {item.serial_number}: no longer in a rack")
                continue

            result = self.executor.execute(item, ZoneType.RECYCLE_SINK, registry)
            if not result:
                self._queue.append(report)
                continue

            recycled += 1
            self.metrics.record_recycled()
            self.removals.schedule_removal(item, registry)
            logger.info(f"Recycled failed {item.serial_number}")

        return recycled

"""
Aggregate counters for the status dashboard.
"""

from dataclasses import asdict, dataclass


@dataclass
class EngineMetrics:
    """
    Counters updated only as a side effect of engine operations.
    All of them only grow, except pass_rate which is a running average.
    """

    items_inspected: int = 0
    items_passed: int = 0
    pass_rate: float = 0.0
    defects_detected: int = 0
    failures_detected: int = 0
    items_recycled: int = 0
    items_removed: int = 0

    def record_inspection(self, passed: bool) -> None:
        self.items_inspected += 1
        if passed:
            self.items_passed += 1
        else:
            self.defects_detected += 1
        # Running average over every inspection so far
        outcome = 1.0 if passed else 0.0
        self.pass_rate += (outcome - self.pass_rate) / self.items_inspected

    def record_failure(self) -> None:
        self.failures_detected += 1

    def record_recycled(self) -> None:
        self.items_recycled += 1

    def record_removed(self) -> None:
        self.items_removed += 1

    def snapshot(self, **queue_lengths: int) -> dict:
        """Plain-data copy of the counters plus current queue lengths."""
        data = asdict(self)
        data.update(queue_lengths)
        return data

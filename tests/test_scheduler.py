"""
Tests for the simulated clock and deferred task queue.
"""
import pytest

from movement_engine.scheduler import DeferredTaskQueue, SimulationClock


class TestSimulationClock:
    """Tests for SimulationClock class."""

    def test_advance(self):
        """The clock moves forward."""
        clock = SimulationClock(start=10.0)

        assert clock.advance(2.5) == 12.5
        assert clock.now == 12.5

    def test_cannot_go_backwards(self):
        """The clock never moves backwards."""
        with pytest.raises(ValueError):
            SimulationClock().advance(-1.0)


class TestDeferredTaskQueue:
    """Tests for DeferredTaskQueue class."""

    def test_task_fires_when_due(self, clock, tasks):
        """Tasks fire once their time is reached."""
        fired = []
        tasks.schedule_in(5.0, lambda: fired.append("a"))

        clock.advance(4.0)
        assert tasks.run_due() == 0
        assert fired == []

        clock.advance(1.0)
        assert tasks.run_due() == 1
        assert fired == ["a"]
        assert len(tasks) == 0

    def test_tasks_fire_in_time_order(self, clock, tasks):
        """Tasks fire by time, ties in insertion order."""
        fired = []
        tasks.schedule(3.0, lambda: fired.append("late"))
        tasks.schedule(1.0, lambda: fired.append("early"))
        tasks.schedule(1.0, lambda: fired.append("early-second"))

        clock.advance(10.0)
        tasks.run_due()

        assert fired == ["early", "early-second", "late"]

    def test_run_due_with_explicit_time(self, tasks):
        """run_due accepts an explicit time."""
        fired = []
        tasks.schedule(2.0, lambda: fired.append(1))

        assert tasks.run_due(now=1.0) == 0
        assert tasks.run_due(now=2.0) == 1

    def test_pending_and_next_fire_time(self, tasks):
        """Pending tasks and the next fire time are reported."""
        assert tasks.next_fire_time() is None

        tasks.schedule(4.0, lambda: None, label="b")
        tasks.schedule(2.0, lambda: None, label="a")

        assert tasks.next_fire_time() == 2.0
        assert [task.label for task in tasks.pending] == ["a", "b"]

    def test_negative_delay_fires_now(self):
        """A negative delay fires on the next run."""
        clock = SimulationClock(start=7.0)
        tasks = DeferredTaskQueue(clock)
        tasks.schedule_in(-3.0, lambda: None)

        assert tasks.next_fire_time() == 7.0
        assert tasks.run_due() == 1

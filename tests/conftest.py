"""
Pytest fixtures for movement engine tests.
"""

from collections.abc import AsyncGenerator, Generator, Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from movement_engine.config import Settings
from movement_engine.executor import MovementExecutor
from movement_engine.hierarchy.rules import HierarchyRules
from movement_engine.main import app
from movement_engine.metrics import EngineMetrics
from movement_engine.models.item import Item
from movement_engine.models.types import ZoneType
from movement_engine.processes.removal import RemovalScheduler
from movement_engine.registry import ZoneRegistry
from movement_engine.scheduler import DeferredTaskQueue, SimulationClock
from movement_engine.tick_engine import SimulationEngine, set_engine


class ScriptedRandom:
    """
    Deterministic random source.
    random() replays `draws` then returns `default`; choice() picks the first element.
    `calls` and `choices` count the draws of each kind.
    """

    def __init__(self, draws: Sequence[float] = (), default: float = 0.5) -> None:
        self._draws = list(draws)
        self.default = default
        self.calls = 0
        self.choices = 0

    def random(self) -> float:
        self.calls += 1
        if self._draws:
            return self._draws.pop(0)
        return self.default

    def choice(self, seq):
        self.choices += 1
        return seq[0]


def build_registry(
    docks: int = 1,
    dock_capacity: int = 1,
    stations: int = 1,
    station_capacity: int = 1,
    bins: int = 1,
    bin_capacity: int = 4,
    racks: int = 2,
    sinks: int = 1,
    sink_capacity: int = 10,
) -> ZoneRegistry:
    """Small facility for unit tests."""
    registry = ZoneRegistry()
    for i in range(docks):
        registry.create_zone(f"dock-{i + 1}", ZoneType.DOCK, dock_capacity, columns=2)
    for i in range(stations):
        registry.create_zone(f"qc-{i + 1}", ZoneType.INSPECTION_STATION, station_capacity)
    for i in range(bins):
        registry.create_zone(f"bin-{i + 1}", ZoneType.STORAGE_BIN, bin_capacity, columns=2)
    for i in range(racks):
        registry.create_zone(f"rack-{i + 1}", ZoneType.RACK_SLOT, 1)
    for i in range(sinks):
        registry.create_zone(f"recycle-{i + 1}", ZoneType.RECYCLE_SINK, sink_capacity)
    return registry


def place(registry: ZoneRegistry, item: Item, zone_id: str) -> Item:
    """Put an item straight into a zone, as a delivery would."""
    assert registry.attach(item, registry.get_zone(zone_id))
    return item


def small_settings(**overrides) -> Settings:
    """Settings with every process running on every tick."""
    values = dict(
        drain_every_ticks=1,
        resolve_every_ticks=1,
        scan_every_ticks=1,
        recycle_every_ticks=1,
        seconds_per_tick=1.0,
        frame_budget_ms=1000.0,
        dock_count=1,
        dock_capacity=4,
        inspection_station_count=1,
        inspection_capacity=2,
        storage_bin_count=1,
        storage_capacity=4,
        rack_slot_count=2,
        recycle_sink_count=1,
        recycle_capacity=10,
        random_seed=7,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def clock() -> SimulationClock:
    return SimulationClock()


@pytest.fixture
def rules() -> HierarchyRules:
    return HierarchyRules()


@pytest.fixture
def registry() -> ZoneRegistry:
    return build_registry()


@pytest.fixture
def executor(rules: HierarchyRules, clock: SimulationClock) -> MovementExecutor:
    return MovementExecutor(rules, clock)


@pytest.fixture
def metrics() -> EngineMetrics:
    return EngineMetrics()


@pytest.fixture
def tasks(clock: SimulationClock) -> DeferredTaskQueue:
    return DeferredTaskQueue(clock)


@pytest.fixture
def removals(
    executor: MovementExecutor, tasks: DeferredTaskQueue, metrics: EngineMetrics
) -> RemovalScheduler:
    return RemovalScheduler(executor, tasks, metrics)


@pytest.fixture
def simulation() -> Generator[SimulationEngine, None, None]:
    """Engine with a small layout and a fixed random source, not ticking."""
    engine = SimulationEngine(settings=small_settings(), rng=ScriptedRandom())
    set_engine(engine)
    yield engine
    set_engine(None)


@pytest_asyncio.fixture
async def client(simulation: SimulationEngine) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

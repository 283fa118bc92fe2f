"""
Configuration management for the movement engine.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from movement_engine import constants
from movement_engine.hierarchy.rules import DEFAULT_HIERARCHY
from movement_engine.models.types import ItemCategory, ZoneType
from movement_engine.processes.recycling import DEFAULT_RISK_FACTORS


def _default_hierarchy() -> dict[ZoneType, list[ZoneType]]:
    return {
        source: sorted(targets, key=lambda t: t.value)
        for source, targets in DEFAULT_HIERARCHY.items()
    }


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MOVEMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Inspection
    inspection_pass_probability: float = Field(
        default=constants.INSPECTION_PASS_PROBABILITY,
        ge=0.0,
        le=1.0,
        description="Probability that an inspected item is verified",
    )
    inspection_duration_seconds: float = Field(
        default=constants.INSPECTION_DURATION,
        ge=0.0,
        description="Simulated seconds an item spends in inspection",
    )

    # Failures and recycling
    base_failure_rate_per_hour: float = Field(
        default=constants.BASE_FAILURE_RATE_PER_HOUR,
        ge=0.0,
        description="Base per-hour failure rate for installed items",
    )
    risk_factors: dict[ItemCategory, float] = Field(
        default_factory=lambda: dict(DEFAULT_RISK_FACTORS),
        description="Per-category multipliers on the base failure rate",
    )
    removal_delay_seconds: float = Field(
        default=constants.REMOVAL_DELAY,
        ge=0.0,
        description="Simulated seconds between recycling and removal",
    )

    # Topology
    hierarchy: dict[ZoneType, list[ZoneType]] = Field(
        default_factory=_default_hierarchy,
        description="Allowed zone-type transitions",
    )

    # Tick Engine
    tick_rate_ms: int = Field(
        default=1000 // constants.TICKS_PER_SECOND,
        gt=0,
        description="Wall-clock tick rate in milliseconds",
    )
    seconds_per_tick: float = Field(
        default=1.0 / constants.TICKS_PER_SECOND,
        gt=0.0,
        description="Simulated seconds advanced per tick",
    )
    frame_budget_ms: float = Field(
        default=constants.FRAME_BUDGET_MS,
        description="Ticks slower than this are logged",
    )
    drain_every_ticks: int = Field(default=constants.DRAIN_EVERY_TICKS, ge=1)
    resolve_every_ticks: int = Field(default=constants.RESOLVE_EVERY_TICKS, ge=1)
    scan_every_ticks: int = Field(default=constants.SCAN_EVERY_TICKS, ge=1)
    recycle_every_ticks: int = Field(default=constants.RECYCLE_EVERY_TICKS, ge=1)
    auto_queue_every_ticks: int = Field(
        default=0,
        ge=0,
        description="Queue the head of every dock for inspection this often. 0 disables it",
    )

    # Facility layout
    dock_count: int = Field(default=constants.DOCK_COUNT, ge=0)
    dock_capacity: int = Field(default=constants.DOCK_CAPACITY, ge=1)
    inspection_station_count: int = Field(default=constants.INSPECTION_STATION_COUNT, ge=0)
    inspection_capacity: int = Field(default=constants.INSPECTION_CAPACITY, ge=1)
    storage_bin_count: int = Field(default=constants.STORAGE_BIN_COUNT, ge=0)
    storage_capacity: int = Field(default=constants.STORAGE_CAPACITY, ge=1)
    rack_slot_count: int = Field(default=constants.RACK_SLOT_COUNT, ge=0)
    rack_slot_capacity: int = Field(default=constants.RACK_SLOT_CAPACITY, ge=1)
    recycle_sink_count: int = Field(default=constants.RECYCLE_SINK_COUNT, ge=0)
    recycle_capacity: int = Field(default=constants.RECYCLE_CAPACITY, ge=1)

    # Randomness
    random_seed: int | None = Field(
        default=None,
        description="Seed for the engine's random source. None means unseeded",
    )

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    @field_validator("hierarchy")
    @classmethod
    def _removed_is_terminal(cls, value: dict[ZoneType, list[ZoneType]]):
        if value.get(ZoneType.REMOVED):
            raise ValueError("'removed' cannot have outgoing transitions")
        return value


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use dependency injection in FastAPI routes.
    """
    return Settings()

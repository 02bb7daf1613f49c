# Coordinator / build-action / monitoring settings dataclasses
# src/env/schema.py

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class CoordinatorSettings:
    """Knobs for coordination.registry.BuildRegistry and the sweeper."""
    rebind_drained_workers: bool = False   # re-run assignment when a worker's section drains
    sweep_interval_seconds: float = 5.0    # period of runtime.sweeper.BuildSweeper


@dataclass
class BuildActionSettings:
    """Per-agent build action limits, in game ticks (20 per second)."""
    max_ticks: int = 120000
    blocks_per_tick: int = 1
    idle_log_interval: int = 20
    progress_log_interval: int = 100
    teleport_distance: int = 5


@dataclass
class MonitoringSettings:
    """Where structured events go and how chatty stdout logging is."""
    event_log_path: Path = Path("logs/monitoring/events.log")
    log_level: str = "INFO"


@dataclass
class CoordinationConfig:
    """Resolved contents of config/coordination.yaml."""
    block_namespace: str = "minecraft"
    coordinator: CoordinatorSettings = field(default_factory=CoordinatorSettings)
    build_action: BuildActionSettings = field(default_factory=BuildActionSettings)
    monitoring: MonitoringSettings = field(default_factory=MonitoringSettings)

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .schema import (
    BuildActionSettings,
    CoordinationConfig,
    CoordinatorSettings,
    MonitoringSettings,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG_PATH = CONFIG_ROOT / "coordination.yaml"

# Points at an alternate coordination.yaml (tests, deployments).
CONFIG_ENV_VAR = "COLLAB_BUILD_CONFIG"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping from `path`."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def _resolve_path(explicit: Optional[Path]) -> Path:
    if explicit is not None:
        return Path(explicit)
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_coordination_config(path: Optional[Path] = None) -> CoordinationConfig:
    """Main entry point: returns a validated CoordinationConfig."""
    raw = _load_yaml(_resolve_path(path))

    coord_raw = _section(raw, "coordinator")
    action_raw = _section(raw, "build_action")
    mon_raw = _section(raw, "monitoring")

    coordinator = CoordinatorSettings(
        rebind_drained_workers=bool(coord_raw.get("rebind_drained_workers", False)),
        sweep_interval_seconds=float(coord_raw.get("sweep_interval_seconds", 5.0)),
    )
    defaults = BuildActionSettings()
    build_action = BuildActionSettings(
        max_ticks=int(action_raw.get("max_ticks", defaults.max_ticks)),
        blocks_per_tick=int(action_raw.get("blocks_per_tick", defaults.blocks_per_tick)),
        idle_log_interval=int(action_raw.get("idle_log_interval", defaults.idle_log_interval)),
        progress_log_interval=int(
            action_raw.get("progress_log_interval", defaults.progress_log_interval)
        ),
        teleport_distance=int(action_raw.get("teleport_distance", defaults.teleport_distance)),
    )
    log_path = Path(mon_raw.get("event_log_path", MonitoringSettings().event_log_path))
    if not log_path.is_absolute():
        log_path = PROJECT_ROOT / log_path
    monitoring = MonitoringSettings(
        event_log_path=log_path,
        log_level=str(mon_raw.get("log_level", "INFO")).upper(),
    )

    config = CoordinationConfig(
        block_namespace=str(raw.get("block_namespace", "minecraft")),
        coordinator=coordinator,
        build_action=build_action,
        monitoring=monitoring,
    )

    # perform basic validation before returning
    _validate_config(config)
    return config


def log_level_of(config: CoordinationConfig) -> int:
    """Numeric logging level for config.monitoring.log_level."""
    return getattr(logging, config.monitoring.log_level)


def _validate_config(config: CoordinationConfig) -> None:
    """Sanity checks; raises ValueError on the first problem found."""
    if not config.block_namespace or ":" in config.block_namespace:
        raise ValueError(f"Invalid block_namespace: {config.block_namespace!r}")

    if config.coordinator.sweep_interval_seconds <= 0:
        raise ValueError(
            f"sweep_interval_seconds must be > 0, got {config.coordinator.sweep_interval_seconds}"
        )

    action = config.build_action
    for name in ("max_ticks", "blocks_per_tick", "idle_log_interval", "progress_log_interval"):
        value = getattr(action, name)
        if value <= 0:
            raise ValueError(f"build_action.{name} must be > 0, got {value}")
    if action.teleport_distance < 0:
        raise ValueError(f"build_action.teleport_distance must be >= 0, got {action.teleport_distance}")

    if config.monitoring.log_level not in _VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log_level: {config.monitoring.log_level}")

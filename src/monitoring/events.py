# path: src/monitoring/events.py
"""
Monitoring event schema for the collaborative build runtime.

Events are plain records published on monitoring.bus.EventBus and written
to JSONL by monitoring.logger.JsonFileLogger. `correlation_id` carries the
build id so one build's history can be grepped out of a shared log.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


# ============================================================
# Event Types
# ============================================================

class EventType(Enum):
    """Typed monitoring events emitted by the coordinator and build actions."""

    # Registry lifecycle
    BUILD_REGISTERED = auto()
    BUILD_COMPLETED = auto()
    BUILDS_SWEPT = auto()

    # Assignment policy
    WORKER_ASSIGNED = auto()   # exclusive pass
    WORKER_HELPING = auto()    # helping pass

    # Per-agent build action
    BLOCK_PLACED = auto()
    BUILD_PROGRESS = auto()
    WORKER_IDLE = auto()
    BUILD_FAILED = auto()

    # Generic log messages
    LOG = auto()


# ============================================================
# Monitoring Event Structure
# ============================================================

@dataclass
class MonitoringEvent:
    """
    One structured runtime event. All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # source module ("coordination.registry", ...)
    event_type: EventType
    message: str                # short human-readable description
    payload: Dict[str, Any] = field(default_factory=dict)
    correlation_id: Optional[str] = None  # build id, when there is one

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["event_type"] = self.event_type.name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MonitoringEvent":
        """Inverse of to_dict(); used when reading JSONL logs back."""
        return cls(
            ts=float(data["ts"]),
            module=str(data["module"]),
            event_type=EventType[data["event_type"]],
            message=str(data.get("message", "")),
            payload=dict(data.get("payload") or {}),
            correlation_id=data.get("correlation_id"),
        )

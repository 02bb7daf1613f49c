# JSON logger subscribing to EventBus
"""
Structured logging for the collaborative build runtime.

Provides:
- JsonFileLogger: subscribes to an EventBus and writes MonitoringEvents as JSONL.
- log_event: helper for publishing MonitoringEvents via an (optional) EventBus.
- read_events: read a JSONL event log back into MonitoringEvents.

Usage:

    bus = EventBus()
    sink = JsonFileLogger(Path("logs/monitoring/events.log"), bus)

    log_event(
        bus=bus,
        module="coordination.registry",
        event_type=EventType.BUILD_REGISTERED,
        message="Registered build house_1700000000000",
        payload={"total": 120},
        correlation_id="house_1700000000000",
    )
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterator, Optional

from .bus import EventBus
from .events import EventType, MonitoringEvent


log = logging.getLogger(__name__)


# ============================================================
# JSONL File Logger
# ============================================================

class JsonFileLogger:
    """
    Writes one JSON object per MonitoringEvent.

    Many worker threads publish concurrently, so writes are serialized by
    a lock to keep lines intact.
    """

    def __init__(self, path: Path, bus: EventBus) -> None:
        self._path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        self._file = path.open("a", encoding="utf-8")
        self._lock = Lock()
        self._bus = bus
        bus.subscribe(self._on_event)

    @property
    def path(self) -> Path:
        return self._path

    def _on_event(self, event: MonitoringEvent) -> None:
        line = json.dumps(event.to_dict(), ensure_ascii=False)
        with self._lock:
            if self._file.closed:
                return
            self._file.write(line + "\n")
            self._file.flush()

    def close(self) -> None:
        """Unsubscribe and close the file. Call at graceful shutdown."""
        self._bus.unsubscribe(self._on_event)
        with self._lock:
            if not self._file.closed:
                self._file.close()


def read_events(path: Path) -> Iterator[MonitoringEvent]:
    """Yield events from a JSONL log, skipping blank or malformed lines."""
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield MonitoringEvent.from_dict(json.loads(line))
            except (ValueError, KeyError) as exc:
                log.warning("Skipping malformed event at %s:%d (%s)", path, lineno, exc)


# ============================================================
# Convenience helper for emitting events
# ============================================================

def log_event(
    bus: Optional[EventBus],
    module: str,
    event_type: EventType,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> None:
    """
    Create and publish a MonitoringEvent.

    A None bus makes this a no-op so core objects can run without a
    monitoring stack attached.
    """
    if bus is None:
        return
    event = MonitoringEvent(
        ts=time.time(),
        module=module,
        event_type=event_type,
        message=message,
        payload=payload or {},
        correlation_id=correlation_id,
    )
    bus.publish(event)

# path: src/runtime/error_handling.py

"""
Error handling helpers for build-action ticking.

Wraps a tick so an unexpected exception is reported on the monitoring bus
before it propagates. Normal "no work" outcomes never raise; only genuine
failures (host world errors, bugs) reach this path.
"""

from __future__ import annotations

from typing import Optional

from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event

from .build_action import ActionResult, BuildStructureAction


def safe_tick_with_logging(
    action: BuildStructureAction,
    bus: Optional[EventBus],
    correlation_id: Optional[str] = None,
) -> Optional[ActionResult]:
    """
    Call action.tick(). On exception, emit a LOG event with subtype
    "ACTION_TICK_EXCEPTION" and re-raise so the runtime decides how fatal
    it is.
    """
    try:
        return action.tick()
    except Exception as exc:
        build_id = action.build.id if action.build is not None else None
        log_event(
            bus=bus,
            module="runtime.safe_tick",
            event_type=EventType.LOG,
            message="Build action tick raised an exception",
            payload={
                "subtype": "ACTION_TICK_EXCEPTION",
                "worker": action.worker,
                "structure_type": action.structure_type,
                "build_id": build_id,
                "ticks_running": action.ticks_running,
                "exception_repr": repr(exc),
            },
            correlation_id=correlation_id or build_id,
        )
        raise

# path: src/monitoring/integration.py
"""
Integration helpers for emitting build-coordination events.

All functions are thin wrappers around monitoring.logger.log_event that
keep payload shapes consistent between the registry, the per-agent build
action and the sweeper. Every helper accepts bus=None and then does nothing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .bus import EventBus
from .events import EventType
from .logger import log_event


JsonDict = Dict[str, Any]

REGISTRY_MODULE = "coordination.registry"
ACTION_MODULE = "runtime.build_action"


# ============================================================
# Registry lifecycle
# ============================================================

def emit_build_registered(
    bus: Optional[EventBus],
    build_id: str,
    structure_type: str,
    anchor: JsonDict,
    total_blocks: int,
    section_sizes: List[int],
) -> None:
    log_event(
        bus=bus,
        module=REGISTRY_MODULE,
        event_type=EventType.BUILD_REGISTERED,
        message=f"Registered collaborative build '{structure_type}' with {total_blocks} blocks",
        payload={
            "structure_type": structure_type,
            "anchor": anchor,
            "total": total_blocks,
            "section_sizes": section_sizes,
        },
        correlation_id=build_id,
    )


def emit_build_completed(
    bus: Optional[EventBus],
    build_id: str,
    participants: List[str],
) -> None:
    log_event(
        bus=bus,
        module=REGISTRY_MODULE,
        event_type=EventType.BUILD_COMPLETED,
        message=f"Collaborative build '{build_id}' completed by {len(participants)} workers",
        payload={"participants": participants},
        correlation_id=build_id,
    )


def emit_builds_swept(bus: Optional[EventBus], build_ids: List[str]) -> None:
    """Only emitted when something was actually removed."""
    if not build_ids:
        return
    log_event(
        bus=bus,
        module=REGISTRY_MODULE,
        event_type=EventType.BUILDS_SWEPT,
        message=f"Swept {len(build_ids)} completed builds",
        payload={"build_ids": build_ids},
    )


# ============================================================
# Assignment policy
# ============================================================

def emit_worker_assigned(
    bus: Optional[EventBus],
    build_id: str,
    worker: str,
    section_index: int,
    label: str,
    remaining: int,
    helping: bool,
) -> None:
    """
    WORKER_ASSIGNED for exclusive bindings, WORKER_HELPING for bindings
    made by the helping pass.
    """
    if helping:
        event_type = EventType.WORKER_HELPING
        message = f"'{worker}' helping with {label} quadrant ({remaining} blocks remaining)"
    else:
        event_type = EventType.WORKER_ASSIGNED
        message = f"Assigned '{worker}' to {label} quadrant"
    log_event(
        bus=bus,
        module=REGISTRY_MODULE,
        event_type=event_type,
        message=message,
        payload={
            "worker": worker,
            "section_index": section_index,
            "label": label,
            "remaining": remaining,
        },
        correlation_id=build_id,
    )


# ============================================================
# Build action
# ============================================================

def emit_block_placed(
    bus: Optional[EventBus],
    build_id: str,
    worker: str,
    placement: JsonDict,
    placed: int,
    total: int,
) -> None:
    log_event(
        bus=bus,
        module=ACTION_MODULE,
        event_type=EventType.BLOCK_PLACED,
        message=f"'{worker}' placed block - total {placed}/{total}",
        payload={"worker": worker, "placement": placement, "placed": placed, "total": total},
        correlation_id=build_id,
    )


def emit_build_progress(
    bus: Optional[EventBus],
    build_id: str,
    snapshot: JsonDict,
) -> None:
    log_event(
        bus=bus,
        module=ACTION_MODULE,
        event_type=EventType.BUILD_PROGRESS,
        message=(
            f"{snapshot.get('structure_type')} build progress: "
            f"{snapshot.get('placed')}/{snapshot.get('total')} ({snapshot.get('percent')}%)"
        ),
        payload=snapshot,
        correlation_id=build_id,
    )


def emit_worker_idle(
    bus: Optional[EventBus],
    build_id: str,
    worker: str,
    reason: str,
    percent: int,
) -> None:
    log_event(
        bus=bus,
        module=ACTION_MODULE,
        event_type=EventType.WORKER_IDLE,
        message=f"'{worker}' has no more blocks ({reason}); build {percent}% complete",
        payload={"worker": worker, "reason": reason, "percent": percent},
        correlation_id=build_id,
    )


def emit_build_failed(
    bus: Optional[EventBus],
    worker: str,
    structure_type: str,
    reason: str,
    build_id: Optional[str] = None,
) -> None:
    log_event(
        bus=bus,
        module=ACTION_MODULE,
        event_type=EventType.BUILD_FAILED,
        message=f"'{worker}' failed building {structure_type}: {reason}",
        payload={"worker": worker, "structure_type": structure_type, "reason": reason},
        correlation_id=build_id,
    )

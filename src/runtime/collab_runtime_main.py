# path: src/runtime/collab_runtime_main.py

"""
Reference runtime wiring the build coordinator to worker threads.

Shows how the pieces fit together:
- config/coordination.yaml -> CoordinationConfig
- EventBus + JsonFileLogger for structured events
- one BuildRegistry shared by every agent, plus a BuildSweeper
- one thread per agent, each ticking its own BuildStructureAction

The game host normally owns the agent threads; here they are plain Python
threads ticking as fast as they can against a WorldExecutor.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from coordination.registry import BuildRegistry
from env.schema import CoordinationConfig
from monitoring.bus import EventBus, default_bus
from monitoring.logger import JsonFileLogger
from structure.placement import BlockPos, Placement

from .build_action import ActionResult, BuildStructureAction, PlanFactory
from .error_handling import safe_tick_with_logging
from .sweeper import BuildSweeper
from .world import WorldExecutor


log = logging.getLogger(__name__)


def build_monitoring_stack(
    log_path: Optional[Path] = None,
    bus: Optional[EventBus] = None,
    use_default_bus: bool = False,
) -> Tuple[EventBus, Optional[JsonFileLogger]]:
    """
    Return (bus, file_logger). With no log_path the bus has no file sink.

    An explicit bus wins. Otherwise use_default_bus picks the shared
    monitoring.bus.default_bus so other in-process tools can subscribe;
    without it a fresh EventBus is created.
    """
    if bus is None:
        bus = default_bus if use_default_bus else EventBus()
    sink = JsonFileLogger(path=log_path, bus=bus) if log_path is not None else None
    return bus, sink


def build_registry(config: CoordinationConfig, bus: Optional[EventBus]) -> BuildRegistry:
    return BuildRegistry(
        bus=bus,
        rebind_drained=config.coordinator.rebind_drained_workers,
    )


@dataclass
class WorkerReport:
    """What one agent thread did."""
    worker: str
    result: Optional[ActionResult] = None
    ticks: int = 0
    blocks_placed: int = 0
    error: Optional[str] = None


@dataclass
class RunReport:
    build_id: Optional[str]
    workers: Dict[str, WorkerReport] = field(default_factory=dict)
    snapshot: Dict = field(default_factory=dict)


def _run_worker(
    action: BuildStructureAction,
    bus: Optional[EventBus],
    report: WorkerReport,
) -> None:
    try:
        result = action.result
        while result is None:
            result = safe_tick_with_logging(action, bus)
        report.result = result
    except Exception as exc:
        # Already reported on the bus; record it for the caller.
        report.error = repr(exc)
        action.cancel()
    finally:
        report.ticks = action.ticks_running
        report.blocks_placed = action.blocks_placed_by_me


def run_collaborative_build(
    config: CoordinationConfig,
    structure_type: str,
    plan: Sequence[Placement],
    anchor: BlockPos,
    workers: Sequence[str],
    world: WorldExecutor,
    registry: Optional[BuildRegistry] = None,
    bus: Optional[EventBus] = None,
) -> RunReport:
    """
    Run every worker to completion on one build and return what happened.

    Every action is started before any thread ticks, so all workers join
    the same build even when the plan is tiny.
    """
    registry = registry or build_registry(config, bus)
    plan_list: List[Placement] = list(plan)
    plan_factory: PlanFactory = lambda: plan_list

    reports: Dict[str, WorkerReport] = {}
    actions: List[BuildStructureAction] = []
    threads: List[threading.Thread] = []

    for name in workers:
        action = BuildStructureAction(
            worker=name,
            structure_type=structure_type,
            registry=registry,
            world=world,
            plan_factory=plan_factory,
            anchor=anchor,
            settings=config.build_action,
            bus=bus,
        )
        reports[name] = WorkerReport(worker=name)
        actions.append(action)
        threads.append(
            threading.Thread(
                target=_run_worker,
                args=(action, bus, reports[name]),
                name=f"BuildWorker-{name}",
                daemon=True,
            )
        )

    sweeper = BuildSweeper(registry, config.coordinator.sweep_interval_seconds)
    sweeper.start()
    try:
        for action in actions:
            action.start()
        for t in threads:
            t.start()
        for t in threads:
            t.join()
    finally:
        sweeper.stop()

    build = next((a.build for a in actions if a.build is not None), None)
    log.info(
        "Collaborative %s run finished: %s",
        structure_type,
        ", ".join(f"{r.worker}={r.blocks_placed}" for r in reports.values()),
    )
    return RunReport(
        build_id=build.id if build is not None else None,
        workers=reports,
        snapshot=build.snapshot() if build is not None else {},
    )

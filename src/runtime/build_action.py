# path: src/runtime/build_action.py

"""
Per-agent "build structure" action driven by game ticks.

Each agent that is told to build something runs one BuildStructureAction.
On start it joins the active collaborative build for that structure type
or registers a new one; on every tick it pulls placements from the
registry and asks the host world to write them. Whichever agent notices
the build is complete removes it from the registry.

The action never decides what to build: the plan comes from a factory
supplied by the planner layer and is only invoked when no build of the
type is active yet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from coordination.assignment import DispenseOutcome
from coordination.build import Build
from coordination.registry import BuildRegistry
from env.schema import BuildActionSettings
from monitoring.bus import EventBus
from monitoring.integration import (
    emit_block_placed,
    emit_build_failed,
    emit_build_progress,
    emit_worker_idle,
)
from structure.placement import BlockPos, Placement

from .world import WorldExecutor


log = logging.getLogger(__name__)

PlanFactory = Callable[[], Sequence[Placement]]


@dataclass(frozen=True)
class ActionResult:
    """Terminal outcome of an action."""
    success: bool
    message: str

    @staticmethod
    def succeeded(message: str) -> "ActionResult":
        return ActionResult(True, message)

    @staticmethod
    def failed(message: str) -> "ActionResult":
        return ActionResult(False, message)


class BuildStructureAction:
    """
    Tick-driven worker for one agent on one collaborative build.

    Lifecycle:
        action.start()
        while (result := action.tick()) is None:
            ...            # one call per game tick
        action.cancel()    # only if the agent abandons the build

    After start(), `result` is already set if the build could not begin.
    """

    def __init__(
        self,
        worker: str,
        structure_type: str,
        registry: BuildRegistry,
        world: WorldExecutor,
        plan_factory: PlanFactory,
        anchor: BlockPos,
        settings: Optional[BuildActionSettings] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.worker = worker
        self.structure_type = structure_type.lower()
        self._registry = registry
        self._world = world
        self._plan_factory = plan_factory
        self._anchor = anchor
        self._settings = settings or BuildActionSettings()
        self._bus = bus

        self.build: Optional[Build] = None
        self.result: Optional[ActionResult] = None
        self.ticks_running = 0
        self.blocks_placed_by_me = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> Optional[ActionResult]:
        build, created = self._registry.join_or_register(
            self.structure_type, self._plan_factory, self._anchor
        )
        if created and build.aggregate_total() == 0:
            # Nothing to do; drop the degenerate build so it isn't joined.
            self._registry.complete_build(build.id)
            return self._fail(f"Cannot generate build plan for: {self.structure_type}")

        self.build = build
        self._world.set_flying(self.worker, True)
        if created:
            log.info(
                "'%s' CREATED new %s collaborative build at %s with %d blocks",
                self.worker, self.structure_type, build.anchor, build.aggregate_total(),
            )
        else:
            log.info(
                "'%s' JOINING collaborative build of '%s' (%d%% complete)",
                self.worker, self.structure_type, build.progress_percent(),
            )
        return None

    def tick(self) -> Optional[ActionResult]:
        """Advance one game tick; returns the result once the action is done."""
        if self.result is not None:
            return self.result
        if self.build is None:
            return self._fail("Build system error: not in collaborative mode")

        self.ticks_running += 1
        build = self.build

        if self.ticks_running > self._settings.max_ticks:
            return self._fail("Building timeout")

        if build.is_complete():
            self._registry.complete_build(build.id)
            self._world.set_flying(self.worker, False)
            self.result = ActionResult.succeeded(
                f"Built {self.structure_type} collaboratively!"
            )
            return self.result

        for _ in range(self._settings.blocks_per_tick):
            dispensed = self._registry.next_block(build, self.worker)
            if dispensed.placement is None:
                if self.ticks_running % self._settings.idle_log_interval == 0:
                    self._report_idle(dispensed.outcome)
                break
            self._place(dispensed.placement)

        if (
            self.ticks_running % self._settings.progress_log_interval == 0
            and build.aggregate_placed() > 0
        ):
            snapshot = build.snapshot()
            log.info(
                "%s build progress: %d/%d (%d%%) - %d workers",
                self.structure_type, snapshot["placed"], snapshot["total"],
                snapshot["percent"], len(snapshot["participants"]),
            )
            emit_build_progress(self._bus, build.id, snapshot)
        return None

    def cancel(self) -> None:
        """Abandon the build. Its section is picked up by whoever asks next."""
        self._world.set_flying(self.worker, False)

    def describe(self) -> str:
        if self.build is None:
            return f"Build {self.structure_type} (not started)"
        return (
            f"Build {self.structure_type} ({self.build.aggregate_placed()}/"
            f"{self.build.aggregate_total()}, {self.blocks_placed_by_me} by {self.worker})"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _place(self, placement: Placement) -> None:
        build = self.build
        assert build is not None

        here = self._world.position_of(self.worker)
        limit = self._settings.teleport_distance
        if here.dist_sqr(placement.pos) > limit * limit:
            self._world.teleport(self.worker, placement.pos.offset(2, 0, 2))
            log.debug("'%s' teleported to block at %s", self.worker, placement.pos)

        self._world.place_block(self.worker, placement)
        self.blocks_placed_by_me += 1
        emit_block_placed(
            self._bus,
            build_id=build.id,
            worker=self.worker,
            placement=placement.to_dict(),
            placed=build.aggregate_placed(),
            total=build.aggregate_total(),
        )

    def _report_idle(self, outcome: DispenseOutcome) -> None:
        build = self.build
        assert build is not None
        log.info(
            "'%s' has no more blocks (%s)! Build %d%% complete",
            self.worker, outcome.name, build.progress_percent(),
        )
        emit_worker_idle(self._bus, build.id, self.worker, outcome.name, build.progress_percent())

    def _fail(self, reason: str) -> ActionResult:
        self._world.set_flying(self.worker, False)
        build_id = self.build.id if self.build is not None else None
        log.warning("'%s' build of %s failed: %s", self.worker, self.structure_type, reason)
        emit_build_failed(self._bus, self.worker, self.structure_type, reason, build_id)
        self.result = ActionResult.failed(reason)
        return self.result

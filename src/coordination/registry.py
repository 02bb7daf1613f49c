# src/coordination/registry.py
"""
Process-wide registry of in-progress collaborative builds.

The registry is the single entry point agents use:

    build, created = registry.join_or_register("house", make_plan, anchor)
    placement = registry.get_next_block(build, "Steve")

Structural changes to the id -> Build map are serialized by one lock.
Dispensing does not take that lock; it only touches the Build's own
bookkeeping and its sections' cursors.

Builds stay registered until complete_build() or a sweep removes them.
A held Build reference keeps working after removal; it just stops being
discoverable.
"""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from monitoring.bus import EventBus
from monitoring.integration import (
    emit_build_completed,
    emit_build_registered,
    emit_builds_swept,
    emit_worker_assigned,
)
from structure.placement import BlockPos, Placement

from .assignment import DispenseResult, dispense
from .build import Build


log = logging.getLogger(__name__)

ClockFn = Callable[[], int]
PlanFactory = Callable[[], Sequence[Placement]]


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class BuildRegistry:
    """
    Mapping from build id to live Build, plus the per-tick dispense facade.

    Parameters
    ----------
    bus:
        Optional EventBus for BUILD_REGISTERED / WORKER_* / BUILD_COMPLETED
        events. Events are fire-and-forget.
    clock:
        Millisecond clock used to mint build ids. Injected by tests.
    rebind_drained:
        Re-run assignment for workers whose section is drained instead of
        leaving them bound to it.
    """

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        clock: Optional[ClockFn] = None,
        rebind_drained: bool = False,
    ) -> None:
        self._bus = bus
        self._clock: ClockFn = clock or _wall_clock_ms
        self._rebind_drained = rebind_drained
        # insertion order == creation order; find_active_build relies on it
        self._builds: Dict[str, Build] = {}
        self._lock = Lock()

    # ------------------------------------------------------------------
    # Registration & lookup
    # ------------------------------------------------------------------

    def register_build(
        self,
        structure_type: str,
        plan: Sequence[Placement],
        anchor: BlockPos,
    ) -> Build:
        """Create a Build for `plan` under a fresh "<type>_<ms>" id."""
        with self._lock:
            build = self._register_locked(structure_type, plan, anchor)
        self._announce(build, structure_type)
        return build

    def _register_locked(
        self,
        structure_type: str,
        plan: Sequence[Placement],
        anchor: BlockPos,
    ) -> Build:
        stamp = self._clock()
        build_id = f"{structure_type}_{stamp}"
        # Two registrations in the same millisecond must not overwrite each other.
        while build_id in self._builds:
            stamp += 1
            build_id = f"{structure_type}_{stamp}"
        build = Build(build_id, plan, anchor)
        self._builds[build_id] = build
        return build

    def _announce(self, build: Build, structure_type: str) -> None:
        log.info(
            "Registered collaborative build '%s' at %s with %d blocks",
            build.id, build.anchor, build.aggregate_total(),
        )
        emit_build_registered(
            self._bus,
            build_id=build.id,
            structure_type=structure_type,
            anchor=build.anchor.as_dict(),
            total_blocks=build.aggregate_total(),
            section_sizes=[s.total() for s in build.sections],
        )

    def join_or_register(
        self,
        structure_type: str,
        plan_factory: PlanFactory,
        anchor: BlockPos,
    ) -> Tuple[Build, bool]:
        """
        Return (build, created). Joins the active build for this type if
        there is one; otherwise builds a plan and registers it.

        The factory runs without the registry lock held. Agents racing on
        the same type may each build a plan, but the lookup is repeated
        before registering, so only the first one registers and the rest
        join it and discard theirs.
        """
        existing = self.find_active_build(structure_type)
        if existing is not None:
            return existing, False

        plan = list(plan_factory())

        with self._lock:
            existing = self._find_active_locked(structure_type)
            if existing is None:
                build = self._register_locked(structure_type, plan, anchor)
        if existing is not None:
            log.debug(
                "Discarding %s plan: joined '%s' registered meanwhile",
                structure_type, existing.id,
            )
            return existing, False
        self._announce(build, structure_type)
        return build, True

    def find_active_build(self, structure_type: str) -> Optional[Build]:
        """Earliest-registered incomplete build of this type, or None."""
        with self._lock:
            return self._find_active_locked(structure_type)

    def _find_active_locked(self, structure_type: str) -> Optional[Build]:
        prefix = structure_type + "_"
        for build_id, build in self._builds.items():
            if build_id.startswith(prefix) and not build.is_complete():
                return build
        return None

    def get_build(self, build_id: str) -> Optional[Build]:
        with self._lock:
            return self._builds.get(build_id)

    def active_builds(self) -> List[Build]:
        """Snapshot of every registered build, complete or not, in creation order."""
        with self._lock:
            return list(self._builds.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._builds)

    def __contains__(self, build_id: object) -> bool:
        with self._lock:
            return build_id in self._builds

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def complete_build(self, build_id: str) -> None:
        """Remove a build. Unknown or already-removed ids are ignored."""
        with self._lock:
            build = self._builds.pop(build_id, None)
        if build is None:
            return
        participants = sorted(build.participants)
        log.info(
            "Collaborative build '%s' completed by %d workers",
            build_id, len(participants),
        )
        emit_build_completed(self._bus, build_id, participants)

    def cleanup_completed_builds(self) -> List[str]:
        """Remove every complete build; return the removed ids."""
        with self._lock:
            done = [bid for bid, build in self._builds.items() if build.is_complete()]
            for build_id in done:
                del self._builds[build_id]
        if done:
            log.info("Cleaned up %d completed builds: %s", len(done), ", ".join(done))
        emit_builds_swept(self._bus, done)
        return done

    # ------------------------------------------------------------------
    # Dispensing
    # ------------------------------------------------------------------

    def next_block(self, build: Build, worker: str) -> DispenseResult:
        """Tagged form of get_next_block()."""
        result = dispense(build, worker, rebind_drained=self._rebind_drained)
        if result.assignment is not None:
            a = result.assignment
            emit_worker_assigned(
                self._bus,
                build_id=build.id,
                worker=worker,
                section_index=a.section_index,
                label=a.label,
                remaining=a.remaining,
                helping=a.helping,
            )
        return result

    def get_next_block(self, build: Build, worker: str) -> Optional[Placement]:
        """Next placement for `worker`, or None when there is no work for it."""
        return self.next_block(build, worker).placement

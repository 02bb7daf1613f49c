# src/coordination/assignment.py
"""
Worker-to-section assignment and per-request dispensing.

Policy (two passes, index order):
1. exclusive: first incomplete section nobody is bound to
2. helping:   first incomplete section, shared or not

A worker keeps its first binding. With rebind_drained=True a worker whose
section has been drained is run through the policy again on its next
request instead of receiving SECTION_DRAINED forever.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from structure.placement import Placement

from .build import Build


log = logging.getLogger(__name__)


class DispenseOutcome(Enum):
    """Why a request did or did not yield a placement."""

    PLACED = auto()            # a placement was handed out
    BUILD_COMPLETE = auto()    # every section is drained
    SECTION_DRAINED = auto()   # bound section empty; another may still have work
    UNASSIGNABLE = auto()      # no incomplete section to bind to


@dataclass(frozen=True)
class AssignmentResult:
    """A fresh binding made for a worker."""

    worker: str
    section_index: int
    label: str
    helping: bool              # True when bound via the helping pass
    remaining: int             # blocks left in the section at bind time


@dataclass(frozen=True)
class DispenseResult:
    outcome: DispenseOutcome
    placement: Optional[Placement] = None
    section_index: Optional[int] = None
    assignment: Optional[AssignmentResult] = None

    @property
    def ok(self) -> bool:
        return self.outcome is DispenseOutcome.PLACED


def _assign_locked(build: Build, worker: str) -> Optional[AssignmentResult]:
    """Two-pass policy; the caller holds build.lock."""
    taken = build.bound_section_indices()
    if build.section_index_for(worker) is not None:
        # A worker being rebound doesn't block its own old section.
        taken = {i for w, i in build.worker_to_section.items() if w != worker}

    for idx, section in enumerate(build.sections):
        if not section.is_complete() and idx not in taken:
            build.bind(worker, idx)
            return AssignmentResult(worker, idx, section.label, False, section.remaining())

    for idx, section in enumerate(build.sections):
        if not section.is_complete():
            build.bind(worker, idx)
            return AssignmentResult(worker, idx, section.label, True, section.remaining())

    return None


def _log_assignment(build: Build, result: AssignmentResult) -> None:
    if result.helping:
        log.info(
            "'%s' helping with %s quadrant of %s (%d blocks remaining)",
            result.worker, result.label, build.id, result.remaining,
        )
    else:
        log.info(
            "Assigned '%s' to %s quadrant of %s - will build %d blocks bottom-to-top",
            result.worker, result.label, build.id,
            build.sections[result.section_index].total(),
        )


def assign_worker(build: Build, worker: str) -> Optional[AssignmentResult]:
    """
    Bind `worker` to a section of `build` and return the binding, or None
    if every section is complete. The check and the bind happen under the
    build lock so two concurrent first passes never pick the same section.
    """
    with build.lock:
        result = _assign_locked(build, worker)
    if result is not None:
        _log_assignment(build, result)
    return result


def dispense(build: Build, worker: str, rebind_drained: bool = False) -> DispenseResult:
    """Hand `worker` its next placement from `build`."""
    if build.is_complete():
        return DispenseResult(DispenseOutcome.BUILD_COMPLETE)

    build.add_participant(worker)

    assignment: Optional[AssignmentResult] = None
    with build.lock:
        index = build.section_index_for(worker)
        needs_binding = index is None or (
            rebind_drained and build.sections[index].is_complete()
        )
        if needs_binding:
            assignment = _assign_locked(build, worker)
            if assignment is None:
                return DispenseResult(DispenseOutcome.UNASSIGNABLE)
            index = assignment.section_index

    if assignment is not None:
        _log_assignment(build, assignment)

    placement = build.sections[index].next_placement()
    if placement is None:
        return DispenseResult(DispenseOutcome.SECTION_DRAINED, None, index, assignment)
    return DispenseResult(DispenseOutcome.PLACED, placement, index, assignment)

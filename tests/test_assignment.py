# tests/test_assignment.py
"""
Two-pass assignment policy and the tagged dispense results.
"""

from __future__ import annotations

import logging
import threading
from typing import List

from coordination.assignment import DispenseOutcome, assign_worker, dispense
from coordination.build import Build
from structure.placement import BlockPos
from tests.fakes.plans import four_quadrant_plan, make_plan


ANCHOR = BlockPos(0, 0, 0)


def _drain(section) -> None:
    while section.next_placement() is not None:
        pass


def test_first_workers_get_distinct_sections():
    build = Build("house_1", four_quadrant_plan(5), ANCHOR)

    for name in ("w1", "w2", "w3", "w4"):
        result = dispense(build, name)
        assert result.ok
        assert not result.assignment.helping

    bindings = build.worker_to_section
    assert bindings == {"w1": 0, "w2": 1, "w3": 2, "w4": 3}


def test_extra_worker_helps_first_incomplete_section():
    build = Build("house_1", four_quadrant_plan(5), ANCHOR)
    for name in ("w1", "w2", "w3", "w4"):
        dispense(build, name)

    result = dispense(build, "w5")

    assert result.ok
    assert result.section_index == 0
    assert result.assignment.helping
    assert build.worker_to_section["w5"] == 0


def test_helping_skips_completed_sections():
    build = Build("house_1", four_quadrant_plan(3), ANCHOR)
    for name in ("w1", "w2", "w3", "w4"):
        dispense(build, name)
    _drain(build.sections[0])
    _drain(build.sections[1])

    result = dispense(build, "w5")

    assert result.section_index == 2
    assert result.assignment.helping


def test_exclusive_pass_prefers_unbound_incomplete_section():
    build = Build("house_1", four_quadrant_plan(3), ANCHOR)
    dispense(build, "w1")             # binds section 0
    _drain(build.sections[1])         # nobody bound, but complete

    result = dispense(build, "w2")

    assert result.section_index == 2
    assert not result.assignment.helping


def test_binding_is_sticky_without_rebind():
    build = Build("house_1", four_quadrant_plan(2), ANCHOR)
    dispense(build, "w1")
    dispense(build, "w1")             # section 0 now drained

    result = dispense(build, "w1")

    assert result.outcome is DispenseOutcome.SECTION_DRAINED
    assert result.placement is None
    assert result.section_index == 0
    assert build.worker_to_section["w1"] == 0


def test_rebind_moves_worker_off_a_drained_section():
    build = Build("house_1", four_quadrant_plan(2), ANCHOR)
    dispense(build, "w1", rebind_drained=True)
    dispense(build, "w2", rebind_drained=True)
    dispense(build, "w1", rebind_drained=True)  # drains section 0

    result = dispense(build, "w1", rebind_drained=True)

    assert result.ok
    # section 1 is w2's, so the exclusive pass picks section 2
    assert result.section_index == 2
    assert not result.assignment.helping
    assert build.worker_to_section["w1"] == 2


def test_complete_build_returns_build_complete_without_side_effects():
    build = Build("wall_1", make_plan([(0, 0, 0)]), ANCHOR)
    assert dispense(build, "w1").ok

    result = dispense(build, "late")

    assert result.outcome is DispenseOutcome.BUILD_COMPLETE
    assert "late" not in build.participants
    assert "late" not in build.worker_to_section


def test_empty_build_never_assigns():
    build = Build("void_1", [], ANCHOR)

    assert dispense(build, "w1").outcome is DispenseOutcome.BUILD_COMPLETE
    assert assign_worker(build, "w1") is None


def test_every_section_bound_before_any_is_shared():
    build = Build("house_1", four_quadrant_plan(10), ANCHOR)
    workers = [f"w{i}" for i in range(7)]

    for name in workers:
        dispense(build, name)

    bindings = build.worker_to_section
    counts = [list(bindings.values()).count(i) for i in range(4)]
    assert all(c >= 1 for c in counts)
    assert sum(counts) == 7
    assert build.participants == frozenset(workers)


def test_participants_only_grow():
    build = Build("house_1", four_quadrant_plan(2), ANCHOR)
    seen = []
    for name in ("a", "b", "a", "c", "b"):
        dispense(build, name)
        seen.append(len(build.participants))

    assert seen == sorted(seen)
    assert build.participants == {"a", "b", "c"}


class _LockCheckingHandler(logging.Handler):
    """Records, per log record, whether another thread could take the build lock."""

    def __init__(self, build: Build) -> None:
        super().__init__(level=logging.INFO)
        self.build = build
        self.lock_free: List[bool] = []

    def emit(self, record: logging.LogRecord) -> None:
        got: List[bool] = []

        def try_lock() -> None:
            acquired = self.build.lock.acquire(blocking=False)
            if acquired:
                self.build.lock.release()
            got.append(acquired)

        t = threading.Thread(target=try_lock)
        t.start()
        t.join()
        self.lock_free.extend(got)


def test_assignment_logs_are_written_outside_the_build_lock():
    build = Build("house_1", four_quadrant_plan(2), ANCHOR)
    handler = _LockCheckingHandler(build)
    logger = logging.getLogger("coordination.assignment")
    old_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        for name in ("w1", "w2", "w3", "w4", "w5"):
            dispense(build, name)
        assign_worker(build, "w6")
    finally:
        logger.removeHandler(handler)
        logger.setLevel(old_level)

    assert len(handler.lock_free) == 6
    assert all(handler.lock_free)

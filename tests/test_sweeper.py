# tests/test_sweeper.py

from __future__ import annotations

import time

import pytest

from monitoring.events import EventType
from runtime.sweeper import BuildSweeper
from structure.placement import BlockPos
from tests.fakes.plans import four_quadrant_plan, make_plan


ANCHOR = BlockPos(0, 0, 0)


def test_sweep_once_removes_completed_builds(registry, captured):
    done = registry.register_build("pillar", make_plan([(0, 0, 0)]), ANCHOR)
    busy = registry.register_build("house", four_quadrant_plan(2), ANCHOR)
    registry.get_next_block(done, "w1")
    sweeper = BuildSweeper(registry, interval_seconds=60)

    assert sweeper.sweep_once() == [done.id]
    assert sweeper.sweep_once() == []
    assert sweeper.sweeps == 2
    assert registry.active_builds() == [busy]

    swept = [e for e in captured if e.event_type == EventType.BUILDS_SWEPT]
    assert len(swept) == 1
    assert swept[0].payload["build_ids"] == [done.id]


def test_background_sweeper_runs_and_stops(registry):
    build = registry.register_build("pillar", make_plan([(0, 0, 0)]), ANCHOR)
    registry.get_next_block(build, "w1")
    sweeper = BuildSweeper(registry, interval_seconds=0.01)

    sweeper.start()
    try:
        deadline = time.monotonic() + 2.0
        while build.id in registry and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        sweeper.stop(timeout=1.0)

    assert build.id not in registry
    assert not sweeper.running
    assert sweeper.sweeps >= 1


def test_sweeper_rejects_non_positive_interval(registry):
    with pytest.raises(ValueError):
        BuildSweeper(registry, interval_seconds=0)

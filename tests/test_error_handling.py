# tests/test_error_handling.py

from __future__ import annotations

import pytest

from monitoring.events import EventType
from runtime.build_action import BuildStructureAction
from runtime.error_handling import safe_tick_with_logging
from structure.placement import BlockPos
from tests.fakes.fake_world import FlakyWorld
from tests.fakes.plans import make_plan


def test_tick_exception_is_reported_and_reraised(registry, bus, captured):
    plan = make_plan([(0, 0, 0), (0, 1, 0)])
    world = FlakyWorld(fail_at={BlockPos(0, 1, 0)})
    action = BuildStructureAction(
        "Steve", "pillar", registry, world, lambda: plan, BlockPos(0, 0, 0), bus=bus
    )
    action.start()

    assert safe_tick_with_logging(action, bus) is None

    with pytest.raises(RuntimeError, match="host refused"):
        safe_tick_with_logging(action, bus)

    logs = [e for e in captured if e.event_type == EventType.LOG]
    assert len(logs) == 1
    payload = logs[0].payload
    assert payload["subtype"] == "ACTION_TICK_EXCEPTION"
    assert payload["worker"] == "Steve"
    assert payload["build_id"] == action.build.id
    assert "host refused" in payload["exception_repr"]
    assert logs[0].correlation_id == action.build.id


def test_successful_tick_passes_result_through(registry, bus):
    plan = make_plan([(0, 0, 0)])
    action = BuildStructureAction(
        "Steve", "pillar", registry, FlakyWorld(fail_at=set()), lambda: plan, BlockPos(0, 0, 0)
    )
    action.start()

    assert safe_tick_with_logging(action, bus) is None
    result = safe_tick_with_logging(action, bus)
    assert result is not None and result.success

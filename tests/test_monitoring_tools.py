# tests/test_monitoring_tools.py

from __future__ import annotations

import io
import json
from pathlib import Path

from rich.console import Console

from coordination.registry import BuildRegistry
from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent
from monitoring.logger import JsonFileLogger
from monitoring.tools import (
    load_last_n_build_summaries,
    main,
    render_build_table,
    summarize_builds,
)
from structure.placement import BlockPos

from tests.fakes.plans import four_quadrant_plan


def _event(ts, event_type, build_id, **payload):
    return MonitoringEvent(
        ts=ts,
        module="test",
        event_type=event_type,
        message="",
        payload=payload,
        correlation_id=build_id,
    )


def test_summarize_builds_groups_by_build_id():
    events = [
        _event(1.0, EventType.BUILD_REGISTERED, "house_1", structure_type="house", total=8),
        _event(2.0, EventType.WORKER_ASSIGNED, "house_1", worker="a", label="NW"),
        _event(3.0, EventType.BUILD_REGISTERED, "tower_2", structure_type="tower", total=4),
        _event(4.0, EventType.WORKER_HELPING, "house_1", worker="e", label="SE"),
        _event(5.0, EventType.BUILD_FAILED, "tower_2", worker="b", reason="Building timeout"),
        _event(6.0, EventType.BUILD_COMPLETED, "house_1", participants=["a", "e"]),
        _event(7.0, EventType.BUILDS_SWEPT, None, build_ids=["house_1"]),
    ]

    house, tower = summarize_builds(events)

    assert house.build_id == "house_1"
    assert house.total_blocks == 8
    assert house.assignments == {"a": "NW", "e": "SE"}
    assert house.helpers == ["e"]
    assert house.completed and house.last_percent == 100
    assert house.participants == ["a", "e"]

    assert tower.structure_type == "tower"
    assert not tower.completed
    assert tower.failures == ["b: Building timeout"]


def test_summaries_from_a_real_log(tmp_path: Path):
    bus = EventBus()
    log_path = tmp_path / "events.log"
    sink = JsonFileLogger(log_path, bus)
    registry = BuildRegistry(bus=bus)

    build = registry.register_build("house", four_quadrant_plan(1), BlockPos(0, 0, 0))
    for worker in ("a", "b", "c", "d"):
        registry.next_block(build, worker)
    registry.complete_build(build.id)
    sink.close()

    (summary,) = load_last_n_build_summaries(log_path, last_n=5)

    assert summary.build_id == build.id
    assert summary.total_blocks == 4
    assert sorted(summary.assignments.values()) == ["NE", "NW", "SE", "SW"]
    assert summary.completed


def test_missing_log_gives_no_summaries(tmp_path: Path):
    assert load_last_n_build_summaries(tmp_path / "absent.log") == []


def test_render_build_table():
    events = [
        _event(1.0, EventType.BUILD_REGISTERED, "house_1", structure_type="house", total=8),
        _event(2.0, EventType.BUILD_PROGRESS, "house_1", percent=50),
    ]
    out = io.StringIO()

    render_build_table(summarize_builds(events), console=Console(file=out, width=120))

    text = out.getvalue()
    assert "house_1" in text
    assert "50%" in text


def test_cli_prints_json(tmp_path: Path, capsys):
    bus = EventBus()
    log_path = tmp_path / "events.log"
    sink = JsonFileLogger(log_path, bus)
    BuildRegistry(bus=bus).register_build("barn", four_quadrant_plan(2), BlockPos(0, 0, 0))
    sink.close()

    main(["inspect-builds", "--log-path", str(log_path), "-n", "1"])

    data = json.loads(capsys.readouterr().out)
    assert len(data) == 1
    assert data[0]["structure_type"] == "barn"
    assert data[0]["total_blocks"] == 8

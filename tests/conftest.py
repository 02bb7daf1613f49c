# tests/conftest.py

from __future__ import annotations

import itertools
import sys
from pathlib import Path
from typing import Callable, List

import pytest

# Ensure src/ is on sys.path for test imports like `import coordination`,
# and the project root for `from tests.fakes import ...`.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

for _path in (SRC_ROOT, PROJECT_ROOT):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from coordination.registry import BuildRegistry  # noqa: E402
from monitoring.bus import EventBus  # noqa: E402
from monitoring.events import MonitoringEvent  # noqa: E402


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def captured(bus: EventBus) -> List[MonitoringEvent]:
    """Every event published on `bus` during the test."""
    events: List[MonitoringEvent] = []
    bus.subscribe(events.append)
    return events


@pytest.fixture
def fixed_clock() -> Callable[[], int]:
    """Clock that always reports the same millisecond."""
    return lambda: 1_700_000_000_000


@pytest.fixture
def ticking_clock() -> Callable[[], int]:
    """Clock that advances one millisecond per call."""
    counter = itertools.count(1_700_000_000_000)
    return lambda: next(counter)


@pytest.fixture
def registry(bus: EventBus, ticking_clock) -> BuildRegistry:
    return BuildRegistry(bus=bus, clock=ticking_clock)

# path: src/runtime/sweeper.py

"""
Background sweep of completed builds.

Agents normally remove a build themselves when they see it complete, but an
agent can be cancelled between the last placement and that check. The
sweeper removes such leftovers on a fixed period.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from coordination.registry import BuildRegistry


log = logging.getLogger(__name__)


class BuildSweeper:
    """
    Runs registry.cleanup_completed_builds() every `interval_seconds` on a
    daemon thread.
    """

    def __init__(self, registry: BuildRegistry, interval_seconds: float = 5.0) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._registry = registry
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.sweeps = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep_once(self) -> List[str]:
        removed = self._registry.cleanup_completed_builds()
        self.sweeps += 1
        return removed

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="BuildSweeperThread",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the thread and wait for it to exit."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        log.debug("Build sweeper started (interval=%.2fs)", self._interval)
        # wait() returns True as soon as stop() is called
        while not self._stop.wait(self._interval):
            self.sweep_once()
        log.debug("Build sweeper stopped after %d sweeps", self.sweeps)

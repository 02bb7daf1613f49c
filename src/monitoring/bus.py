# EventBus for monitoring events
"""
In-process, thread-safe pub/sub for MonitoringEvents.

Build workers publish from many threads at once, so the subscriber list is
guarded by a lock and every publish iterates over a snapshot of it.
A failing subscriber is counted and skipped; publishers never see its
exception.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, Dict, List, Optional, Tuple

from .events import EventType, MonitoringEvent


log = logging.getLogger(__name__)


# ============================================================
# Type aliases
# ============================================================

SubscriberFn = Callable[[MonitoringEvent], None]


# ============================================================
# Event Bus
# ============================================================

class EventBus:
    """
    Simple in-process event bus.

    Subscribers may register for every event or for a single EventType.
    """

    def __init__(self) -> None:
        # (fn, filter) pairs; filter None means "all event types"
        self._subscribers: List[Tuple[SubscriberFn, Optional[EventType]]] = []
        self._failures: Dict[str, int] = {}
        self._lock = Lock()

    # --------------------------------------------------------
    # Subscription API
    # --------------------------------------------------------

    def subscribe(self, fn: SubscriberFn, event_type: Optional[EventType] = None) -> None:
        """Register `fn`; restrict it to `event_type` if one is given."""
        with self._lock:
            self._subscribers.append((fn, event_type))

    def unsubscribe(self, fn: SubscriberFn) -> None:
        """
        Remove every registration of `fn`.

        Safe to call even if `fn` is not present.
        """
        with self._lock:
            self._subscribers = [(f, t) for f, t in self._subscribers if f != fn]

    # --------------------------------------------------------
    # Publish API
    # --------------------------------------------------------

    def publish(self, event: MonitoringEvent) -> None:
        """
        Deliver `event` to matching subscribers, outside the lock so a
        subscriber may publish or subscribe in turn.
        """
        with self._lock:
            subscribers = list(self._subscribers)

        for fn, wanted in subscribers:
            if wanted is not None and wanted is not event.event_type:
                continue
            try:
                fn(event)
            except Exception:
                name = getattr(fn, "__qualname__", repr(fn))
                with self._lock:
                    self._failures[name] = self._failures.get(name, 0) + 1
                log.debug("Monitoring subscriber %s failed", name, exc_info=True)

    # --------------------------------------------------------
    # Utility
    # --------------------------------------------------------

    def failure_counts(self) -> Dict[str, int]:
        """Subscriber name -> number of events it raised on."""
        with self._lock:
            return dict(self._failures)

    def clear(self) -> None:
        """Drop all subscribers. Mostly useful for tests."""
        with self._lock:
            self._subscribers.clear()
            self._failures.clear()


# ============================================================
# Optional: shared bus instance
# ============================================================

# Runtimes that don't want to thread a bus through everything can use this.
default_bus = EventBus()

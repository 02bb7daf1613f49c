# src/coordination/section.py
"""
One spatial partition of a collaborative build.

A Section owns an ordered, immutable tuple of placements and a dispense
cursor. The cursor only ever moves forward; every call to
next_placement() consumes exactly one index, even past the end.
"""

from __future__ import annotations

from threading import Lock
from typing import Optional, Sequence, Tuple

from structure.placement import Placement


QUADRANT_LABELS: Tuple[str, ...] = ("NW", "NE", "SW", "SE")


class Section:
    """Quadrant of a build plan handed out one placement at a time."""

    def __init__(self, section_id: int, label: str, blocks: Sequence[Placement]) -> None:
        self.id = section_id
        self.label = label
        self._blocks: Tuple[Placement, ...] = tuple(blocks)
        self._cursor = 0
        self._lock = Lock()

    @property
    def blocks(self) -> Tuple[Placement, ...]:
        return self._blocks

    def next_placement(self) -> Optional[Placement]:
        """
        Fetch-and-increment the cursor; return the placement at the old
        index, or None once the section is drained.
        """
        with self._lock:
            index = self._cursor
            self._cursor += 1
        if index < len(self._blocks):
            return self._blocks[index]
        return None

    def placed(self) -> int:
        return min(self._cursor, len(self._blocks))

    def total(self) -> int:
        return len(self._blocks)

    def remaining(self) -> int:
        return self.total() - self.placed()

    def is_complete(self) -> bool:
        return self._cursor >= len(self._blocks)

    def __repr__(self) -> str:
        return f"Section(id={self.id}, label={self.label!r}, placed={self.placed()}/{self.total()})"

# src/coordination/build.py
"""
A single collaborative construction project.

Build owns its Sections exclusively; many workers share the Build itself.
Mutable worker bookkeeping (worker -> section bindings and the participant
set) is guarded by one per-Build lock. Section cursors carry their own
lock, so dispensing never holds the Build lock.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from structure.placement import BlockPos, Placement

from .partition import partition_plan
from .section import Section


log = logging.getLogger(__name__)


class Build:
    """
    Shared state for one structure being built by an open set of workers.

    Fields:
    - id:       "<structure_type>_<creation-ms>"
    - plan:     the full placement sequence as supplied
    - anchor:   starting position of the structure
    - sections: 0-4 non-empty quadrants, in NW, NE, SW, SE order
    """

    def __init__(self, build_id: str, plan: Sequence[Placement], anchor: BlockPos) -> None:
        self.id = build_id
        self.plan: Tuple[Placement, ...] = tuple(plan)
        self.anchor = anchor
        self.sections: List[Section] = partition_plan(self.plan)

        # Held by the assignment policy for check-then-bind.
        self.lock = RLock()
        self._worker_to_section: Dict[str, int] = {}
        self._participants: Set[str] = set()

        log.info(
            "Divided '%s' into %d sections for collaborative building",
            build_id,
            len(self.sections),
        )

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def structure_type(self) -> str:
        """The <type> part of the id."""
        head, sep, _tail = self.id.rpartition("_")
        return head if sep else self.id

    # ------------------------------------------------------------------
    # Worker bookkeeping
    # ------------------------------------------------------------------

    @property
    def participants(self) -> FrozenSet[str]:
        with self.lock:
            return frozenset(self._participants)

    @property
    def worker_to_section(self) -> Dict[str, int]:
        with self.lock:
            return dict(self._worker_to_section)

    def add_participant(self, worker: str) -> None:
        with self.lock:
            self._participants.add(worker)

    def section_index_for(self, worker: str) -> Optional[int]:
        with self.lock:
            return self._worker_to_section.get(worker)

    def bound_section_indices(self) -> Set[int]:
        with self.lock:
            return set(self._worker_to_section.values())

    def bind(self, worker: str, section_index: int) -> None:
        if not 0 <= section_index < len(self.sections):
            raise IndexError(f"Section index {section_index} out of range for build {self.id}")
        with self.lock:
            self._worker_to_section[worker] = section_index

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def aggregate_placed(self) -> int:
        return sum(section.placed() for section in self.sections)

    def aggregate_total(self) -> int:
        return len(self.plan)

    def is_complete(self) -> bool:
        return all(section.is_complete() for section in self.sections)

    def progress_percent(self) -> int:
        total = self.aggregate_total()
        if total == 0:
            return 100
        return (self.aggregate_placed() * 100) // total

    def snapshot(self) -> Dict[str, Any]:
        """JSON-safe progress summary for events and tools."""
        bindings = self.worker_to_section
        return {
            "id": self.id,
            "structure_type": self.structure_type,
            "anchor": self.anchor.as_dict(),
            "placed": self.aggregate_placed(),
            "total": self.aggregate_total(),
            "percent": self.progress_percent(),
            "complete": self.is_complete(),
            "participants": sorted(self.participants),
            "sections": [
                {
                    "index": idx,
                    "label": section.label,
                    "placed": section.placed(),
                    "total": section.total(),
                    "workers": sorted(w for w, i in bindings.items() if i == idx),
                }
                for idx, section in enumerate(self.sections)
            ],
        }

    def __repr__(self) -> str:
        return (
            f"Build(id={self.id!r}, placed={self.aggregate_placed()}/{self.aggregate_total()}, "
            f"sections={len(self.sections)})"
        )

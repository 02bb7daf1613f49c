# src/coordination/partition.py
"""
Quadrant partitioning of a block plan.

The (x, z) bounding rectangle is split at its integer midpoint into four
bins. Ties on the midpoint go west (x) and north (z). Each bin is sorted
bottom-to-top so whoever works it builds from the ground up. Empty bins
are dropped and the survivors are renumbered in NW, NE, SW, SE order.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from structure.placement import Placement

from .section import QUADRANT_LABELS, Section


log = logging.getLogger(__name__)


def bounds(plan: Sequence[Placement]) -> Tuple[int, int, int, int]:
    """Return (min_x, max_x, min_z, max_z) for a non-empty plan."""
    if not plan:
        raise ValueError("bounds() requires a non-empty plan")
    xs = [p.pos.x for p in plan]
    zs = [p.pos.z for p in plan]
    return min(xs), max(xs), min(zs), max(zs)


def quadrant_of(x: int, z: int, cx: int, cz: int) -> int:
    """Quadrant index (0=NW, 1=NE, 2=SW, 3=SE) for a column."""
    east = x > cx
    south = z > cz
    return (2 if south else 0) + (1 if east else 0)


def partition_plan(plan: Sequence[Placement]) -> List[Section]:
    """Split a plan into 0-4 ground-up sections."""
    if not plan:
        return []

    min_x, max_x, min_z, max_z = bounds(plan)
    # Python's // floors like the midpoint rule requires, negatives included.
    cx = (min_x + max_x) // 2
    cz = (min_z + max_z) // 2

    bins: List[List[Placement]] = [[], [], [], []]
    for placement in plan:
        bins[quadrant_of(placement.pos.x, placement.pos.z, cx, cz)].append(placement)

    sections: List[Section] = []
    for label, members in zip(QUADRANT_LABELS, bins):
        if not members:
            continue
        # sorted() is stable, so equal-y placements keep plan order
        ordered = sorted(members, key=lambda p: p.pos.y)
        sections.append(Section(len(sections), label, ordered))

    log.info(
        "Divided plan into %d quadrants (bottom-to-top): NW=%d, NE=%d, SW=%d, SE=%d blocks",
        len(sections),
        *(len(b) for b in bins),
    )
    return sections

# src/runtime/memory_world.py
"""
In-memory WorldExecutor.

Stands in for the game host in the demo runtime and in tests. Stores the
block written at each position plus a full write log so callers can check
for double placement.
"""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Dict, List, Optional

from structure.placement import BlockPos, Placement


@dataclass(frozen=True)
class BlockWrite:
    """One recorded place_block() call."""

    worker: str
    placement: Placement


class InMemoryWorld:
    """Thread-safe dict-of-blocks world."""

    def __init__(self, spawn: Optional[BlockPos] = None) -> None:
        self._spawn = spawn or BlockPos(0, 64, 0)
        self._lock = Lock()
        self.blocks: Dict[BlockPos, str] = {}
        self.writes: List[BlockWrite] = []
        self.positions: Dict[str, BlockPos] = {}
        self.flying: Dict[str, bool] = {}
        self.teleports = 0

    def position_of(self, worker: str) -> BlockPos:
        with self._lock:
            return self.positions.get(worker, self._spawn)

    def teleport(self, worker: str, pos: BlockPos) -> None:
        with self._lock:
            self.positions[worker] = pos
            self.teleports += 1

    def place_block(self, worker: str, placement: Placement) -> None:
        with self._lock:
            self.blocks[placement.pos] = placement.block
            self.writes.append(BlockWrite(worker, placement))

    def set_flying(self, worker: str, flying: bool) -> None:
        with self._lock:
            self.flying[worker] = flying

    def writes_by(self, worker: str) -> List[Placement]:
        with self._lock:
            return [w.placement for w in self.writes if w.worker == worker]

# src/structure/placement.py
"""
Immutable plan values: world positions and (position, block) placements.

A plan is just a finite sequence of Placement objects. Producers (LLM
planner, templates, procedural generators) live outside this repo; the
coordinator consumes whatever they hand over and never validates it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping


@dataclass(frozen=True)
class BlockPos:
    """Integer block coordinate in world space."""

    x: int
    y: int
    z: int

    def offset(self, dx: int, dy: int, dz: int) -> "BlockPos":
        return BlockPos(self.x + dx, self.y + dy, self.z + dz)

    def dist_sqr(self, other: "BlockPos") -> int:
        """Squared euclidean distance, matching the game's distSqr."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def as_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class Placement:
    """A single block to write at a single position."""

    pos: BlockPos
    block: str

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe form for monitoring payloads."""
        data: Dict[str, Any] = self.pos.as_dict()
        data["block"] = self.block
        return data


def normalize_block_id(name: str, namespace: str = "minecraft") -> str:
    """
    Canonicalize a free-form block name.

    "Oak Planks" -> "minecraft:oak_planks"; names that already carry a
    namespace keep it.
    """
    cleaned = str(name).strip().lower().replace(" ", "_")
    if not cleaned:
        raise ValueError("Block name must be a non-empty string.")
    if ":" not in cleaned:
        cleaned = f"{namespace}:{cleaned}"
    return cleaned


def placements_from_dicts(
    rows: Iterable[Mapping[str, Any]],
    namespace: str = "minecraft",
) -> List[Placement]:
    """
    Build a plan from mapping rows of the form {"x", "y", "z", "block"}.

    Used by tools and tests that read plans from JSON/YAML.
    """
    plan: List[Placement] = []
    for idx, row in enumerate(rows):
        missing = [k for k in ("x", "y", "z", "block") if k not in row]
        if missing:
            raise ValueError(f"Plan row {idx} is missing keys: {missing}")
        pos = BlockPos(int(row["x"]), int(row["y"]), int(row["z"]))
        plan.append(Placement(pos=pos, block=normalize_block_id(row["block"], namespace)))
    return plan

# src/structure/__init__.py
"""
Block-plan value types shared by the coordinator, the build action and tools.
"""

from .placement import BlockPos, Placement, normalize_block_id, placements_from_dicts

__all__ = [
    "BlockPos",
    "Placement",
    "normalize_block_id",
    "placements_from_dicts",
]

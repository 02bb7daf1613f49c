# WorldExecutor interface definition
# src/runtime/world.py

from __future__ import annotations

from typing import Protocol

from structure.placement import BlockPos, Placement


class WorldExecutor(Protocol):
    """Host-world operations a build action needs for one agent.

    Implementations live in the game integration layer. They must tolerate
    repeated writes to the same position: the coordinator dispenses each
    placement once, but a host may re-issue a write after its own failures.
    """

    def position_of(self, worker: str) -> BlockPos:
        """Current block position of the named agent."""
        ...

    def teleport(self, worker: str, pos: BlockPos) -> None:
        """Move the agent next to `pos` without pathfinding."""
        ...

    def place_block(self, worker: str, placement: Placement) -> None:
        """Write the block, with whatever swing/particle/sound effects the host has."""
        ...

    def set_flying(self, worker: str, flying: bool) -> None:
        """Toggle flight so the agent can reach upper layers."""
        ...

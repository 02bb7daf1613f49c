# src/coordination/__init__.py
"""
Collaborative build coordination.

Splits a block plan into ground-up quadrants, binds workers to quadrants
and hands out one placement per request, safely across threads.
"""

from .assignment import AssignmentResult, DispenseOutcome, DispenseResult, assign_worker, dispense
from .build import Build
from .cache import get_default_registry
from .partition import bounds, partition_plan
from .registry import BuildRegistry
from .section import QUADRANT_LABELS, Section

__all__ = [
    "AssignmentResult",
    "Build",
    "BuildRegistry",
    "DispenseOutcome",
    "DispenseResult",
    "QUADRANT_LABELS",
    "Section",
    "assign_worker",
    "bounds",
    "dispense",
    "get_default_registry",
    "partition_plan",
]

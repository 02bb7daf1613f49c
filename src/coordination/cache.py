# src/coordination/cache.py
"""
Process-local default BuildRegistry.

Runtimes should pass a BuildRegistry explicitly. This accessor exists for
entrypoints where threading one through is awkward; every caller in the
process shares the same instance.
"""

from threading import Lock
from typing import Optional

from .registry import BuildRegistry


_default_registry: Optional[BuildRegistry] = None
_guard = Lock()


def get_default_registry() -> BuildRegistry:
    """
    Return the process-wide BuildRegistry, creating it on first use.
    """
    global _default_registry
    with _guard:
        if _default_registry is None:
            _default_registry = BuildRegistry()
        return _default_registry


def _reset_default_registry_for_tests() -> None:
    """
    Drop the shared registry. Only meant for test isolation.
    """
    global _default_registry
    with _guard:
        _default_registry = None

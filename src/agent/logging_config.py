# src/agent/logging_config.py
"""
Central logging configuration for the collaborative build runtime.

Call configure_logging() once from an entrypoint:

    from agent.logging_config import configure_logging
    configure_logging(logging.DEBUG)

Registry, assignment and build-action logs then show up on stdout next to
whatever the host process prints.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
) -> bool:
    """
    Attach a stream handler to the root logger unless one is already there.

    Returns True if a handler was installed. The level is applied either way,
    so a second call can still turn on DEBUG.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return False

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=fmt))
    root.addHandler(handler)
    return True

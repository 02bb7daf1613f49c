#src/monitoring/tools.py
"""
Human-facing utilities for build monitoring.

Provides:

- Build inspector:
    - Load the last N builds from a monitoring JSONL log.
    - Summarize size, quadrant assignments, helpers, progress and outcome.

- Monitoring CLI (argparse):
    - inspect-builds: print summaries as JSON or as a rich table
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from rich.console import Console
from rich.table import Table

from .events import EventType, MonitoringEvent
from .logger import read_events


JsonDict = Dict[str, Any]


# ============================================================
# Build inspector
# ============================================================

@dataclass
class BuildSummary:
    """
    Summary of one build reconstructed from monitoring events.
    """
    build_id: str
    structure_type: Optional[str] = None
    total_blocks: Optional[int] = None
    assignments: Dict[str, str] = field(default_factory=dict)  # worker -> quadrant label
    helpers: List[str] = field(default_factory=list)
    last_percent: Optional[int] = None
    completed: bool = False
    participants: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)
    first_ts: float = 0.0
    last_ts: float = 0.0

    def to_dict(self) -> JsonDict:
        return asdict(self)


def _apply_event(summary: BuildSummary, event: MonitoringEvent) -> None:
    p = event.payload
    et = event.event_type

    if not summary.first_ts:
        summary.first_ts = event.ts
    summary.last_ts = max(summary.last_ts, event.ts)

    if et == EventType.BUILD_REGISTERED:
        summary.structure_type = p.get("structure_type")
        summary.total_blocks = p.get("total")
    elif et in (EventType.WORKER_ASSIGNED, EventType.WORKER_HELPING):
        worker = p.get("worker")
        if worker:
            summary.assignments[worker] = p.get("label", "?")
            if et == EventType.WORKER_HELPING and worker not in summary.helpers:
                summary.helpers.append(worker)
    elif et == EventType.BUILD_PROGRESS:
        summary.last_percent = p.get("percent")
    elif et == EventType.BUILD_COMPLETED:
        summary.completed = True
        summary.last_percent = 100
        summary.participants = list(p.get("participants") or [])
    elif et == EventType.BUILD_FAILED:
        summary.failures.append(f"{p.get('worker')}: {p.get('reason')}")


def summarize_builds(events: Iterable[MonitoringEvent]) -> List[BuildSummary]:
    """Group events by build id; summaries ordered by first appearance."""
    by_id: Dict[str, BuildSummary] = {}
    for event in events:
        if not event.correlation_id:
            continue
        summary = by_id.get(event.correlation_id)
        if summary is None:
            summary = by_id[event.correlation_id] = BuildSummary(build_id=event.correlation_id)
        _apply_event(summary, event)
    return sorted(by_id.values(), key=lambda s: s.first_ts)


def load_last_n_build_summaries(log_path: Path, last_n: int = 5) -> List[BuildSummary]:
    if not log_path.exists():
        return []
    summaries = summarize_builds(read_events(log_path))
    return summaries[-last_n:] if last_n > 0 else summaries


def render_build_table(summaries: List[BuildSummary], console: Optional[Console] = None) -> None:
    """Print summaries as a rich table."""
    table = Table(title="Collaborative builds")
    table.add_column("Build", style="bold")
    table.add_column("Blocks", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Quadrants")
    table.add_column("Status")

    for s in summaries:
        quadrants = ", ".join(f"{w}={label}" for w, label in sorted(s.assignments.items()))
        if s.completed:
            status = "[green]complete[/green]"
        elif s.failures:
            status = f"[red]{len(s.failures)} failures[/red]"
        else:
            status = "active"
        table.add_row(
            s.build_id,
            "-" if s.total_blocks is None else str(s.total_blocks),
            "-" if s.last_percent is None else f"{s.last_percent}%",
            quadrants or "-",
            status,
        )

    (console or Console()).print(table)


# ============================================================
# CLI
# ============================================================

def _cmd_inspect_builds(args: argparse.Namespace) -> None:
    summaries = load_last_n_build_summaries(Path(args.log_path), last_n=args.n)
    if args.table:
        render_build_table(summaries)
        return
    json.dump([s.to_dict() for s in summaries], sys.stdout, indent=2, sort_keys=True)
    print()


def build_arg_parser() -> argparse.ArgumentParser:
    """
    Build the monitoring CLI argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="collab-monitor",
        description="Inspect collaborative build monitoring logs.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_builds = sub.add_parser("inspect-builds", help="Summarize the last N builds in a log.")
    p_builds.add_argument(
        "--log-path",
        type=str,
        default="logs/monitoring/events.log",
        help="Path to monitoring JSONL log file.",
    )
    p_builds.add_argument(
        "-n",
        type=int,
        default=5,
        help="Number of recent builds to show (0 for all).",
    )
    p_builds.add_argument(
        "--table",
        action="store_true",
        help="Render a rich table instead of JSON.",
    )
    p_builds.set_defaults(func=_cmd_inspect_builds)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the monitoring CLI.

        python -m monitoring.tools inspect-builds -n 3 --table
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()

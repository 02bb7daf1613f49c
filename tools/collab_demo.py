# Path: tools/collab_demo.py

"""
Run a collaborative build end to end against an in-memory world.

    python tools/collab_demo.py --workers 6 --size 9 6 9

Registers a hollow box, lets N worker threads build it and prints a
per-quadrant summary table.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT / "src"))

from rich.console import Console  # noqa: E402
from rich.table import Table  # noqa: E402

from agent.logging_config import configure_logging  # noqa: E402
from env.loader import load_coordination_config, log_level_of  # noqa: E402
from runtime.collab_runtime_main import (  # noqa: E402
    RunReport,
    build_monitoring_stack,
    run_collaborative_build,
)
from runtime.memory_world import InMemoryWorld  # noqa: E402
from structure.placement import BlockPos, Placement, normalize_block_id  # noqa: E402


def hollow_box(anchor: BlockPos, width: int, height: int, depth: int, block: str) -> List[Placement]:
    """Floor plus four walls; enough shape to populate every quadrant."""
    plan: List[Placement] = []
    for y in range(height):
        for x in range(width):
            for z in range(depth):
                edge = x in (0, width - 1) or z in (0, depth - 1)
                if y == 0 or edge:
                    plan.append(Placement(anchor.offset(x, y, z), block))
    return plan


def render_report(report: RunReport, console: Console) -> None:
    snap = report.snapshot
    table = Table(title=f"{report.build_id}: {snap.get('placed')}/{snap.get('total')} blocks")
    table.add_column("Quadrant", style="bold")
    table.add_column("Placed", justify="right")
    table.add_column("Workers")
    for section in snap.get("sections", []):
        table.add_row(
            section["label"],
            f"{section['placed']}/{section['total']}",
            ", ".join(section["workers"]) or "-",
        )
    console.print(table)

    per_worker = Table(title="Workers")
    per_worker.add_column("Worker", style="bold")
    per_worker.add_column("Blocks", justify="right")
    per_worker.add_column("Ticks", justify="right")
    per_worker.add_column("Result")
    for name, w in report.workers.items():
        if w.error:
            outcome = f"[red]{w.error}[/red]"
        elif w.result is not None and w.result.success:
            outcome = f"[green]{w.result.message}[/green]"
        else:
            outcome = w.result.message if w.result else "-"
        per_worker.add_row(name, str(w.blocks_placed), str(w.ticks), outcome)
    console.print(per_worker)


def main() -> None:
    parser = argparse.ArgumentParser(description="Collaborative build demo (in-memory world).")
    parser.add_argument("--workers", type=int, default=4, help="Number of agent threads.")
    parser.add_argument(
        "--size",
        type=int,
        nargs=3,
        default=[9, 6, 9],
        metavar=("WIDTH", "HEIGHT", "DEPTH"),
        help="Box dimensions.",
    )
    parser.add_argument("--structure", type=str, default="house", help="Structure type name.")
    parser.add_argument("--block", type=str, default="oak planks", help="Block to build with.")
    parser.add_argument("--config", type=Path, default=None, help="Alternate coordination.yaml.")
    parser.add_argument(
        "--event-log",
        type=Path,
        default=None,
        help="Write monitoring events here (defaults to the configured path).",
    )
    args = parser.parse_args()

    config = load_coordination_config(args.config)
    configure_logging(log_level_of(config))

    bus, sink = build_monitoring_stack(
        args.event_log or config.monitoring.event_log_path, use_default_bus=True
    )
    anchor = BlockPos(0, 64, 0)
    width, height, depth = args.size
    block = normalize_block_id(args.block, config.block_namespace)

    try:
        report = run_collaborative_build(
            config=config,
            structure_type=args.structure,
            plan=hollow_box(anchor, width, height, depth, block),
            anchor=anchor,
            workers=[f"Steve{i + 1}" for i in range(args.workers)],
            world=InMemoryWorld(spawn=anchor),
            bus=bus,
        )
    finally:
        if sink is not None:
            sink.close()

    render_report(report, Console())


if __name__ == "__main__":
    main()

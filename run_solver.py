#!/usr/bin/env python3
"""
Main entry point for the Grippr lookup-table generator.

Solves inverse kinematics for every cell of the target grid, snaps each
solution to whole degrees, and writes the angle table for the embedded
controller.  Run headless, or watch the arm work through the grid.

Usage examples::

    # Solve the default grid and write a C header
    python run_solver.py --mode solve --output grippr_angles.h

    # Same, as JSON, on a finer grid
    python run_solver.py --step-x 5 --step-z 10 --output table.json

    # Watch the solve in a Pygame window
    python run_solver.py --mode visualize
"""

from __future__ import annotations

import argparse
from typing import List

from grippr_sim.envs.arm_table_env import ArmTableEnv
from grippr_sim.envs.configs import ArmTableEnvConfig
from grippr_sim.export.lookup_table import LookupTable
from grippr_sim.scheduling.grid import GridConfig
from grippr_sim.scheduling.scheduler import TargetGridScheduler
from grippr_sim.scheduling.targets import TargetPoint
from grippr_sim.solver.gradient_descent import SolverConfig
from grippr_sim.utils import constants as c
from grippr_sim.visualization.viewer import SimViewer

# ======================================================================
# Configuration builders
# ======================================================================


def _build_grid_config(args: argparse.Namespace) -> GridConfig:
    """Construct a ``GridConfig`` from parsed CLI arguments.

    Args:
        args: Namespace from ``argparse``.

    Returns:
        A ``GridConfig`` instance.
    """
    return GridConfig(
        min_x=args.min_x,
        max_x=args.max_x,
        step_x=args.step_x,
        min_z=args.min_z,
        max_z=args.max_z,
        step_z=args.step_z,
        height_y=args.height_y,
    )


def _build_solver_config(args: argparse.Namespace) -> SolverConfig:
    """Construct a ``SolverConfig`` from parsed CLI arguments.

    Args:
        args: Namespace from ``argparse``.

    Returns:
        A ``SolverConfig`` instance.
    """
    return SolverConfig(tolerance=args.tolerance, max_iterations=args.max_iterations)


def _export_callback(grid: GridConfig, output: str):
    """Return a completion callback that writes the table to *output*.

    Args:
        grid: Grid the targets were enumerated from.
        output: Destination path; the suffix selects the format.

    Returns:
        Callable taking the finished target list.
    """

    def _export(targets: List[TargetPoint]) -> None:
        table = LookupTable.from_targets(targets, grid)
        path = table.save(output)
        print(f"Lookup table ({len(table.rows)} cells) written to {path}")

    return _export


# ======================================================================
# Mode runners
# ======================================================================


def _run_solve(args: argparse.Namespace) -> None:
    """Solve the grid headless and export the table.

    Args:
        args: Parsed CLI arguments.
    """
    grid = _build_grid_config(args)
    scheduler = TargetGridScheduler(
        grid=grid,
        solver_config=_build_solver_config(args),
        on_complete=_export_callback(grid, args.output),
        verbose=not args.quiet,
    )
    scheduler.run(max_ticks=args.max_ticks)
    if not scheduler.is_complete:
        progress = scheduler.progress()
        print(
            f"Stopped after {scheduler.ticks} ticks with "
            f"{progress['created']}/{progress['total']} targets started; "
            "no table written."
        )


def _run_visualize(args: argparse.Namespace) -> None:
    """Drive the solve through ``ArmTableEnv`` with a live viewer.

    Args:
        args: Parsed CLI arguments.
    """
    grid = _build_grid_config(args)
    env_cfg = ArmTableEnvConfig(
        grid=grid,
        solver=_build_solver_config(args),
        verbose=not args.quiet,
        episode_length=args.max_ticks or ArmTableEnvConfig.episode_length,
    )
    env = ArmTableEnv(env_cfg, on_complete=_export_callback(grid, args.output))
    viewer = SimViewer(fps=args.fps)
    env.reset()
    tick = 0
    done = False
    alive = True
    while alive and not done:
        _, _, terminated, truncated, info = env.step(0)
        tick += 1
        done = terminated or truncated
        if tick % max(args.render_every, 1) == 0 or done:
            alive = viewer.render_frame(
                env.render(), tick, info, env.scheduler.progress()
            )
    viewer.close()


# ======================================================================
# CLI
# ======================================================================


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed ``argparse.Namespace``.
    """
    parser = argparse.ArgumentParser(description="Grippr angle lookup-table generator")
    parser.add_argument("--mode", choices=["solve", "visualize"], default="solve")
    parser.add_argument("--output", default="grippr_angles.h")
    parser.add_argument("--min-x", type=float, default=c.TARGET_MIN_X)
    parser.add_argument("--max-x", type=float, default=c.TARGET_MAX_X)
    parser.add_argument("--step-x", type=float, default=c.TARGET_STEP_X)
    parser.add_argument("--min-z", type=float, default=c.TARGET_MIN_Z)
    parser.add_argument("--max-z", type=float, default=c.TARGET_MAX_Z)
    parser.add_argument("--step-z", type=float, default=c.TARGET_STEP_Z)
    parser.add_argument("--height-y", type=float, default=c.TARGET_Y)
    parser.add_argument("--tolerance", type=float, default=c.TOLERANCE)
    parser.add_argument("--max-iterations", type=int, default=c.MAX_ITERATIONS)
    parser.add_argument("--max-ticks", type=int, default=None)
    parser.add_argument("--fps", type=int, default=0)
    parser.add_argument("--render-every", type=int, default=10)
    parser.add_argument("--quiet", action="store_true")
    return parser.parse_args()


# ======================================================================
# Dispatch
# ======================================================================


# Mapping from mode name to runner function
_MODE_DISPATCH = {
    "solve": _run_solve,
    "visualize": _run_visualize,
}


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------
if __name__ == "__main__":
    args = _parse_args()
    print(f"Mode: {args.mode} | Output: {args.output}")
    print("-" * 60)
    _MODE_DISPATCH[args.mode](args)

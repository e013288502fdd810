"""
Tick-driven scheduler that walks the target grid.

The scheduler owns every piece of mutable simulation state in a single
``SolverContext``.  Each external tick advances the solve by one bounded
unit of work: creating the next target, one solver step, and, on the tick
a target converges, the polish steps plus the whole-degree refinement.

Classes:
    SolverContext: Targets, grid cursor, live pose, and warm-start pose.
    TargetGridScheduler: Per-tick driver of the grid solve.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np

from grippr_sim.kinematics.chain import DEFAULT_CHAIN, ChainSpec, forward_kinematics
from grippr_sim.scheduling.grid import GridConfig, iter_grid
from grippr_sim.scheduling.targets import TargetPoint, TargetState
from grippr_sim.solver.gradient_descent import GradientDescentSolver, SolverConfig

CompletionCallback = Callable[[List[TargetPoint]], None]


@dataclass
class SolverContext:
    """All mutable state of one grid solve.

    Attributes:
        current_angles: Pose shown by the display, updated every step.
        last_solved_pose: Final angles of the last converged target; seeds
            the next target.
        targets: Every target created so far, in grid order.
        cursor: Remaining grid cells.
        completed: True once every cell reached a terminal state.
    """

    current_angles: np.ndarray
    last_solved_pose: np.ndarray
    targets: List[TargetPoint] = field(default_factory=list)
    cursor: Optional[Iterator[Tuple[Tuple[int, int], np.ndarray]]] = None
    completed: bool = False

    @classmethod
    def start(cls, grid: GridConfig, chain: ChainSpec) -> "SolverContext":
        """Create a context positioned before the first grid cell.

        Args:
            grid: Grid to walk.
            chain: Chain whose default pose seeds the first target.

        Returns:
            A fresh ``SolverContext``.
        """
        return cls(
            current_angles=chain.default_angles(),
            last_solved_pose=chain.default_angles(),
            cursor=iter_grid(grid),
        )


class TargetGridScheduler:
    """Solves the target grid one tick at a time.

    Attributes:
        grid: Grid bounds.
        chain: Chain geometry.
        solver: Gradient-descent solver.
        refiner: Whole-degree refiner, shared with the solver.
        context: Mutable state of the solve.
        on_complete: Called once with the finished targets.
        verbose: Print progress lines when True.
    """

    def __init__(
        self,
        grid: Optional[GridConfig] = None,
        chain: ChainSpec = DEFAULT_CHAIN,
        solver_config: Optional[SolverConfig] = None,
        on_complete: Optional[CompletionCallback] = None,
        verbose: bool = False,
    ) -> None:
        """Initialise the scheduler.

        Args:
            grid: Optional ``GridConfig``; defaults are used when *None*.
            chain: Chain geometry.
            solver_config: Optional ``SolverConfig`` for the solver.
            on_complete: Callback run exactly once when the grid is done.
            verbose: Print per-target progress.
        """
        self.grid = grid or GridConfig()
        self.chain = chain
        self.solver = GradientDescentSolver(chain, solver_config)
        self.refiner = self.solver.refiner
        self.on_complete = on_complete
        self.verbose = verbose
        self.context = SolverContext.start(self.grid, chain)
        self._ticks = 0

    # ------------------------------------------------------------------
    # Read-only views for the display
    # ------------------------------------------------------------------

    @property
    def targets(self) -> List[TargetPoint]:
        """Targets created so far, in grid order."""
        return self.context.targets

    @property
    def current_target(self) -> Optional[TargetPoint]:
        """The most recently created target, or None before the first tick."""
        return self.context.targets[-1] if self.context.targets else None

    @property
    def current_angles(self) -> np.ndarray:
        """Copy of the pose the arm is currently displayed in."""
        return self.context.current_angles.copy()

    @property
    def effector_position(self) -> np.ndarray:
        """Live end-effector position for ``current_angles``."""
        return forward_kinematics(self.context.current_angles, self.chain)

    @property
    def is_complete(self) -> bool:
        """Whether every grid cell reached a terminal state."""
        return self.context.completed

    @property
    def ticks(self) -> int:
        """Number of ticks that did work."""
        return self._ticks

    def progress(self) -> Dict[str, int]:
        """Count targets per outcome.

        Returns:
            Mapping with ``total``, ``created``, ``refined`` and ``unsolved``.
        """
        states = [t.state for t in self.context.targets]
        return {
            "total": self.grid.total,
            "created": len(states),
            "refined": states.count(TargetState.REFINED),
            "unsolved": states.count(TargetState.UNSOLVED),
        }

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def _next_target(self) -> Optional[TargetPoint]:
        """Create the target for the next grid cell, warm-started.

        Returns:
            The new target, or None when the grid is exhausted.
        """
        cell = next(self.context.cursor, None)
        if cell is None:
            return None
        grid_index, goal = cell
        target = TargetPoint.create(goal, self.context.last_solved_pose, grid_index)
        self.context.targets.append(target)
        if self.verbose:
            x, y, z = goal
            print(f"Starting {x:g}, {y:g}, {z:g}")
        return target

    def _finish_target(self, target: TargetPoint) -> None:
        """Refine a target that left the ``SOLVING`` state and record its pose.

        Args:
            target: Target that converged or hit the iteration cap.
        """
        self.refiner.refine(target)
        self.context.current_angles = target.rots.copy()
        if target.found:
            self.context.last_solved_pose = target.rots.copy()
        if self.verbose:
            angles = ", ".join(f"{a:g}" for a in target.rots)
            label = "found" if target.found else "unsolved"
            print(f"   {label} @ {angles} (distance {target.distance:.3f})")

    def _complete(self) -> bool:
        """Mark the grid done and fire the completion callback once.

        Returns:
            True, for use as the tick result.
        """
        self.context.completed = True
        if self.verbose:
            summary = self.progress()
            print(
                f"Grid complete: {summary['refined']} refined, "
                f"{summary['unsolved']} unsolved of {summary['total']}"
            )
        if self.on_complete is not None:
            self.on_complete(list(self.context.targets))
        return True

    def tick(self) -> bool:
        """Advance the grid solve by one tick.

        Returns:
            True only on the tick at which the last target finished.
        """
        if self.context.completed:
            return False
        target = self.current_target
        if target is None or target.is_done:
            target = self._next_target()
            if target is None:
                return self._complete()
        self._ticks += 1
        state = self.solver.tick(target)
        self.context.current_angles = target.rots.copy()
        if state is not TargetState.SOLVING:
            self._finish_target(target)
            if len(self.context.targets) == self.grid.total:
                return self._complete()
        return False

    def run(self, max_ticks: Optional[int] = None) -> List[TargetPoint]:
        """Tick until the grid is complete or *max_ticks* were spent.

        Args:
            max_ticks: Optional cap on the number of ticks.

        Returns:
            The targets created so far.
        """
        spent = 0
        while not self.context.completed:
            if max_ticks is not None and spent >= max_ticks:
                break
            self.tick()
            spent += 1
        return self.targets

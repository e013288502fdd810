"""
Per-target bookkeeping for the grid solve.

Classes:
    TargetState: Lifecycle of a single grid target.
    TargetPoint: One grid cell, its goal, and the angles solving it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from grippr_sim.utils.helpers import as_joint_angles


class TargetState(Enum):
    """Lifecycle of a target: ``SOLVING -> CONVERGED -> REFINED``.

    ``UNSOLVED`` is the terminal state of a target that hit the iteration
    cap without reaching the tolerance.
    """

    SOLVING = "solving"
    CONVERGED = "converged"
    REFINED = "refined"
    UNSOLVED = "unsolved"

    @property
    def is_terminal(self) -> bool:
        """Whether the scheduler may move on from a target in this state."""
        return self in (TargetState.REFINED, TargetState.UNSOLVED)


@dataclass(eq=False)
class TargetPoint:
    """A single grid target being solved.

    Attributes:
        initial_pos: The goal assigned at creation; never changes.
        rots: Joint angles (degrees) currently associated with the target.
        pos: Best-known reached position.
        found: True once the convergence tolerance was met.
        state: Lifecycle state.
        distance: Last measured distance between ``pos`` and the goal.
        iterations: Solver steps spent on this target.
        grid_index: (ix, iz) cell coordinates within the grid.
    """

    initial_pos: np.ndarray
    rots: np.ndarray
    pos: Optional[np.ndarray] = None
    found: bool = False
    state: TargetState = TargetState.SOLVING
    distance: float = float("inf")
    iterations: int = 0
    grid_index: Tuple[int, int] = (0, 0)

    def __post_init__(self) -> None:
        """Normalise arrays and freeze the goal."""
        goal = np.array(self.initial_pos, dtype=np.float64).reshape(3)
        goal.setflags(write=False)
        self.initial_pos = goal
        self.rots = as_joint_angles(self.rots)
        if self.pos is None:
            self.pos = goal.copy()
        else:
            self.pos = np.array(self.pos, dtype=np.float64).reshape(3)

    @classmethod
    def create(
        cls,
        goal: Sequence[float],
        seed_angles: Sequence[float],
        grid_index: Tuple[int, int] = (0, 0),
    ) -> "TargetPoint":
        """Create a target warm-started from *seed_angles*.

        Args:
            goal: World position [x, y, z] to reach.
            seed_angles: Angles the solver starts from (copied).
            grid_index: (ix, iz) cell coordinates.

        Returns:
            A new ``TargetPoint`` in the ``SOLVING`` state.
        """
        return cls(initial_pos=goal, rots=seed_angles, grid_index=grid_index)

    @property
    def is_done(self) -> bool:
        """Whether the target reached a terminal state."""
        return self.state.is_terminal

    def whole_angles(self) -> Tuple[int, ...]:
        """Return the angles rounded to integers (exact once refined)."""
        return tuple(int(round(a)) for a in self.rots)

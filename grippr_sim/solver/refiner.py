"""
Whole-degree refinement of converged solutions.

The embedded controller stores integer degrees only, and rounding a
continuous solution can land far from the goal because forward kinematics
is nonlinear in the angles.  The refiner instead tries every integer
combination in a small window around the continuous solution and keeps the
one whose effector lands closest to the original goal.

Classes:
    WholeAngleRefiner: Exhaustive integer-window search around a solution.
"""

from __future__ import annotations

import itertools
import math
from typing import Optional

import numpy as np

from grippr_sim.kinematics.chain import DEFAULT_CHAIN, ChainSpec, forward_kinematics
from grippr_sim.scheduling.targets import TargetPoint, TargetState
from grippr_sim.utils.constants import REFINE_OFFSET, REFINE_WINDOW


class WholeAngleRefiner:
    """Snaps a target's angles to the best nearby whole-degree combination.

    For each joint the window starts at ``floor(angle) + offset`` and spans
    ``window`` consecutive integers, giving ``window ** joints`` candidates.

    Attributes:
        chain: Chain geometry used to evaluate candidates.
        window: Integers tried per joint.
        offset: Start of the window relative to ``floor(angle)``.
    """

    def __init__(
        self,
        chain: ChainSpec = DEFAULT_CHAIN,
        window: int = REFINE_WINDOW,
        offset: int = REFINE_OFFSET,
    ) -> None:
        """Initialise the refiner.

        Args:
            chain: Chain geometry.
            window: Integers tried per joint (must be >= 1).
            offset: Window start relative to the floored angle.

        Raises:
            ValueError: If *window* is less than one.
        """
        if window < 1:
            raise ValueError(f"window must be >= 1, got {window}")
        self.chain = chain
        self.window = window
        self.offset = offset

    def base_angles(self, angles: np.ndarray) -> np.ndarray:
        """Lowest integer tried for each joint."""
        return np.array([math.floor(a) + self.offset for a in angles], dtype=np.float64)

    def candidate_window(self, angles: np.ndarray) -> np.ndarray:
        """Enumerate every whole-degree candidate around *angles*.

        The last joint varies fastest.

        Args:
            angles: Continuous joint-angle vector.

        Returns:
            Integer array of shape ``(window ** joints, joints)``.
        """
        base = self.base_angles(angles).astype(np.int64)
        offsets = itertools.product(range(self.window), repeat=base.shape[0])
        return np.array([base + np.array(o) for o in offsets], dtype=np.int64)

    def best_candidate(self, angles: np.ndarray, goal: np.ndarray) -> tuple:
        """Search the window for the candidate closest to *goal*.

        Ties keep the earliest candidate.  If no candidate yields a finite
        distance the floor combination is returned.

        Args:
            angles: Continuous joint-angle vector.
            goal: Goal position.

        Returns:
            Tuple of (angles, reached position, squared distance).
        """
        best: Optional[tuple] = None
        for candidate in self.candidate_window(angles):
            whole = candidate.astype(np.float64)
            reached = forward_kinematics(whole, self.chain)
            sq_distance = float(np.sum((reached - goal) ** 2))
            if not math.isfinite(sq_distance):
                continue
            if best is None or sq_distance < best[2]:
                best = (whole, reached, sq_distance)
        if best is None:
            floor = self.base_angles(angles) - self.offset
            reached = forward_kinematics(floor, self.chain)
            best = (floor, reached, float(np.sum((reached - goal) ** 2)))
        return best

    def refine(self, target: TargetPoint) -> None:
        """Replace ``target.rots`` with the best whole-degree combination.

        Measures against ``target.initial_pos``, not the drifting ``pos``.
        A converged target becomes ``REFINED``; an unsolved one keeps its
        state.

        Args:
            target: Target whose continuous solution is refined in place.
        """
        angles, reached, sq_distance = self.best_candidate(
            target.rots, target.initial_pos
        )
        target.rots = angles
        target.pos = reached
        target.distance = math.sqrt(sq_distance)
        if target.state is TargetState.CONVERGED:
            target.state = TargetState.REFINED

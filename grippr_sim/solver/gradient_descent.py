"""
Gradient-descent inverse kinematics.

Each step estimates the gradient of the effector's distance to the goal
with respect to every joint by a forward finite difference, then moves all
joints against it at once.  Close to the goal the probe and the learning
rate shrink so the effector does not overshoot.

Classes:
    SolverConfig: Step sizes, tolerance, and iteration cap.
    GradientDescentSolver: Per-tick solver operating on one ``TargetPoint``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from grippr_sim.kinematics.chain import DEFAULT_CHAIN, ChainSpec, forward_kinematics
from grippr_sim.scheduling.targets import TargetPoint, TargetState
from grippr_sim.solver.refiner import WholeAngleRefiner
from grippr_sim.utils.constants import (
    LEARNING_RATE,
    MAX_ITERATIONS,
    NEAR_FACTOR,
    NEAR_PROBE_SCALE,
    NEAR_RATE_SCALE,
    POLISH_STEPS,
    PROBE_ANGLE,
    TOLERANCE,
)


@dataclass(frozen=True)
class SolverConfig:
    """Tuning of the gradient-descent solver.

    Attributes:
        probe_angle: Finite-difference probe (degrees).
        learning_rate: Degrees moved per unit of gradient.
        tolerance: Distance (mm) at which a target counts as reached.
        near_factor: Multiple of ``tolerance`` below which steps shrink.
        near_probe_scale: Probe multiplier close to the goal.
        near_rate_scale: Learning-rate multiplier close to the goal.
        polish_steps: Extra unconditional steps run after convergence.
        max_iterations: Steps after which a target is given up on.
    """

    probe_angle: float = PROBE_ANGLE
    learning_rate: float = LEARNING_RATE
    tolerance: float = TOLERANCE
    near_factor: float = NEAR_FACTOR
    near_probe_scale: float = NEAR_PROBE_SCALE
    near_rate_scale: float = NEAR_RATE_SCALE
    polish_steps: int = POLISH_STEPS
    max_iterations: int = MAX_ITERATIONS

    def __post_init__(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: On non-positive step sizes or tolerance, a negative
                polish count, or an iteration cap below one.
        """
        positives = {
            "probe_angle": self.probe_angle,
            "learning_rate": self.learning_rate,
            "tolerance": self.tolerance,
            "near_factor": self.near_factor,
            "near_probe_scale": self.near_probe_scale,
            "near_rate_scale": self.near_rate_scale,
        }
        for name, value in positives.items():
            if value <= 0.0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.polish_steps < 0:
            raise ValueError(f"polish_steps must be >= 0, got {self.polish_steps}")
        if self.max_iterations < 1:
            raise ValueError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )


class GradientDescentSolver:
    """Moves a target's joint angles toward its goal, one step per call.

    The solver keeps no per-target state: every call receives the target
    it works on and leaves all bookkeeping on that target.

    Attributes:
        chain: Chain geometry used as the evaluation function.
        config: Solver tuning.
    """

    def __init__(
        self,
        chain: ChainSpec = DEFAULT_CHAIN,
        config: Optional[SolverConfig] = None,
        refiner: Optional[WholeAngleRefiner] = None,
    ) -> None:
        """Initialise the solver.

        Args:
            chain: Chain geometry.
            config: Optional ``SolverConfig``; defaults are used when *None*.
            refiner: Optional ``WholeAngleRefiner`` run at the end of
                ``solve``; one over *chain* is created when *None*.
        """
        self.chain = chain
        self.config = config or SolverConfig()
        self.refiner = refiner or WholeAngleRefiner(chain)

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------

    def _distance_from(
        self, angles: np.ndarray, goal: np.ndarray
    ) -> Tuple[np.ndarray, float]:
        """Evaluate FK for *angles* and its distance to *goal*.

        Args:
            angles: Joint-angle vector.
            goal: Goal position.

        Returns:
            Tuple of (reached position, Euclidean distance).
        """
        reached = forward_kinematics(angles, self.chain)
        return reached, float(np.linalg.norm(reached - goal))

    def distance(self, target: TargetPoint) -> float:
        """Distance from the effector at ``target.rots`` to the goal.

        Args:
            target: Target to measure; not modified.

        Returns:
            Euclidean distance in mm.
        """
        return self._distance_from(target.rots, target.initial_pos)[1]

    def has_converged(self, distance: float) -> bool:
        """Whether *distance* is within the convergence tolerance."""
        return distance <= self.config.tolerance

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def _step_sizes(self, distance: float) -> Tuple[float, float]:
        """Return (probe, learning rate), shrunk when close to the goal.

        Args:
            distance: Current distance to the goal.

        Returns:
            Tuple of (probe angle, learning rate).
        """
        cfg = self.config
        if distance < cfg.tolerance * cfg.near_factor:
            return (
                cfg.probe_angle * cfg.near_probe_scale,
                cfg.learning_rate * cfg.near_rate_scale,
            )
        return cfg.probe_angle, cfg.learning_rate

    def gradient(
        self, angles: np.ndarray, goal: np.ndarray, probe: float, current: float
    ) -> np.ndarray:
        """Forward-difference gradient of the goal distance per joint.

        Args:
            angles: Joint-angle vector; restored before returning.
            goal: Goal position.
            probe: Perturbation applied to one joint at a time.
            current: Distance at the unperturbed *angles*.

        Returns:
            Gradient vector, one entry per joint.
        """
        gradients = np.zeros_like(angles)
        for i in range(angles.shape[0]):
            old_angle = angles[i]
            angles[i] = old_angle + probe
            _, perturbed = self._distance_from(angles, goal)
            gradients[i] = (perturbed - current) / probe
            angles[i] = old_angle
        return gradients

    def step(self, target: TargetPoint) -> float:
        """Advance *target* by one gradient-descent step.

        Updates ``rots``, ``pos``, ``distance`` and ``iterations`` in place.

        Args:
            target: Target being solved.

        Returns:
            Distance to the goal after the step.
        """
        _, current = self._distance_from(target.rots, target.initial_pos)
        probe, rate = self._step_sizes(current)
        gradients = self.gradient(target.rots, target.initial_pos, probe, current)
        target.rots -= rate * gradients
        target.pos, target.distance = self._distance_from(
            target.rots, target.initial_pos
        )
        target.iterations += 1
        return target.distance

    def polish(self, target: TargetPoint) -> float:
        """Run the post-convergence steps and record the result.

        Args:
            target: A target that just met the tolerance.

        Returns:
            Distance to the goal after polishing.
        """
        for _ in range(self.config.polish_steps):
            self.step(target)
        target.pos, target.distance = self._distance_from(
            target.rots, target.initial_pos
        )
        target.found = True
        target.state = TargetState.CONVERGED
        return target.distance

    def tick(self, target: TargetPoint) -> TargetState:
        """One scheduler tick: step, then detect convergence or give up.

        Args:
            target: Target in the ``SOLVING`` state.

        Returns:
            The target's state after the tick (``SOLVING``, ``CONVERGED``
            or ``UNSOLVED``).
        """
        distance = self.step(target)
        if self.has_converged(distance):
            self.polish(target)
        elif target.iterations >= self.config.max_iterations:
            target.state = TargetState.UNSOLVED
        return target.state

    def solve(self, target: TargetPoint, refine: bool = True) -> bool:
        """Tick *target* until it converges or hits the iteration cap.

        With *refine* the result is then snapped to whole degrees, leaving a
        converged target ``REFINED`` and an unsolved one ``UNSOLVED``.

        Args:
            target: Target to solve.
            refine: Run the whole-degree refiner once ticking stops.

        Returns:
            True if the target converged.
        """
        while target.state is TargetState.SOLVING:
            self.tick(target)
        if refine:
            self.refiner.refine(target)
        return target.found

"""
Gymnasium environment driving the grid solve one tick per step.

The action is a no-op tick command; all decisions are made by the solver.
Observations expose the live pose, the live effector position, and the goal
of the target being solved.  ``render()`` draws a top-down and a side view
of the arm, the targets, and the effector into an RGB array.

Classes:
    ArmTableEnv: Gymnasium environment around ``TargetGridScheduler``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from grippr_sim.envs.configs import ArmTableEnvConfig
from grippr_sim.kinematics.chain import joint_positions
from grippr_sim.scheduling.scheduler import CompletionCallback, TargetGridScheduler
from grippr_sim.scheduling.targets import TargetPoint
from grippr_sim.utils.constants import (
    COLOR_ARM,
    COLOR_BACKGROUND,
    COLOR_EFFECTOR_FOUND,
    COLOR_EFFECTOR_SEEKING,
    COLOR_FLOOR,
    COLOR_TARGET,
    NUM_JOINTS,
)

# World window shown by each view, (horizontal min, max, vertical min, max) in mm.
_TOP_VIEW = (-350.0, 350.0, -100.0, 600.0)
_SIDE_VIEW = (-100.0, 600.0, 0.0, 700.0)


class ArmTableEnv(gym.Env):
    """Gymnasium environment for the tick-driven lookup-table solve.

    Attributes:
        metadata: Gymnasium metadata with supported render modes.
        cfg: ``ArmTableEnvConfig`` controlling grid, solver, and rendering.
        scheduler: Scheduler of the current episode.
    """

    metadata: Dict[str, Any] = {"render_modes": ["rgb_array", "human"]}

    def __init__(
        self,
        cfg: ArmTableEnvConfig | None = None,
        on_complete: Optional[CompletionCallback] = None,
    ) -> None:
        """Initialise the environment.

        Args:
            cfg: Optional configuration; defaults are used when *None*.
            on_complete: Forwarded to every scheduler the env creates.
        """
        super().__init__()
        self.cfg = cfg or ArmTableEnvConfig()
        self.render_mode = self.cfg.render_mode
        self.on_complete = on_complete
        self._step_count = 0
        self._init_spaces()
        self.scheduler = self._build_scheduler()

    # ------------------------------------------------------------------
    # Initialisation helpers
    # ------------------------------------------------------------------

    def _init_spaces(self) -> None:
        """Define action and observation Gymnasium spaces."""
        self.action_space = spaces.Discrete(1)
        self.observation_space = spaces.Dict(
            {
                "angles": spaces.Box(
                    low=-np.inf, high=np.inf, shape=(NUM_JOINTS,), dtype=np.float64
                ),
                "effector": spaces.Box(
                    low=-np.inf, high=np.inf, shape=(3,), dtype=np.float64
                ),
                "target": spaces.Box(
                    low=-np.inf, high=np.inf, shape=(3,), dtype=np.float64
                ),
            }
        )

    def _build_scheduler(self) -> TargetGridScheduler:
        """Create a scheduler positioned before the first grid cell."""
        return TargetGridScheduler(
            grid=self.cfg.grid,
            chain=self.cfg.chain,
            solver_config=self.cfg.solver,
            on_complete=self.on_complete,
            verbose=self.cfg.verbose,
        )

    # ------------------------------------------------------------------
    # Gymnasium API
    # ------------------------------------------------------------------

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """Restart the grid solve from the first cell.

        Args:
            seed: Unused beyond Gymnasium bookkeeping; the solve is deterministic.
            options: Unused; for Gymnasium compatibility.

        Returns:
            Tuple of (observation dict, info dict).
        """
        super().reset(seed=seed)
        self._step_count = 0
        self.scheduler = self._build_scheduler()
        return self._build_observation(), self._build_info(False)

    def step(
        self, action: Any = 0
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """Advance the grid solve by one tick.

        Args:
            action: Ignored tick command (the single element of ``Discrete(1)``).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        completed_now = self.scheduler.tick()
        self._step_count += 1
        target = self.scheduler.current_target
        reward = -float(target.distance) if target is not None else 0.0
        if not np.isfinite(reward):
            reward = 0.0
        terminated = self.scheduler.is_complete
        truncated = not terminated and self._step_count >= self.cfg.episode_length
        return (
            self._build_observation(),
            reward,
            terminated,
            truncated,
            self._build_info(completed_now),
        )

    # ------------------------------------------------------------------
    # Observation builder
    # ------------------------------------------------------------------

    def _build_observation(self) -> Dict[str, np.ndarray]:
        """Assemble the observation dictionary.

        Returns:
            Dictionary with ``'angles'``, ``'effector'`` and ``'target'``.
        """
        target = self.scheduler.current_target
        goal = (
            np.array(target.initial_pos, dtype=np.float64)
            if target is not None
            else self.cfg.grid.position(0, 0)
        )
        return {
            "angles": self.scheduler.current_angles,
            "effector": self.scheduler.effector_position,
            "target": goal,
        }

    def _build_info(self, completed_now: bool) -> Dict[str, Any]:
        """Assemble the info dictionary.

        Args:
            completed_now: True on the tick the grid finished.

        Returns:
            Dictionary with target index, state, and completion flags.
        """
        target = self.scheduler.current_target
        return {
            "target_index": len(self.scheduler.targets) - 1,
            "state": target.state.value if target is not None else None,
            "completed": self.scheduler.is_complete,
            "completed_now": completed_now,
            "is_success": self.scheduler.is_complete,
        }

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _to_pixel(
        self, u: float, v: float, view: Tuple[float, float, float, float], w: int, h: int
    ) -> Tuple[int, int]:
        """Map view coordinates to pixel coordinates inside one panel.

        Args:
            u: Horizontal world coordinate.
            v: Vertical world coordinate (up is positive).
            view: (u_min, u_max, v_min, v_max) of the panel.
            w: Panel width.
            h: Panel height.

        Returns:
            Tuple of (pixel_x, pixel_y) clipped to the panel.
        """
        u_min, u_max, v_min, v_max = view
        px = int((u - u_min) / (u_max - u_min) * (w - 1))
        py = int((1.0 - (v - v_min) / (v_max - v_min)) * (h - 1))
        return int(np.clip(px, 0, w - 1)), int(np.clip(py, 0, h - 1))

    def _draw_disc(
        self,
        panel: np.ndarray,
        centre: Tuple[int, int],
        radius: int,
        colour: Tuple[int, int, int],
    ) -> None:
        """Draw a filled disc on a panel.

        Args:
            panel: Mutable (H, W, 3) uint8 array.
            centre: Pixel (x, y).
            radius: Radius in pixels.
            colour: RGB colour tuple.
        """
        h, w = panel.shape[:2]
        rr, cc = np.ogrid[:h, :w]
        mask = (rr - centre[1]) ** 2 + (cc - centre[0]) ** 2 <= radius**2
        panel[mask] = colour

    def _draw_segment(
        self,
        panel: np.ndarray,
        start: Tuple[int, int],
        end: Tuple[int, int],
        colour: Tuple[int, int, int],
    ) -> None:
        """Draw a thick line between two pixels as a run of discs."""
        samples = max(abs(end[0] - start[0]), abs(end[1] - start[1]), 1)
        for t in np.linspace(0.0, 1.0, samples + 1):
            x = int(round(start[0] + t * (end[0] - start[0])))
            y = int(round(start[1] + t * (end[1] - start[1])))
            panel[max(y - 1, 0) : y + 2, max(x - 1, 0) : x + 2] = colour

    def _draw_panel(
        self,
        panel: np.ndarray,
        view: Tuple[float, float, float, float],
        project: Any,
        chain_points: np.ndarray,
        targets: List[TargetPoint],
        effector_colour: Tuple[int, int, int],
    ) -> None:
        """Draw the arm, targets, and effector into one view panel.

        Args:
            panel: Mutable (H, W, 3) uint8 array.
            view: World window of the panel.
            project: Maps a world [x, y, z] to the panel's (u, v).
            chain_points: Joint positions from the ground up.
            targets: Targets to mark.
            effector_colour: Colour of the effector marker.
        """
        h, w = panel.shape[:2]
        pixels = [self._to_pixel(*project(p), view, w, h) for p in chain_points]
        for start, end in zip(pixels[:-1], pixels[1:]):
            self._draw_segment(panel, start, end, COLOR_ARM)
        for target in targets:
            self._draw_disc(
                panel, self._to_pixel(*project(target.pos), view, w, h), 2, COLOR_TARGET
            )
        self._draw_disc(panel, pixels[-1], 5, effector_colour)

    def render(self) -> np.ndarray:
        """Render the top-down (left) and side (right) views as an RGB image.

        Returns:
            (H, W, 3) uint8 NumPy array.
        """
        h, w = self.cfg.observation_height, self.cfg.observation_width
        canvas = np.zeros((h, w, 3), dtype=np.uint8)
        canvas[:] = COLOR_BACKGROUND
        half = w // 2
        top, side = canvas[:, :half], canvas[:, half:]
        chain = joint_positions(self.scheduler.current_angles, self.cfg.chain)
        ground = np.array([[0.0, 0.0, 0.0]])
        points = np.vstack([ground, chain])
        side_floor = self._to_pixel(0.0, 0.0, _SIDE_VIEW, side.shape[1], h)[1]
        side[side_floor:, :] = COLOR_FLOOR
        target = self.scheduler.current_target
        found = target is not None and target.found
        colour = COLOR_EFFECTOR_FOUND if found else COLOR_EFFECTOR_SEEKING
        targets = self.scheduler.targets
        self._draw_panel(top, _TOP_VIEW, lambda p: (p[0], p[2]), points, targets, colour)
        self._draw_panel(side, _SIDE_VIEW, lambda p: (p[2], p[1]), points, targets, colour)
        return canvas

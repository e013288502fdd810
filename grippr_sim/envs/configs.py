"""
Dataclass configuration for the arm-table environment.

Classes:
    ArmTableEnvConfig: Grid, solver, episode, and rendering settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from grippr_sim.kinematics.chain import DEFAULT_CHAIN, ChainSpec
from grippr_sim.scheduling.grid import GridConfig
from grippr_sim.solver.gradient_descent import SolverConfig
from grippr_sim.utils.constants import (
    DEFAULT_FPS,
    DEFAULT_RENDER_HEIGHT,
    DEFAULT_RENDER_WIDTH,
)


@dataclass
class ArmTableEnvConfig:
    """Configuration of ``ArmTableEnv``.

    Attributes:
        task: Human-readable task identifier.
        fps: Ticks per second when driven by a live viewer.
        episode_length: Ticks after which an episode is truncated.
        render_mode: Gymnasium render mode (``'rgb_array'`` or ``'human'``).
        observation_height: Pixel height of rendered frames.
        observation_width: Pixel width of rendered frames (two views side by side).
        grid: Target grid.
        solver: Solver tuning.
        chain: Chain geometry.
        verbose: Print per-target progress from the scheduler.
    """

    task: str = "GripprTable-v0"
    fps: int = DEFAULT_FPS
    episode_length: int = 1_000_000
    render_mode: str = "rgb_array"
    observation_height: int = DEFAULT_RENDER_HEIGHT
    observation_width: int = DEFAULT_RENDER_WIDTH
    grid: GridConfig = field(default_factory=GridConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    chain: ChainSpec = DEFAULT_CHAIN
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate episode and rendering settings.

        Raises:
            ValueError: On a non-positive episode length or frame size.
        """
        if self.episode_length < 1:
            raise ValueError(
                f"episode_length must be >= 1, got {self.episode_length}"
            )
        if self.observation_height < 1 or self.observation_width < 2:
            raise ValueError(
                "Frame size too small: "
                f"{self.observation_width}x{self.observation_height}"
            )

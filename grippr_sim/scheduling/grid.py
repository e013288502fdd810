"""
Target grid definition and row-major enumeration.

Classes:
    GridConfig: Inclusive X/Z bounds and steps at a fixed table height.

Functions:
    iter_grid: Yield every grid cell with its index and world position.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Tuple

import numpy as np

from grippr_sim.utils.constants import (
    TARGET_MAX_X,
    TARGET_MAX_Z,
    TARGET_MIN_X,
    TARGET_MIN_Z,
    TARGET_STEP_X,
    TARGET_STEP_Z,
    TARGET_Y,
)
from grippr_sim.utils.helpers import grid_count


@dataclass(frozen=True)
class GridConfig:
    """Bounds of the target grid on the table plane.

    Both bounds are inclusive; X varies fastest.

    Attributes:
        min_x: First X sample (mm).
        max_x: Upper X bound (mm).
        step_x: X spacing (mm).
        min_z: First Z sample (mm).
        max_z: Upper Z bound (mm).
        step_z: Z spacing (mm).
        height_y: Table height every target sits at (mm).
    """

    min_x: float = TARGET_MIN_X
    max_x: float = TARGET_MAX_X
    step_x: float = TARGET_STEP_X
    min_z: float = TARGET_MIN_Z
    max_z: float = TARGET_MAX_Z
    step_z: float = TARGET_STEP_Z
    height_y: float = TARGET_Y

    def __post_init__(self) -> None:
        """Validate steps and bounds.

        Raises:
            ValueError: When a step is not positive or a max lies below its min.
        """
        for axis, lo, hi, step in (
            ("x", self.min_x, self.max_x, self.step_x),
            ("z", self.min_z, self.max_z, self.step_z),
        ):
            if step <= 0.0:
                raise ValueError(f"step_{axis} must be positive, got {step}")
            if hi < lo:
                raise ValueError(f"max_{axis} ({hi}) is below min_{axis} ({lo})")

    @property
    def count_x(self) -> int:
        """Number of samples along X."""
        return grid_count(self.min_x, self.max_x, self.step_x)

    @property
    def count_z(self) -> int:
        """Number of samples along Z."""
        return grid_count(self.min_z, self.max_z, self.step_z)

    @property
    def total(self) -> int:
        """Total number of grid targets."""
        return self.count_x * self.count_z

    def position(self, ix: int, iz: int) -> np.ndarray:
        """World position of cell (*ix*, *iz*).

        Args:
            ix: Column index along X.
            iz: Row index along Z.

        Returns:
            [x, height_y, z] as a float64 array.
        """
        return np.array(
            [
                self.min_x + ix * self.step_x,
                self.height_y,
                self.min_z + iz * self.step_z,
            ],
            dtype=np.float64,
        )

    def summary(self) -> Dict[str, float]:
        """Dimensions of the grid as realised by enumeration.

        ``max_x``/``max_z`` report the last sample actually visited, which
        is below the configured bound when the range is not a whole number
        of steps.

        Returns:
            Mapping with min/max/count per axis and the table height.
        """
        return {
            "min_x": self.min_x,
            "max_x": self.min_x + (self.count_x - 1) * self.step_x,
            "count_x": self.count_x,
            "min_z": self.min_z,
            "max_z": self.min_z + (self.count_z - 1) * self.step_z,
            "count_z": self.count_z,
            "height_y": self.height_y,
        }


def iter_grid(grid: GridConfig) -> Iterator[Tuple[Tuple[int, int], np.ndarray]]:
    """Yield ``((ix, iz), position)`` for every cell in row-major order.

    Args:
        grid: Grid bounds.

    Yields:
        Cell index and world position, X varying fastest.
    """
    for iz in range(grid.count_z):
        for ix in range(grid.count_x):
            yield (ix, iz), grid.position(ix, iz)

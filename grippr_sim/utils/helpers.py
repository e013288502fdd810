"""
Small stateless helpers used across the grippr_sim package.

Provides joint-angle vector validation and inclusive grid counting.
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from grippr_sim.utils.constants import NUM_JOINTS

# Slack so that e.g. (120 - -120) / 10 does not lose its last cell to rounding.
_COUNT_EPSILON: float = 1e-9


def as_joint_angles(values: Iterable[float]) -> np.ndarray:
    """Copy *values* into a float64 joint-angle vector.

    Args:
        values: One angle in degrees per joint.

    Returns:
        A new ``(NUM_JOINTS,)`` float64 array.

    Raises:
        ValueError: If the number of values is not ``NUM_JOINTS``.
    """
    angles = np.array(list(values), dtype=np.float64).reshape(-1)
    if angles.shape[0] != NUM_JOINTS:
        raise ValueError(
            f"Expected {NUM_JOINTS} joint angles, got {angles.shape[0]}"
        )
    return angles


def grid_count(lo: float, hi: float, step: float) -> int:
    """Return the number of samples in the inclusive range [*lo*, *hi*].

    Args:
        lo: First sample.
        hi: Upper bound (inclusive when reached exactly).
        step: Positive spacing between samples.

    Returns:
        Sample count, at least one.
    """
    return int(math.floor((hi - lo) / step + _COUNT_EPSILON)) + 1

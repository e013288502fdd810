"""
Joint-chain description and forward kinematics.

The arm is a serial chain of four revolute joints.  Joint 0 turns the
whole arm about the vertical axis; joints 1-3 pitch it about a horizontal
axis perpendicular to the arm's vertical plane.  Each joint is followed by
a fixed link along the chain's longitudinal (+Y) axis.

Classes:
    JointRole: Index of each joint in an angle vector.
    ChainSpec: Immutable link lengths, axes, and default pose.

Functions:
    forward_kinematics: Map an angle vector to the end-effector position.
    joint_positions: World positions of every joint origin plus the effector.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence, Tuple

import numpy as np

from grippr_sim.utils.constants import (
    BASE_HEIGHT,
    DEFAULT_POSE,
    HORIZONTAL_AXIS,
    LINK_LENGTHS,
    NUM_JOINTS,
    VERTICAL_AXIS,
)
from grippr_sim.utils.helpers import as_joint_angles


class JointRole(IntEnum):
    """Position of each joint within a joint-angle vector."""

    BASE_ROTATION = 0
    SHOULDER = 1
    ELBOW = 2
    WRIST = 3


@dataclass(frozen=True)
class ChainSpec:
    """Static geometry of the arm.

    Attributes:
        base_height: Height of joint 0 above the ground (mm).
        link_lengths: Length of the link following each joint (mm).
        axes: Rotation axis of each joint in its local frame.
        default_pose: Angles (degrees) the arm starts from.
    """

    base_height: float = BASE_HEIGHT
    link_lengths: Tuple[float, ...] = LINK_LENGTHS
    axes: Tuple[Tuple[float, float, float], ...] = (
        VERTICAL_AXIS,
        HORIZONTAL_AXIS,
        HORIZONTAL_AXIS,
        HORIZONTAL_AXIS,
    )
    default_pose: Tuple[float, ...] = DEFAULT_POSE

    def __post_init__(self) -> None:
        """Reject degenerate geometry before any solve starts.

        Raises:
            ValueError: On a wrong joint count, a non-positive or non-finite
                link length, a negative or non-finite base height, or a zero
                or non-finite rotation axis.
        """
        self._validate_counts()
        lengths = self.link_lengths
        if not all(math.isfinite(length) and length > 0.0 for length in lengths):
            raise ValueError(
                f"Link lengths must be positive and finite, got {lengths}"
            )
        if not (math.isfinite(self.base_height) and self.base_height >= 0.0):
            raise ValueError(
                f"Base height must be finite and >= 0, got {self.base_height}"
            )
        for axis in self.axes:
            norm = np.linalg.norm(np.asarray(axis, dtype=np.float64))
            if not (math.isfinite(norm) and norm >= 1e-9):
                raise ValueError(
                    f"Rotation axis must be finite and non-zero, got {axis}"
                )

    def _validate_counts(self) -> None:
        """Raise if any per-joint field does not have ``NUM_JOINTS`` entries.

        Raises:
            ValueError: When a per-joint tuple has the wrong length.
        """
        fields = {
            "link_lengths": self.link_lengths,
            "axes": self.axes,
            "default_pose": self.default_pose,
        }
        for name, values in fields.items():
            if len(values) != NUM_JOINTS:
                raise ValueError(
                    f"{name} needs {NUM_JOINTS} entries, got {len(values)}"
                )

    @property
    def reach(self) -> float:
        """Total length of all links (mm)."""
        return float(sum(self.link_lengths))

    def default_angles(self) -> np.ndarray:
        """Return a fresh copy of the default pose as a joint-angle vector."""
        return as_joint_angles(self.default_pose)


DEFAULT_CHAIN = ChainSpec()


# ---------------------------------------------------------------------------
# Transform helpers
# ---------------------------------------------------------------------------


def _translation(offset: Sequence[float]) -> np.ndarray:
    """Build a 4x4 homogeneous translation matrix.

    Args:
        offset: Translation [x, y, z].

    Returns:
        4x4 float64 matrix.
    """
    transform = np.identity(4, dtype=np.float64)
    transform[:3, 3] = offset
    return transform


def _rotation(axis: Sequence[float], degrees: float) -> np.ndarray:
    """Build a 4x4 rotation of *degrees* about *axis* (Rodrigues' formula).

    Args:
        axis: Rotation axis, normalised here.
        degrees: Right-handed rotation angle.

    Returns:
        4x4 float64 matrix.
    """
    u = np.asarray(axis, dtype=np.float64)
    u = u / np.linalg.norm(u)
    theta = np.radians(degrees)
    c, s = np.cos(theta), np.sin(theta)
    skew = np.array(
        [
            [0.0, -u[2], u[1]],
            [u[2], 0.0, -u[0]],
            [-u[1], u[0], 0.0],
        ]
    )
    transform = np.identity(4, dtype=np.float64)
    transform[:3, :3] = c * np.identity(3) + s * skew + (1.0 - c) * np.outer(u, u)
    return transform


def _joint_transforms(angles: np.ndarray, chain: ChainSpec) -> list:
    """Accumulate the chain transform, keeping every intermediate frame.

    Args:
        angles: Joint-angle vector in degrees.
        chain: Chain geometry.

    Returns:
        List of ``NUM_JOINTS + 1`` 4x4 matrices: the frame at joint 0 and the
        frame after each link.
    """
    transform = _translation((0.0, chain.base_height, 0.0))
    frames = [transform]
    for angle, axis, length in zip(angles, chain.axes, chain.link_lengths):
        transform = transform @ _rotation(axis, angle)
        transform = transform @ _translation((0.0, length, 0.0))
        frames.append(transform)
    return frames


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def forward_kinematics(
    angles: Sequence[float], chain: ChainSpec = DEFAULT_CHAIN
) -> np.ndarray:
    """Compute the end-effector position for a joint-angle vector.

    Args:
        angles: One angle in degrees per joint.
        chain: Chain geometry (defaults to the Grippr arm).

    Returns:
        World-space [x, y, z] of the end effector, shape ``(3,)``.
    """
    frames = _joint_transforms(as_joint_angles(angles), chain)
    return frames[-1][:3, 3].copy()


def joint_positions(
    angles: Sequence[float], chain: ChainSpec = DEFAULT_CHAIN
) -> np.ndarray:
    """Return the world position of each joint origin and the effector.

    Args:
        angles: One angle in degrees per joint.
        chain: Chain geometry.

    Returns:
        Array of shape ``(NUM_JOINTS + 1, 3)``; the last row equals
        ``forward_kinematics(angles, chain)``.
    """
    frames = _joint_transforms(as_joint_angles(angles), chain)
    return np.array([frame[:3, 3] for frame in frames])

"""
Kinematic chain model for the 4-joint arm.

Provides the immutable chain description and the pure forward-kinematics
function shared by the solver, the refiner, and the renderers.
"""

from grippr_sim.kinematics.chain import (
    DEFAULT_CHAIN,
    ChainSpec,
    JointRole,
    forward_kinematics,
    joint_positions,
)

__all__ = [
    "DEFAULT_CHAIN",
    "ChainSpec",
    "JointRole",
    "forward_kinematics",
    "joint_positions",
]

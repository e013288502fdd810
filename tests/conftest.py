"""Shared fixtures for the grippr_sim test suite."""

from __future__ import annotations

import pytest

from grippr_sim.kinematics.chain import DEFAULT_CHAIN
from grippr_sim.scheduling.targets import TargetPoint
from grippr_sim.solver.gradient_descent import GradientDescentSolver

STRAIGHT_AHEAD = (0.0, 5.0, 230.0)


@pytest.fixture(scope="session")
def converged_target() -> TargetPoint:
    """The straight-ahead target solved from the default pose, not yet refined."""
    target = TargetPoint.create(STRAIGHT_AHEAD, DEFAULT_CHAIN.default_pose)
    GradientDescentSolver().solve(target, refine=False)
    return target

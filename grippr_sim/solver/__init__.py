"""
Inverse-kinematics solving for grid targets.

Provides the finite-difference gradient-descent solver and the
whole-degree refiner that runs once a target has converged.
"""

from grippr_sim.solver.gradient_descent import GradientDescentSolver, SolverConfig
from grippr_sim.solver.refiner import WholeAngleRefiner

__all__ = [
    "GradientDescentSolver",
    "SolverConfig",
    "WholeAngleRefiner",
]

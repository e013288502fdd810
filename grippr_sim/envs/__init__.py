"""
Gymnasium adapter for the tick-driven grid solve.

Wraps ``TargetGridScheduler`` so that any Gymnasium-style loop can drive it
one tick per ``step()`` and render the arm, targets, and effector.
"""

from grippr_sim.envs.arm_table_env import ArmTableEnv
from grippr_sim.envs.configs import ArmTableEnvConfig

__all__ = ["ArmTableEnv", "ArmTableEnvConfig"]

"""
Grippr arm simulation and angle lookup-table generator.

Simulates a 4-joint serial robot arm, solves inverse kinematics for a grid
of target points on a fixed-height plane, snaps every solution onto whole
degrees, and exports the resulting table for an embedded controller.

Modules:
    kinematics: Joint-chain description and forward kinematics.
    solver: Gradient-descent IK solver and whole-angle refiner.
    scheduling: Grid enumeration, target bookkeeping, and the tick-driven scheduler.
    export: Lookup-table construction and C header / JSON rendering.
    envs: Gymnasium adapter exposing the per-tick advance and a render view.
    visualization: Pygame live viewer.
    utils: Shared constants and small helpers.
"""

__version__ = "0.1.0"

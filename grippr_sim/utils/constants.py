"""
Shared constants for the grippr_sim package.

Physical dimensions of the arm (millimetres), the default target grid,
solver tuning values, and the colour palette used by the renderers.
"""

from __future__ import annotations

from typing import Tuple

# ---------------------------------------------------------------------------
# Arm geometry (millimetres)
# ---------------------------------------------------------------------------
NUM_JOINTS: int = 4
BASE_HEIGHT: float = 108.0
SHOULDER_HEIGHT: float = 72.0
ARM_LENGTH: float = 124.0
HAND_LENGTH: float = 192.0
LINK_LENGTHS: Tuple[float, ...] = (SHOULDER_HEIGHT, ARM_LENGTH, ARM_LENGTH, HAND_LENGTH)

# Joint 0 turns about the vertical axis, the rest about the horizontal one.
VERTICAL_AXIS: Tuple[float, float, float] = (0.0, -1.0, 0.0)
HORIZONTAL_AXIS: Tuple[float, float, float] = (-1.0, 0.0, 0.0)

DEFAULT_POSE: Tuple[float, ...] = (0.0, -22.0, -65.0, -80.0)

# ---------------------------------------------------------------------------
# Target grid (millimetres)
# ---------------------------------------------------------------------------
TARGET_MIN_X: float = -120.0
TARGET_MAX_X: float = 120.0
TARGET_STEP_X: float = 10.0
TARGET_Y: float = 100.0
TARGET_MIN_Z: float = 140.0
TARGET_MAX_Z: float = 300.0
TARGET_STEP_Z: float = 20.0

# ---------------------------------------------------------------------------
# Solver tuning
# ---------------------------------------------------------------------------
PROBE_ANGLE: float = 0.25
LEARNING_RATE: float = 0.1
TOLERANCE: float = 1.0
NEAR_FACTOR: float = 3.0
NEAR_PROBE_SCALE: float = 0.5
NEAR_RATE_SCALE: float = 0.25
POLISH_STEPS: int = 10
MAX_ITERATIONS: int = 20000

REFINE_WINDOW: int = 4
REFINE_OFFSET: int = -1

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------
DEFAULT_RENDER_WIDTH: int = 640
DEFAULT_RENDER_HEIGHT: int = 320
DEFAULT_FPS: int = 60

COLOR_BACKGROUND: Tuple[int, int, int] = (230, 115, 51)
COLOR_FLOOR: Tuple[int, int, int] = (153, 153, 153)
COLOR_ARM: Tuple[int, int, int] = (230, 230, 230)
COLOR_TARGET: Tuple[int, int, int] = (153, 153, 255)
COLOR_EFFECTOR_SEEKING: Tuple[int, int, int] = (255, 153, 153)
COLOR_EFFECTOR_FOUND: Tuple[int, int, int] = (153, 255, 153)
COLOR_TEXT: Tuple[int, int, int] = (30, 30, 30)

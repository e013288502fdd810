import numpy as np
import pytest

from grippr_sim.scheduling.grid import GridConfig, iter_grid
from grippr_sim.scheduling.scheduler import TargetGridScheduler
from grippr_sim.solver.gradient_descent import SolverConfig

TABLE_GRID = GridConfig(
    min_x=-120.0, max_x=120.0, step_x=10.0, min_z=160.0, max_z=300.0, step_z=10.0
)


def test_grid_counts_are_inclusive():
    assert TABLE_GRID.count_x == 25
    assert TABLE_GRID.count_z == 15
    assert TABLE_GRID.total == ((120 - (-120)) // 10 + 1) * ((300 - 160) // 10 + 1)


def test_default_grid_matches_original_table():
    grid = GridConfig()
    assert (grid.count_x, grid.count_z) == (25, 9)
    assert grid.height_y == 100.0


def test_enumeration_is_row_major_with_x_fastest():
    cells = list(iter_grid(TABLE_GRID))
    assert len(cells) == TABLE_GRID.total
    assert cells[0][0] == (0, 0)
    assert cells[1][0] == (1, 0)
    assert cells[25][0] == (0, 1)
    assert cells[0][1] == pytest.approx([-120.0, 100.0, 160.0])
    assert cells[-1][1] == pytest.approx([120.0, 100.0, 300.0])


def test_partial_last_step_is_not_visited():
    grid = GridConfig(min_x=0.0, max_x=25.0, step_x=10.0, min_z=0.0, max_z=0.0)
    assert grid.count_x == 3
    assert grid.count_z == 1
    assert grid.summary()["max_x"] == 20.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"step_x": 0.0},
        {"step_z": -10.0},
        {"min_x": 10.0, "max_x": 0.0},
        {"min_z": 300.0, "max_z": 100.0},
    ],
)
def test_degenerate_grid_is_rejected(kwargs):
    with pytest.raises(ValueError):
        GridConfig(**kwargs)


def test_scheduler_creates_one_target_per_cell():
    scheduler = TargetGridScheduler(
        grid=TABLE_GRID,
        solver_config=SolverConfig(max_iterations=1, polish_steps=0),
    )
    targets = scheduler.run()
    assert scheduler.is_complete
    assert len(targets) == TABLE_GRID.total
    expected = [(pos[0], pos[2]) for _, pos in iter_grid(TABLE_GRID)]
    actual = [(float(t.initial_pos[0]), float(t.initial_pos[2])) for t in targets]
    assert actual == expected
    assert len(set(actual)) == len(actual)
    assert all(np.isclose(t.initial_pos[1], TABLE_GRID.height_y) for t in targets)

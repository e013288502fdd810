import json

import pytest

from grippr_sim.export.lookup_table import LookupTable
from grippr_sim.scheduling.grid import GridConfig
from grippr_sim.scheduling.scheduler import TargetGridScheduler
from grippr_sim.scheduling.targets import TargetPoint, TargetState

GRID = GridConfig(
    min_x=-10.0, max_x=10.0, step_x=10.0, min_z=200.0, max_z=220.0, step_z=20.0
)


@pytest.fixture(scope="module")
def solved_targets():
    return TargetGridScheduler(grid=GRID).run()


@pytest.fixture(scope="module")
def table(solved_targets):
    return LookupTable.from_targets(solved_targets, GRID)


def test_table_is_row_major_with_four_angles_per_cell(table, solved_targets):
    assert len(table.rows) == 6
    assert [row.grid_index for row in table.rows] == [
        (0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1),
    ]
    assert [(row.x, row.z) for row in table.rows[:4]] == [
        (-10.0, 200.0), (0.0, 200.0), (10.0, 200.0), (-10.0, 220.0),
    ]
    assert table.angles == [t.whole_angles() for t in solved_targets]
    assert all(len(a) == 4 and all(isinstance(v, int) for v in a) for a in table.angles)


def test_dimensions_summary(table):
    assert table.dimensions == {
        "min_x": -10.0, "max_x": 10.0, "count_x": 3,
        "min_z": 200.0, "max_z": 220.0, "count_z": 2,
        "height_y": 100.0,
    }


def test_export_is_idempotent(solved_targets):
    first = LookupTable.from_targets(solved_targets, GRID)
    second = LookupTable.from_targets(solved_targets, GRID)
    assert first.to_c_header().encode() == second.to_c_header().encode()
    assert first.to_json().encode() == second.to_json().encode()


def test_c_header_layout(table):
    header = table.to_c_header()
    assert header.startswith("/* Generated by grippr_sim. Do not edit. */\n")
    assert "#define GRIPPR_COUNT_X 3" in header
    assert "#define GRIPPR_COUNT_Z 2" in header
    assert "#define GRIPPR_TARGET_Y 100f" in header
    assert (
        "static const int16_t grippr_angles"
        "[GRIPPR_COUNT_Z * GRIPPR_COUNT_X][GRIPPR_NUM_JOINTS] = {"
    ) in header
    rows = [line for line in header.splitlines() if line.startswith("    {")]
    assert len(rows) == 6
    assert rows[0].endswith("/* x=-10 z=200 */")
    assert "}," in rows[0]
    assert "}," not in rows[-1]
    assert header.endswith("#endif /* GRIPPR_ANGLE_TABLE_H */\n")


def test_json_round_trips(table):
    data = json.loads(table.to_json())
    assert data["dimensions"]["count_x"] == 3
    assert [row["angles"] for row in data["rows"]] == [list(a) for a in table.angles]
    assert all(row["solved"] for row in data["rows"])


def test_save_picks_format_by_suffix(table, tmp_path):
    header = table.save(tmp_path / "out" / "angles.h")
    as_json = table.save(tmp_path / "angles.json")
    assert header.read_text(encoding="utf-8") == table.to_c_header()
    assert as_json.read_text(encoding="utf-8") == table.to_json()
    with pytest.raises(ValueError):
        table.save(tmp_path / "angles.txt")


def test_unsolved_cells_are_flagged():
    grid = GridConfig(min_x=0.0, max_x=0.0, min_z=0.0, max_z=0.0, height_y=2000.0)
    from grippr_sim.solver.gradient_descent import SolverConfig

    targets = TargetGridScheduler(
        grid=grid, solver_config=SolverConfig(max_iterations=3)
    ).run()
    table = LookupTable.from_targets(targets, grid)
    assert not table.rows[0].solved
    assert "unsolved */" in table.to_c_header()
    assert json.loads(table.to_json())["rows"][0]["solved"] is False


def test_incomplete_targets_are_rejected(solved_targets):
    with pytest.raises(ValueError):
        LookupTable.from_targets(solved_targets[:-1], GRID)
    pending = TargetPoint.create((0.0, 100.0, 200.0), (0.0, -22.0, -65.0, -80.0))
    assert pending.state is TargetState.SOLVING
    with pytest.raises(ValueError):
        LookupTable.from_targets(list(solved_targets[:-1]) + [pending], GRID)

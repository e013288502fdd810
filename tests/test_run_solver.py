import argparse
import json

import run_solver


def _solve_args(output, **overrides):
    values = dict(
        min_x=0.0,
        max_x=0.0,
        step_x=10.0,
        min_z=220.0,
        max_z=220.0,
        step_z=20.0,
        height_y=100.0,
        tolerance=1.0,
        max_iterations=20000,
        max_ticks=None,
        quiet=True,
        output=str(output),
    )
    values.update(overrides)
    return argparse.Namespace(**values)


def test_headless_solve_writes_c_header(tmp_path, capsys):
    output = tmp_path / "angles.h"
    run_solver._run_solve(_solve_args(output))

    text = output.read_text()
    assert text.startswith("/* Generated by grippr_sim")
    assert "_COUNT_X 1" in text
    assert "_COUNT_Z 1" in text
    assert "(1 cells) written to" in capsys.readouterr().out


def test_headless_solve_writes_json_by_suffix(tmp_path):
    output = tmp_path / "angles.json"
    run_solver._run_solve(_solve_args(output))

    payload = json.loads(output.read_text())
    assert len(payload["rows"]) == 1
    angles = payload["rows"][0]["angles"]
    assert len(angles) == 4
    assert all(float(angle).is_integer() for angle in angles)

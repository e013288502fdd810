import copy
import itertools
import math

import numpy as np
import pytest

from grippr_sim.kinematics.chain import forward_kinematics
from grippr_sim.scheduling.targets import TargetPoint, TargetState
from grippr_sim.solver import refiner as refiner_module
from grippr_sim.solver.refiner import WholeAngleRefiner


def _sq_distance(angles, goal):
    return float(np.sum((forward_kinematics(angles) - goal) ** 2))


def test_refined_angles_beat_every_window_candidate(converged_target):
    target = copy.deepcopy(converged_target)
    continuous = target.rots.copy()
    WholeAngleRefiner().refine(target)

    assert target.state is TargetState.REFINED
    assert np.array_equal(target.rots, np.round(target.rots))
    chosen = _sq_distance(target.rots, target.initial_pos)
    base = [math.floor(a) - 1 for a in continuous]
    for offsets in itertools.product(range(4), repeat=4):
        candidate = np.array(base, dtype=np.float64) + offsets
        assert chosen <= _sq_distance(candidate, target.initial_pos)
    for angle, lo in zip(target.rots, base):
        assert lo <= angle <= lo + 3


def test_refine_updates_position_and_distance(converged_target):
    target = copy.deepcopy(converged_target)
    WholeAngleRefiner().refine(target)
    assert target.pos == pytest.approx(forward_kinematics(target.rots))
    assert target.distance == pytest.approx(
        float(np.linalg.norm(target.pos - target.initial_pos))
    )


def test_refine_measures_against_initial_goal(converged_target):
    target = copy.deepcopy(converged_target)
    target.pos = target.pos + 50.0
    reference = copy.deepcopy(converged_target)
    WholeAngleRefiner().refine(target)
    WholeAngleRefiner().refine(reference)
    assert np.array_equal(target.rots, reference.rots)


def test_candidate_window_covers_all_combinations():
    refiner = WholeAngleRefiner()
    window = refiner.candidate_window(np.array([0.4, -22.7, -65.0, 10.99]))
    assert window.shape == (256, 4)
    assert len({tuple(row) for row in window}) == 256
    assert window.min(axis=0).tolist() == [-1, -24, -66, 9]
    assert window.max(axis=0).tolist() == [2, -21, -63, 12]


def test_refine_falls_back_to_floor(monkeypatch):
    monkeypatch.setattr(
        refiner_module, "forward_kinematics", lambda angles, chain: np.full(3, np.nan)
    )
    target = TargetPoint.create((0.0, 100.0, 200.0), (1.7, -22.2, -64.5, -80.9))
    target.state = TargetState.CONVERGED
    WholeAngleRefiner().refine(target)
    assert target.rots.tolist() == [1.0, -23.0, -65.0, -81.0]
    assert target.state is TargetState.REFINED


def test_unsolved_target_keeps_its_state():
    target = TargetPoint.create((0.0, 100.0, 200.0), (0.0, -22.0, -65.0, -80.0))
    target.state = TargetState.UNSOLVED
    WholeAngleRefiner().refine(target)
    assert target.state is TargetState.UNSOLVED
    assert np.array_equal(target.rots, np.round(target.rots))


def test_window_must_be_positive():
    with pytest.raises(ValueError):
        WholeAngleRefiner(window=0)

import numpy as np
import pytest

from grippr_sim.kinematics.chain import (
    DEFAULT_CHAIN,
    ChainSpec,
    JointRole,
    forward_kinematics,
    joint_positions,
)


def test_forward_kinematics_is_deterministic():
    rng = np.random.default_rng(7)
    for _ in range(50):
        angles = rng.uniform(-180.0, 180.0, size=4)
        first = forward_kinematics(angles)
        second = forward_kinematics(angles.copy())
        assert np.array_equal(first, second)


def test_zero_pose_points_straight_up():
    pos = forward_kinematics([0.0, 0.0, 0.0, 0.0])
    expected_height = DEFAULT_CHAIN.base_height + sum(DEFAULT_CHAIN.link_lengths)
    assert pos == pytest.approx([0.0, expected_height, 0.0], abs=1e-9)
    assert expected_height == pytest.approx(620.0)


def test_negative_shoulder_reaches_forward():
    pos = forward_kinematics([0.0, -90.0, 0.0, 0.0])
    assert pos == pytest.approx([0.0, 180.0, 440.0], abs=1e-9)


def test_base_rotation_turns_arm_about_vertical_axis():
    pos = forward_kinematics([90.0, -90.0, 0.0, 0.0])
    assert pos == pytest.approx([-440.0, 180.0, 0.0], abs=1e-9)


def test_default_pose_lands_in_front_of_base():
    pos = forward_kinematics(DEFAULT_CHAIN.default_pose)
    assert pos[0] == pytest.approx(0.0, abs=1e-9)
    assert 100.0 < pos[1] < 130.0
    assert 200.0 < pos[2] < 230.0


def test_angles_are_not_wrapped():
    angles = np.array([10.0, -22.0, -65.0, -80.0])
    assert forward_kinematics(angles) == pytest.approx(
        forward_kinematics(angles + [360.0, 0.0, 0.0, 0.0]), abs=1e-9
    )


def test_forward_kinematics_does_not_mutate_input():
    angles = np.array([1.0, 2.0, 3.0, 4.0])
    forward_kinematics(angles)
    assert np.array_equal(angles, [1.0, 2.0, 3.0, 4.0])


def test_joint_positions_end_at_effector():
    angles = [15.0, -30.0, -45.0, -60.0]
    points = joint_positions(angles)
    assert points.shape == (5, 3)
    assert points[0] == pytest.approx([0.0, DEFAULT_CHAIN.base_height, 0.0])
    assert points[-1] == pytest.approx(forward_kinematics(angles))
    lengths = np.linalg.norm(np.diff(points, axis=0), axis=1)
    assert lengths == pytest.approx(DEFAULT_CHAIN.link_lengths)


def test_joint_roles_index_angle_vector():
    assert [role.value for role in JointRole] == [0, 1, 2, 3]
    assert JointRole.WRIST == 3


def test_wrong_angle_count_is_rejected():
    with pytest.raises(ValueError):
        forward_kinematics([0.0, 0.0, 0.0])


@pytest.mark.parametrize(
    "kwargs",
    [
        {"link_lengths": (72.0, 124.0, 0.0, 192.0)},
        {"link_lengths": (72.0, -124.0, 124.0, 192.0)},
        {"link_lengths": (72.0, 124.0, 124.0)},
        {"link_lengths": (72.0, float("nan"), 124.0, 192.0)},
        {"link_lengths": (72.0, 124.0, float("inf"), 192.0)},
        {"base_height": -1.0},
        {"base_height": float("nan")},
        {"axes": ((float("nan"), 0.0, 0.0),) * 4},
        {"axes": ((0.0, 0.0, 0.0),) * 4},
        {"default_pose": (0.0, 0.0)},
    ],
)
def test_degenerate_chain_is_rejected(kwargs):
    with pytest.raises(ValueError):
        ChainSpec(**kwargs)


def test_chain_reach_and_default_angles():
    assert DEFAULT_CHAIN.reach == pytest.approx(512.0)
    angles = DEFAULT_CHAIN.default_angles()
    angles[0] = 99.0
    assert DEFAULT_CHAIN.default_angles()[0] == 0.0

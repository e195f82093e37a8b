"""Pendulum state model and randomized initialization."""

import math

import numpy as np
import pytest

from config import ARM_CELL_FRACTION, INITIAL_ANGLE
from grid_layout import compute_grid_layout
from pendulum import Arm, DoublePendulum, create_population, random_pendulum


def test_arm_rejects_non_positive_mass() -> None:
    with pytest.raises(ValueError):
        Arm(10.0, 0.0)
    with pytest.raises(ValueError):
        Arm(10.0, -1.0)


def test_arm_rejects_negative_length() -> None:
    with pytest.raises(ValueError):
        Arm(-1.0, 1.0)


def test_zero_length_arm_allowed() -> None:
    arm = Arm(0.0, 1.0)
    assert arm.length == 0.0


def test_length_mass_and_origin_are_fixed() -> None:
    p = DoublePendulum(Arm(1.0, 1.0), Arm(2.0, 1.0), (5.0, 6.0))
    with pytest.raises(AttributeError):
        p.origin = (0.0, 0.0)
    with pytest.raises(AttributeError):
        p.arm1.length = 3.0
    with pytest.raises(AttributeError):
        p.arm2.mass = 3.0


def test_forward_kinematics_hanging_straight_down() -> None:
    p = DoublePendulum(Arm(3.0, 1.0, angle=0.0), Arm(4.0, 1.0, angle=0.0), (10.0, 20.0))
    origin, elbow, tip = p.joint_positions()
    assert origin == (10.0, 20.0)
    assert elbow == pytest.approx((10.0, 23.0))
    assert tip == pytest.approx((10.0, 27.0))


def test_forward_kinematics_horizontal() -> None:
    p = DoublePendulum(Arm(3.0, 1.0, angle=math.pi / 2), Arm(4.0, 1.0, angle=math.pi / 2), (0.0, 0.0))
    _, elbow, tip = p.joint_positions()
    assert elbow == pytest.approx((3.0, 0.0), abs=1e-12)
    assert tip == pytest.approx((7.0, 0.0), abs=1e-12)


def test_random_pendulum_initial_conditions() -> None:
    rng = np.random.default_rng(0)
    for _ in range(200):
        p = random_pendulum((0.0, 0.0), cell_size=1000.0, length_multiplier=1.0, rng=rng)
        assert 10.0 <= p.arm1.length < 14.0
        assert 20.0 <= p.arm2.length < 25.0
        for arm in (p.arm1, p.arm2):
            assert 0.5 <= arm.mass < 2.0
            assert arm.angle == INITIAL_ANGLE
            assert arm.velocity == 0.0


@pytest.mark.parametrize("multiplier", [0.5, 0.7, 1.0, 2.0, 10.0])
@pytest.mark.parametrize("cell_size", [0.0, 5.0, 30.0, 70.0, 500.0])
def test_length_cap_applied_after_scaling(multiplier: float, cell_size: float) -> None:
    rng = np.random.default_rng(42)
    cap = cell_size * ARM_CELL_FRACTION
    for _ in range(50):
        p = random_pendulum((0.0, 0.0), cell_size, multiplier, rng)
        assert p.arm1.length <= cap
        assert p.arm2.length <= cap


def test_population_follows_layout() -> None:
    layout = compute_grid_layout(81, 900, 900)
    population = create_population(layout, 0.7, np.random.default_rng(3))
    assert len(population) == 81
    for p, (x, y) in zip(population, layout.origins):
        assert p.origin == (x, y)

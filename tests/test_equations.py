"""Double pendulum angular accelerations."""

import math

import numpy as np
import pytest

from equations import angular_accelerations, build_equations_of_motion, pendulum_accelerations
from pendulum import Arm, DoublePendulum


def test_horizontal_arms_known_value() -> None:
    """Both arms horizontal, unit masses and lengths, at rest."""
    a1, a2 = angular_accelerations(math.pi / 2, math.pi / 2, 0.0, 0.0, 1.0, 1.0, 1.0, 1.0, 1.0)
    assert a1 == pytest.approx(-1.0)
    assert a2 == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("theta", [0.0, 0.3, math.pi / 2, -2.0, 7.5])
def test_rest_without_gravity(theta: float) -> None:
    a1, a2 = angular_accelerations(theta, theta, 0.0, 0.0, 1.3, 0.7, 9.0, 17.0, 0.0)
    assert a1 == 0.0
    assert a2 == 0.0


def test_hanging_straight_down_is_equilibrium() -> None:
    a1, a2 = angular_accelerations(0.0, 0.0, 0.0, 0.0, 1.0, 2.0, 3.0, 4.0, 5.0)
    assert a1 == pytest.approx(0.0)
    assert a2 == pytest.approx(0.0)


def test_vectorized_matches_scalar() -> None:
    rng = np.random.default_rng(7)
    n = 20
    theta1, theta2 = rng.uniform(-4, 4, n), rng.uniform(-4, 4, n)
    omega1, omega2 = rng.normal(size=n), rng.normal(size=n)
    m1, m2 = rng.uniform(0.5, 2.0, n), rng.uniform(0.5, 2.0, n)
    l1, l2 = rng.uniform(7, 10, n), rng.uniform(14, 18, n)

    alpha1, alpha2 = angular_accelerations(theta1, theta2, omega1, omega2, m1, m2, l1, l2, 1.0)
    for i in range(n):
        s1, s2 = angular_accelerations(
            theta1[i], theta2[i], omega1[i], omega2[i], m1[i], m2[i], l1[i], l2[i], 1.0
        )
        assert alpha1[i] == pytest.approx(s1)
        assert alpha2[i] == pytest.approx(s2)


def test_finite_for_positive_masses() -> None:
    theta = np.linspace(-10, 10, 101)
    a1, a2 = angular_accelerations(theta, theta[::-1], 3.0, -2.0, 0.5, 2.0, 5.0, 9.0, 5.0)
    assert np.all(np.isfinite(a1))
    assert np.all(np.isfinite(a2))


def test_pendulum_accelerations_reads_state() -> None:
    p = DoublePendulum(Arm(1.0, 1.0, angle=math.pi / 2), Arm(1.0, 1.0, angle=math.pi / 2), (0.0, 0.0))
    a1, a2 = pendulum_accelerations(p, 1.0)
    assert a1 == pytest.approx(-1.0)
    assert a2 == pytest.approx(0.0, abs=1e-12)


def test_equations_of_motion_layout() -> None:
    p = DoublePendulum(Arm(1.0, 1.0), Arm(1.0, 1.0), (0.0, 0.0))
    f = build_equations_of_motion(p, 1.0)
    du = f(0.0, np.array([math.pi / 2, math.pi / 2, 0.25, -0.5]))
    assert du.shape == (4,)
    assert du[0] == 0.25
    assert du[1] == -0.5
    expected = angular_accelerations(math.pi / 2, math.pi / 2, 0.25, -0.5, 1.0, 1.0, 1.0, 1.0, 1.0)
    np.testing.assert_allclose(du[2:], expected)

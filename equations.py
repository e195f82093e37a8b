"""
Double Pendulum Equations of Motion
Angular accelerations of the coupled two-link system
"""

from __future__ import annotations

from typing import Callable, Tuple, Union

import numpy as np

from pendulum import DoublePendulum

Scalar = Union[float, np.ndarray]


def angular_accelerations(
    theta1: Scalar,
    theta2: Scalar,
    omega1: Scalar,
    omega2: Scalar,
    m1: Scalar,
    m2: Scalar,
    l1: Scalar,
    l2: Scalar,
    gravity: float,
) -> Tuple[Scalar, Scalar]:
    """
    Return (alpha1, alpha2) for the standard point-mass double pendulum.

    Works elementwise on numpy arrays. The shared denominator is at least
    2*m1, so positive masses never divide by zero.
    """
    g = gravity
    delta = theta1 - theta2
    sin_delta = np.sin(delta)
    cos_delta = np.cos(delta)
    den = 2 * m1 + m2 - m2 * np.cos(2 * theta1 - 2 * theta2)

    alpha1 = (
        -g * (2 * m1 + m2) * np.sin(theta1)
        - m2 * g * np.sin(theta1 - 2 * theta2)
        - 2 * sin_delta * m2 * (omega2**2 * l2 + omega1**2 * l1 * cos_delta)
    ) / (l1 * den)

    alpha2 = (
        2 * sin_delta * (
            omega1**2 * l1 * (m1 + m2)
            + g * (m1 + m2) * np.cos(theta1)
            + omega2**2 * l2 * m2 * cos_delta
        )
    ) / (l2 * den)

    return alpha1, alpha2


def pendulum_accelerations(pendulum: DoublePendulum, gravity: float) -> Tuple[float, float]:
    """Accelerations for one pendulum, read entirely from its current state."""
    a1, a2 = pendulum.arm1, pendulum.arm2
    alpha1, alpha2 = angular_accelerations(
        a1.angle, a2.angle, a1.velocity, a2.velocity,
        a1.mass, a2.mass, a1.length, a2.length,
        gravity,
    )
    return float(alpha1), float(alpha2)


def build_equations_of_motion(pendulum: DoublePendulum, gravity: float) -> Callable:
    """
    equations of motion for one pendulum in solve_ivp form.

    Masses and lengths are captured at build time; the state is u = [theta1, theta2, omega1, omega2].
    """
    m1, m2 = pendulum.arm1.mass, pendulum.arm2.mass
    l1, l2 = pendulum.arm1.length, pendulum.arm2.length

    def equations_of_motion(t: float, u: np.ndarray) -> np.ndarray:
        """Return time derivative of state [theta, omega]."""
        theta1, theta2, omega1, omega2 = u
        alpha1, alpha2 = angular_accelerations(theta1, theta2, omega1, omega2, m1, m2, l1, l2, gravity)
        return np.array([omega1, omega2, alpha1, alpha2])

    return equations_of_motion

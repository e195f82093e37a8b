"""
Fixed-Step Integrator
Semi-implicit Euler update of arm angles and velocities
"""

from __future__ import annotations

from typing import Tuple

from config import DAMPING, TIME_STEP
from equations import Scalar, pendulum_accelerations
from pendulum import DoublePendulum


def semi_implicit_euler_step(
    theta: Scalar,
    omega: Scalar,
    alpha: Scalar,
    speed_multiplier: float = 1.0,
    dt: float = TIME_STEP,
) -> Tuple[Scalar, Scalar]:
    """
    One step: omega += alpha*dt*speed, then theta += omega*dt.

    The speed multiplier scales only the velocity increment; the angle
    advances with the updated velocity and the plain dt.
    """
    omega = omega + alpha * dt * speed_multiplier
    theta = theta + omega * dt
    return theta, omega * DAMPING


def step_pendulum(
    pendulum: DoublePendulum,
    gravity: float,
    speed_multiplier: float = 1.0,
    dt: float = TIME_STEP,
) -> None:
    """Advance one pendulum in place by a single tick."""
    # A zero-length arm (zero-area viewport) has no dynamics; it stays collapsed on its origin
    if pendulum.arm1.length == 0 or pendulum.arm2.length == 0:
        return
    # Both accelerations come from the state at the start of the tick
    alpha1, alpha2 = pendulum_accelerations(pendulum, gravity)
    for arm, alpha in ((pendulum.arm1, alpha1), (pendulum.arm2, alpha2)):
        arm.angle, arm.velocity = semi_implicit_euler_step(arm.angle, arm.velocity, alpha, speed_multiplier, dt)

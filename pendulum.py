"""
Double Pendulum State
Arms, pendulums and randomized population initialization
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from config import (
    ARM1_LENGTH_RANGE,
    ARM2_LENGTH_RANGE,
    ARM_CELL_FRACTION,
    INITIAL_ANGLE,
    MASS_RANGE,
)
from grid_layout import GridLayout

Point = Tuple[float, float]


class Arm:
    """One rigid link: fixed length and mass, mutable angle and angular velocity."""

    __slots__ = ("_length", "_mass", "angle", "velocity")

    def __init__(self, length: float, mass: float, angle: float = 0.0, velocity: float = 0.0) -> None:
        # Zero length is allowed: a zero-area viewport caps every arm to nothing
        if not length >= 0:
            raise ValueError(f"Arm length must be >= 0, got {length}")
        if not mass > 0:
            raise ValueError(f"Arm mass must be > 0, got {mass}")
        self._length = float(length)
        self._mass = float(mass)
        self.angle = float(angle)
        self.velocity = float(velocity)

    @property
    def length(self) -> float:
        return self._length

    @property
    def mass(self) -> float:
        return self._mass

    def __repr__(self) -> str:
        return (
            f"Arm(length={self._length:.3f}, mass={self._mass:.3f}, "
            f"angle={self.angle:.3f}, velocity={self.velocity:.3f})"
        )


class DoublePendulum:
    """Two arms, the second hanging from the tip of the first, suspended at a fixed origin."""

    __slots__ = ("arm1", "arm2", "_origin")

    def __init__(self, arm1: Arm, arm2: Arm, origin: Point) -> None:
        self.arm1 = arm1
        self.arm2 = arm2
        self._origin = (float(origin[0]), float(origin[1]))

    @property
    def origin(self) -> Point:
        return self._origin

    @property
    def state(self) -> np.ndarray:
        """State vector [theta1, theta2, omega1, omega2]."""
        return np.array([self.arm1.angle, self.arm2.angle, self.arm1.velocity, self.arm2.velocity])

    def joint_positions(self) -> Tuple[Point, Point, Point]:
        """Forward kinematics: (origin, elbow, tip) with angles measured from the downward vertical."""
        ox, oy = self._origin
        x1 = ox + self.arm1.length * np.sin(self.arm1.angle)
        y1 = oy + self.arm1.length * np.cos(self.arm1.angle)
        x2 = x1 + self.arm2.length * np.sin(self.arm2.angle)
        y2 = y1 + self.arm2.length * np.cos(self.arm2.angle)
        return self._origin, (float(x1), float(y1)), (float(x2), float(y2))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.state)))

    def __repr__(self) -> str:
        return f"DoublePendulum(origin={self._origin}, arm1={self.arm1!r}, arm2={self.arm2!r})"


def random_pendulum(
    origin: Point,
    cell_size: float,
    length_multiplier: float,
    rng: Optional[np.random.Generator] = None,
) -> DoublePendulum:
    """
    Build one pendulum with random lengths and masses, both arms at the initial angle and at rest.

    The cell cap is applied after scaling, so no arm exceeds 40% of its cell.
    """
    rng = rng if rng is not None else np.random.default_rng()
    cap = cell_size * ARM_CELL_FRACTION

    length1 = min(cap, rng.uniform(*ARM1_LENGTH_RANGE) * length_multiplier)
    mass1 = rng.uniform(*MASS_RANGE)
    length2 = min(cap, rng.uniform(*ARM2_LENGTH_RANGE) * length_multiplier)
    mass2 = rng.uniform(*MASS_RANGE)

    return DoublePendulum(
        Arm(length1, mass1, angle=INITIAL_ANGLE),
        Arm(length2, mass2, angle=INITIAL_ANGLE),
        origin,
    )


def create_population(
    layout: GridLayout,
    length_multiplier: float,
    rng: Optional[np.random.Generator] = None,
) -> List[DoublePendulum]:
    """One freshly randomized pendulum per grid cell, in cell order."""
    rng = rng if rng is not None else np.random.default_rng()
    return [
        random_pendulum((x, y), layout.cell_size, length_multiplier, rng)
        for x, y in layout.origins
    ]

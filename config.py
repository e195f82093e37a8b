"""
Pendulum Grid Configuration
Constants and tunable simulation parameters
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace as _replace

POPULATION_SIZE = 81      # Fixed number of pendulums in the grid
TIME_STEP = 0.05          # Integration step per tick
SQUARE_FRACTION = 0.7     # Drawing square relative to the smaller viewport side
ARM_CELL_FRACTION = 0.4   # Maximum arm length relative to the grid cell
DAMPING = 1.0             # Velocity factor applied after each step (identity)

ARM1_LENGTH_RANGE = (10.0, 14.0)
ARM2_LENGTH_RANGE = (20.0, 25.0)
MASS_RANGE = (0.5, 2.0)
INITIAL_ANGLE = math.pi / 2


@dataclass(frozen=True)
class ParameterRange:
    """Bounds, step and default for one tunable, as exposed by the controls."""

    name: str
    minimum: float
    maximum: float
    step: float
    default: float

    def clamp(self, value: float) -> float:
        """Snap to the nearest step and clamp into [minimum, maximum]."""
        value = float(value)
        if not math.isfinite(value):
            return self.default
        snapped = self.minimum + round((value - self.minimum) / self.step) * self.step
        snapped = min(max(snapped, self.minimum), self.maximum)
        # Drop float noise left by the step arithmetic
        return round(snapped, 10)

    def __contains__(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


GRAVITY_RANGE = ParameterRange("gravity", 0.1, 5.0, 0.1, 1.0)
LENGTH_RANGE = ParameterRange("length_multiplier", 0.5, 2.0, 0.1, 0.7)
SPEED_RANGE = ParameterRange("speed_multiplier", 0.1, 3.0, 0.1, 1.0)

PARAMETER_RANGES = {
    r.name: r for r in (GRAVITY_RANGE, LENGTH_RANGE, SPEED_RANGE)
}


@dataclass(frozen=True)
class SimulationParameters:
    """Global parameters read by every pendulum uniformly."""

    gravity: float = GRAVITY_RANGE.default
    length_multiplier: float = LENGTH_RANGE.default
    speed_multiplier: float = SPEED_RANGE.default

    def replace(self, **changes: float) -> "SimulationParameters":
        return _replace(self, **changes)

    def clamped(self) -> "SimulationParameters":
        """Copy with every tunable snapped into its control range."""
        return SimulationParameters(
            gravity=GRAVITY_RANGE.clamp(self.gravity),
            length_multiplier=LENGTH_RANGE.clamp(self.length_multiplier),
            speed_multiplier=SPEED_RANGE.clamp(self.speed_multiplier),
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "gravity": self.gravity,
            "length_multiplier": self.length_multiplier,
            "speed_multiplier": self.speed_multiplier,
        }

"""Shared fixtures; plots render off-screen."""

import matplotlib

matplotlib.use("Agg")

import pytest

from config import SimulationParameters
from simulator import SimulationDriver


@pytest.fixture
def params() -> SimulationParameters:
    return SimulationParameters()


@pytest.fixture
def driver(params: SimulationParameters) -> SimulationDriver:
    d = SimulationDriver(seed=1234)
    d.configure(params, (900, 900))
    return d

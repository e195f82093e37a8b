"""
Pendulum Grid Simulation
Advance the whole population each tick and expose joint positions
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

import dill
import numpy as np
from scipy.integrate import solve_ivp

from config import POPULATION_SIZE, TIME_STEP, SimulationParameters
from equations import build_equations_of_motion
from grid_layout import GridLayout, compute_grid_layout
from integrator import step_pendulum
from pendulum import DoublePendulum, Point, create_population
from logging_config import get_logger
from scheduler import FrameRequest, FrameScheduler

logger = get_logger("simulator")

CHECKPOINT_VERSION = 1

Snapshot = List[Tuple[Point, Point, Point]]
RenderCallback = Callable[[Snapshot], None]


class SimulationDriver:
    """
    Owns the pendulum population and the animation loop.

    Each frame draws the current state, then advances it (draw-then-advance).
    configure() rebuilds everything from scratch and keeps at most one frame pending.
    """

    def __init__(
        self,
        scheduler: Optional[FrameScheduler] = None,
        count: int = POPULATION_SIZE,
        dt: float = TIME_STEP,
        seed: Union[int, np.random.Generator, None] = None,
    ) -> None:
        self.scheduler = scheduler
        self.count = count
        self.dt = dt
        self._rng = np.random.default_rng(seed)
        self.params: Optional[SimulationParameters] = None
        self.viewport: Optional[Tuple[float, float]] = None
        self.layout: Optional[GridLayout] = None
        self.pendulums: List[DoublePendulum] = []
        self.ticks = 0
        self.generation = 0  # bumped on every full reset
        self._request: Optional[FrameRequest] = None
        self._render: Optional[RenderCallback] = None

    # --- configuration -------------------------------------------------

    @property
    def configured(self) -> bool:
        return self.layout is not None

    @property
    def running(self) -> bool:
        return self._render is not None

    def configure(self, params: SimulationParameters, viewport: Tuple[float, float]) -> None:
        """Recompute the layout and re-initialize every pendulum (full reset)."""
        was_running = self.running
        self._cancel_pending()

        width, height = viewport
        self.params = params
        self.viewport = (float(width), float(height))
        self.layout = compute_grid_layout(self.count, width, height)
        self.pendulums = create_population(self.layout, params.length_multiplier, self._rng)
        self.ticks = 0
        self.generation += 1
        logger.info(
            "Configured %d pendulums for %gx%g viewport (cell %.2f, gravity=%.2f, length=%.2f, speed=%.2f)",
            self.count, width, height, self.layout.cell_size,
            params.gravity, params.length_multiplier, params.speed_multiplier,
        )

        if was_running:
            self._schedule()

    def _require_configured(self) -> None:
        if not self.configured or self.params is None:
            raise RuntimeError("Driver not configured: call configure() first.")

    # --- stepping -------------------------------------------------------

    def tick(self, params: Optional[SimulationParameters] = None) -> None:
        """Advance every pendulum by one fixed step, in place."""
        self._require_configured()
        params = params or self.params
        for pendulum in self.pendulums:
            step_pendulum(pendulum, params.gravity, params.speed_multiplier, self.dt)
        self.ticks += 1

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.tick()

    def snapshot(self) -> Snapshot:
        """(origin, elbow, tip) for every pendulum, in cell order."""
        self._require_configured()
        return [p.joint_positions() for p in self.pendulums]

    def snapshot_array(self) -> np.ndarray:
        """Snapshot as an array of shape (count, 3, 2)."""
        return np.asarray(self.snapshot(), dtype=float).reshape(len(self.pendulums), 3, 2)

    # --- animation loop -------------------------------------------------

    def start(self, render: RenderCallback) -> None:
        """Begin the frame loop; each frame calls render(snapshot()) then tick()."""
        self._require_configured()
        if self.scheduler is None:
            raise RuntimeError("No frame scheduler attached to the driver.")
        self._cancel_pending()
        self._render = render
        logger.debug("Animation loop started")
        self._schedule()

    def stop(self) -> None:
        """Cancel the pending frame and leave the loop."""
        self._cancel_pending()
        if self._render is not None:
            logger.debug("Animation loop stopped after %d ticks", self.ticks)
        self._render = None

    def _schedule(self) -> None:
        self._request = self.scheduler.request_frame(self._on_frame)

    def _cancel_pending(self) -> None:
        if self._request is not None and self._request.active:
            logger.debug("Cancelling pending frame request")
            self._request.cancel()
        self._request = None

    def _on_frame(self) -> None:
        self._request = None
        render = self._render
        if render is None:
            return
        generation = self.generation
        render(self.snapshot())
        # A reset inside render leaves the fresh population undrawn; it must not advance yet
        if self.generation == generation:
            self.tick()
        # render may have stopped or reconfigured the loop
        if self._render is not None and self._request is None:
            self._schedule()

    # --- persistence ----------------------------------------------------

    def save_checkpoint(self, path: Union[str, Path]) -> Path:
        """Persist parameters, viewport, layout and population with dill."""
        self._require_configured()
        path = Path(path)
        payload = {
            "version": CHECKPOINT_VERSION,
            "params": self.params,
            "viewport": self.viewport,
            "layout": self.layout,
            "pendulums": self.pendulums,
            "ticks": self.ticks,
            "dt": self.dt,
        }
        with open(path, "wb") as f:
            dill.dump(payload, f)
        logger.info("Saved checkpoint with %d pendulums to %s", len(self.pendulums), path)
        return path

    def load_checkpoint(self, path: Union[str, Path]) -> None:
        """Restore a checkpoint written by save_checkpoint(); the loop is restarted if running."""
        path = Path(path)
        with open(path, "rb") as f:
            payload = dill.load(f)
        if not isinstance(payload, dict) or payload.get("version") != CHECKPOINT_VERSION:
            raise ValueError(f"{path} is not a pendulum grid checkpoint")

        was_running = self.running
        self._cancel_pending()
        self.params = payload["params"]
        self.viewport = payload["viewport"]
        self.layout = payload["layout"]
        self.pendulums = payload["pendulums"]
        self.count = len(self.pendulums)
        self.ticks = payload["ticks"]
        self.dt = payload["dt"]
        self.generation += 1
        logger.info("Loaded checkpoint with %d pendulums from %s", self.count, path)
        if was_running:
            self._schedule()


def reference_trajectory(
    pendulum: DoublePendulum,
    gravity: float,
    T: float,
    dt: float = TIME_STEP,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Integrate one pendulum with a high-order adaptive solver for comparison.

    Parameters:
    -----------
    pendulum : DoublePendulum
        Initial state (not modified)
    gravity : float
        Gravity parameter
    T : float
        Total time
    dt : float
        Sampling interval, matching the fixed-step grid

    Returns:
    --------
    t : array
        Sample times
    u : array
        States [theta1, theta2, omega1, omega2] (shape: len(t) x 4)
    """
    equations_of_motion = build_equations_of_motion(pendulum, gravity)
    n = int(round(T / dt))
    t = np.arange(n + 1) * dt
    sol = solve_ivp(
        equations_of_motion,
        [0, t[-1]],
        pendulum.state,
        t_eval=t,
        method='DOP853',  # High-order Runge-Kutta method
        rtol=1e-10,
        atol=1e-12,
    )
    if not sol.success:
        raise RuntimeError(f"Integration failed: {sol.message}")
    return t, sol.y.T


def simulate_grid(
    frames: int = 600,
    width: float = 900,
    height: float = 900,
    params: Optional[SimulationParameters] = None,
    seed: Union[int, None] = None,
    output: Union[str, Path, None] = 'simulation_results.npz',
) -> Tuple[np.ndarray, np.ndarray, GridLayout]:
    """
    Record a headless run of the pendulum grid

    Parameters:
    -----------
    frames : int
        Number of frames to record
    width, height : float
        Viewport size
    params : SimulationParameters
        Gravity, length and speed multipliers (defaults if None)
    seed : int | None
        Seed for the random initialization
    output : path | None
        Where to save the .npz results (skip saving when None)

    Returns:
    --------
    t : array
        Simulation time of each frame
    positions : array
        Joint positions (shape: frames x count x 3 x 2)
    layout : GridLayout
        Square region and origins
    """
    params = params or SimulationParameters()
    driver = SimulationDriver(seed=seed)
    driver.configure(params, (width, height))

    print(f"Simulating {driver.count} pendulums for {frames} frames...")
    tic = time.time()

    positions = np.zeros((frames, driver.count, 3, 2))
    for ii in range(frames):
        positions[ii] = driver.snapshot_array()
        driver.tick()
        if (ii + 1) % 100 == 0 or ii + 1 == frames:
            print(f"Progress: {ii+1}/{frames}")

    toc = time.time()
    print(f"Simulation completed in {toc-tic:.1f} seconds")

    t = np.arange(frames) * driver.dt
    layout = driver.layout
    if output is not None:
        np.savez(
            output,
            t=t,
            positions=positions,
            square=np.array([layout.square_x, layout.square_y, layout.square_size]),
            viewport=np.array([width, height]),
            gravity=params.gravity,
            length_multiplier=params.length_multiplier,
            speed_multiplier=params.speed_multiplier,
        )
        print(f"Results saved to {output}")

    return t, positions, layout


if __name__ == '__main__':
    # Run simulation
    t, positions, layout = simulate_grid(frames=600)

"""
Pendulum Grid Animation
Live matplotlib view with parameter sliders, and video export of recorded runs
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, FFMpegWriter
from matplotlib.collections import LineCollection
from matplotlib.patches import Rectangle
from matplotlib.widgets import Slider

from config import (
    GRAVITY_RANGE,
    LENGTH_RANGE,
    PARAMETER_RANGES,
    SPEED_RANGE,
    ParameterRange,
    SimulationParameters,
)
from grid_layout import GridLayout
from logging_config import get_logger
from scheduler import TimerScheduler
from simulator import SimulationDriver, Snapshot

logger = get_logger("animator")

SQUARE_FACE = (20 / 255, 20 / 255, 20 / 255, 0.9)
SQUARE_EDGE = '#444444'
ARM_COLOR = 'white'
ARM_WIDTH = 1.5
FRAME_INTERVAL_MS = 16
TITLE = "Amidst the chaos"


def snapshot_segments(snapshot: Snapshot | np.ndarray) -> np.ndarray:
    """Two segments per pendulum (origin->elbow, elbow->tip), shape (2*count, 2, 2)."""
    joints = np.asarray(snapshot, dtype=float).reshape(-1, 3, 2)
    segments = np.empty((2 * len(joints), 2, 2))
    segments[0::2] = joints[:, 0:2]
    segments[1::2] = joints[:, 1:3]
    return segments


class PendulumGridView:
    """
    Draws the square region and every pendulum's two arms in pixel coordinates.

    The axes span the drawing area with y growing downwards, like a canvas.
    """

    def __init__(self, ax: plt.Axes) -> None:
        self.ax = ax
        ax.set_facecolor('black')
        ax.axis('off')
        self.square = Rectangle((0, 0), 0, 0, facecolor=SQUARE_FACE, edgecolor=SQUARE_EDGE, linewidth=4, zorder=1)
        ax.add_patch(self.square)
        self.arms = LineCollection([], colors=ARM_COLOR, linewidths=ARM_WIDTH, zorder=2)
        ax.add_collection(self.arms)

    def set_viewport(self, width: float, height: float, layout: GridLayout) -> None:
        self.set_region(width, height, layout.square_x, layout.square_y, layout.square_size)

    def set_region(self, width: float, height: float, square_x: float, square_y: float, square_size: float) -> None:
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)
        self.square.set_xy((square_x, square_y))
        self.square.set_width(square_size)
        self.square.set_height(square_size)

    def draw(self, snapshot: Snapshot | np.ndarray) -> None:
        self.arms.set_segments(snapshot_segments(snapshot))


def _add_slider(fig: plt.Figure, rect: Sequence[float], label: str, param: ParameterRange, value: float) -> Slider:
    ax = fig.add_axes(rect, facecolor='#222222')
    slider = Slider(
        ax, label, param.minimum, param.maximum,
        valinit=value, valstep=param.step, valfmt='%.1f', color='#888888',
    )
    slider.label.set_color('white')
    slider.valtext.set_color('white')
    return slider


class PendulumGridApp:
    """Interactive window: a driver, its view, and the three parameter sliders."""

    def __init__(
        self,
        params: Optional[SimulationParameters] = None,
        seed: Optional[int] = None,
        figsize: Sequence[float] = (9, 10),
    ) -> None:
        self.params = (params or SimulationParameters()).clamped()

        self.fig = plt.figure(figsize=figsize, facecolor='black')
        self.ax = self.fig.add_axes([0.0, 0.15, 1.0, 0.85])
        self.view = PendulumGridView(self.ax)
        self.fig.suptitle(TITLE, color='white')

        self.sliders = {
            'gravity': _add_slider(self.fig, [0.25, 0.09, 0.55, 0.025], 'Gravity', GRAVITY_RANGE, self.params.gravity),
            'length_multiplier': _add_slider(
                self.fig, [0.25, 0.055, 0.55, 0.025], 'Length Multiplier', LENGTH_RANGE, self.params.length_multiplier
            ),
            'speed_multiplier': _add_slider(
                self.fig, [0.25, 0.02, 0.55, 0.025], 'Speed Multiplier', SPEED_RANGE, self.params.speed_multiplier
            ),
        }
        for name, slider in self.sliders.items():
            slider.on_changed(lambda val, name=name: self.update_parameter(name, val))

        timer = self.fig.canvas.new_timer(interval=FRAME_INTERVAL_MS)
        self.driver = SimulationDriver(scheduler=TimerScheduler(timer), seed=seed)
        self.fig.canvas.mpl_connect('resize_event', self.on_resize)
        self.reconfigure()

    def viewport(self) -> tuple[float, float]:
        """Pixel size of the drawing axes."""
        bbox = self.ax.get_window_extent()
        return max(bbox.width, 0.0), max(bbox.height, 0.0)

    def reconfigure(self) -> None:
        width, height = self.viewport()
        self.driver.configure(self.params, (width, height))
        self.view.set_viewport(width, height, self.driver.layout)
        self.view.draw(self.driver.snapshot())

    def update_parameter(self, name: str, value: float) -> None:
        param = PARAMETER_RANGES[name]
        self.params = self.params.replace(**{name: param.clamp(value)})
        logger.debug("%s -> %.1f", name, getattr(self.params, name))
        self.reconfigure()

    def on_resize(self, event=None) -> None:
        self.reconfigure()

    def render(self, snapshot: Snapshot) -> None:
        self.view.draw(snapshot)
        self.fig.canvas.draw_idle()

    def start(self) -> None:
        self.driver.start(self.render)

    def stop(self) -> None:
        self.driver.stop()
        self.driver.scheduler.close()


def animate_grid(params: Optional[SimulationParameters] = None, seed: Optional[int] = None) -> None:
    """Open the interactive pendulum grid window and block until it is closed."""
    app = PendulumGridApp(params=params, seed=seed)
    app.start()
    print("Displaying animation (close window to exit)...")
    plt.show()
    app.stop()
    plt.close(app.fig)


def export_video(
    input_file: str = 'simulation_results.npz',
    video_filename: str = 'pendulum_grid.mp4',
    playback_speed: float = 1.0,
    save_video: bool = True,
    backend: str = 'matplotlib',
):
    """
    Create animation of a recorded pendulum grid run.

    Parameters
    ----------
    input_file : str
        .npz file written by simulator.simulate_grid.
    video_filename : str
        Output video filename.
    playback_speed : float
        Relative playback multiplier (>1 faster, <1 slower).
    save_video : bool
        Save as video when True, otherwise display in a window.
    backend : str
        Renderer; only 'matplotlib' is available.
    """

    backend = (backend or 'matplotlib').lower()
    if backend != 'matplotlib':
        raise ValueError(f"Unknown backend '{backend}'. Use 'matplotlib'.")

    print("Loading simulation results...")
    try:
        data = np.load(input_file)
        positions = data['positions']
        square_x, square_y, square_size = data['square']
        width, height = data['viewport']
    except FileNotFoundError:
        print(f"Error: {input_file} not found. Please run simulator.py first.")
        return

    Frame, M = positions.shape[:2]
    playback_speed = max(playback_speed, 1e-3)
    base_fps = 60
    render_fps = max(1, int(round(base_fps * playback_speed)))
    actual_speed = render_fps / base_fps
    print(f"Loaded {Frame} frames for {M} pendulums")

    dpi = 100
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi, facecolor='black')
    ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
    view = PendulumGridView(ax)
    view.set_region(width, height, square_x, square_y, square_size)

    def init():
        """Initialize animation"""
        view.draw(positions[0])
        return [view.arms]

    def update(frame):
        """Update animation frame"""
        view.draw(positions[frame])

        if (frame + 1) % 30 == 0:
            progress = 100 * (frame + 1) / Frame
            print(f'Animating: {progress:.1f}%', end='\r')

        return [view.arms]

    print(f"Creating animation at {render_fps} fps (~{actual_speed:.2f}x speed)...")
    anim = FuncAnimation(
        fig,
        update,
        frames=Frame,
        init_func=init,
        blit=True,
        interval=1000 / render_fps,
    )

    if save_video:
        print(f"Saving video to {video_filename}...")
        writer = FFMpegWriter(fps=render_fps, bitrate=5000, extra_args=['-vcodec', 'libx264'])
        anim.save(video_filename, writer=writer, dpi=dpi)
        print("Video saved successfully!")
    else:
        print("Displaying animation (close window to exit)...")
        plt.show()

    plt.close(fig)


if __name__ == '__main__':
    # Open the interactive grid
    animate_grid()

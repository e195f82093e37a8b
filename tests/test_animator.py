"""Matplotlib view and interactive app (Agg backend)."""

import numpy as np
import pytest

pytest.importorskip("matplotlib")

import matplotlib.pyplot as plt

from animator import PendulumGridApp, PendulumGridView, export_video, snapshot_segments
from config import POPULATION_SIZE, SimulationParameters
from simulator import simulate_grid


def test_snapshot_segments() -> None:
    snapshot = [((0, 0), (1, 2), (3, 4)), ((10, 10), (11, 12), (13, 14))]
    segments = snapshot_segments(snapshot)
    assert segments.shape == (4, 2, 2)
    np.testing.assert_array_equal(segments[0], [[0, 0], [1, 2]])
    np.testing.assert_array_equal(segments[1], [[1, 2], [3, 4]])
    np.testing.assert_array_equal(segments[3], [[11, 12], [13, 14]])


def test_view_draws_two_segments_per_pendulum(driver) -> None:
    fig, ax = plt.subplots()
    view = PendulumGridView(ax)
    view.set_viewport(900, 900, driver.layout)
    view.draw(driver.snapshot())
    assert len(view.arms.get_segments()) == 2 * POPULATION_SIZE
    assert ax.get_ylim() == (900, 0)
    assert view.square.get_width() == pytest.approx(630)
    plt.close(fig)


def test_app_sliders_reconfigure_driver() -> None:
    app = PendulumGridApp(params=SimulationParameters(gravity=9.0), seed=1)
    try:
        assert app.params.gravity == 5.0
        assert app.driver.configured
        width, height = app.driver.viewport
        assert width > 0 and height > 0

        app.sliders['length_multiplier'].set_val(1.5)
        assert app.driver.params.length_multiplier == pytest.approx(1.5)

        app.update_parameter('speed_multiplier', 2.26)
        assert app.driver.params.speed_multiplier == pytest.approx(2.3)
    finally:
        plt.close(app.fig)


def test_app_frame_loop() -> None:
    app = PendulumGridApp(seed=2)
    try:
        app.start()
        assert app.driver.running
        app.driver.scheduler._on_timer()
        assert app.driver.ticks == 1
        app.on_resize()
        assert app.driver.ticks == 0
        assert app.driver.running
        timer = app.driver.scheduler._timer
        app.stop()
        assert not app.driver.running
        assert all(cb[0] != app.driver.scheduler._on_timer for cb in timer.callbacks)
    finally:
        plt.close(app.fig)


def test_export_video_missing_input(tmp_path, capsys) -> None:
    export_video(input_file=str(tmp_path / "missing.npz"))
    assert "not found" in capsys.readouterr().out


def test_export_video_writes_file(tmp_path) -> None:
    from matplotlib.animation import FFMpegWriter

    if not FFMpegWriter.isAvailable():
        pytest.skip("ffmpeg not available")
    data = tmp_path / "run.npz"
    simulate_grid(frames=10, width=320, height=240, seed=1, output=data)
    video = tmp_path / "grid.mp4"
    export_video(input_file=str(data), video_filename=str(video))
    assert video.exists()


def test_export_video_rejects_unknown_backend(tmp_path) -> None:
    with pytest.raises(ValueError, match="Unknown backend"):
        export_video(input_file=str(tmp_path / "run.npz"), backend='cpp')

"""
Grid Layout
Place pendulum origins on a square grid centered in the viewport
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np

from config import SQUARE_FRACTION


class GridLayout(NamedTuple):
    """Square drawing region and one origin per grid cell."""

    square_x: float
    square_y: float
    square_size: float
    grid_dim: int
    cell_size: float
    origins: np.ndarray  # (count, 2)


def grid_dimension(count: int) -> int:
    """Smallest side length of a square grid holding ``count`` cells."""
    if count < 1:
        raise ValueError(f"Population count must be >= 1, got {count}")
    dim = math.isqrt(count)
    return dim if dim * dim == count else dim + 1


def compute_grid_layout(count: int, width: float, height: float) -> GridLayout:
    """
    Compute the centered square region and the origin of every cell.

    Parameters:
    -----------
    count : int
        Number of pendulums (cells are filled row by row)
    width, height : float
        Viewport size in pixels

    Returns:
    --------
    GridLayout
        A zero-area viewport collapses every origin onto the viewport center.
    """
    if width < 0 or height < 0:
        raise ValueError(f"Viewport size must be non-negative, got {width}x{height}")

    grid_dim = grid_dimension(count)
    square_size = min(width, height) * SQUARE_FRACTION
    square_x = (width - square_size) / 2
    square_y = (height - square_size) / 2
    cell_size = square_size / grid_dim

    idx = np.arange(count)
    origins = np.empty((count, 2), dtype=float)
    origins[:, 0] = square_x + (idx % grid_dim) * cell_size + cell_size / 2
    origins[:, 1] = square_y + (idx // grid_dim) * cell_size + cell_size / 2

    return GridLayout(square_x, square_y, square_size, grid_dim, cell_size, origins)

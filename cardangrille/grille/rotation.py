"""
Grid Rotation

Clockwise quarter-turn rotation of square grids and of single coordinates.
The element at row i, column j of an n x n grid moves to row j, column
n - 1 - i.
"""

from typing import Tuple

import numpy as np


def rotate_clockwise(grid: np.ndarray, turns: int = 1) -> np.ndarray:
    """
    Rotate a square grid clockwise by a number of quarter turns.

    Args:
        grid: Square 2-D array of any dtype
        turns: Number of 90 degree clockwise turns (may be negative)

    Returns:
        A new rotated array; the input is left untouched

    Raises:
        ValueError: If the grid is not a square 2-D array
    """
    grid = np.asarray(grid)
    if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
        raise ValueError(f"Grid must be square, got shape {grid.shape}")
    # rot90 rotates counter-clockwise for positive k
    return np.rot90(grid, k=-turns).copy()


def rotate_coordinate(coord: Tuple[int, int], size: int, turns: int = 1) -> Tuple[int, int]:
    """
    Position of a cell after rotating a size x size grid clockwise.

    Args:
        coord: (row, column) before rotation
        size: Grid edge length
        turns: Number of 90 degree clockwise turns

    Returns:
        (row, column) after rotation
    """
    row, col = coord
    for _ in range(turns % 4):
        row, col = col, size - 1 - row
    return row, col

"""
Rotation Orbit Matrices

This module provides the canonical labelled grids for the supported grille
sizes. Every label marks one rotation orbit: the set of cells that map onto
each other when the grid is turned by 90 degrees. A stencil with one hole per
label therefore exposes every cell exactly once over four turns.
"""

from enum import IntEnum
from functools import lru_cache
from typing import Dict, Optional, Tuple, Union

import numpy as np

from .rotation import rotate_coordinate

Coordinate = Tuple[int, int]


class GrilleSize(IntEnum):
    """Edge lengths supported by the grille."""
    FOUR = 4
    FIVE = 5
    SIX = 6

    @classmethod
    def coerce(cls, value: Union['GrilleSize', int]) -> 'GrilleSize':
        """
        Convert a plain int to a GrilleSize.

        Raises:
            ValueError: If the value is not a supported size
        """
        if isinstance(value, bool):
            raise ValueError(f"Unsupported grille size: {value!r}")
        try:
            return cls(value)
        except (ValueError, TypeError):
            supported = ', '.join(str(int(s)) for s in cls)
            raise ValueError(f"Unsupported grille size {value!r}; expected one of {supported}") from None


_BASE_MATRICES = {
    GrilleSize.FOUR: (
        (1, 2, 3, 1),
        (3, 4, 4, 2),
        (2, 4, 4, 3),
        (1, 3, 2, 1),
    ),
    GrilleSize.FIVE: (
        (1, 2, 3, 4, 1),
        (4, 5, 6, 5, 2),
        (3, 6, 7, 6, 3),
        (2, 5, 6, 5, 4),
        (1, 4, 3, 2, 1),
    ),
    GrilleSize.SIX: (
        (1, 2, 3, 4, 5, 1),
        (5, 6, 7, 8, 6, 2),
        (4, 8, 9, 9, 7, 3),
        (3, 7, 9, 9, 8, 4),
        (2, 6, 8, 7, 6, 5),
        (1, 5, 4, 3, 2, 1),
    ),
}

_ORBIT_COUNTS = {
    GrilleSize.FOUR: 4,
    GrilleSize.FIVE: 7,
    GrilleSize.SIX: 9,
}


@lru_cache(maxsize=None)
def _matrix(size: GrilleSize) -> np.ndarray:
    matrix = np.array(_BASE_MATRICES[size], dtype=np.int8)
    matrix.flags.writeable = False
    return matrix


def orbit_matrix(size: Union[GrilleSize, int]) -> np.ndarray:
    """
    Return the canonical orbit matrix for a grille size.

    Args:
        size: Grille edge length (4, 5 or 6)

    Returns:
        A read-only (size, size) int8 array of orbit labels
    """
    return _matrix(GrilleSize.coerce(size))


def orbit_count(size: Union[GrilleSize, int]) -> int:
    """Number of distinct orbits (stencil holes) for a grille size."""
    return _ORBIT_COUNTS[GrilleSize.coerce(size)]


def center_label(size: Union[GrilleSize, int]) -> Optional[int]:
    """
    Label of the single-cell orbit at the centre of an odd grille.

    Returns:
        The label, or None for even sizes
    """
    size = GrilleSize.coerce(size)
    if size % 2 == 0:
        return None
    middle = size // 2
    return int(orbit_matrix(size)[middle, middle])


@lru_cache(maxsize=None)
def _coordinates(size: GrilleSize) -> Dict[int, Tuple[Coordinate, ...]]:
    matrix = _matrix(size)
    by_label = {}
    for row, col in np.ndindex(matrix.shape):
        by_label.setdefault(int(matrix[row, col]), []).append((row, col))
    return {label: tuple(cells) for label, cells in sorted(by_label.items())}


def orbit_coordinates(size: Union[GrilleSize, int]) -> Dict[int, Tuple[Coordinate, ...]]:
    """
    Map each orbit label to the cells carrying it, in row-major order.

    The mapping is computed once per size and shared; callers must not
    mutate it.
    """
    return _coordinates(GrilleSize.coerce(size))


def validate_orbit_matrix(matrix: np.ndarray) -> None:
    """
    Check that every label of a matrix marks exactly one rotation orbit.

    Args:
        matrix: Square integer matrix of orbit labels

    Raises:
        ValueError: If the matrix is not square or a label spans more or
            less than one orbit
    """
    matrix = np.asarray(matrix)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Orbit matrix must be square, got shape {matrix.shape}")

    n = matrix.shape[0]
    seen = set()
    for row, col in np.ndindex(matrix.shape):
        label = int(matrix[row, col])
        orbit = {rotate_coordinate((row, col), n, turns) for turns in range(4)}
        cells = {(int(r), int(c)) for r, c in zip(*np.nonzero(matrix == label))}
        if orbit != cells:
            raise ValueError(f"Label {label} at {(row, col)} does not match its rotation orbit")
        seen.add(label)

    expected = set(range(1, len(seen) + 1))
    if seen != expected:
        raise ValueError(f"Labels must be numbered 1..{len(seen)}, got {sorted(seen)}")


if __name__ == "__main__":
    for grille_size in GrilleSize:
        validate_orbit_matrix(orbit_matrix(grille_size))
        print(f"{int(grille_size)}x{int(grille_size)}: {orbit_count(grille_size)} orbits")
        print(orbit_matrix(grille_size))

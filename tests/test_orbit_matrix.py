"""
Tests for the rotation orbit matrices.
"""

import math
from collections import Counter

import numpy as np
import pytest

from cardangrille.grille import (
    GrilleSize,
    center_label,
    orbit_coordinates,
    orbit_count,
    orbit_matrix,
    rotate_clockwise,
    validate_orbit_matrix,
)


@pytest.mark.parametrize("size, expected", [(4, 4), (5, 7), (6, 9)])
def test_orbit_count(size, expected):
    assert orbit_count(size) == expected
    assert orbit_count(size) == math.ceil(size * size / 4)


@pytest.mark.parametrize("size", list(GrilleSize))
def test_label_multiplicities(size):
    counts = Counter(orbit_matrix(size).ravel().tolist())
    assert sorted(counts) == list(range(1, orbit_count(size) + 1))

    center = center_label(size)
    for label, count in counts.items():
        assert count == (1 if label == center else 4)


@pytest.mark.parametrize("size", list(GrilleSize))
def test_matrices_are_valid_orbit_decompositions(size):
    matrix = orbit_matrix(size)
    validate_orbit_matrix(matrix)
    assert matrix.shape == (size, size)
    assert np.array_equal(rotate_clockwise(matrix, 4), matrix)


def test_center_label():
    assert center_label(4) is None
    assert center_label(6) is None
    assert center_label(5) == 7
    assert orbit_matrix(5)[2, 2] == 7


def test_matrix_is_read_only():
    matrix = orbit_matrix(GrilleSize.FOUR)
    with pytest.raises(ValueError):
        matrix[0, 0] = 9
    assert orbit_matrix(4)[0, 0] == 1


@pytest.mark.parametrize("size", list(GrilleSize))
def test_orbit_coordinates_match_matrix(size):
    matrix = orbit_matrix(size)
    by_label = orbit_coordinates(size)

    assert list(by_label) == list(range(1, orbit_count(size) + 1))
    all_cells = [cell for cells in by_label.values() for cell in cells]
    assert len(all_cells) == size * size
    assert len(set(all_cells)) == size * size
    for label, cells in by_label.items():
        assert all(matrix[r, c] == label for r, c in cells)


@pytest.mark.parametrize("size", [0, 3, 7, 16, -4, "4", None, True])
def test_unsupported_sizes_rejected(size):
    with pytest.raises(ValueError):
        orbit_matrix(size)
    with pytest.raises(ValueError):
        orbit_count(size)


def test_coerce_accepts_ints_and_members():
    assert GrilleSize.coerce(5) is GrilleSize.FIVE
    assert GrilleSize.coerce(GrilleSize.SIX) is GrilleSize.SIX


def test_validate_rejects_broken_matrices():
    broken = np.array(orbit_matrix(4))
    broken[0, 1], broken[0, 2] = broken[0, 2], broken[0, 1]
    with pytest.raises(ValueError):
        validate_orbit_matrix(broken)

    with pytest.raises(ValueError):
        validate_orbit_matrix(np.ones((2, 3), dtype=int))

    gap = np.array(orbit_matrix(4))
    gap[gap == 4] = 5
    with pytest.raises(ValueError):
        validate_orbit_matrix(gap)

"""
Tests for stencil key generation and validation.
"""

import dataclasses
from collections import Counter

import numpy as np
import pytest

from cardangrille.grille import GrilleSize, center_label, orbit_count, orbit_matrix, rotate_coordinate
from cardangrille.key_schedule import StencilKey, derive_key_from_password, generate_key
from cardangrille.key_schedule import stencil_key

FAST_KDF = {'time_cost': 1, 'memory_cost': 8, 'parallelism': 1}


@pytest.mark.parametrize("size", list(GrilleSize))
def test_generated_key_is_valid(size):
    key = generate_key(size, np.random.default_rng(42))
    matrix = orbit_matrix(size)

    assert key.size is size
    assert key.holes == orbit_count(size)
    assert len(set(key.coordinates)) == key.holes
    for label, (row, col) in enumerate(key.coordinates, start=1):
        assert 0 <= row < size and 0 <= col < size
        assert matrix[row, col] == label


@pytest.mark.parametrize("size", list(GrilleSize))
@pytest.mark.parametrize("seed", range(5))
def test_rotation_images_partition_grid(size, seed):
    key = generate_key(size, np.random.default_rng(seed))
    images = [rotate_coordinate(c, size, turns) for c in key.coordinates for turns in range(4)]
    assert set(images) == {(r, c) for r in range(size) for c in range(size)}


@pytest.mark.parametrize("size", list(GrilleSize))
def test_turn_masks_cover_grid_once(size):
    key = generate_key(size, np.random.default_rng(7))
    total = sum(key.mask(turn).astype(int) for turn in range(4))
    assert np.array_equal(total, np.ones((size, size), dtype=int))


def test_holes_for_turn_skips_center_after_first_turn():
    key = generate_key(5, np.random.default_rng(1))
    center = center_label(5)

    assert key.holes_for_turn(0) == key.coordinates
    for turn in (1, 2, 3):
        holes = key.holes_for_turn(turn)
        assert len(holes) == key.holes - 1
        assert (2, 2) not in holes
    assert key.coordinates[center - 1] == (2, 2)
    assert sum(len(key.holes_for_turn(t)) for t in range(4)) == key.block_size


def test_holes_for_turn_rejects_bad_turn():
    key = generate_key(4)
    with pytest.raises(ValueError):
        key.holes_for_turn(4)


def test_mask_of_known_key():
    key = StencilKey(GrilleSize.FOUR, ((0, 0), (0, 1), (0, 2), (1, 1)))
    assert key.mask(0).astype(int).tolist() == [
        [1, 1, 1, 0],
        [0, 1, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ]
    assert key.mask(1).astype(int).tolist() == [
        [0, 0, 0, 0],
        [1, 0, 0, 0],
        [1, 1, 0, 0],
        [1, 0, 0, 0],
    ]


def test_seeded_generation_is_reproducible():
    first = generate_key(6, np.random.default_rng(1234))
    second = generate_key(6, np.random.default_rng(1234))
    assert first == second


def test_every_orbit_member_can_be_chosen():
    rng = np.random.default_rng(2024)
    chosen = Counter(generate_key(4, rng).coordinates[0] for _ in range(200))
    assert set(chosen) == {(0, 0), (0, 3), (3, 0), (3, 3)}


def test_key_is_immutable():
    key = generate_key(4)
    with pytest.raises(dataclasses.FrozenInstanceError):
        key.coordinates = ()


def test_key_accepts_numpy_integers():
    key = StencilKey(GrilleSize.FOUR, tuple(map(tuple, np.array([[0, 3], [0, 1], [0, 2], [1, 1]]))))
    assert key.coordinates == ((0, 3), (0, 1), (0, 2), (1, 1))
    assert all(type(v) is int for coord in key.coordinates for v in coord)


def test_key_accepts_plain_int_size():
    key = StencilKey(4, [[0, 0], [0, 1], [0, 2], [1, 1]])
    assert key.size is GrilleSize.FOUR
    assert key.coordinates == ((0, 0), (0, 1), (0, 2), (1, 1))
    assert key.block_size == 16


@pytest.mark.parametrize("coords", [
    ((0, 0), (0, 1), (0, 2)),
    ((0, 0), (0, 1), (0, 2), (1, 1), (1, 2)),
    ((0, 1), (0, 0), (0, 2), (1, 1)),
    ((0, 0), (0, 1), (0, 2), (4, 4)),
    ((0, 0), (0, 1), (0, 2), (-1, 1)),
    ((0.9, 0.2), (0, 1), (0, 2), (1, 1)),
    ((0.0, 0.0), (0, 1), (0, 2), (1, 1)),
    (("0", "0"), (0, 1), (0, 2), (1, 1)),
    ((False, False), (0, 1), (0, 2), (1, 1)),
])
def test_invalid_keys_rejected(coords):
    with pytest.raises(ValueError):
        StencilKey(GrilleSize.FOUR, coords)


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        generate_key(3)


def test_missing_orbit_is_invariant_violation(monkeypatch):
    monkeypatch.setattr(stencil_key, 'orbit_coordinates', lambda size: {1: ((0, 0),)})
    with pytest.raises(RuntimeError):
        generate_key(4)


def test_password_derivation_is_deterministic():
    salt = b'0123456789abcdef'
    first, first_salt = derive_key_from_password("correct horse", 6, salt, FAST_KDF)
    second, _ = derive_key_from_password("correct horse", 6, salt, FAST_KDF)

    assert first_salt == salt
    assert first == second


def test_password_derivation_depends_on_salt():
    keys = {
        derive_key_from_password("correct horse", 6, bytes([i]) * 16, FAST_KDF)[0]
        for i in range(5)
    }
    assert len(keys) > 1


def test_password_derivation_generates_salt():
    key, salt = derive_key_from_password("pw", 5, params=FAST_KDF)
    assert len(salt) == 16
    assert key.size is GrilleSize.FIVE


def test_empty_password_rejected():
    with pytest.raises(ValueError):
        derive_key_from_password("", 4, params=FAST_KDF)


@pytest.mark.parametrize("params", [
    {'time_cost': 0},
    {'memory_cost': 4, 'parallelism': 1},
    {'parallelism': 0},
    {'salt_len': 4},
    {'time_cost': 1.5},
    {'pepper': 1},
])
def test_password_derivation_rejects_bad_params(params):
    with pytest.raises(ValueError):
        derive_key_from_password("pw", 4, params={**FAST_KDF, **params})


def test_password_derivation_rejects_short_salt():
    with pytest.raises(ValueError):
        derive_key_from_password("pw", 4, salt=b"abc", params=FAST_KDF)

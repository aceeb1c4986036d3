"""
Stencil Key Generation

This module builds the grille key: one punched hole per rotation orbit,
chosen uniformly at random among the cells of that orbit. Because orbit
members are exactly the rotation images of each other, the four turns of
such a stencil expose every cell of the grid exactly once.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from ..grille.orbit_matrix import (
    Coordinate,
    GrilleSize,
    center_label,
    orbit_coordinates,
    orbit_count,
    orbit_matrix,
)
from ..grille.rotation import rotate_coordinate
from .kdf import derive_key, generate_salt, resolve_kdf_params

logger = logging.getLogger(__name__)


def _cell_index(value: Any) -> int:
    # numpy integers are fine; floats, strings and bools are not
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"Coordinate components must be integers, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class StencilKey:
    """
    Grille key: the edge length and one (row, column) hole per orbit label,
    ordered by label.
    """
    size: GrilleSize
    coordinates: Tuple[Coordinate, ...]

    def __post_init__(self):
        size = GrilleSize.coerce(self.size)
        coords = tuple((_cell_index(r), _cell_index(c)) for r, c in self.coordinates)
        object.__setattr__(self, 'size', size)
        object.__setattr__(self, 'coordinates', coords)

        expected = orbit_count(size)
        if len(coords) != expected:
            raise ValueError(f"Key for size {int(size)} needs {expected} coordinates, got {len(coords)}")

        matrix = orbit_matrix(size)
        for label, (row, col) in enumerate(coords, start=1):
            if not (0 <= row < size and 0 <= col < size):
                raise ValueError(f"Coordinate {(row, col)} is outside a {int(size)}x{int(size)} grid")
            if matrix[row, col] != label:
                raise ValueError(f"Coordinate {(row, col)} does not belong to orbit {label}")

    @property
    def block_size(self) -> int:
        """Number of characters one grid block holds."""
        return int(self.size) ** 2

    @property
    def holes(self) -> int:
        return len(self.coordinates)

    def holes_for_turn(self, turn: int) -> Tuple[Coordinate, ...]:
        """
        Holes written through on a given turn, in label order.

        The single centre cell of an odd grille is its own rotation image,
        so it is only open on the first turn.
        """
        if not 0 <= turn < 4:
            raise ValueError(f"Turn must be in range 0..3, got {turn}")
        center = center_label(self.size)
        if turn == 0 or center is None:
            return self.coordinates
        return tuple(c for label, c in enumerate(self.coordinates, start=1) if label != center)

    def mask(self, turn: int = 0) -> np.ndarray:
        """
        Boolean grid of the cells exposed by the stencil after `turn`
        clockwise turns, seen from the fixed grid.
        """
        mask = np.zeros((self.size, self.size), dtype=bool)
        for coord in self.holes_for_turn(turn):
            # rotating the grid t times clockwise equals rotating the stencil t times counter-clockwise
            mask[rotate_coordinate(coord, self.size, -turn)] = True
        return mask


def generate_key(size: Union[GrilleSize, int] = GrilleSize.FOUR,
                 rng: Optional[np.random.Generator] = None) -> StencilKey:
    """
    Generate a random stencil key for a grille size.

    Args:
        size: Grille edge length (default: 4)
        rng: Optional random generator; a fresh one is created per call
             when omitted

    Returns:
        A new StencilKey

    Raises:
        ValueError: If the size is not supported
        RuntimeError: If an orbit label has no cells in the orbit matrix
    """
    size = GrilleSize.coerce(size)
    if rng is None:
        rng = np.random.default_rng()

    cells_by_label = orbit_coordinates(size)
    coords = []
    for label in range(1, orbit_count(size) + 1):
        cells = cells_by_label.get(label)
        if not cells:
            raise RuntimeError(f"Orbit matrix for size {int(size)} has no cell labelled {label}")
        coords.append(cells[int(rng.integers(len(cells)))])

    logger.debug("Generated %dx%d stencil key with %d holes", size, size, len(coords))
    return StencilKey(size, tuple(coords))


def derive_key_from_password(password: str,
                             size: Union[GrilleSize, int] = GrilleSize.FOUR,
                             salt: Optional[bytes] = None,
                             params: Optional[Dict[str, int]] = None) -> Tuple[StencilKey, bytes]:
    """
    Derive a stencil key from a password using Argon2id.

    The same password, salt and parameters always yield the same stencil,
    so two parties sharing a passphrase only need to exchange the salt.

    Args:
        password: The password to derive the key from
        size: Grille edge length (default: 4)
        salt: Optional salt (will be generated if not provided)
        params: Optional Argon2id parameters overriding KDF_DEFAULT_PARAMS

    Returns:
        A tuple of (key, salt)
    """
    resolved = resolve_kdf_params(params)
    if salt is None:
        salt = generate_salt(resolved['salt_len'])

    seed = derive_key(password, salt, **{k: v for k, v in resolved.items() if k != 'salt_len'})

    logger.debug("Derived stencil key from password (size %d)", GrilleSize.coerce(size))
    rng = np.random.default_rng(int.from_bytes(seed, byteorder='big'))
    return generate_key(size, rng), salt


if __name__ == "__main__":
    for grille_size in GrilleSize:
        key = generate_key(grille_size)
        print(f"{int(grille_size)}x{int(grille_size)} key: {key.coordinates}")
        print(key.mask().astype(int))

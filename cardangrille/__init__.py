"""
CardanGrille - Cardan Grille Transposition Cipher Library

This library implements the Cardan grille: a square stencil with one hole
per rotation orbit is laid over a grid, characters are written through the
holes, and the stencil is turned a quarter four times so that every cell is
filled exactly once. The filled grid, read row by row, is the ciphertext.

Key Features:
- 4x4, 5x5 and 6x6 grilles
- Random stencil keys, or keys derived from a password with Argon2id
- Per-call configuration of the padding placeholder
- Key tokens for transport, optionally sealed with AES-GCM

This is a classical cipher and offers no real confidentiality.
"""

from .config import GrilleConfig, KDF_DEFAULT_PARAMS
from .grille import GrilleSize, orbit_count, orbit_matrix, rotate_clockwise
from .key_schedule import StencilKey, generate_key, derive_key_from_password
from .cipher_core import GrilleCipher, encode, encode_with_key, decode
from .kdf_km import export_key, import_key, seal_key, unseal_key

__version__ = '0.1.0'
__author__ = 'CardanGrille Team'

__all__ = [
    'GrilleConfig', 'KDF_DEFAULT_PARAMS',
    'GrilleSize', 'orbit_count', 'orbit_matrix', 'rotate_clockwise',
    'StencilKey', 'generate_key', 'derive_key_from_password',
    'GrilleCipher', 'encode', 'encode_with_key', 'decode',
    'export_key', 'import_key', 'seal_key', 'unseal_key',
]

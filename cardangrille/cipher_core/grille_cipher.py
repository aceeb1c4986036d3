"""
Cardan Grille Cipher Implementation

This module provides the encode/decode pipeline of the Cardan grille
transposition cipher. Plaintext is cut into blocks of size*size characters;
each block is written into an empty grid through the stencil holes, turning
the grid a quarter clockwise after every pass, and the filled grid is read
out row by row. Decoding loads each block back into a grid and reads through
the same holes in the same order.
"""

import logging
from typing import List, Optional, Tuple, Union

import numpy as np

from ..config import DEFAULT_CONFIG, GrilleConfig
from ..grille.orbit_matrix import GrilleSize
from ..grille.rotation import rotate_clockwise
from ..key_schedule.stencil_key import StencilKey, generate_key

logger = logging.getLogger(__name__)

TURNS = 4


def _require_text(text: str, what: str = "Text") -> None:
    if text is None or (isinstance(text, str) and not text):
        raise ValueError(f"{what} must not be empty")
    if not isinstance(text, str):
        raise TypeError(f"{what} must be a string, got {type(text).__name__}")


def _require_key(key: StencilKey) -> None:
    if not isinstance(key, StencilKey):
        raise TypeError(f"Expected a StencilKey, got {type(key).__name__}")


class GrilleCipher:
    """
    Cardan grille transposition cipher bound to one configuration.

    Instances hold no per-message state and can be shared between threads.
    """

    def __init__(self, config: Optional[GrilleConfig] = None):
        """
        Initialize the cipher.

        Args:
            config: Placeholder and trimming settings (default: '#' padding,
                    spaces trimmed)
        """
        self.config = config if config is not None else DEFAULT_CONFIG

    def pad(self, text: str, size: Union[GrilleSize, int]) -> str:
        """
        Trim the text and pad it with the placeholder to whole blocks.

        Args:
            text: The plaintext
            size: Grille edge length

        Returns:
            Text whose length is a multiple of size*size

        Raises:
            ValueError: If the text is empty before or after trimming
        """
        _require_text(text)
        block_size = int(GrilleSize.coerce(size)) ** 2

        text = text.strip(self.config.trim_chars)
        if not text:
            raise ValueError("Text must contain more than trim characters")
        if text.endswith(self.config.placeholder):
            logger.warning("Plaintext ends with the placeholder %r; it will be stripped on decode",
                           self.config.placeholder)

        shortfall = -len(text) % block_size
        return text + self.config.placeholder * shortfall

    def _write_blocks(self, text: str, key: StencilKey) -> str:
        n = int(key.size)
        passes = [key.holes_for_turn(turn) for turn in range(TURNS)]
        result = []
        cursor = 0

        while cursor < len(text):
            grid = np.full((n, n), '', dtype=object)
            for holes in passes:
                for row, col in holes:
                    grid[row, col] = text[cursor]
                    cursor += 1
                grid = rotate_clockwise(grid)
            result.append(''.join(grid.ravel()))

        return ''.join(result)

    def _read_blocks(self, text: str, key: StencilKey) -> str:
        n = int(key.size)
        passes = [key.holes_for_turn(turn) for turn in range(TURNS)]
        result: List[str] = []

        for start in range(0, len(text), key.block_size):
            grid = np.array(list(text[start:start + key.block_size]), dtype=object).reshape(n, n)
            for holes in passes:
                result.extend(grid[row, col] for row, col in holes)
                grid = rotate_clockwise(grid)

        return ''.join(result)

    def encode(self, text: str,
               size: Union[GrilleSize, int] = GrilleSize.FOUR) -> Tuple[str, StencilKey]:
        """
        Encode text with a freshly generated stencil key.

        Args:
            text: Message to encode
            size: Grille edge length (default: 4)

        Returns:
            A tuple of (ciphertext, key); the key is needed to decode
        """
        padded = self.pad(text, size)
        key = generate_key(size)
        return self._encode_padded(padded, key), key

    def encode_with_key(self, text: str, key: StencilKey) -> str:
        """
        Encode text with an existing stencil key.

        Args:
            text: Message to encode
            key: Stencil key, e.g. one agreed with the recipient beforehand

        Returns:
            The ciphertext
        """
        _require_key(key)
        return self._encode_padded(self.pad(text, key.size), key)

    def _encode_padded(self, padded: str, key: StencilKey) -> str:
        ciphertext = self._write_blocks(padded, key)
        logger.debug("Encoded %d block(s) with a %dx%d grille",
                     len(padded) // key.block_size, key.size, key.size)
        return ciphertext

    def decode(self, text: str, key: StencilKey) -> str:
        """
        Decode ciphertext with the stencil key it was encoded with.

        Trailing placeholders are removed, so a message that legitimately
        ended in the placeholder character loses those characters.

        Args:
            text: Ciphertext to decode
            key: The key returned by encode

        Returns:
            The decoded message

        Raises:
            ValueError: If the ciphertext is empty or not whole blocks
        """
        _require_text(text, "Ciphertext")
        _require_key(key)

        if len(text) % key.block_size != 0:
            raise ValueError(f"Ciphertext length {len(text)} is not a multiple of {key.block_size}")

        logger.debug("Decoding %d block(s) with a %dx%d grille",
                     len(text) // key.block_size, key.size, key.size)
        return self._read_blocks(text, key).rstrip(self.config.placeholder)


def encode(text: str,
           size: Union[GrilleSize, int] = GrilleSize.FOUR,
           config: Optional[GrilleConfig] = None) -> Tuple[str, StencilKey]:
    """
    Convenience function to encode with a new key.

    Args:
        text: Message to encode
        size: Grille edge length (default: 4)
        config: Optional cipher configuration

    Returns:
        A tuple of (ciphertext, key)
    """
    return GrilleCipher(config).encode(text, size)


def encode_with_key(text: str, key: StencilKey,
                    config: Optional[GrilleConfig] = None) -> str:
    """
    Convenience function to encode with an existing key.

    Args:
        text: Message to encode
        key: Stencil key
        config: Optional cipher configuration

    Returns:
        The ciphertext
    """
    return GrilleCipher(config).encode_with_key(text, key)


def decode(text: str, key: StencilKey,
           config: Optional[GrilleConfig] = None) -> str:
    """
    Convenience function to decode.

    Args:
        text: Ciphertext to decode
        key: The key used for encoding
        config: Optional cipher configuration; must use the same placeholder
                as the encoding side

    Returns:
        The decoded message
    """
    return GrilleCipher(config).decode(text, key)


if __name__ == "__main__":
    message = "Meet me at the old mill at midnight"

    for grille_size in GrilleSize:
        ciphertext, key = encode(message, grille_size)
        decoded = decode(ciphertext, key)

        print(f"Size: {int(grille_size)}")
        print(f"Key: {key.coordinates}")
        print(f"Ciphertext: {ciphertext}")
        print(f"Decoded: {decoded}")
        assert decoded == message

    print("Grille cipher round trips completed successfully!")

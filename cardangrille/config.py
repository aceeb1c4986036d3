"""
Configuration

This module holds the per-call configuration for the grille cipher and the
default Argon2id parameters used by password-based key derivation and key
sealing.
"""

import os
from dataclasses import dataclass

DEFAULT_PLACEHOLDER = '#'
DEFAULT_TRIM_CHARS = ' '

PLACEHOLDER_ENV_VAR = 'CARDANGRILLE_PLACEHOLDER'

# Argon2id cost used when the caller gives none; memory_cost is in KiB
KDF_DEFAULT_PARAMS = {
    'time_cost': 4,
    'memory_cost': 64 * 1024,
    'parallelism': 4,
    'hash_len': 32,
    'salt_len': 16,
}

# Inclusive (low, high) bounds; sealed tokens carry their own parameters
KDF_LIMITS = {
    'time_cost': (1, 16),
    'memory_cost': (8, 256 * 1024),
    'parallelism': (1, 16),
    'hash_len': (16, 64),
    'salt_len': (8, 64),
}


@dataclass(frozen=True)
class GrilleConfig:
    """
    Settings applied to a single encode or decode call.

    Attributes:
        placeholder: Character appended to fill the last block. Trailing
            occurrences are stripped on decode, so it must not end a message.
        trim_chars: Characters stripped from both ends of the plaintext
            before padding.
    """
    placeholder: str = DEFAULT_PLACEHOLDER
    trim_chars: str = DEFAULT_TRIM_CHARS

    def __post_init__(self):
        if not isinstance(self.placeholder, str) or len(self.placeholder) != 1:
            raise ValueError("Placeholder must be exactly one character")
        if not isinstance(self.trim_chars, str):
            raise ValueError("Trim characters must be a string")
        if self.placeholder in self.trim_chars:
            raise ValueError("Placeholder cannot also be a trim character")

    @classmethod
    def from_env(cls) -> 'GrilleConfig':
        """
        Build a configuration, taking the placeholder from the
        CARDANGRILLE_PLACEHOLDER environment variable when it is set.
        """
        placeholder = os.environ.get(PLACEHOLDER_ENV_VAR)
        if placeholder:
            return cls(placeholder=placeholder)
        return cls()


DEFAULT_CONFIG = GrilleConfig()

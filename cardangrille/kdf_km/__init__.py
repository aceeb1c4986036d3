"""
Key Derivation and Key Transport Package

This package implements Argon2id key derivation and the token formats used
to hand a stencil key to the recipient, optionally sealed under a password.
"""

from ..key_schedule.kdf import derive_key, generate_salt
from .key_management import export_key, import_key, seal_key, unseal_key

__all__ = ['derive_key', 'export_key', 'generate_salt', 'import_key', 'seal_key', 'unseal_key']

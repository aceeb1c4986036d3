"""
Key Schedule Package

This package generates grille stencil keys, either at random or derived
deterministically from a password.
"""

from .stencil_key import StencilKey, generate_key, derive_key_from_password

__all__ = ['StencilKey', 'generate_key', 'derive_key_from_password']

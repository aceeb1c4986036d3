"""
Cipher Core Package

This package implements the Cardan grille encode/decode pipeline.
"""

from .grille_cipher import GrilleCipher, encode, encode_with_key, decode

__all__ = ['GrilleCipher', 'encode', 'encode_with_key', 'decode']

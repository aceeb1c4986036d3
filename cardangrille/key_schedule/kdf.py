"""
Password-Based Key Derivation

Argon2id derivation shared by password-derived stencil keys and by key
sealing. Parameters are checked against fixed bounds before Argon2 runs,
since sealed tokens carry their own parameters and cannot be trusted.
"""

import secrets
from typing import Any, Dict, Mapping, Optional, Union

import argon2
from argon2.exceptions import HashingError
from argon2.low_level import Type

from ..config import KDF_DEFAULT_PARAMS, KDF_LIMITS

KDF_PARAM_NAMES = ('time_cost', 'memory_cost', 'parallelism', 'hash_len')


def _bounded_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"KDF parameter {name} must be an integer, got {value!r}")
    low, high = KDF_LIMITS[name]
    if not low <= value <= high:
        raise ValueError(f"KDF parameter {name}={value} outside allowed range {low}..{high}")
    return value


def resolve_kdf_params(params: Optional[Mapping[str, Any]] = None) -> Dict[str, int]:
    """
    Merge overrides into KDF_DEFAULT_PARAMS and check every value.

    Raises:
        ValueError: If a parameter is unknown, not an integer or out of range
    """
    resolved = dict(KDF_DEFAULT_PARAMS)
    if params:
        unknown = set(params) - set(resolved)
        if unknown:
            raise ValueError(f"Unknown KDF parameters: {sorted(unknown)}")
        resolved.update(params)

    resolved = {name: _bounded_int(name, value) for name, value in resolved.items()}
    if resolved['memory_cost'] < 8 * resolved['parallelism']:
        raise ValueError("KDF memory_cost must be at least 8 KiB per lane of parallelism")
    return resolved


def generate_salt(length: int = KDF_DEFAULT_PARAMS['salt_len']) -> bytes:
    """Random salt of `length` bytes (at least the Argon2 minimum)."""
    return secrets.token_bytes(_bounded_int('salt_len', length))


def derive_key(password: Union[str, bytes], salt: bytes, **params: int) -> bytes:
    """
    Derive raw key material from a password using Argon2id.

    Args:
        password: Password to derive from
        salt: Salt of at least 8 bytes
        **params: Overrides for time_cost, memory_cost, parallelism, hash_len

    Returns:
        hash_len bytes of key material

    Raises:
        ValueError: On an empty password, short salt, bad parameters, or if
            Argon2 itself rejects the input
    """
    if isinstance(password, str):
        password = password.encode('utf-8')
    if not password:
        raise ValueError("Password must not be empty")
    if not isinstance(salt, bytes):
        raise ValueError("Salt must be bytes")
    _bounded_int('salt_len', len(salt))

    resolved = resolve_kdf_params(params)
    try:
        return argon2.low_level.hash_secret_raw(
            secret=password,
            salt=salt,
            type=Type.ID,
            **{name: resolved[name] for name in KDF_PARAM_NAMES}
        )
    except HashingError as e:
        raise ValueError(f"Key derivation failed: {e}") from e

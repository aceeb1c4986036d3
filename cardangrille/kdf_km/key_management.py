"""
Key Derivation and Key Transport

This module implements in-memory encodings for moving a stencil key from
the sender to the recipient: a plain token for trusted channels, and a
password-sealed token protected with Argon2id and AES-GCM. Nothing is
written to disk; transporting the token is up to the caller.
"""

import base64
import binascii
import json
import logging
import secrets
from typing import Any, Dict, Mapping, Optional

from Cryptodome.Cipher import AES

from ..key_schedule.kdf import KDF_PARAM_NAMES, derive_key, generate_salt, resolve_kdf_params
from ..key_schedule.stencil_key import StencilKey

logger = logging.getLogger(__name__)

TOKEN_VERSION = 1
SEALED_ALGORITHM = 'argon2id+aes-256-gcm'

# AES accepts 128, 192 and 256-bit keys
AES_KEY_SIZES = (16, 24, 32)


def _wrapping_params(params: Optional[Mapping[str, Any]]) -> Dict[str, int]:
    resolved = resolve_kdf_params(params)
    if resolved['hash_len'] not in AES_KEY_SIZES:
        raise ValueError(f"hash_len must be one of {AES_KEY_SIZES} to key AES, got {resolved['hash_len']}")
    return resolved


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('ascii')


def _b64decode(data: str) -> bytes:
    try:
        return base64.urlsafe_b64decode(data.encode('ascii'))
    except (binascii.Error, UnicodeEncodeError, AttributeError) as e:
        raise ValueError(f"Malformed base64 data: {e}") from e


def _key_document(key: StencilKey) -> Dict[str, Any]:
    return {
        'v': TOKEN_VERSION,
        'size': int(key.size),
        'coords': [list(c) for c in key.coordinates],
    }


def _key_from_document(document: Any) -> StencilKey:
    if not isinstance(document, dict):
        raise ValueError("Key document must be a JSON object")
    if document.get('v') != TOKEN_VERSION:
        raise ValueError(f"Unsupported key token version: {document.get('v')!r}")
    try:
        coords = tuple((r, c) for r, c in document['coords'])
        return StencilKey(document['size'], coords)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed key document: {e}") from e


def export_key(key: StencilKey) -> str:
    """
    Encode a stencil key as a URL-safe text token.

    The token is not protected; anyone holding it can decode messages.
    """
    document = json.dumps(_key_document(key), separators=(',', ':'))
    return _b64encode(document.encode('utf-8'))


def import_key(token: str) -> StencilKey:
    """
    Rebuild a stencil key from a token produced by export_key.

    Raises:
        ValueError: If the token is malformed or describes an invalid key
    """
    raw = _b64decode(token)
    try:
        document = json.loads(raw.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Malformed key token: {e}") from e
    return _key_from_document(document)


def seal_key(key: StencilKey, password: str,
             params: Optional[Dict[str, int]] = None) -> str:
    """
    Encrypt a stencil key under a password for transport.

    Args:
        key: The stencil key to protect
        password: Shared password
        params: Optional Argon2id parameters overriding KDF_DEFAULT_PARAMS

    Returns:
        URL-safe sealed token carrying the salt, nonce, tag and ciphertext

    Raises:
        ValueError: If the password is empty or a parameter is out of range
    """
    kdf_params = _wrapping_params(params)
    cost = {k: kdf_params[k] for k in KDF_PARAM_NAMES}

    salt = generate_salt(kdf_params['salt_len'])
    wrapping_key = derive_key(password, salt, **cost)

    nonce = secrets.token_bytes(12)
    cipher = AES.new(wrapping_key, AES.MODE_GCM, nonce=nonce)
    plaintext = json.dumps(_key_document(key), separators=(',', ':')).encode('utf-8')
    ciphertext, tag = cipher.encrypt_and_digest(plaintext)

    envelope = {
        'v': TOKEN_VERSION,
        'alg': SEALED_ALGORITHM,
        'kdf_params': cost,
        'salt': _b64encode(salt),
        'nonce': _b64encode(nonce),
        'tag': _b64encode(tag),
        'ct': _b64encode(ciphertext),
    }
    logger.debug("Sealed %dx%d stencil key", key.size, key.size)
    return _b64encode(json.dumps(envelope, separators=(',', ':')).encode('utf-8'))


def unseal_key(token: str, password: str) -> StencilKey:
    """
    Decrypt a sealed token produced by seal_key.

    Args:
        token: Sealed key token
        password: The password used when sealing

    Returns:
        The stencil key

    Raises:
        ValueError: If the token is malformed, the password is wrong or the
            token was tampered with
    """
    try:
        envelope = json.loads(_b64decode(token).decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Malformed sealed token: {e}") from e
    if not isinstance(envelope, dict) or envelope.get('alg') != SEALED_ALGORITHM:
        raise ValueError("Not a sealed stencil key token")

    try:
        cost = {k: envelope['kdf_params'][k] for k in KDF_PARAM_NAMES}
        salt = _b64decode(envelope['salt'])
        nonce = _b64decode(envelope['nonce'])
        tag = _b64decode(envelope['tag'])
        ciphertext = _b64decode(envelope['ct'])
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed sealed token: {e}") from e

    # the token supplies its own cost, so bound it before running Argon2
    _wrapping_params(cost)
    wrapping_key = derive_key(password, salt, **cost)
    cipher = AES.new(wrapping_key, AES.MODE_GCM, nonce=nonce)
    try:
        plaintext = cipher.decrypt_and_verify(ciphertext, tag)
    except (ValueError, KeyError) as e:
        raise ValueError(f"Failed to unseal key: {e}") from e

    return _key_from_document(json.loads(plaintext.decode('utf-8')))


if __name__ == "__main__":
    from ..key_schedule.stencil_key import generate_key

    key = generate_key(6)
    token = export_key(key)
    print(f"Key token: {token}")
    assert import_key(token) == key

    sealed = seal_key(key, "secure_password_example")
    print(f"Sealed token: {sealed}")
    assert unseal_key(sealed, "secure_password_example") == key

    try:
        unseal_key(sealed, "wrong_password")
        print("ERROR: Wrong password not detected!")
    except ValueError as e:
        print(f"Correctly rejected wrong password: {e}")

    print("Key transport tests completed successfully!")

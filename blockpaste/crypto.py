"""
Paste encryption.

- Key derivation: single SHA-256 over the passphrase (32 bytes, AES-256).
  Not a password-stretching KDF; kept so existing encrypted pastes stay
  readable.
- Encryption: AES-256-GCM via the `cryptography` package.
- Blob layout: nonce(12) + ciphertext + tag(16). No associated data.
"""

from __future__ import annotations

import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from blockpaste.exceptions import AuthenticationError

NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32


def derive_key(passphrase: str) -> bytes:
    """Hash a passphrase into a 32-byte AES key."""
    return hashlib.sha256(passphrase.encode("utf-8")).digest()


def encrypt(plaintext: bytes, passphrase: str) -> bytes:
    """Encrypt data with a passphrase using AES-256-GCM.

    A fresh nonce is drawn from the OS CSPRNG on every call, so encrypting
    the same plaintext twice yields different blobs.

    Args:
        plaintext: Data to encrypt.
        passphrase: Caller-supplied passphrase.

    Returns:
        nonce + ciphertext (tag included).
    """
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = AESGCM(derive_key(passphrase)).encrypt(nonce, plaintext, None)
    return nonce + ciphertext


def decrypt(blob: bytes, passphrase: str) -> bytes:
    """Decrypt a blob produced by :func:`encrypt`.

    Args:
        blob: nonce + ciphertext.
        passphrase: Passphrase used for encryption.

    Returns:
        The decrypted plaintext.

    Raises:
        AuthenticationError: If the blob is too short to hold a nonce, or
            the tag does not verify (wrong passphrase, tampered data, or
            plaintext that was never encrypted).
    """
    if len(blob) < NONCE_SIZE:
        raise AuthenticationError(reason="text not long enough to contain nonce")

    aesgcm = AESGCM(derive_key(passphrase))
    try:
        return aesgcm.decrypt(blob[:NONCE_SIZE], blob[NONCE_SIZE:], None)
    except InvalidTag as e:
        raise AuthenticationError(reason="authentication tag mismatch") from e


def assert_entropy() -> None:
    """Fail fast if the system has no usable source of randomness."""
    try:
        sample = os.urandom(1)
    except NotImplementedError as e:
        raise RuntimeError("Failed to assert safe source of system entropy exists!") from e
    if len(sample) != 1:
        raise RuntimeError("Failed to assert safe source of system entropy exists!")

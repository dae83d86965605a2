"""
Tests for paste encryption: round-trip, tamper detection, wrong keys.
"""

from __future__ import annotations

import hashlib
import random

import pytest

from blockpaste.crypto import NONCE_SIZE, assert_entropy, decrypt, derive_key, encrypt
from blockpaste.exceptions import AuthenticationError


class TestDeriveKey:
    def test_key_is_sha256_of_passphrase(self):
        assert derive_key("secret") == hashlib.sha256(b"secret").digest()

    def test_key_is_32_bytes(self):
        assert len(derive_key("")) == 32
        assert len(derive_key("ünïcødé passphrase")) == 32


class TestRoundTrip:
    @pytest.mark.parametrize(
        "plaintext",
        [b"", b"hello world", bytes(range(256)), b"x" * 1048576],
    )
    def test_decrypt_inverts_encrypt(self, plaintext):
        assert decrypt(encrypt(plaintext, "secret"), "secret") == plaintext

    def test_blob_layout(self):
        blob = encrypt(b"classified", "secret")
        # nonce + ciphertext + 16-byte GCM tag
        assert len(blob) == NONCE_SIZE + len(b"classified") + 16

    def test_encryption_is_not_deterministic(self):
        first = encrypt(b"classified", "secret")
        second = encrypt(b"classified", "secret")
        assert first != second
        assert first[:NONCE_SIZE] != second[:NONCE_SIZE]


class TestAuthenticationFailures:
    def test_wrong_key_rejected(self):
        blob = encrypt(b"classified", "secret")
        with pytest.raises(AuthenticationError):
            decrypt(blob, "wrong")

    def test_bit_flips_rejected(self):
        """Flipping any sampled bit of the blob must fail authentication."""
        blob = encrypt(b"some paste text worth protecting", "secret")
        rng = random.Random(1234)
        positions = rng.sample(range(len(blob) * 8), 64)
        for bit in positions:
            tampered = bytearray(blob)
            tampered[bit // 8] ^= 1 << (bit % 8)
            with pytest.raises(AuthenticationError):
                decrypt(bytes(tampered), "secret")

    @pytest.mark.parametrize("blob", [b"", b"short", b"\x00" * (NONCE_SIZE - 1)])
    def test_blob_shorter_than_nonce(self, blob):
        with pytest.raises(AuthenticationError) as exc_info:
            decrypt(blob, "secret")
        assert "nonce" in exc_info.value.reason

    def test_plaintext_treated_as_ciphertext_fails_closed(self):
        with pytest.raises(AuthenticationError):
            decrypt(b"this paste was never encrypted at all", "secret")

    def test_error_message_is_safe(self):
        with pytest.raises(AuthenticationError) as exc_info:
            decrypt(encrypt(b"classified", "secret"), "wrong")
        assert exc_info.value.detail == "Paste decryption failed!"
        assert exc_info.value.status_code == 500


def test_assert_entropy_passes():
    assert_entropy()

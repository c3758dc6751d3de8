# Tests for key derivation and the AES-256-GCM sealed store
# Covers: derive_key, seal, open_sealed, base64 storage helpers

import hashlib
import os

import pytest

from passman.vault.encryption import (
    KEY_LENGTH,
    NONCE_LENGTH,
    decode_from_storage,
    derive_key,
    encode_for_storage,
    open_sealed,
    seal,
)
from passman.vault.exceptions import AuthenticationError, ErrorKind, FormatError


# ── derive_key ────────────────────────────────────────────────────────


class TestDeriveKey:
    def test_known_vector(self):
        # SHA-256("abc")
        expected = bytes.fromhex(
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )
        assert derive_key("abc") == expected

    def test_length(self):
        assert len(derive_key("anything")) == KEY_LENGTH

    def test_deterministic(self):
        assert derive_key("hunter2") == derive_key("hunter2")

    def test_different_passphrases_differ(self):
        assert derive_key("hunter2") != derive_key("hunter3")

    def test_utf8_passphrase(self):
        assert derive_key("pässwörd") == hashlib.sha256("pässwörd".encode("utf-8")).digest()

    def test_empty_passphrase(self):
        assert derive_key("") == hashlib.sha256(b"").digest()


# ── seal / open_sealed ────────────────────────────────────────────────


class TestSealOpen:
    def test_roundtrip(self):
        key = os.urandom(KEY_LENGTH)
        nonce, ciphertext = seal(key, b"secret payload")
        assert open_sealed(key, nonce, ciphertext) == b"secret payload"

    def test_roundtrip_empty_plaintext(self):
        key = os.urandom(KEY_LENGTH)
        nonce, ciphertext = seal(key, b"")
        assert open_sealed(key, nonce, ciphertext) == b""

    def test_nonce_length(self):
        nonce, _ = seal(os.urandom(KEY_LENGTH), b"x")
        assert len(nonce) == NONCE_LENGTH

    def test_ciphertext_carries_tag(self):
        _, ciphertext = seal(os.urandom(KEY_LENGTH), b"12345")
        assert len(ciphertext) == 5 + 16

    def test_ciphertext_differs_from_plaintext(self):
        plaintext = b"hello world, this is plaintext"
        _, ciphertext = seal(os.urandom(KEY_LENGTH), plaintext)
        assert plaintext not in ciphertext

    def test_wrong_key_fails(self):
        k1 = derive_key("right")
        k2 = derive_key("wrong")
        nonce, ciphertext = seal(k1, b"payload")

        with pytest.raises(AuthenticationError) as exc_info:
            open_sealed(k2, nonce, ciphertext)
        assert exc_info.value.kind is ErrorKind.AUTHENTICATION

    def test_wrong_nonce_fails(self):
        key = os.urandom(KEY_LENGTH)
        _, ciphertext = seal(key, b"payload")
        with pytest.raises(AuthenticationError):
            open_sealed(key, os.urandom(NONCE_LENGTH), ciphertext)

    def test_every_bit_flip_detected(self):
        key = os.urandom(KEY_LENGTH)
        nonce, ciphertext = seal(key, b'{"a":1}')

        for byte_index in range(len(ciphertext)):
            for bit in range(8):
                tampered = bytearray(ciphertext)
                tampered[byte_index] ^= 1 << bit
                with pytest.raises(AuthenticationError):
                    open_sealed(key, nonce, bytes(tampered))

    def test_truncated_ciphertext_fails(self):
        key = os.urandom(KEY_LENGTH)
        nonce, ciphertext = seal(key, b"payload")
        with pytest.raises(AuthenticationError):
            open_sealed(key, nonce, ciphertext[:-1])

    def test_nonces_unique(self):
        key = os.urandom(KEY_LENGTH)
        nonces = {seal(key, b"x")[0] for _ in range(10_000)}
        assert len(nonces) == 10_000

    def test_same_plaintext_different_ciphertext(self):
        key = os.urandom(KEY_LENGTH)
        _, c1 = seal(key, b"same")
        _, c2 = seal(key, b"same")
        assert c1 != c2

    def test_short_key_rejected(self):
        with pytest.raises(ValueError, match="Key must be 32 bytes"):
            seal(os.urandom(16), b"x")

    def test_bad_nonce_length_rejected(self):
        key = os.urandom(KEY_LENGTH)
        _, ciphertext = seal(key, b"x")
        with pytest.raises(ValueError, match="Nonce must be 12 bytes"):
            open_sealed(key, b"\x00" * 8, ciphertext)


# ── base64 helpers ────────────────────────────────────────────────────


class TestStorageEncoding:
    def test_roundtrip(self):
        data = os.urandom(64)
        assert decode_from_storage(encode_for_storage(data)) == data

    def test_encode_is_standard_base64(self):
        assert encode_for_storage(b"\xfb\xff") == "+/8="

    def test_invalid_base64(self):
        with pytest.raises(FormatError):
            decode_from_storage("not*base64!")

    def test_non_ascii_rejected(self):
        with pytest.raises(FormatError):
            decode_from_storage("ünïcode")

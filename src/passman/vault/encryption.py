# Vault - Encryption Service
#
# Master passphrase → Encryption key (SHA-256)
# Vault payload encryption (AES-256-GCM)
# Fresh random nonce for every seal

import base64
import binascii
import hashlib
import os
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import AuthenticationError, FormatError

KEY_LENGTH = 32  # 256 bits for AES-256
NONCE_LENGTH = 12  # 96-bit nonce for GCM


def derive_key(passphrase: str) -> bytes:
    """
    Derive the session key from the master passphrase.

    The key is a single SHA-256 of the UTF-8 passphrase: no salt and no
    iteration count. Existing vault files depend on this exact derivation,
    so switching to a salted or memory-hard KDF is a file format change.

    Args:
        passphrase: User's master passphrase

    Returns:
        256-bit encryption key
    """
    return hashlib.sha256(passphrase.encode("utf-8")).digest()


def _check_key(key: bytes) -> None:
    if len(key) != KEY_LENGTH:
        raise ValueError(f"Key must be {KEY_LENGTH} bytes, got {len(key)}")


def seal(key: bytes, plaintext: bytes) -> Tuple[bytes, bytes]:
    """
    Encrypt plaintext using AES-256-GCM.

    A new random nonce is drawn on every call; callers never supply one.

    Args:
        key: 256-bit encryption key (from derive_key)
        plaintext: Serialized vault payload

    Returns:
        Tuple of (nonce, ciphertext)
        The ciphertext carries the 16-byte authentication tag.
    """
    _check_key(key)
    nonce = os.urandom(NONCE_LENGTH)

    aesgcm = AESGCM(key)
    ciphertext = aesgcm.encrypt(nonce, plaintext, None)

    return nonce, ciphertext


def open_sealed(key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt ciphertext using AES-256-GCM.

    Args:
        key: 256-bit encryption key (same as encryption)
        nonce: Nonce used during encryption
        ciphertext: Encrypted data with tag

    Returns:
        Decrypted plaintext

    Raises:
        AuthenticationError: If the tag does not verify. A wrong passphrase
            and a tampered file look exactly the same here.
    """
    _check_key(key)
    if len(nonce) != NONCE_LENGTH:
        raise ValueError(f"Nonce must be {NONCE_LENGTH} bytes, got {len(nonce)}")

    aesgcm = AESGCM(key)
    try:
        return aesgcm.decrypt(nonce, ciphertext, None)
    except InvalidTag as exc:
        raise AuthenticationError() from exc


def encode_for_storage(data: bytes) -> str:
    """Encode binary data as base64 text for the JSON envelope."""
    return base64.b64encode(data).decode("ascii")


def decode_from_storage(data: str) -> bytes:
    """Decode base64 text from the JSON envelope."""
    try:
        return base64.b64decode(data.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise FormatError(f"Invalid base64 in vault file: {exc}") from exc

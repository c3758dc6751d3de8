# Vault Module - Encrypted account store
#
# Account map sealed with AES-256-GCM in a single JSON envelope file.
# Session key derived from the master passphrase (SHA-256).

from .codec import decode_accounts, encode_accounts
from .encryption import derive_key, open_sealed, seal
from .exceptions import (
    AlreadyExists,
    AuthenticationError,
    ErrorKind,
    FormatError,
    NotFound,
    VaultError,
    VaultIOError,
)
from .models import Account, Envelope
from .persistence import EnvelopeFile
from .repository import AccountRepository

__all__ = [
    "Account",
    "AccountRepository",
    "AlreadyExists",
    "AuthenticationError",
    "Envelope",
    "EnvelopeFile",
    "ErrorKind",
    "FormatError",
    "NotFound",
    "VaultError",
    "VaultIOError",
    "decode_accounts",
    "derive_key",
    "encode_accounts",
    "open_sealed",
    "seal",
]

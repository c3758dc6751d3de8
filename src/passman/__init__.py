# passman: local encrypted password store
#
# Accounts (username → password, notes) live in one AES-256-GCM sealed
# JSON file, unlocked per command with the master passphrase.

__version__ = "0.1.0"
__author__ = "passman contributors"
__description__ = "Local encrypted password manager CLI"

from .vault import (
    Account,
    AccountRepository,
    EnvelopeFile,
    VaultError,
    derive_key,
)

__all__ = [
    "__version__",
    "Account",
    "AccountRepository",
    "EnvelopeFile",
    "VaultError",
    "derive_key",
]

"""
Vault Exception Classes

Every failure the vault core can report is a VaultError subclass tagged
with an ErrorKind, so the CLI can render a specific message without
matching on exception types.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Tag carried by every VaultError."""
    FORMAT = "format"
    AUTHENTICATION = "authentication"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    IO = "io"


class VaultError(Exception):
    """Base exception for vault operations"""
    kind: ErrorKind


class FormatError(VaultError):
    """Raised when the envelope document or decrypted payload is malformed"""
    kind = ErrorKind.FORMAT


class AuthenticationError(VaultError):
    """Raised when AES-GCM tag verification fails (wrong passphrase or tampered data)"""
    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Incorrect master passphrase or corrupted vault"):
        super().__init__(message)


class AlreadyExists(VaultError):
    """Raised when adding a username that is already stored"""
    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, username: str):
        super().__init__(f"Account already exists: {username}")
        self.username = username


class NotFound(VaultError):
    """Raised when a username is not stored"""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, username: str):
        super().__init__(f"Account not found: {username}")
        self.username = username


class VaultIOError(VaultError):
    """Raised when reading or writing the vault file fails"""
    kind = ErrorKind.IO

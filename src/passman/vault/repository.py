# Vault - Account Repository
#
# Every operation: load + decrypt → read/mutate → (if mutated) encrypt + store.
# The session key is an argument of every call and is never kept on the
# repository, so nothing outlives the command that needed it.

from typing import Dict, List, Optional, Tuple

from ..core import EventSeverity, EventType, get_audit_logger
from ..core.audit_log import AuditLogger
from .codec import decode_accounts, encode_accounts
from .encryption import open_sealed, seal
from .exceptions import AlreadyExists, AuthenticationError, NotFound, VaultError
from .models import Account, Envelope
from .persistence import EnvelopeFile


class AccountRepository:
    """
    CRUD over the encrypted account map.

    Security:
    - Whole map sealed with AES-256-GCM, fresh nonce on every save
    - Failed preconditions never touch the file
    - Audit logging for all vault access (usernames only, never secrets)
    """

    def __init__(
        self,
        envelope_file: EnvelopeFile,
        audit_logger: Optional[AuditLogger] = None
    ):
        self.envelope_file = envelope_file
        self.logger = audit_logger or get_audit_logger()

    # ── Load / save ──────────────────────────────────────────────────

    def _load(self, key: bytes) -> Dict[str, Account]:
        """Decrypt the stored map. A missing file is an empty vault."""
        try:
            envelope = self.envelope_file.load()
            if envelope is None:
                return {}
            plaintext = open_sealed(key, envelope.nonce, envelope.ciphertext)
            accounts = decode_accounts(plaintext)
        except AuthenticationError:
            self.logger.log_event(
                event_type=EventType.VAULT_UNLOCK_FAILED,
                severity=EventSeverity.ALERT,
                message="Vault unlock failed: incorrect passphrase or corrupted file",
                details={"path": str(self.envelope_file.path)}
            )
            raise
        except VaultError as e:
            self._log_error(f"Failed to load vault: {e}", e)
            raise

        self.logger.log_event(
            event_type=EventType.VAULT_LOADED,
            severity=EventSeverity.INFO,
            message="Vault loaded",
            details={"path": str(self.envelope_file.path), "account_count": len(accounts)}
        )
        return accounts

    def _save(self, key: bytes, accounts: Dict[str, Account]) -> None:
        nonce, ciphertext = seal(key, encode_accounts(accounts))
        try:
            self.envelope_file.store(Envelope(nonce=nonce, ciphertext=ciphertext))
        except VaultError as e:
            self._log_error(f"Failed to save vault: {e}", e)
            raise

        self.logger.log_event(
            event_type=EventType.VAULT_SAVED,
            severity=EventSeverity.INFO,
            message="Vault saved",
            details={"path": str(self.envelope_file.path), "account_count": len(accounts)}
        )

    def _log_error(self, message: str, error: VaultError) -> None:
        self.logger.log_event(
            event_type=EventType.VAULT_ERROR,
            severity=EventSeverity.CRITICAL,
            message=message,
            details={"path": str(self.envelope_file.path), "kind": error.kind.value}
        )

    # ── Operations ───────────────────────────────────────────────────

    def add_account(self, key: bytes, username: str, password: str, notes: str) -> None:
        """
        Add a new account and persist.

        Raises:
            AlreadyExists: username is already stored (nothing written)
        """
        accounts = self._load(key)
        if username in accounts:
            raise AlreadyExists(username)

        accounts[username] = Account(password=password, notes=notes)
        self._save(key, accounts)

        self.logger.log_event(
            event_type=EventType.ACCOUNT_ADDED,
            severity=EventSeverity.INFO,
            message=f"Account added to vault: {username}",
            details={"username": username}
        )

    def delete_account(self, key: bytes, username: str) -> None:
        """
        Remove an account and persist.

        Raises:
            NotFound: username is not stored (nothing written)
        """
        accounts = self._load(key)
        if username not in accounts:
            raise NotFound(username)

        del accounts[username]
        self._save(key, accounts)

        self.logger.log_event(
            event_type=EventType.ACCOUNT_DELETED,
            severity=EventSeverity.INFO,
            message=f"Account deleted from vault: {username}",
            details={"username": username}
        )

    def update_account(
        self,
        key: bytes,
        username: str,
        password: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Account:
        """
        Overwrite the provided fields of an existing account and persist.

        Fields left as None keep their stored value. The account is
        re-saved even when both are None.

        Returns:
            The account as stored after the update

        Raises:
            NotFound: username is not stored (nothing written)
        """
        accounts = self._load(key)
        account = accounts.get(username)
        if account is None:
            raise NotFound(username)

        if password is not None:
            account.password = password
        if notes is not None:
            account.notes = notes

        self._save(key, accounts)

        changed = [name for name, value in (("password", password), ("notes", notes))
                   if value is not None]
        self.logger.log_event(
            event_type=EventType.ACCOUNT_UPDATED,
            severity=EventSeverity.INFO,
            message=f"Account updated: {username}",
            details={"username": username, "fields": changed}
        )
        return account

    def list_accounts(self, key: bytes) -> List[Tuple[str, Account]]:
        """Return every (username, account) pair, sorted by username. Read-only."""
        accounts = self._load(key)
        return sorted(accounts.items(), key=lambda item: item[0])

    def get_account(self, key: bytes, username: str) -> Account:
        """
        Return one account. Read-only.

        Raises:
            NotFound: username is not stored
        """
        accounts = self._load(key)
        account = accounts.get(username)
        if account is None:
            raise NotFound(username)

        self.logger.log_event(
            event_type=EventType.ACCOUNT_ACCESSED,
            severity=EventSeverity.INFO,
            message=f"Account accessed: {username}",
            details={"username": username}
        )
        return account

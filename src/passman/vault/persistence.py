# Vault - Envelope File
#
# Single JSON document on disk:
#   {"iv": "<base64 nonce>", "encrypted_data": "<base64 ciphertext+tag>"}
#
# Writes go to a sibling .tmp file (mode 600) and are moved into place with
# os.replace, so a crash mid-write leaves the previous file intact.

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .encryption import NONCE_LENGTH, decode_from_storage, encode_for_storage
from .exceptions import FormatError, VaultIOError
from .models import Envelope

logger = logging.getLogger(__name__)

IV_FIELD = "iv"
DATA_FIELD = "encrypted_data"


class EnvelopeFile:
    """Reads and atomically replaces the vault envelope file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def exists(self) -> bool:
        return self.path.exists()

    def read_bytes(self) -> Optional[bytes]:
        """Raw file contents, or None if the file does not exist."""
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise VaultIOError(f"Cannot read vault file {self.path}: {exc}") from exc

    def load(self) -> Optional[Envelope]:
        """
        Parse the envelope from disk.

        Returns:
            The envelope, or None when no vault file exists yet (first run).

        Raises:
            FormatError: File is not a well-formed envelope document.
            VaultIOError: File exists but cannot be read.
        """
        raw = self.read_bytes()
        if raw is None:
            return None

        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as exc:
            raise FormatError(f"Vault file {self.path} is not valid JSON: {exc}") from exc

        if not isinstance(document, dict):
            raise FormatError(f"Vault file {self.path} must contain a JSON object")

        for name in (IV_FIELD, DATA_FIELD):
            if not isinstance(document.get(name), str):
                raise FormatError(f"Vault file {self.path} is missing string field {name!r}")

        nonce = decode_from_storage(document[IV_FIELD])
        if len(nonce) != NONCE_LENGTH:
            raise FormatError(
                f"Vault nonce must be {NONCE_LENGTH} bytes, got {len(nonce)}"
            )
        ciphertext = decode_from_storage(document[DATA_FIELD])

        return Envelope(nonce=nonce, ciphertext=ciphertext)

    def store(self, envelope: Envelope) -> None:
        """
        Replace the vault file with the given envelope.

        Raises:
            VaultIOError: The write did not complete. The previous file, if
                any, is left unchanged.
        """
        document = json.dumps({
            IV_FIELD: encode_for_storage(envelope.nonce),
            DATA_FIELD: encode_for_storage(envelope.ciphertext),
        })

        tmp_path = self.tmp_path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            # Clean up temp file on failure
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    logger.warning("Could not remove temp vault file %s", tmp_path)
            raise VaultIOError(f"Cannot write vault file {self.path}: {exc}") from exc

        logger.debug("Vault file written: %s", self.path)

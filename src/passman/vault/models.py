"""
Vault data model.

Account is the decrypted record; Envelope is what sits on disk.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Account:
    """A stored credential, keyed externally by username."""
    password: str
    notes: str

    def to_dict(self) -> Dict[str, Any]:
        return {"password": self.password, "notes": self.notes}


@dataclass(frozen=True)
class Envelope:
    """Sealed vault snapshot: AES-GCM nonce plus ciphertext (tag appended)."""
    nonce: bytes
    ciphertext: bytes

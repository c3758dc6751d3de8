"""Account map <-> JSON bytes.

The decrypted vault payload is a JSON object keyed by username:

    {"alice": {"notes": "site.com", "password": "p1"}}

Output is compact with sorted keys, so the same map always encodes to the
same bytes.
"""

import json
from typing import Dict

from .exceptions import FormatError
from .models import Account

_FIELDS = ("password", "notes")


def encode_accounts(accounts: Dict[str, Account]) -> bytes:
    """Serialize the account map to UTF-8 JSON."""
    payload = {username: account.to_dict() for username, account in accounts.items()}
    return json.dumps(
        payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def decode_accounts(data: bytes) -> Dict[str, Account]:
    """Parse a payload produced by encode_accounts.

    Unknown per-record fields are ignored; a missing or non-string
    password/notes field is an error.

    Raises:
        FormatError: Payload is not valid UTF-8 JSON of the expected shape.
    """
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise FormatError(f"Vault payload is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise FormatError("Vault payload must be a JSON object")

    accounts: Dict[str, Account] = {}
    for username, record in payload.items():
        if not isinstance(record, dict):
            raise FormatError(f"Record for {username!r} must be a JSON object")
        for name in _FIELDS:
            if name not in record:
                raise FormatError(f"Record for {username!r} is missing {name!r}")
            if not isinstance(record[name], str):
                raise FormatError(f"Field {name!r} of {username!r} must be a string")
        accounts[username] = Account(password=record["password"], notes=record["notes"])

    return accounts

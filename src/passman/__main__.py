# Main Entry Point - Command Line Interface
#
# One command per invocation: prompt for the master passphrase, derive the
# session key, run exactly one vault operation, print the result.

import argparse
import getpass
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from . import __version__
from .core import AuditLogger, load_settings, set_audit_logger
from .vault import (
    Account,
    AccountRepository,
    EnvelopeFile,
    ErrorKind,
    VaultError,
    derive_key,
)

PASSPHRASE_PROMPT = "Master passphrase: "
TABLE_HEADERS = ("Username", "Password", "Notes")

_ERROR_HINTS = {
    ErrorKind.AUTHENTICATION: "Check your master passphrase.",
    ErrorKind.FORMAT: "The vault file is damaged or not a passman vault.",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="passman",
        description="A simple command-line password manager",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="Vault file (default: $PASSMAN_DATA_FILE or .passman_data.json)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"passman v{__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    add = subparsers.add_parser("add", help="Add a new account")
    add.add_argument("-u", "--username", required=True, help="Username")
    add.add_argument("-p", "--password", required=True, help="Password")
    add.add_argument("-n", "--notes", required=True, help="Notes (website or application)")

    delete = subparsers.add_parser("delete", help="Delete an account")
    delete.add_argument("-u", "--username", required=True, help="Username")

    update = subparsers.add_parser("update", help="Update an account")
    update.add_argument("-u", "--username", required=True, help="Username")
    update.add_argument("-p", "--password", default=None, help="New password (optional)")
    update.add_argument("-n", "--notes", default=None, help="New notes (optional)")

    subparsers.add_parser("list", help="Show all accounts")

    get = subparsers.add_parser("get", help="Show one account")
    get.add_argument("-u", "--username", required=True, help="Username")

    return parser


def read_passphrase() -> str:
    """Prompt for the master passphrase without echo."""
    return getpass.getpass(PASSPHRASE_PROMPT)


def render_table(rows: Sequence[Tuple[str, Account]]) -> str:
    """Render accounts as an ASCII table (passwords shown in clear)."""
    cells: List[Tuple[str, str, str]] = [TABLE_HEADERS]
    cells.extend((username, account.password, account.notes) for username, account in rows)
    widths = [max(len(row[i]) for row in cells) for i in range(len(TABLE_HEADERS))]

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(row):
        return "| " + " | ".join(value.ljust(w) for value, w in zip(row, widths)) + " |"

    out = [border, line(cells[0]), border]
    out.extend(line(row) for row in cells[1:])
    out.append(border)
    return "\n".join(out)


def run_command(args: argparse.Namespace, repo: AccountRepository, key: bytes) -> None:
    """Dispatch one parsed command to the repository."""
    if args.command == "add":
        repo.add_account(key, args.username, args.password, args.notes)
        print(f"Account added: {args.username}")

    elif args.command == "delete":
        repo.delete_account(key, args.username)
        print(f"Account deleted: {args.username}")

    elif args.command == "update":
        repo.update_account(key, args.username, password=args.password, notes=args.notes)
        print(f"Account updated: {args.username}")

    elif args.command == "list":
        accounts = repo.list_accounts(key)
        if not accounts:
            print("No accounts stored")
        else:
            print(render_table(accounts))

    elif args.command == "get":
        account = repo.get_account(key, args.username)
        print(render_table([(args.username, account)]))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for passman.

    Returns:
        Process exit code (0 success, 1 vault or audit log error, 130 interrupted)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    data_file = args.data_file or settings.data_file

    try:
        audit_logger = AuditLogger(log_dir=settings.audit_dir, enabled=settings.audit_enabled)
    except OSError as e:
        print(f"Error: cannot open audit log in {settings.audit_dir}: {e}", file=sys.stderr)
        return 1
    set_audit_logger(audit_logger)
    repo = AccountRepository(EnvelopeFile(data_file), audit_logger=audit_logger)

    try:
        passphrase = read_passphrase()
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 130
    except EOFError:
        print("\nError: no passphrase entered", file=sys.stderr)
        return 1

    key = derive_key(passphrase)

    try:
        run_command(args, repo, key)
    except VaultError as e:
        print(f"Error: {e}", file=sys.stderr)
        hint = _ERROR_HINTS.get(e.kind)
        if hint:
            print(hint, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""nbn entry point - account management for the unified Google CLI.

Usage:
  nbn accounts credentials <file.json>     Set OAuth credentials (once)
  nbn accounts list                        List configured accounts
  nbn accounts add <email> [--manual]      Add account (--manual for browserless OAuth)
  nbn accounts remove <email>              Remove account
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from nbngcli import __version__
from nbngcli.accounts import Account, AccountStorage, CredentialsFileError, load_client_secrets_file
from nbngcli.auth import AuthorizationError, GoogleTokenExchanger, OAuthFlow
from nbngcli.config import get_settings
from nbngcli.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nbn",
        description="nbn - Unified Google CLI (Gmail, Calendar, Drive)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nbn accounts credentials ~/credentials.json
  nbn accounts add you@gmail.com
  nbn accounts add you@gmail.com --manual
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    accounts = commands.add_parser("accounts", help="Account management")
    actions = accounts.add_subparsers(dest="action", required=True)

    creds = actions.add_parser("credentials", help="Set OAuth client credentials (once)")
    creds.add_argument("file", help="Client secrets JSON downloaded from Google Cloud Console")

    actions.add_parser("list", help="List configured accounts")

    add = actions.add_parser("add", help="Authorize and add an account")
    add.add_argument("email")
    add.add_argument(
        "--manual",
        action="store_true",
        help="Browserless OAuth: paste the redirect URL instead of using a local server",
    )

    remove = actions.add_parser("remove", help="Remove an account")
    remove.add_argument("email")

    return parser


def cmd_credentials(storage: AccountStorage, path: str) -> int:
    try:
        credential = load_client_secrets_file(path)
    except CredentialsFileError as e:
        return _fail(str(e))
    storage.set_credentials(credential)
    print("Credentials saved")
    return 0


def cmd_list(storage: AccountStorage) -> int:
    accounts = storage.get_all_accounts()
    if not accounts:
        print("No accounts configured")
    for account in accounts:
        print(account.email)
    return 0


async def cmd_add(storage: AccountStorage, email: str, manual: bool) -> int:
    if storage.has_account(email):
        return _fail(f"Account '{email}' already exists")
    credential = storage.get_credentials()
    if credential is None:
        return _fail("No credentials configured. Run: nbn accounts credentials <file.json>")

    settings = get_settings()
    flow = OAuthFlow(
        credential,
        exchanger=GoogleTokenExchanger(settings.token_url, timeout=settings.http_timeout),
        auth_url=settings.auth_url,
    )
    try:
        refresh_token = await flow.authorize(manual=manual)
    except AuthorizationError as e:
        return _fail(e.message)

    storage.add_account(
        Account(
            email=email,
            client_id=credential.client_id,
            client_secret=credential.client_secret,
            refresh_token=refresh_token,
        )
    )
    print(f"Account '{email}' added")
    return 0


def cmd_remove(storage: AccountStorage, email: str) -> int:
    if storage.delete_account(email):
        print(f"Account '{email}' removed")
        return 0
    return _fail(f"Account '{email}' not found")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else get_settings().log_level)

    storage = AccountStorage()
    if args.action == "credentials":
        return cmd_credentials(storage, args.file)
    if args.action == "list":
        return cmd_list(storage)
    if args.action == "add":
        try:
            return asyncio.run(cmd_add(storage, args.email, args.manual))
        except KeyboardInterrupt:
            return _fail("Authorization interrupted")
    if args.action == "remove":
        return cmd_remove(storage, args.email)
    return _fail(f"Unknown accounts action: {args.action}")


if __name__ == "__main__":
    raise SystemExit(main())

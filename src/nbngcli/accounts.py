# Account Storage - file-based OAuth client credentials and account tokens.
# Created: 2026-10-12
#
# ~/.nbngcli/credentials.json   OAuth client credentials
# ~/.nbngcli/accounts.json      Account refresh tokens

from __future__ import annotations

import json
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from nbngcli.auth.request import ClientCredential
from nbngcli.config import get_config_dir

logger = logging.getLogger(__name__)


class CredentialsFileError(ValueError):
    """A client secrets file is unreadable or lacks a client id/secret."""


@dataclass
class Account:
    """A configured Google account and its OAuth material."""

    email: str
    client_id: str
    client_secret: str
    refresh_token: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "oauth2": {
                "clientId": self.client_id,
                "clientSecret": self.client_secret,
                "refreshToken": self.refresh_token,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Account:
        oauth2 = data.get("oauth2", {})
        return cls(
            email=data["email"],
            client_id=oauth2.get("clientId", ""),
            client_secret=oauth2.get("clientSecret", ""),
            refresh_token=oauth2.get("refreshToken", ""),
        )


def load_client_secrets_file(path: str | Path) -> ClientCredential:
    """Read a client secrets JSON file.

    Accepts the file downloaded from Google Cloud Console
    (``{"installed": {...}}`` or ``{"web": {...}}``) or a flat
    ``{"clientId": ..., "clientSecret": ...}`` object.
    """
    try:
        data = json.loads(Path(path).expanduser().read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise CredentialsFileError(f"Cannot read credentials file {path}: {e}") from e

    if not isinstance(data, dict):
        raise CredentialsFileError("Invalid credentials file")

    section = data.get("installed") or data.get("web") or {}
    client_id = section.get("client_id") or data.get("clientId")
    client_secret = section.get("client_secret") or data.get("clientSecret")
    if not client_id or not client_secret:
        raise CredentialsFileError("Invalid credentials file")
    return ClientCredential(client_id=client_id, client_secret=client_secret)


class AccountStorage:
    """File-based store under the config directory.

    Files are chmod 0600 (owner-only read/write).
    """

    def __init__(self, base_dir: Path | None = None):
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        if self._base_dir is None:
            return get_config_dir()
        self._base_dir.mkdir(parents=True, exist_ok=True)
        return self._base_dir

    @property
    def credentials_path(self) -> Path:
        return self.base_dir / "credentials.json"

    @property
    def accounts_path(self) -> Path:
        return self.base_dir / "accounts.json"

    # -- client credentials ------------------------------------------------

    def set_credentials(self, credential: ClientCredential) -> None:
        self._write_json(
            self.credentials_path,
            {"clientId": credential.client_id, "clientSecret": credential.client_secret},
        )
        logger.info("Saved OAuth client credentials")

    def get_credentials(self) -> ClientCredential | None:
        """Load client credentials. Returns None if not configured."""
        data = self._read_json(self.credentials_path)
        if not isinstance(data, dict):
            return None
        client_id = data.get("clientId")
        client_secret = data.get("clientSecret")
        if not client_id or not client_secret:
            return None
        return ClientCredential(client_id=client_id, client_secret=client_secret)

    # -- accounts ----------------------------------------------------------

    def get_all_accounts(self) -> list[Account]:
        data = self._read_json(self.accounts_path)
        if not isinstance(data, list):
            return []
        accounts = []
        for entry in data:
            try:
                accounts.append(Account.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping malformed account entry: %s", e)
        return accounts

    def get_account(self, email: str) -> Account | None:
        for account in self.get_all_accounts():
            if account.email == email:
                return account
        return None

    def has_account(self, email: str) -> bool:
        return self.get_account(email) is not None

    def add_account(self, account: Account) -> None:
        """Add or replace the account with the same email."""
        accounts = [a for a in self.get_all_accounts() if a.email != account.email]
        accounts.append(account)
        self._save_accounts(accounts)
        logger.info("Saved account %s", account.email)

    def delete_account(self, email: str) -> bool:
        """Delete an account. Returns True if deleted."""
        accounts = self.get_all_accounts()
        remaining = [a for a in accounts if a.email != email]
        if len(remaining) == len(accounts):
            return False
        self._save_accounts(remaining)
        logger.info("Deleted account %s", email)
        return True

    def _save_accounts(self, accounts: list[Account]) -> None:
        self._write_json(self.accounts_path, [a.to_dict() for a in accounts])

    # -- file helpers ------------------------------------------------------

    @staticmethod
    def _read_json(path: Path) -> Any:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load %s: %s", path.name, e)
            return None

    @staticmethod
    def _write_json(path: Path, data: Any) -> None:
        # Write to temp file, set permissions, then rename atomically
        temp_path = path.with_suffix(".tmp")
        temp_path.write_text(json.dumps(data, indent=2))
        os.chmod(temp_path, stat.S_IRUSR | stat.S_IWUSR)
        temp_path.replace(path)

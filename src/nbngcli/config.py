"""Configuration for nbngcli.

Settings come from ``NBNGCLI_*`` environment variables. The authorization
flow constants (scopes, 2-minute timeout) live in ``nbngcli.auth.scopes``
and are not configurable.

Created: 2026-10-12
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nbngcli.auth.scopes import GOOGLE_AUTH_URL, GOOGLE_TOKEN_URL


class Settings(BaseSettings):
    """Runtime settings, overridable via environment."""

    model_config = SettingsConfigDict(env_prefix="NBNGCLI_", extra="ignore")

    home: Path = Field(default_factory=lambda: Path.home() / ".nbngcli")
    auth_url: str = GOOGLE_AUTH_URL
    token_url: str = GOOGLE_TOKEN_URL
    http_timeout: float = 15.0
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_config_dir() -> Path:
    """Get/create the config directory (``~/.nbngcli`` by default)."""
    d = get_settings().home.expanduser()
    d.mkdir(parents=True, exist_ok=True)
    return d

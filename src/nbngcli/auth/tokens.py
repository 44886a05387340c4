# Token exchange - trade an authorization code for access + refresh tokens.
# Created: 2026-10-12

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from nbngcli.auth.errors import ExchangeFailure
from nbngcli.auth.request import ClientCredential
from nbngcli.auth.scopes import GOOGLE_TOKEN_URL

logger = logging.getLogger(__name__)


@dataclass
class TokenGrant:
    """Tokens returned by a successful code exchange."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_at: float | None = None  # Unix timestamp
    scopes: list[str] = field(default_factory=list)


class TokenExchanger(Protocol):
    async def exchange(
        self, code: str, redirect_uri: str, credential: ClientCredential
    ) -> TokenGrant: ...


class GoogleTokenExchanger:
    """Exchanges authorization codes at Google's token endpoint.

    A single POST, no retries. Every transport error, non-2xx response or
    malformed body is raised as :class:`ExchangeFailure`.
    """

    def __init__(self, token_url: str = GOOGLE_TOKEN_URL, timeout: float = 15):
        self.token_url = token_url
        self.timeout = timeout

    async def exchange(
        self, code: str, redirect_uri: str, credential: ClientCredential
    ) -> TokenGrant:
        """Exchange an authorization code for tokens.

        Args:
            code: Authorization code from the redirect.
            redirect_uri: Same redirect URI used in the auth request.
            credential: OAuth client id + secret.

        Returns:
            TokenGrant with access token and (usually) refresh token.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    self.token_url,
                    data={
                        "code": code,
                        "client_id": credential.client_id,
                        "client_secret": credential.client_secret,
                        "redirect_uri": redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ExchangeFailure(_describe_error(e.response)) from e
        except httpx.HTTPError as e:
            raise ExchangeFailure(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise ExchangeFailure(f"invalid response body: {e}") from e

        if not isinstance(data, dict) or not data.get("access_token"):
            raise ExchangeFailure("response did not contain an access token")

        expires_in = data.get("expires_in", 3600)
        grant = TokenGrant(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or None,
            token_type=data.get("token_type", "Bearer"),
            expires_at=time.time() + expires_in,
            scopes=data.get("scope", "").split(),
        )
        logger.info(
            "Exchanged authorization code (refresh token %s)",
            "received" if grant.refresh_token else "missing",
        )
        return grant


def _describe_error(resp: httpx.Response) -> str:
    """Render a token endpoint error response as ``error: description``."""
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"

    if not isinstance(body, dict):
        return f"HTTP {resp.status_code}"
    error = body.get("error", f"HTTP {resp.status_code}")
    description = body.get("error_description")
    return f"{error}: {description}" if description else str(error)

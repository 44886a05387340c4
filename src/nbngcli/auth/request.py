# Authorization request - per-attempt request values and URL construction.
# Created: 2026-10-12

from __future__ import annotations

import urllib.parse
from dataclasses import dataclass

from nbngcli.auth.scopes import (
    ACCESS_TYPE,
    GOOGLE_AUTH_URL,
    LOOPBACK_HOST,
    MANUAL_REDIRECT_URI,
    PROMPT,
    RESPONSE_TYPE,
    SCOPES,
)


@dataclass(frozen=True)
class ClientCredential:
    """OAuth client id + secret, fixed for the lifetime of an attempt."""

    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"ClientCredential(client_id={self.client_id!r}, client_secret='***')"


@dataclass(frozen=True)
class AuthorizationRequest:
    """Everything that goes into one authorization URL.

    Built fresh for every ``authorize()`` call. The redirect URI depends on
    the mode, so a new value is created per attempt rather than patching a
    shared client.
    """

    client_id: str
    redirect_uri: str
    scopes: tuple[str, ...] = SCOPES
    response_type: str = RESPONSE_TYPE
    access_type: str = ACCESS_TYPE
    prompt: str = PROMPT

    @classmethod
    def for_loopback(cls, credential: ClientCredential, port: int) -> AuthorizationRequest:
        return cls(
            client_id=credential.client_id,
            redirect_uri=f"http://{LOOPBACK_HOST}:{port}",
        )

    @classmethod
    def for_manual(cls, credential: ClientCredential) -> AuthorizationRequest:
        return cls(client_id=credential.client_id, redirect_uri=MANUAL_REDIRECT_URI)


def build_authorization_url(
    request: AuthorizationRequest, auth_url: str = GOOGLE_AUTH_URL
) -> str:
    """Generate the provider authorization URL for *request*.

    Scopes are space-joined and every component is percent-encoded
    (spaces become ``%20``, not ``+``).
    """
    params = {
        "client_id": request.client_id,
        "redirect_uri": request.redirect_uri,
        "response_type": request.response_type,
        "scope": " ".join(request.scopes),
        "access_type": request.access_type,
        "prompt": request.prompt,
    }
    query = urllib.parse.urlencode(params, quote_via=urllib.parse.quote)
    return f"{auth_url}?{query}"


@dataclass(frozen=True)
class CallbackParams:
    """The query parameters of a redirect back from the provider."""

    code: str | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        """True if the redirect carries a ``code`` or an ``error``."""
        return self.code is not None or self.error is not None


def parse_redirect(url: str) -> CallbackParams:
    """Extract ``code`` / ``error`` from a redirect URL or request target.

    Accepts a full URL (``http://localhost:1/?code=...``) as pasted from the
    address bar, or a bare request target (``/?code=...``).
    """
    query = urllib.parse.urlsplit(url.strip()).query
    params = urllib.parse.parse_qs(query, keep_blank_values=True)

    code = params.get("code", [None])[0]
    error = params.get("error", [None])[0]
    return CallbackParams(code=code, error=error)

# Scope Configuration - fixed scope set and flow constants.
# Created: 2026-10-12

from __future__ import annotations

# Combined scopes for mail, calendar and drive (full access), requested
# together on one consent screen. Order is part of the contract: changing it
# forces re-consent for every stored account.
SCOPES: tuple[str, ...] = (
    "https://mail.google.com/",
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/drive",
)

AUTHORIZATION_TIMEOUT = 2 * 60  # seconds

RESPONSE_TYPE = "code"
ACCESS_TYPE = "offline"
PROMPT = "consent"

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"

# Redirect URIs use the hostname, the listener binds the loopback address.
LOOPBACK_HOST = "localhost"
LOOPBACK_BIND_ADDRESS = "127.0.0.1"

# Nothing listens on port 1; the browser shows an error page and the user
# copies the address bar instead.
MANUAL_REDIRECT_URI = "http://localhost:1"

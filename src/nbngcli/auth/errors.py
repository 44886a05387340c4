# Authorization errors - typed failure outcomes of one authorization attempt.
# Created: 2026-10-12

from __future__ import annotations

from enum import Enum


class OutcomeKind(str, Enum):
    """Terminal outcome of an authorization attempt."""

    SUCCESS = "success"
    USER_CANCELLED = "user_cancelled"
    MISSING_CODE = "missing_code"
    BIND_FAILURE = "bind_failure"
    TIMED_OUT = "timed_out"
    EXCHANGE_FAILURE = "exchange_failure"
    NO_REFRESH_TOKEN = "no_refresh_token"


class AuthorizationError(Exception):
    """Base class for every non-success authorization outcome."""

    kind: OutcomeKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UserCancelled(AuthorizationError):
    """The provider redirected back with an ``error`` parameter."""

    kind = OutcomeKind.USER_CANCELLED

    def __init__(self, provider_reason: str):
        super().__init__(f"Authorization cancelled: {provider_reason}")
        self.provider_reason = provider_reason


class MissingCode(AuthorizationError):
    kind = OutcomeKind.MISSING_CODE

    def __init__(self, message: str = "No authorization code found in URL"):
        super().__init__(message)


class BindFailure(AuthorizationError):
    """The loopback callback listener could not be started."""

    kind = OutcomeKind.BIND_FAILURE

    def __init__(self, reason: str):
        super().__init__(f"Could not start callback listener: {reason}")
        self.reason = reason


class TimedOut(AuthorizationError):
    kind = OutcomeKind.TIMED_OUT

    def __init__(self, seconds: float | None = None):
        if seconds is None:
            message = "Authorization timed out"
        else:
            message = f"Authorization timed out after {seconds:g} seconds"
        super().__init__(message)
        self.seconds = seconds


class ExchangeFailure(AuthorizationError):
    """Exchanging the authorization code for tokens failed."""

    kind = OutcomeKind.EXCHANGE_FAILURE

    def __init__(self, reason: str):
        super().__init__(f"Token exchange failed: {reason}")
        self.reason = reason


class NoRefreshToken(AuthorizationError):
    """The provider issued tokens but withheld the refresh token."""

    kind = OutcomeKind.NO_REFRESH_TOKEN

    def __init__(self):
        super().__init__(
            "No refresh token received. Revoke the app's access in your Google "
            "account settings and try again."
        )


class AttemptInProgress(RuntimeError):
    """``authorize()`` was called while another attempt is still pending."""

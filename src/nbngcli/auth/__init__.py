"""Interactive Google authorization (authorization-code flow).

Public API: ``OAuthFlow(credential).authorize(manual=False)`` returns a
refresh token or raises an ``AuthorizationError`` subclass.
"""

from nbngcli.auth.errors import (
    AttemptInProgress,
    AuthorizationError,
    BindFailure,
    ExchangeFailure,
    MissingCode,
    NoRefreshToken,
    OutcomeKind,
    TimedOut,
    UserCancelled,
)
from nbngcli.auth.flow import OAuthFlow, State
from nbngcli.auth.request import AuthorizationRequest, ClientCredential, build_authorization_url
from nbngcli.auth.scopes import AUTHORIZATION_TIMEOUT, SCOPES
from nbngcli.auth.tokens import GoogleTokenExchanger, TokenExchanger, TokenGrant

__all__ = [
    "AUTHORIZATION_TIMEOUT",
    "SCOPES",
    "AttemptInProgress",
    "AuthorizationError",
    "AuthorizationRequest",
    "BindFailure",
    "ClientCredential",
    "ExchangeFailure",
    "GoogleTokenExchanger",
    "MissingCode",
    "NoRefreshToken",
    "OAuthFlow",
    "OutcomeKind",
    "State",
    "TimedOut",
    "TokenExchanger",
    "TokenGrant",
    "UserCancelled",
    "build_authorization_url",
]

# OAuth Flow - interactive authorization-code flow for a Google refresh token.
# Created: 2026-10-12
#
# Two modes:
# - automated: loopback listener on an OS-assigned port + external browser
# - manual: the user pastes the (non-loading) redirect URL into the console
# Both race against a fixed 2-minute deadline and release the listener and
# timer on every exit path.

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from enum import Enum

from nbngcli.auth.attempt import PendingAttempt
from nbngcli.auth.browser import open_browser
from nbngcli.auth.errors import (
    AttemptInProgress,
    AuthorizationError,
    BindFailure,
    ExchangeFailure,
    MissingCode,
    NoRefreshToken,
    OutcomeKind,
    UserCancelled,
)
from nbngcli.auth.listener import CallbackListener
from nbngcli.auth.prompt import ManualPrompt, print_manual_instructions
from nbngcli.auth.request import (
    AuthorizationRequest,
    CallbackParams,
    ClientCredential,
    build_authorization_url,
)
from nbngcli.auth.scopes import AUTHORIZATION_TIMEOUT, GOOGLE_AUTH_URL
from nbngcli.auth.tokens import GoogleTokenExchanger, TokenExchanger, TokenGrant

logger = logging.getLogger(__name__)


class State(str, Enum):
    """Coordinator state for the current (or last) attempt."""

    IDLE = "idle"
    AWAITING_REDIRECT = "awaiting_redirect"
    EXCHANGING = "exchanging"
    TERMINAL = "terminal"


class OAuthFlow:
    """Runs one authorization attempt at a time and returns a refresh token.

    Args:
        credential: OAuth client id + secret.
        exchanger: Code-for-token exchanger (default: Google's token endpoint).
        launcher: Callable that opens a URL in a browser; failures are logged
            and never fail the attempt.
        prompt_reader: ``input``-like callable used in manual mode. One
            pending read is shared by successive manual attempts.
        timeout: Seconds before an unanswered attempt fails with TimedOut.
        auth_url: Provider authorization endpoint.
    """

    def __init__(
        self,
        credential: ClientCredential,
        exchanger: TokenExchanger | None = None,
        launcher: Callable[[str], object] = open_browser,
        prompt_reader: Callable[[str], str] | None = None,
        timeout: float = AUTHORIZATION_TIMEOUT,
        auth_url: str = GOOGLE_AUTH_URL,
    ):
        self._credential = credential
        self._exchanger = exchanger or GoogleTokenExchanger()
        self._launcher = launcher
        self._prompt = ManualPrompt(prompt_reader)
        self._timeout = timeout
        self._auth_url = auth_url
        self._state = State.IDLE
        self.last_outcome: OutcomeKind | None = None

    @property
    def state(self) -> State:
        return self._state

    async def authorize(self, manual: bool = False) -> str:
        """Run the flow and return the refresh token.

        Raises:
            AuthorizationError: subclass matching the failure outcome.
            AttemptInProgress: another attempt is pending on this instance.
        """
        grant = await self.authorize_grant(manual)
        if not grant.refresh_token:
            raise NoRefreshToken()
        return grant.refresh_token

    async def authorize_grant(self, manual: bool = False) -> TokenGrant:
        """Run the flow and return the full token grant."""
        if self._state in (State.AWAITING_REDIRECT, State.EXCHANGING):
            raise AttemptInProgress("An authorization attempt is already in progress")
        self._state = State.AWAITING_REDIRECT

        attempt = PendingAttempt()
        try:
            if manual:
                request, params = await self._await_manual(attempt)
            else:
                request, params = await self._await_loopback(attempt)

            # Listener and timer go away before the network call.
            await attempt.release()

            code = self._extract_code(params)
            self._state = State.EXCHANGING
            grant = await self._exchange(code, request)
            if not grant.refresh_token:
                raise NoRefreshToken()

        except AuthorizationError as exc:
            self.last_outcome = exc.kind
            logger.info("Authorization failed (%s): %s", exc.kind.value, exc.message)
            raise
        finally:
            await attempt.release()
            self._state = State.TERMINAL

        self.last_outcome = OutcomeKind.SUCCESS
        logger.info("Authorization succeeded")
        return grant

    async def _await_loopback(
        self, attempt: PendingAttempt
    ) -> tuple[AuthorizationRequest, CallbackParams]:
        listener = CallbackListener(attempt)
        # Port must be known before the URL is built: it is the redirect URI.
        listener.bind()
        attempt.on_release(listener.close)

        request = AuthorizationRequest.for_loopback(self._credential, listener.port)
        auth_url = build_authorization_url(request, self._auth_url)

        await listener.start()
        attempt.arm_deadline(self._timeout)

        print("Opening browser for authorization...")
        print("If browser doesn't open, visit this URL:")
        print(auth_url)
        self._launch_browser(auth_url)

        if listener.task is None:
            raise BindFailure("callback server did not start")
        await asyncio.wait({attempt.outcome, listener.task}, return_when=asyncio.FIRST_COMPLETED)
        if not attempt.resolved:
            attempt.fail(BindFailure("callback server stopped unexpectedly"))

        return request, attempt.outcome.result()

    async def _await_manual(
        self, attempt: PendingAttempt
    ) -> tuple[AuthorizationRequest, CallbackParams]:
        request = AuthorizationRequest.for_manual(self._credential)
        print_manual_instructions(build_authorization_url(request, self._auth_url))

        self._prompt.start(attempt)
        attempt.on_release(functools.partial(self._prompt.detach, attempt))
        attempt.arm_deadline(self._timeout)

        return request, await attempt.outcome

    def _launch_browser(self, url: str) -> None:
        try:
            self._launcher(url)
        except Exception:
            logger.warning("Browser launcher failed", exc_info=True)

    @staticmethod
    def _extract_code(params: CallbackParams) -> str:
        if params.error is not None:
            raise UserCancelled(params.error)
        if not params.code:
            raise MissingCode()
        return params.code

    async def _exchange(self, code: str, request: AuthorizationRequest) -> TokenGrant:
        try:
            return await self._exchanger.exchange(code, request.redirect_uri, self._credential)
        except AuthorizationError:
            raise
        except Exception as exc:
            raise ExchangeFailure(str(exc) or type(exc).__name__) from exc

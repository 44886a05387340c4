"""Single-resolution state for one authorization attempt.

A ``PendingAttempt`` is created by ``OAuthFlow.authorize()`` and discarded when
it returns. Three sources race to settle it: the callback listener, the
deadline timer and (in manual mode) the console reader. The first one to call
``resolve()`` or ``fail()`` wins; everything after that is dropped.

Created: 2026-10-12
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from nbngcli.auth.errors import AuthorizationError, TimedOut
from nbngcli.auth.request import CallbackParams

logger = logging.getLogger(__name__)


class PendingAttempt:
    """One in-flight authorization: outcome future, deadline and resources."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop or asyncio.get_running_loop()
        self.outcome: asyncio.Future[CallbackParams] = self._loop.create_future()
        self._deadline: asyncio.TimerHandle | None = None
        self._release_callbacks: list[Callable[[], Any]] = []
        self._released = False

    @property
    def resolved(self) -> bool:
        return self.outcome.done()

    @property
    def released(self) -> bool:
        return self._released

    def resolve(self, params: CallbackParams) -> bool:
        """Settle the attempt with redirect parameters. First caller wins."""
        if self.outcome.done():
            logger.debug("Ignoring redirect after attempt was resolved")
            return False
        self.outcome.set_result(params)
        self._cancel_deadline()
        return True

    def fail(self, error: AuthorizationError) -> bool:
        """Settle the attempt with a failure. First caller wins."""
        if self.outcome.done():
            logger.debug("Ignoring %s after attempt was resolved", error.kind.value)
            return False
        self.outcome.set_exception(error)
        self._cancel_deadline()
        return True

    def resolve_threadsafe(self, params: CallbackParams) -> None:
        self._call_threadsafe(self.resolve, params)

    def fail_threadsafe(self, error: AuthorizationError) -> None:
        self._call_threadsafe(self.fail, error)

    def _call_threadsafe(self, fn: Callable[[Any], bool], arg: Any) -> None:
        try:
            self._loop.call_soon_threadsafe(fn, arg)
        except RuntimeError:
            # Loop already closed: the attempt ended long ago.
            logger.debug("Event loop closed, dropping late %s", fn.__name__)

    # -- deadline ----------------------------------------------------------

    def arm_deadline(self, seconds: float) -> None:
        """Start the deadline timer. Expiry fails the attempt with TimedOut."""
        if self._deadline is not None or self.outcome.done():
            return
        self._deadline = self._loop.call_later(seconds, self._expire, seconds)

    def _expire(self, seconds: float) -> None:
        self._deadline = None
        if self.fail(TimedOut(seconds)):
            logger.info("Authorization timed out after %g seconds", seconds)

    def _cancel_deadline(self) -> None:
        if self._deadline is not None:
            self._deadline.cancel()
            self._deadline = None

    @property
    def deadline_armed(self) -> bool:
        return self._deadline is not None

    # -- cleanup -----------------------------------------------------------

    def on_release(self, callback: Callable[[], Any]) -> None:
        """Register a sync or async callable to run on ``release()``."""
        self._release_callbacks.append(callback)

    async def release(self) -> None:
        """Cancel the deadline and release every resource. Runs once.

        Errors are logged but don't prevent the remaining callbacks from
        running, and never replace the attempt's own outcome.
        """
        if self._released:
            return
        self._released = True
        self._cancel_deadline()

        callbacks, self._release_callbacks = self._release_callbacks, []
        for callback in reversed(callbacks):
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.warning("Error releasing authorization resource", exc_info=True)

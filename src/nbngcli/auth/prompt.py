# Manual prompt - read the pasted redirect URL from the console.
# Created: 2026-10-12

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from nbngcli.auth.attempt import PendingAttempt
from nbngcli.auth.request import parse_redirect

logger = logging.getLogger(__name__)

PROMPT_TEXT = "Paste redirect URL: "


def print_manual_instructions(auth_url: str) -> None:
    print("Visit this URL to authorize:")
    print(auth_url)
    print("")
    print("After authorizing, you'll be redirected to a page that won't load.")
    print("Copy the URL from your browser's address bar and paste it here.")
    print("")


class ManualPrompt:
    """Blocking console read of the redirect URL, run off the event loop.

    One reader thread serves every manual attempt on a flow. A read that is
    still blocked when its attempt ends (the deadline won) stays pending, and
    the line it eventually returns goes to whichever attempt is attached at
    that moment. Lines read with no attempt attached are dropped.
    """

    def __init__(self, reader: Callable[[str], str] | None = None):
        self._reader = reader or input
        self._lock = threading.Lock()
        self._attempt: PendingAttempt | None = None
        self._reading = False
        self._thread: threading.Thread | None = None

    @property
    def reading(self) -> bool:
        return self._reading

    def start(self, attempt: PendingAttempt) -> None:
        """Attach ``attempt``, starting a read unless one is already pending."""
        with self._lock:
            self._attempt = attempt
            if self._reading:
                logger.debug("Console read from an earlier attempt still pending, reusing it")
                return
            self._reading = True
            self._thread = threading.Thread(
                target=self._read, name="nbn-manual-prompt", daemon=True
            )
            self._thread.start()

    def detach(self, attempt: PendingAttempt) -> None:
        with self._lock:
            if self._attempt is attempt:
                self._attempt = None

    def _read(self) -> None:
        try:
            line = self._reader(PROMPT_TEXT)
        except EOFError:
            # stdin closed: same as pasting nothing
            line = ""
        except Exception:
            logger.warning("Failed to read redirect URL", exc_info=True)
            line = ""

        with self._lock:
            self._reading = False
            attempt, self._attempt = self._attempt, None

        if attempt is None:
            logger.debug("No authorization pending, dropping pasted line")
            return
        attempt.resolve_threadsafe(parse_redirect(line))

# Browser launcher - best-effort spawn of the system URL opener.
# Created: 2026-10-12

from __future__ import annotations

import logging
import platform
import subprocess

logger = logging.getLogger(__name__)


def browser_command(url: str, system: str | None = None) -> list[str]:
    """Return the platform command that opens *url* in the default browser."""
    system = system or platform.system()
    if system == "Darwin":
        return ["open", url]
    if system == "Windows":
        # Empty title argument; "start" treats the first quoted arg as one.
        return ["cmd", "/c", "start", "", url]
    return ["xdg-open", url]


def open_browser(url: str) -> bool:
    """Open *url* in the user's browser without waiting for it.

    Returns False if the opener could not be spawned. Never raises: the URL
    is always printed for manual copying as well.
    """
    cmd = browser_command(url)
    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        logger.warning("Failed to launch browser (%s): %s", cmd[0], exc)
        return False

    logger.debug("Spawned %s for authorization URL", cmd[0])
    return True

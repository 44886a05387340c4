# Logging setup - Rich console handler for the CLI.
# Created: 2026-10-12

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str = "WARNING") -> None:
    """Route all logging through a RichHandler on stderr.

    Progress messages for the user are printed to stdout; logging is for
    diagnostics and goes to stderr so it never mixes with command output.
    """
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

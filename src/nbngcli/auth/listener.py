# Callback listener - ephemeral loopback HTTP endpoint for the OAuth redirect.
# Created: 2026-10-12

from __future__ import annotations

import asyncio
import html
import logging
import platform
import socket

import uvicorn
from fastapi import FastAPI, Query
from fastapi.responses import HTMLResponse

from nbngcli.auth.attempt import PendingAttempt
from nbngcli.auth.errors import BindFailure
from nbngcli.auth.request import CallbackParams
from nbngcli.auth.scopes import LOOPBACK_BIND_ADDRESS

logger = logging.getLogger(__name__)


def _page(title: str, message: str, color: str = "#333") -> str:
    return f"""<html>
<head><title>{title}</title></head>
<body style="font-family: sans-serif; padding: 40px; text-align: center;">
  <h1 style="color: {color};">{title}</h1>
  <p>{message}</p>
</body>
</html>"""


def create_callback_app(attempt: PendingAttempt) -> FastAPI:
    """Build the one-route app that receives the provider redirect.

    The first request to ``/`` carrying ``code`` or ``error`` settles
    *attempt*; anything after that is answered but otherwise ignored. Other
    paths fall through to FastAPI's 404.
    """
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/", response_class=HTMLResponse)
    async def oauth_callback(
        code: str | None = Query(None),
        error: str | None = Query(None),
    ):
        if attempt.resolved:
            return HTMLResponse(
                _page("Already processed", "You can close this window."), status_code=400
            )

        params = CallbackParams(code=code, error=error)
        if not params.is_terminal:
            return HTMLResponse(
                _page("Invalid request", "Missing authorization code in callback."),
                status_code=400,
            )

        attempt.resolve(params)

        if error is not None:
            return HTMLResponse(
                _page(
                    "Authorization cancelled",
                    f"{html.escape(error)}<br>You can close this window.",
                    "#dc3545",
                )
            )
        if not code:
            return HTMLResponse(
                _page("No authorization code", "Please close this window and try again."),
                status_code=400,
            )
        return HTMLResponse(
            _page(
                "Authorization received",
                "You can close this window and return to your terminal.",
                "#28a745",
            )
        )

    return app


class CallbackListener:
    """Loopback HTTP server bound to an OS-assigned port.

    ``bind()`` reserves the port synchronously so the redirect URI can be
    built before anything is served; ``start()`` runs uvicorn on that socket
    as a background task; ``close()`` stops it and frees the port.
    """

    def __init__(self, attempt: PendingAttempt, host: str = LOOPBACK_BIND_ADDRESS):
        self._attempt = attempt
        self._host = host
        self._sock: socket.socket | None = None
        self._port: int | None = None
        self._server: uvicorn.Server | None = None
        self._task: asyncio.Task | None = None
        self._closed = False

    @property
    def port(self) -> int:
        if self._port is None:
            raise RuntimeError("Listener is not bound")
        return self._port

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def task(self) -> asyncio.Task | None:
        """The serving task; finishing before the attempt resolves is a failure."""
        return self._task

    def bind(self) -> int:
        """Bind and listen on ``host:0``. Raises BindFailure on any socket error."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            if platform.system() != "Windows":
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._host, 0))
            sock.listen(16)
            sock.setblocking(False)
        except OSError as exc:
            sock.close()
            raise BindFailure(str(exc)) from exc

        self._sock = sock
        self._port = sock.getsockname()[1]
        logger.debug("Callback listener bound to %s:%d", self._host, self.port)
        return self.port

    async def start(self) -> None:
        """Serve the callback app on the bound socket until ``close()``."""
        if self._sock is None:
            self.bind()

        config = uvicorn.Config(
            create_callback_app(self._attempt),
            log_config=None,
            log_level="warning",
            access_log=False,
            lifespan="off",
            timeout_graceful_shutdown=1,
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[self._sock]))

        # Wait for uvicorn to report startup
        while not self._server.started:
            if self._task.done():
                exc = None if self._task.cancelled() else self._task.exception()
                raise BindFailure(str(exc) if exc else "callback server exited during startup")
            await asyncio.sleep(0.01)

        logger.info("Listening for OAuth callback on port %d", self.port)

    async def close(self) -> None:
        """Stop serving and release the port. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        if self._server is not None:
            self._server.should_exit = True
        if self._task is not None:
            try:
                await self._task
            except Exception:
                logger.warning("Callback server stopped with an error", exc_info=True)
        if self._sock is not None:
            self._sock.close()
        logger.debug("Callback listener closed")

from __future__ import annotations

import logging
import threading
import time

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

ALIVE_TEXT = "Discord bot is running!"

STARTUP_TIMEOUT_S = 10.0


def create_app() -> FastAPI:
    """
    Keep-alive app: a single liveness route for the process supervisor.
    """
    app = FastAPI(title="role-dm-bot keep-alive", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/", response_class=PlainTextResponse)
    def alive() -> str:
        return ALIVE_TEXT

    return app


app = create_app()


def start_keepalive(
    host: str,
    port: int,
    log_level: str = "info",
    *,
    startup_timeout: float = STARTUP_TIMEOUT_S,
) -> uvicorn.Server:
    """
    Serve the keep-alive app from a daemon thread and wait until it is listening.

    uvicorn only installs signal handlers on the main thread, so Ctrl+C still
    reaches the Discord client running there.

    Raises RuntimeError if the server dies or is not listening within
    `startup_timeout` seconds (e.g. the port is already in use).
    Set `server.should_exit = True` on the returned server to stop it.
    """
    config = uvicorn.Config(app, host=host, port=int(port), log_level=log_level.lower())
    server = uvicorn.Server(config)

    def _serve() -> None:
        try:
            server.run()
        except SystemExit as exc:
            # uvicorn exits the thread when it cannot bind.
            logger.error("Keep-alive server exited during startup (code=%s).", exc.code)
        except Exception:
            logger.exception("Keep-alive server crashed.")

    thread = threading.Thread(target=_serve, name="keepalive", daemon=True)
    thread.start()

    deadline = time.monotonic() + startup_timeout
    while not server.started:
        if not thread.is_alive():
            raise RuntimeError(f"Keep-alive server failed to start on {host}:{port} (port already in use?).")
        if time.monotonic() > deadline:
            server.should_exit = True
            raise RuntimeError(f"Keep-alive server did not start on {host}:{port} within {startup_timeout}s.")
        time.sleep(0.05)

    logger.info("Simple web server running on port %s", port)
    return server


__all__ = ["ALIVE_TEXT", "app", "create_app", "start_keepalive"]

"""HTTP server hosting the API."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from socketserver import ThreadingMixIn
from typing import Any, Callable, Iterable
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    """Server configuration options; durations are in seconds."""

    host: str = ""
    port: int = 0
    keep_alive: int = 0
    read_timeout: int = 0
    write_timeout: int = 0
    shutdown_timeout: int = 0


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        return


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class Server:
    """Serves a WSGI application in a background thread."""

    def __init__(
        self,
        cfg: ServerConfig,
        app: Callable[[dict, Callable[..., Any]], Iterable[bytes]],
    ) -> None:
        self.cfg = cfg
        self.app = app
        self._httpd: WSGIServer | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def address(self) -> str:
        """Configured listen address."""
        return f"{self.cfg.host}:{self.cfg.port}"

    @property
    def server_address(self) -> tuple[str, int] | None:
        """Address actually bound while running, else None."""
        httpd = self._httpd
        return None if httpd is None else httpd.server_address[:2]

    def start(self) -> None:
        """Bind the listen address and serve requests in the background."""
        read_timeout = self.cfg.read_timeout or None

        class _Handler(_QuietHandler):
            timeout = read_timeout

        with self._lock:
            if self._httpd is not None:
                raise RuntimeError("server already started")
            logger.info("Starting REST API HTTP server: address=%s", self.address)
            httpd = make_server(
                self.cfg.host,
                self.cfg.port,
                self.app,
                server_class=_ThreadingWSGIServer,
                handler_class=_Handler,
            )
            thread = threading.Thread(
                target=httpd.serve_forever, name="rest-api-server", daemon=True
            )
            thread.start()
            self._httpd, self._thread = httpd, thread

    def shutdown(self) -> None:
        """Stop serving; does nothing if the server is not running."""
        with self._lock:
            httpd, thread = self._httpd, self._thread
            self._httpd, self._thread = None, None
        if httpd is None:
            return
        logger.info("starting to shutdown REST API HTTP server")
        httpd.shutdown()
        httpd.server_close()
        if thread is not None:
            thread.join(timeout=self.cfg.shutdown_timeout or None)
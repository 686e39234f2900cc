"""WSGI middleware logging every request and shielding callers from failures."""

from __future__ import annotations

import logging
import sys
import time
from datetime import timedelta
from typing import Any, Callable, Iterable
from urllib.parse import quote

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]

_PATH_SAFE = "/:@!$&'()*+,;=-._~"


def injected_logging(app: WSGIApp, logger: logging.Logger | None = None) -> WSGIApp:
    """Wrap a WSGI app so each request is logged and failures answer 500."""
    log = logger or logging.getLogger(__name__)

    def middleware(environ: dict, start_response: Callable[..., Any]) -> list[bytes]:
        user_agent = environ.get("HTTP_USER_AGENT") or "-"
        content_length = environ.get("CONTENT_LENGTH") or "-"
        host = environ.get("HTTP_HOST") or environ.get("REMOTE_ADDR", "")
        content_type = environ.get("CONTENT_TYPE") or "-"
        method = environ.get("REQUEST_METHOD", "")
        path = quote(
            environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", ""), safe=_PATH_SAFE
        )

        start = time.perf_counter()
        try:
            result = app(environ, start_response)
            try:
                body = list(result)
            finally:
                close = getattr(result, "close", None)
                if close is not None:
                    close()
        except Exception:
            start_response(
                "500 Internal Server Error",
                [("Content-Type", "text/plain; charset=utf-8"), ("Content-Length", "0")],
                sys.exc_info(),
            )
            log.error("Failure occurred during request processing")
            return [b""]

        duration = timedelta(seconds=time.perf_counter() - start)
        log.info(
            "HTTP request received: method=%s path=%s duration=%s content_type=%s "
            "content_length=%s user_agent=%s host=%s",
            method,
            path,
            duration,
            content_type,
            content_length,
            user_agent,
            host,
            extra={
                "method": method,
                "path": path,
                "duration": duration,
                "content_type": content_type,
                "content_length": content_length,
                "user_agent": user_agent,
                "host": host,
            },
        )
        return body

    return middleware
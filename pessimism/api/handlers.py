"""HTTP handlers of the API, served as a WSGI application."""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from typing import Any, Callable, Iterable

from pessimism.api.middleware import injected_logging
from pessimism.api.models import (
    SessionRequestBody,
    SessionResponse,
    new_session_accepted_resp,
    new_session_no_process_resp,
    new_session_unmarshal_err_resp,
)
from pessimism.api.service import PessimismService

logger = logging.getLogger(__name__)

HEALTH_ROUTE = "/health"
HEURISTIC_ROUTE = "/v0/heuristic"

_NOT_FOUND_BODY = b"404 page not found\n"

_Route = Callable[[dict], "tuple[int, dict[str, Any]]"]


def _status_line(code: int) -> str:
    return f"{code} {HTTPStatus(code).phrase}"


def _read_body(environ: dict) -> bytes:
    stream = environ.get("wsgi.input")
    if stream is None:
        return b""
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    return stream.read(length) if length > 0 else b""


def _render(resp: SessionResponse) -> tuple[int, dict[str, Any]]:
    return resp.code, resp.to_dict()


class PessimismHandler:
    """Routes API requests to the service."""

    def __init__(self, service: PessimismService, logger_: logging.Logger | None = None) -> None:
        self.service = service
        self._routes: dict[str, tuple[str, _Route]] = {
            HEALTH_ROUTE: ("GET", self.health_check),
            HEURISTIC_ROUTE: ("POST", self.run_heuristic),
        }
        self._app = injected_logging(self._dispatch, logger_ or logger)

    def health_check(self, environ: dict) -> tuple[int, dict[str, Any]]:
        """Status code and JSON body of a health check."""
        return int(HTTPStatus.OK), self.service.check_health().to_dict()

    def run_heuristic(self, environ: dict) -> tuple[int, dict[str, Any]]:
        """Status code and JSON body of a heuristic run request."""
        try:
            body = SessionRequestBody.from_dict(json.loads(_read_body(environ)))
        except (ValueError, TypeError) as exc:
            logger.error("Could not unmarshal request: %s", exc)
            return _render(new_session_unmarshal_err_resp())

        try:
            suuid = self.service.process_heuristic_request(body)
        except Exception as exc:  # any processing failure is reported to the caller
            logger.error("Could not process heuristic request: %s", exc)
            return _render(new_session_no_process_resp())

        return _render(new_session_accepted_resp(suuid))

    def _dispatch(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        route = self._routes.get(environ.get("PATH_INFO") or "/")
        if route is None:
            start_response(
                _status_line(HTTPStatus.NOT_FOUND),
                [
                    ("Content-Type", "text/plain; charset=utf-8"),
                    ("Content-Length", str(len(_NOT_FOUND_BODY))),
                ],
            )
            return [_NOT_FOUND_BODY]

        method, handler = route
        if environ.get("REQUEST_METHOD", "GET").upper() != method:
            start_response(
                _status_line(HTTPStatus.METHOD_NOT_ALLOWED),
                [("Content-Length", "0")],
            )
            return [b""]

        code, payload = handler(environ)
        body = (json.dumps(payload) + "\n").encode("utf-8")
        start_response(
            _status_line(code),
            [("Content-Type", "application/json"), ("Content-Length", str(len(body)))],
        )
        return [body]

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        return self._app(environ, start_response)
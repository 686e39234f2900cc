import logging

from pessimism.api.middleware import injected_logging

LOGGER_NAME = "tests.middleware"


class _Recorder:
    def __init__(self):
        self.status = None
        self.headers = None

    def __call__(self, status, headers, exc_info=None):
        self.status = status
        self.headers = headers


def _ok_app(environ, start_response):
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [b"hello"]


def _failing_app(environ, start_response):
    raise RuntimeError("boom")


def _failing_iter_app(environ, start_response):
    start_response("200 OK", [])

    def body():
        yield b"partial"
        raise RuntimeError("boom")

    return body()


def _info_records(caplog):
    return [r for r in caplog.records if r.name == LOGGER_NAME and r.levelno == logging.INFO]


def test_passes_response_through_and_logs(caplog):
    app = injected_logging(_ok_app, logging.getLogger(LOGGER_NAME))
    recorder = _Recorder()
    environ = {
        "REQUEST_METHOD": "POST",
        "PATH_INFO": "/v0/heuristic",
        "HTTP_USER_AGENT": "probe/1.0",
        "CONTENT_LENGTH": "12",
        "CONTENT_TYPE": "application/json",
        "HTTP_HOST": "svc.example.com",
        "REMOTE_ADDR": "10.0.0.1",
    }

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        result = app(environ, recorder)

    assert result == [b"hello"]
    assert recorder.status == "200 OK"
    (record,) = _info_records(caplog)
    assert record.method == "POST"
    assert record.path == "/v0/heuristic"
    assert record.user_agent == "probe/1.0"
    assert record.content_length == "12"
    assert record.content_type == "application/json"
    assert record.host == "svc.example.com"


def test_missing_headers_are_dashed(caplog):
    app = injected_logging(_ok_app, logging.getLogger(LOGGER_NAME))
    environ = {"REQUEST_METHOD": "GET", "PATH_INFO": "/health", "REMOTE_ADDR": "10.0.0.1"}

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        app(environ, _Recorder())

    (record,) = _info_records(caplog)
    assert record.user_agent == "-"
    assert record.content_length == "-"
    assert record.content_type == "-"
    assert record.host == "10.0.0.1"


def test_failure_answers_500(caplog):
    app = injected_logging(_failing_app, logging.getLogger(LOGGER_NAME))
    recorder = _Recorder()

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        result = app({"REQUEST_METHOD": "GET", "PATH_INFO": "/health"}, recorder)

    assert result == [b""]
    assert recorder.status.startswith("500")
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert messages == ["Failure occurred during request processing"]
    assert _info_records(caplog) == []


def test_failure_while_iterating_answers_500():
    app = injected_logging(_failing_iter_app, logging.getLogger(LOGGER_NAME))
    recorder = _Recorder()

    result = app({"REQUEST_METHOD": "GET", "PATH_INFO": "/health"}, recorder)

    assert result == [b""]
    assert recorder.status.startswith("500")
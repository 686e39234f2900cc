import json
import urllib.request
from unittest.mock import Mock

import pytest

from pessimism.api.handlers import PessimismHandler
from pessimism.api.models import ChainConnectionStatus, HealthCheck
from pessimism.api.server import Server, ServerConfig
from pessimism.api.service import PessimismService


def _handler():
    svc = Mock(spec=PessimismService)
    svc.check_health.return_value = HealthCheck(
        healthy=True,
        chain_connection_status=ChainConnectionStatus(is_l1_healthy=True, is_l2_healthy=True),
    )
    return PessimismHandler(svc)


def test_server_flow_without_start():
    cfg = ServerConfig(host="localhost", port=8080)
    svr = Server(cfg, _handler())

    assert svr.address == "localhost:8080"
    svr.shutdown()
    assert svr.server_address is None


def test_server_serves_requests():
    svr = Server(ServerConfig(host="127.0.0.1", port=0, shutdown_timeout=5), _handler())
    svr.start()
    try:
        host, port = svr.server_address
        assert port > 0
        with urllib.request.urlopen(f"http://{host}:{port}/health", timeout=5) as resp:
            assert resp.status == 200
            hc = HealthCheck.from_dict(json.loads(resp.read()))
        assert hc.healthy is True
    finally:
        svr.shutdown()
    assert svr.server_address is None


def test_start_twice_fails():
    svr = Server(ServerConfig(host="127.0.0.1", port=0), _handler())
    svr.start()
    try:
        with pytest.raises(RuntimeError, match="already started"):
            svr.start()
    finally:
        svr.shutdown()
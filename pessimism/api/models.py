"""Request, response and health models of the HTTP API."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from http import HTTPStatus
from typing import Any, Mapping

from pessimism.core.configs import ClientConfig, PipelineConfig, SessionConfig
from pessimism.core.ids import SUUID
from pessimism.core.transit import SessionParams
from pessimism.core.types import (
    AlertDestination,
    AlertPolicy,
    HeuristicType,
    Network,
    PipelineType,
    RegisterType,
    string_to_heuristic_type,
    string_to_network,
    string_to_pipeline_type,
)

SUUID_KEY = "suuid"


def _parse_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, got {type(value).__name__}")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    return datetime.fromisoformat(text)


def _bool_field(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean, got {type(value).__name__}")
    return value


def _str_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _height_field(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {type(value).__name__}")
    return value


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


@dataclass
class ChainConnectionStatus:
    """Health of each node connection."""

    is_l1_healthy: bool = False
    is_l2_healthy: bool = False


@dataclass
class HealthCheck:
    """Health status of the server."""

    timestamp: datetime = field(default_factory=datetime.now)
    healthy: bool = False
    chain_connection_status: ChainConnectionStatus | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON object form of the health check."""
        status = self.chain_connection_status
        return {
            "Timestamp": self.timestamp.isoformat(),
            "Healthy": self.healthy,
            "ChainConnectionStatus": None
            if status is None
            else {"IsL1Healthy": status.is_l1_healthy, "IsL2Healthy": status.is_l2_healthy},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HealthCheck:
        """Build a health check from its JSON object form."""
        data = _mapping(data, "health check")
        raw_status = data.get("ChainConnectionStatus")
        status = None
        if raw_status is not None:
            raw_status = _mapping(raw_status, "ChainConnectionStatus")
            status = ChainConnectionStatus(
                is_l1_healthy=_bool_field(raw_status, "IsL1Healthy"),
                is_l2_healthy=_bool_field(raw_status, "IsL2Healthy"),
            )
        raw_ts = data.get("Timestamp")
        timestamp = datetime.min if raw_ts is None else _parse_time(raw_ts)
        return cls(
            timestamp=timestamp,
            healthy=_bool_field(data, "Healthy"),
            chain_connection_status=status,
        )


class HeuristicMethod(enum.IntEnum):
    """Operation requested on a heuristic session."""

    RUN = 0
    UPDATE = 1
    STOP = 2


def string_to_heuristic_method(value: str) -> HeuristicMethod:
    """Parse a method name; anything unrecognised means run."""
    return {
        "run": HeuristicMethod.RUN,
        "update": HeuristicMethod.UPDATE,
        "stop": HeuristicMethod.STOP,
    }.get(value, HeuristicMethod.RUN)


class SessionResponseStatus(str, enum.Enum):
    """Outcome status of a heuristic session request."""

    OK = "OK"
    NOT_OK = "NOTOK"

    def __str__(self) -> str:
        return self.value


@dataclass
class SessionRequestParams:
    """Parameters of a heuristic session request."""

    network: str = ""
    ptype: str = ""
    heuristic_type: str = ""
    start_height: int | None = None
    end_height: int | None = None
    session_params: dict[str, Any] | None = None
    alerting_params: AlertPolicy | None = None

    def params(self) -> SessionParams:
        """Heuristic session parameters built from the request."""
        params = SessionParams()
        for key, value in (self.session_params or {}).items():
            params.set_value(key, value)
        return params

    def alerting_dest_type(self) -> AlertDestination:
        """Alert destination named by the request."""
        if self.alerting_params is None:
            raise ValueError("request carries no alerting params")
        return self.alerting_params.destination_type()

    def network_type(self) -> Network:
        """Network named by the request."""
        return string_to_network(self.network)

    def pipeline_type(self) -> PipelineType:
        """Pipeline type named by the request."""
        return string_to_pipeline_type(self.ptype)

    def heuristic(self) -> HeuristicType:
        """Heuristic type named by the request."""
        return string_to_heuristic_type(self.heuristic_type)

    def alert_policy(self) -> AlertPolicy | None:
        """Alerting policy of the request."""
        return self.alerting_params

    def generate_pipeline_config(
        self, poll_interval: timedelta | float, register_type: RegisterType | int
    ) -> PipelineConfig:
        """Pipeline configuration for the request."""
        if not isinstance(poll_interval, timedelta):
            poll_interval = timedelta(seconds=poll_interval)
        return PipelineConfig(
            network=self.network_type(),
            data_type=RegisterType.from_code(register_type),
            pipeline_type=self.pipeline_type(),
            client_config=ClientConfig(
                network=self.network_type(),
                poll_interval=poll_interval,
                start_height=self.start_height,
                end_height=self.end_height,
            ),
        )

    def session_config(self) -> SessionConfig:
        """Heuristic session configuration for the request."""
        return SessionConfig(
            alert_policy=self.alert_policy(),
            heuristic_type=self.heuristic(),
            params=self.params(),
            pt=self.pipeline_type(),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionRequestParams:
        """Build request params from their JSON object form."""
        data = _mapping(data, "params")
        raw_params = data.get("heuristic_params")
        if raw_params is not None:
            raw_params = dict(_mapping(raw_params, "heuristic_params"))
        raw_policy = data.get("alerting_params")
        policy = None
        if raw_policy is not None:
            policy = AlertPolicy.from_dict(_mapping(raw_policy, "alerting_params"))
        return cls(
            network=_str_field(data, "network"),
            ptype=_str_field(data, "pipeline_type"),
            heuristic_type=_str_field(data, "type"),
            start_height=_height_field(data, "start_height"),
            end_height=_height_field(data, "end_height"),
            session_params=raw_params,
            alerting_params=policy,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON object form of the request params."""
        return {
            "network": self.network,
            "pipeline_type": self.ptype,
            "type": self.heuristic_type,
            "start_height": self.start_height,
            "end_height": self.end_height,
            "heuristic_params": self.session_params,
            "alerting_params": None
            if self.alerting_params is None
            else self.alerting_params.to_dict(),
        }


@dataclass
class SessionRequestBody:
    """Body of a heuristic session request."""

    method: str = ""
    params: SessionRequestParams = field(default_factory=SessionRequestParams)

    def clone(self) -> SessionRequestBody:
        """Shallow copy of the body."""
        return SessionRequestBody(method=self.method, params=dataclasses.replace(self.params))

    def method_type(self) -> HeuristicMethod:
        """Parsed method of the request."""
        return string_to_heuristic_method(self.method)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionRequestBody:
        """Build a request body from its JSON object form."""
        data = _mapping(data, "request body")
        raw_params = data.get("params")
        params = (
            SessionRequestParams()
            if raw_params is None
            else SessionRequestParams.from_dict(raw_params)
        )
        return cls(method=_str_field(data, "method"), params=params)

    def to_dict(self) -> dict[str, Any]:
        """JSON object form of the request body."""
        return {"method": self.method, "params": self.params.to_dict()}


@dataclass
class SessionResponse:
    """Response to a heuristic session request."""

    code: int = 0
    status: SessionResponseStatus = SessionResponseStatus.OK
    result: dict[str, str] | None = None
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """JSON object form of the response."""
        return {
            "status_code": self.code,
            "status": str(self.status),
            "result": None if self.result is None else dict(self.result),
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionResponse:
        """Build a response from its JSON object form."""
        data = _mapping(data, "response")
        code = data.get("status_code", 0)
        if isinstance(code, bool) or not isinstance(code, int):
            raise TypeError(f"status_code must be an integer, got {type(code).__name__}")
        raw_result = data.get("result")
        result = None
        if raw_result is not None:
            result = {str(k): str(v) for k, v in _mapping(raw_result, "result").items()}
        return cls(
            code=code,
            status=SessionResponseStatus(_str_field(data, "status")),
            result=result,
            error=_str_field(data, "error"),
        )


def new_session_accepted_resp(suuid: SUUID) -> SessionResponse:
    """Response for an accepted heuristic session."""
    return SessionResponse(
        status=SessionResponseStatus.OK,
        code=int(HTTPStatus.ACCEPTED),
        result={SUUID_KEY: str(suuid)},
    )


def new_session_unmarshal_err_resp() -> SessionResponse:
    """Response for a request body that could not be decoded."""
    return SessionResponse(
        status=SessionResponseStatus.NOT_OK,
        code=int(HTTPStatus.BAD_REQUEST),
        error="could not unmarshal request body",
    )


def new_session_no_process_resp() -> SessionResponse:
    """Response for a request that failed during processing."""
    return SessionResponse(
        status=SessionResponseStatus.NOT_OK,
        code=int(HTTPStatus.INTERNAL_SERVER_ERROR),
        error="error processing heuristic request",
    )
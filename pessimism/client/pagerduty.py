"""Client for triggering PagerDuty events."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import requests

logger = logging.getLogger(__name__)

EVENT_SOURCE = "Pessimism"


class PagerDutyAction(str, enum.Enum):
    """Action an event performs on an incident."""

    TRIGGER = "trigger"
    ACKNOWLEDGE = "acknowledge"
    RESOLVE = "resolve"

    def __str__(self) -> str:
        return self.value


class PagerDutySeverity(str, enum.Enum):
    """Severity of an event."""

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


class PagerDutyResponseStatus(str, enum.Enum):
    """Status reported by a PagerDuty API call."""

    SUCCESS = "success"

    def __str__(self) -> str:
        return self.value


@dataclass
class PagerDutyConfig:
    """Connection settings for a PagerDuty service."""

    integration_key: str = ""
    change_events_url: str = ""
    alert_events_url: str = ""


@dataclass
class PagerDutyEventTrigger:
    """Caller supplied fields of a PagerDuty event."""

    message: str
    action: PagerDutyAction = PagerDutyAction.TRIGGER
    severity: PagerDutySeverity = PagerDutySeverity.CRITICAL
    dedup_key: str = ""


@dataclass
class PagerDutyRequest:
    """Body of a PagerDuty events API request."""

    routing_key: str
    event_action: PagerDutyAction
    dedup_key: str
    summary: str
    severity: PagerDutySeverity
    source: str = EVENT_SOURCE
    timestamp: datetime = field(default_factory=lambda: datetime.now().astimezone())

    @classmethod
    def from_event(
        cls, integration_key: str, event: PagerDutyEventTrigger
    ) -> PagerDutyRequest:
        """Build a request for an event, stamped with the current time."""
        return cls(
            routing_key=integration_key,
            event_action=event.action,
            dedup_key=event.dedup_key,
            summary=event.message,
            severity=event.severity,
        )

    def to_json(self) -> bytes:
        """JSON encoding of the request."""
        body: dict[str, Any] = {
            "routing_key": self.routing_key,
            "event_action": str(self.event_action),
            "dedup_key": self.dedup_key,
            "payload": {
                "summary": self.summary,
                "source": self.source,
                "severity": str(self.severity),
                "timestamp": self.timestamp.isoformat(),
            },
        }
        return json.dumps(body).encode("utf-8")


@dataclass
class PagerDutyAPIResponse:
    """Result reported by the PagerDuty API."""

    status: str = ""
    message: str = ""
    dedup_key: str = ""


def _parse_response(body: bytes) -> PagerDutyAPIResponse:
    data = json.loads(body)
    if not isinstance(data, dict):
        raise ValueError("pagerduty response is not a JSON object")
    return PagerDutyAPIResponse(
        status=data.get("status") or "",
        message=data.get("message") or "",
        dedup_key=data.get("dedup_key") or "",
    )


class PagerDutyClient:
    """Sends events to a PagerDuty service."""

    def __init__(
        self,
        cfg: PagerDutyConfig,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        if not cfg.integration_key:
            logger.warning("No PagerDuty integration key provided")
        self.integration_key = cfg.integration_key
        self.change_events_url = cfg.change_events_url
        self.alert_events_url = cfg.alert_events_url
        self._session = session or requests.Session()
        self._timeout = timeout

    def post_event(self, event: PagerDutyEventTrigger) -> PagerDutyAPIResponse:
        """Post an event and return the API's answer."""
        payload = PagerDutyRequest.from_event(self.integration_key, event).to_json()
        response = self._session.post(
            self.alert_events_url,
            data=payload,
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
        )
        with response:
            return _parse_response(response.content)
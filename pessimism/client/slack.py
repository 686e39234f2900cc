"""Client for posting alerts to a Slack webhook."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)


@dataclass
class SlackConfig:
    """Connection settings for a Slack webhook."""

    channel: str = ""
    url: str = ""


@dataclass
class SlackPayload:
    """Body of a Slack message post."""

    text: Any
    channel: str

    def to_json(self) -> bytes:
        """JSON encoding of the payload."""
        return json.dumps({"text": self.text, "channel": self.channel}).encode("utf-8")


@dataclass
class SlackAPIResponse:
    """Result reported by the Slack API."""

    ok: bool = False
    err: str = ""


def _parse_response(body: bytes) -> SlackAPIResponse:
    data = json.loads(body)
    if not isinstance(data, dict):
        raise ValueError("slack response is not a JSON object")
    return SlackAPIResponse(ok=bool(data.get("ok", False)), err=data.get("error") or "")


class SlackClient:
    """Posts messages to a Slack channel through a webhook URL."""

    def __init__(
        self,
        cfg: SlackConfig,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        if not cfg.url:
            logger.warning("No Slack webhook URL not provided")
        self.url = cfg.url
        self.channel = cfg.channel
        self._session = session or requests.Session()
        self._timeout = timeout

    def post_data(self, text: str) -> SlackAPIResponse:
        """Post text to the configured channel and return the API's answer."""
        payload = SlackPayload(text=text, channel=self.channel).to_json()
        response = self._session.post(
            self.url,
            data=payload,
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
        )
        with response:
            return _parse_response(response.content)
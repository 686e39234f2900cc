"""Alert manager subsystem: routes alerts from heuristic sessions to destinations."""

from __future__ import annotations

import dataclasses
import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from typing import Protocol

from pessimism.alert.cooldown import CoolDownHandler
from pessimism.alert.interpolator import (
    interpolate_pagerduty_message,
    interpolate_slack_message,
)
from pessimism.alert.store import AlertPolicyStore, AlertStoreError
from pessimism.client.pagerduty import (
    PagerDutyAction,
    PagerDutyAPIResponse,
    PagerDutyConfig,
    PagerDutyEventTrigger,
    PagerDutyResponseStatus,
    PagerDutySeverity,
)
from pessimism.client.slack import SlackAPIResponse, SlackConfig
from pessimism.core.ids import SUUID
from pessimism.core.transit import Subsystem
from pessimism.core.types import Alert, AlertDestination, AlertPolicy, Severity

logger = logging.getLogger(__name__)

# How often, in seconds, expired cool downs are forgotten.
COOL_DOWN_UPDATE_INTERVAL = 1.0

_STOP = object()


class _SlackPoster(Protocol):
    def post_data(self, text: str) -> SlackAPIResponse: ...


class _PagerDutyPoster(Protocol):
    def post_event(self, event: PagerDutyEventTrigger) -> PagerDutyAPIResponse: ...


class AlertDeliveryError(Exception):
    """Raised when an alert destination rejects an alert."""


@dataclass
class AlertConfig:
    """Configuration of the alerting destinations."""

    slack_config: SlackConfig = field(default_factory=SlackConfig)
    medium_pagerduty_cfg: PagerDutyConfig = field(default_factory=PagerDutyConfig)
    high_pagerduty_cfg: PagerDutyConfig = field(default_factory=PagerDutyConfig)


_SEVERITY_DESTINATIONS: dict[Severity, tuple[AlertDestination, ...]] = {
    Severity.UNKNOWN: (AlertDestination.UNKNOWN,),
    Severity.LOW: (AlertDestination.SLACK,),
    Severity.MEDIUM: (AlertDestination.PAGER_DUTY, AlertDestination.SLACK),
    Severity.HIGH: (AlertDestination.PAGER_DUTY, AlertDestination.SLACK),
}


def severity_destinations(severity: Severity) -> list[AlertDestination]:
    """Destinations an alert of the given severity is delivered to."""
    return list(_SEVERITY_DESTINATIONS.get(Severity.from_code(severity), ()))


class AlertManager(Subsystem):
    """Receives alerts, applies policies and cool downs, and delivers them."""

    def __init__(
        self,
        slack_client: _SlackPoster,
        pagerduty_client: _PagerDutyPoster,
        high_pagerduty_client: _PagerDutyPoster,
        store: AlertPolicyStore | None = None,
        cool_down_handler: CoolDownHandler | None = None,
    ) -> None:
        self._slack = slack_client
        self._pagerduty_p1 = pagerduty_client
        self._pagerduty_p0 = high_pagerduty_client
        self._store = store or AlertPolicyStore()
        self._cool_down = cool_down_handler or CoolDownHandler()
        self._transit: queue.Queue = queue.Queue()
        self._stopped = threading.Event()

    def add_session(self, suuid: SUUID, policy: AlertPolicy) -> None:
        """Register the alert policy of a heuristic session."""
        self._store.add_alert_policy(suuid, policy)

    def transit(self) -> queue.Queue:
        """Queue on which alerts are delivered to the manager."""
        return self._transit

    def event_loop(self) -> None:
        """Process incoming alerts until shut down."""
        next_tick = time.monotonic() + COOL_DOWN_UPDATE_INTERVAL
        while not self._stopped.is_set():
            timeout = max(0.0, next_tick - time.monotonic())
            try:
                item = self._transit.get(timeout=timeout)
            except queue.Empty:
                self._cool_down.update()
                next_tick = time.monotonic() + COOL_DOWN_UPDATE_INTERVAL
                continue
            try:
                if item is not _STOP:
                    self._process(item)
            finally:
                self._transit.task_done()

    def _process(self, alert: Alert) -> None:
        try:
            policy = self._store.get_alert_policy(alert.suuid)
        except AlertStoreError as exc:
            logger.error("Could not determine alerting destination: %s", exc)
            return

        if policy.has_cool_down() and self._cool_down.is_cool_down(alert.suuid):
            logger.debug("Alert is in cool down: suuid=%s", alert.suuid)
            return

        logger.info("received alert: suuid=%s", alert.suuid)
        self.handle_alert(alert, policy)

        if policy.has_cool_down():
            self._cool_down.add(alert.suuid, policy.cool_down)

    def handle_alert(self, alert: Alert, policy: AlertPolicy) -> None:
        """Deliver an alert to every destination its policy calls for."""
        severity = policy.severity_level()
        alert = dataclasses.replace(alert, criticality=severity)

        locations = [policy.destination_type()]
        if severity != Severity.UNKNOWN:
            locations = severity_destinations(severity)

        for dest in locations:
            self._propagate(dest, alert, policy)

    def _propagate(
        self, dest: AlertDestination, alert: Alert, policy: AlertPolicy
    ) -> None:
        if dest == AlertDestination.SLACK:
            logger.debug("Attempting to post alert to slack")
            try:
                self._post_slack(alert.suuid, alert.content, policy.message)
            except Exception as exc:  # delivery failures are reported, not fatal
                logger.error("Could not post alert to slack: %s", exc)
        elif dest == AlertDestination.PAGER_DUTY:
            logger.debug("Attempting to post alert to pagerduty")
            try:
                self._post_pagerduty(alert)
            except Exception as exc:  # delivery failures are reported, not fatal
                logger.error("Could not post alert to pagerduty: %s", exc)
        elif dest == AlertDestination.THIRD_PARTY:
            logger.error(
                "Attempting to post alert to third_party which is not yet supported"
            )
        else:
            logger.error(
                "Attempting to post alert to unknown destination: destination=%s",
                policy.destination_type(),
            )

    def _post_slack(self, suuid: SUUID, content: str, message: str) -> None:
        text = interpolate_slack_message(suuid, content, message)
        resp = self._slack.post_data(text)
        if not resp.ok and resp.err:
            raise AlertDeliveryError(resp.err)

    def _post_pagerduty(self, alert: Alert) -> None:
        clients = [self._pagerduty_p1]
        if alert.criticality == Severity.HIGH:
            clients.append(self._pagerduty_p0)

        message = interpolate_pagerduty_message(alert.suuid, alert.content)
        for client in clients:
            resp = client.post_event(
                PagerDutyEventTrigger(
                    message=message,
                    action=PagerDutyAction.TRIGGER,
                    severity=PagerDutySeverity.CRITICAL,
                    dedup_key=str(alert.suuid),
                )
            )
            if resp.status != PagerDutyResponseStatus.SUCCESS.value:
                raise AlertDeliveryError(
                    f"could not post to pagerduty: {resp.status}"
                )

    def shutdown(self) -> None:
        """Stop the event loop."""
        self._stopped.set()
        self._transit.put(_STOP)
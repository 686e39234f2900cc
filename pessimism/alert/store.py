"""In-memory store of alert policies keyed by heuristic session."""

from __future__ import annotations

from pessimism.core.ids import SUUID
from pessimism.core.types import AlertPolicy


class AlertStoreError(Exception):
    """Raised when a policy cannot be added to or found in the store."""


class AlertPolicyStore:
    """Holds exactly one alert policy per heuristic session."""

    def __init__(self) -> None:
        self._policies: dict[SUUID, AlertPolicy] = {}

    def add_alert_policy(self, suuid: SUUID, policy: AlertPolicy) -> None:
        """Register the policy of a session; a session may only have one."""
        if suuid in self._policies:
            raise AlertStoreError(
                f"alert destination already exists for heuristic session {suuid}"
            )
        self._policies[suuid] = policy

    def get_alert_policy(self, suuid: SUUID) -> AlertPolicy:
        """Return the policy registered for a session."""
        try:
            return self._policies[suuid]
        except KeyError:
            raise AlertStoreError(
                f"alert destination does not exist for heuristic session {suuid}"
            ) from None
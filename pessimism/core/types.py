"""Enumerations and alert policy types shared across the service."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from pessimism.core.ids import PUUID, SUUID

UNKNOWN_TYPE = "unknown"

# Timeout applied to Ethereum client calls, in seconds.
ETH_CLIENT_TIMEOUT = 20


class Env(str, enum.Enum):
    """Deployment environment of the application."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    LOCAL = "local"

    def __str__(self) -> str:
        return self.value


class _CodedEnum(enum.IntEnum):
    """One-byte enumeration whose zero value means "unknown"."""

    def __str__(self) -> str:
        return UNKNOWN_TYPE if self.value == 0 else self.name.lower()

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    @classmethod
    def from_code(cls, code: int):
        """Return the member for a raw code, or the unknown member."""
        try:
            return cls(int(code))
        except ValueError:
            return cls(0)

    @classmethod
    def from_label(cls, text: str):
        """Return the member whose label is ``text``, or the unknown member."""
        for member in cls:
            if member.value and str(member) == text:
                return member
        return cls(0)


class Network(_CodedEnum):
    """Network a pipeline's oracle is subscribed to."""

    UNKNOWN = 0
    LAYER1 = 1
    LAYER2 = 2


class ChainSubscription(enum.IntEnum):
    """Which networks a component subscribes to."""

    ONLY_LAYER1 = 1
    ONLY_LAYER2 = 2
    BOTH_NETWORKS = 3


class FetchType(enum.IntEnum):
    """What an oracle fetches per block height."""

    HEADER = 0
    BLOCK = 1


class HeuristicType(_CodedEnum):
    """Kind of heuristic run by a session."""

    UNKNOWN = 0
    BALANCE_ENFORCEMENT = 1
    CONTRACT_EVENT = 2
    WITHDRAWAL_ENFORCEMENT = 3
    FAULT_DETECTOR = 4


class AlertDestination(_CodedEnum):
    """Where an alert is delivered."""

    UNKNOWN = 0
    SLACK = 1
    PAGER_DUTY = 2
    THIRD_PARTY = 3


class Severity(_CodedEnum):
    """Severity of an alert."""

    UNKNOWN = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class ComponentType(_CodedEnum):
    """Kind of ETL component."""

    UNKNOWN = 0
    ORACLE = 1
    PIPE = 2
    AGGREGATOR = 3


class PipelineType(_CodedEnum):
    """Kind of ETL pipeline."""

    UNKNOWN = 0
    BACKTEST = 1
    LIVE = 2
    MOCKTEST = 3


class RegisterType(_CodedEnum):
    """Data type produced and consumed by ETL components."""

    UNKNOWN = 0
    ACCOUNT_BALANCE = 1
    GETH_BLOCK = 2
    EVENT_LOG = 3


def string_to_network(value: str) -> Network:
    """Parse a network label."""
    return Network.from_label(value)


def string_to_heuristic_type(value: str) -> HeuristicType:
    """Parse a heuristic type label."""
    return HeuristicType.from_label(value)


def string_to_alert_destination(value: str) -> AlertDestination:
    """Parse an alert destination label."""
    return AlertDestination.from_label(value)


def string_to_severity(value: str) -> Severity:
    """Parse a severity label."""
    return Severity.from_label(value)


def string_to_pipeline_type(value: str) -> PipelineType:
    """Parse a pipeline type label."""
    return PipelineType.from_label(value)


def _text_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass
class AlertPolicy:
    """Alerting policy of a heuristic session."""

    severity: str = ""
    destination: str = ""
    message: str = ""
    cool_down: int = 0

    def has_cool_down(self) -> bool:
        """Whether alerts for this policy are rate limited."""
        return self.cool_down > 0

    def cool_down_time(self) -> datetime:
        """Moment at which a cool down started now would end."""
        return datetime.now() + timedelta(seconds=self.cool_down)

    def severity_level(self) -> Severity:
        """Parsed severity of the policy."""
        return string_to_severity(self.severity)

    def destination_type(self) -> AlertDestination:
        """Parsed destination of the policy."""
        return string_to_alert_destination(self.destination)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AlertPolicy:
        """Build a policy from its JSON object form."""
        cool_down = data.get("cooldown_time")
        if cool_down is None:
            cool_down = 0
        elif isinstance(cool_down, bool) or not isinstance(cool_down, int):
            raise TypeError(
                f"cooldown_time must be an integer, got {type(cool_down).__name__}"
            )
        return cls(
            severity=_text_field(data, "severity"),
            destination=_text_field(data, "destination"),
            message=_text_field(data, "message"),
            cool_down=cool_down,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON object form of the policy."""
        return {
            "severity": self.severity,
            "destination": self.destination,
            "message": self.message,
            "cooldown_time": self.cool_down,
        }


@dataclass
class Alert:
    """An alert raised by a heuristic session."""

    criticality: Severity = Severity.UNKNOWN
    dest: AlertDestination = AlertDestination.UNKNOWN
    puuid: PUUID | None = None
    suuid: SUUID | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    ptype: PipelineType = PipelineType.UNKNOWN
    content: str = ""
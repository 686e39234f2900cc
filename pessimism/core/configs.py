"""Configuration objects passed to pipeline, oracle and session constructors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from pessimism.core.transit import SessionParams
from pessimism.core.types import (
    AlertPolicy,
    HeuristicType,
    Network,
    PipelineType,
    RegisterType,
)


@dataclass
class ClientConfig:
    """Configuration of an oracle component's chain client."""

    network: Network = Network.UNKNOWN
    poll_interval: timedelta = timedelta(0)
    num_of_retries: int = 0
    start_height: int | None = None
    end_height: int | None = None

    def backfill(self) -> bool:
        """Whether the oracle starts from a historical height."""
        return self.start_height is not None

    def backtest(self) -> bool:
        """Whether the oracle stops at a fixed height."""
        return self.end_height is not None


@dataclass
class SessionConfig:
    """Configuration of a heuristic session."""

    network: Network = Network.UNKNOWN
    pt: PipelineType = PipelineType.UNKNOWN
    alert_policy: AlertPolicy | None = None
    heuristic_type: HeuristicType = HeuristicType.UNKNOWN
    params: SessionParams = field(default_factory=SessionParams)


@dataclass
class PipelineConfig:
    """Configuration of an ETL pipeline."""

    network: Network = Network.UNKNOWN
    data_type: RegisterType = RegisterType.UNKNOWN
    pipeline_type: PipelineType = PipelineType.UNKNOWN
    client_config: ClientConfig | None = None
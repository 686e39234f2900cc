"""API service: deploys heuristic sessions and reports node health."""

from __future__ import annotations

import abc
import logging
from datetime import datetime
from typing import Any

from pessimism.api.models import (
    ChainConnectionStatus,
    HealthCheck,
    HeuristicMethod,
    SessionRequestBody,
    SessionRequestParams,
)
from pessimism.client.eth import ClientError, Dependencies, eth_client_from
from pessimism.core.configs import PipelineConfig, SessionConfig
from pessimism.core.ids import SUUID, nil_suuid
from pessimism.core.types import Network

logger = logging.getLogger(__name__)


class SubsystemManager(abc.ABC):
    """Operations the API needs from the subsystem manager."""

    @abc.abstractmethod
    def build_pipeline_cfg(self, params: SessionRequestParams) -> PipelineConfig | None:
        """Build the pipeline configuration for a session request."""

    @abc.abstractmethod
    def build_deploy_cfg(
        self, pipeline_cfg: PipelineConfig | None, session_cfg: SessionConfig
    ) -> Any:
        """Combine pipeline and session configuration into a deployment."""

    @abc.abstractmethod
    def run_session(self, deploy_cfg: Any) -> SUUID:
        """Deploy a heuristic session and return its identifier."""


class PessimismService:
    """Business logic behind the HTTP API."""

    def __init__(self, deps: Dependencies, manager: SubsystemManager) -> None:
        self.deps = deps
        self.manager = manager

    def process_heuristic_request(self, body: SessionRequestBody) -> SUUID:
        """Carry out a heuristic request; only the run method does anything yet."""
        if body.method_type() == HeuristicMethod.RUN:
            return self.run_heuristic_session(body.params)
        return nil_suuid()

    def run_heuristic_session(self, params: SessionRequestParams) -> SUUID:
        """Deploy a heuristic session described by the request params."""
        pipeline_cfg = self.manager.build_pipeline_cfg(params)
        session_cfg = params.session_config()
        deploy_cfg = self.manager.build_deploy_cfg(pipeline_cfg, session_cfg)
        return self.manager.run_session(deploy_cfg)

    def check_health(self) -> HealthCheck:
        """Health of the server, based on both node connections."""
        status = ChainConnectionStatus(
            is_l1_healthy=self.check_eth_rpc_health(Network.LAYER1),
            is_l2_healthy=self.check_eth_rpc_health(Network.LAYER2),
        )
        return HealthCheck(
            timestamp=datetime.now(),
            healthy=status.is_l1_healthy and status.is_l2_healthy,
            chain_connection_status=status,
        )

    def check_eth_rpc_health(self, network: Network) -> bool:
        """Whether the node for a network answers a latest-header query."""
        network = Network.from_code(network)
        try:
            client = eth_client_from(self.deps, network)
        except ClientError as exc:
            logger.error("error getting client from context: %s", exc)
            return False

        try:
            client.header_by_number(None)
        except Exception as exc:  # any failure means the node is unreachable
            logger.error("error connecting to client: network=%s: %s", network, exc)
            return False

        logger.debug("successfully connected: network=%s", network)
        return True
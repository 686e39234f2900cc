"""Application configuration read from the environment and an env file."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field

from dotenv import load_dotenv

from pessimism.alert.manager import AlertConfig
from pessimism.api.server import ServerConfig
from pessimism.client.pagerduty import PagerDutyConfig
from pessimism.client.slack import SlackConfig
from pessimism.core.types import Env

logger = logging.getLogger(__name__)

TRUE_ENV_VAL = "1"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class ConfigError(Exception):
    """Raised when a required setting is missing or malformed."""


@dataclass
class SystemConfig:
    """Limits and polling intervals of the subsystems."""

    max_pipeline_count: int = 0
    l1_poll_interval: int = 0
    l2_poll_interval: int = 0


@dataclass
class MetricsConfig:
    """Settings of the metrics server."""

    host: str = ""
    port: int = 0
    enabled: bool = False
    read_header_timeout: int = 0


@dataclass
class Config:
    """Application level configuration."""

    environment: Env | str = ""
    bootstrap_path: str = ""
    l1_rpc_endpoint: str = ""
    l2_rpc_endpoint: str = ""
    system_config: SystemConfig = field(default_factory=SystemConfig)
    server_config: ServerConfig = field(default_factory=ServerConfig)
    metrics_config: MetricsConfig = field(default_factory=MetricsConfig)
    alert_config: AlertConfig = field(default_factory=AlertConfig)

    def is_production(self) -> bool:
        """Whether the environment is production."""
        return self.environment == Env.PRODUCTION

    def is_development(self) -> bool:
        """Whether the environment is development."""
        return self.environment == Env.DEVELOPMENT

    def is_local(self) -> bool:
        """Whether the environment is local."""
        return self.environment == Env.LOCAL

    def is_bootstrap(self) -> bool:
        """Whether a state bootstrap file is configured."""
        return self.bootstrap_path != ""


def _env_str(key: str) -> str:
    try:
        return os.environ[key]
    except KeyError:
        raise ConfigError(f"could not find env var given key: {key}") from None


def _env_str_default(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_bool(key: str) -> bool:
    return _env_str(key) == TRUE_ENV_VAL


def _env_int(key: str) -> int:
    value = _env_str(key)
    if not _INT_PATTERN.fullmatch(value):
        raise ConfigError(f"env val is not int; got: {key}={value}")
    return int(value)


def _parse_env(value: str) -> Env | str:
    try:
        return Env(value)
    except ValueError:
        return value


def _pagerduty_config(prefix: str) -> PagerDutyConfig:
    return PagerDutyConfig(
        alert_events_url=_env_str_default(f"{prefix}_PAGERDUTY_ALERT_EVENTS_URL"),
        change_events_url=_env_str_default(f"{prefix}_PAGERDUTY_CHANGE_EVENTS_URL"),
        integration_key=_env_str_default(f"{prefix}_PAGERDUTY_INTEGRATION_KEY"),
    )


def load_config(file_name: str | os.PathLike = "config.env") -> Config:
    """Load the env file (without overriding the environment) and build the config."""
    path = os.fspath(file_name)
    if os.path.isfile(path):
        load_dotenv(path, override=False)
    else:
        logger.warning("config file not found for file: %s", path)

    return Config(
        l1_rpc_endpoint=_env_str("L1_RPC_ENDPOINT"),
        l2_rpc_endpoint=_env_str("L2_RPC_ENDPOINT"),
        bootstrap_path=_env_str_default("BOOTSTRAP_PATH"),
        environment=_parse_env(_env_str("ENV")),
        alert_config=AlertConfig(
            slack_config=SlackConfig(
                channel=_env_str_default("SLACK_CHANNEL"),
                url=_env_str_default("SLACK_URL"),
            ),
            high_pagerduty_cfg=_pagerduty_config("P0"),
            medium_pagerduty_cfg=_pagerduty_config("P1"),
        ),
        system_config=SystemConfig(
            max_pipeline_count=_env_int("MAX_PIPELINE_COUNT"),
            l1_poll_interval=_env_int("L1_POLL_INTERVAL"),
            l2_poll_interval=_env_int("L2_POLL_INTERVAL"),
        ),
        metrics_config=MetricsConfig(
            host=_env_str("METRICS_HOST"),
            port=_env_int("METRICS_PORT"),
            enabled=_env_bool("ENABLE_METRICS"),
            read_header_timeout=_env_int("METRICS_READ_HEADER_TIMEOUT"),
        ),
        server_config=ServerConfig(
            host=_env_str("SERVER_HOST"),
            port=_env_int("SERVER_PORT"),
            keep_alive=_env_int("SERVER_KEEP_ALIVE_TIME"),
            read_timeout=_env_int("SERVER_READ_TIMEOUT"),
            write_timeout=_env_int("SERVER_WRITE_TIMEOUT"),
        ),
    )
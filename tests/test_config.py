import os

import pytest

from pessimism.config import Config, ConfigError, load_config
from pessimism.core.types import Env

REQUIRED = {
    "L1_RPC_ENDPOINT": "http://localhost:8545",
    "L2_RPC_ENDPOINT": "http://localhost:9545",
    "ENV": "development",
    "MAX_PIPELINE_COUNT": "10",
    "L1_POLL_INTERVAL": "5000",
    "L2_POLL_INTERVAL": "500",
    "METRICS_HOST": "localhost",
    "METRICS_PORT": "7300",
    "ENABLE_METRICS": "1",
    "METRICS_READ_HEADER_TIMEOUT": "10",
    "SERVER_HOST": "localhost",
    "SERVER_PORT": "8080",
    "SERVER_KEEP_ALIVE_TIME": "10",
    "SERVER_READ_TIMEOUT": "10",
    "SERVER_WRITE_TIMEOUT": "10",
}

OPTIONAL = [
    "BOOTSTRAP_PATH",
    "SLACK_CHANNEL",
    "SLACK_URL",
    "P0_PAGERDUTY_ALERT_EVENTS_URL",
    "P0_PAGERDUTY_CHANGE_EVENTS_URL",
    "P0_PAGERDUTY_INTEGRATION_KEY",
    "P1_PAGERDUTY_ALERT_EVENTS_URL",
    "P1_PAGERDUTY_CHANGE_EVENTS_URL",
    "P1_PAGERDUTY_INTEGRATION_KEY",
]


@pytest.fixture(autouse=True)
def _clean_env():
    saved = dict(os.environ)
    for key in [*REQUIRED, *OPTIONAL]:
        os.environ.pop(key, None)
    yield
    os.environ.clear()
    os.environ.update(saved)


def _write_env(path, values):
    path.write_text("".join(f"{key}={value}\n" for key, value in values.items()))
    return path


def test_loads_all_values_from_file(tmp_path):
    values = {**REQUIRED, "SLACK_CHANNEL": "alerts", "P0_PAGERDUTY_INTEGRATION_KEY": "placeholder"}
    cfg = load_config(_write_env(tmp_path / "config.env", values))

    assert cfg.l1_rpc_endpoint == REQUIRED["L1_RPC_ENDPOINT"]
    assert cfg.l2_rpc_endpoint == REQUIRED["L2_RPC_ENDPOINT"]
    assert cfg.environment == Env.DEVELOPMENT
    assert cfg.is_development() and not cfg.is_production() and not cfg.is_local()
    assert cfg.system_config.max_pipeline_count == int(REQUIRED["MAX_PIPELINE_COUNT"])
    assert cfg.system_config.l1_poll_interval == int(REQUIRED["L1_POLL_INTERVAL"])
    assert cfg.metrics_config.enabled is True
    assert cfg.metrics_config.port == int(REQUIRED["METRICS_PORT"])
    assert cfg.server_config.port == int(REQUIRED["SERVER_PORT"])
    assert cfg.server_config.host == REQUIRED["SERVER_HOST"]
    assert cfg.alert_config.slack_config.channel == "alerts"
    assert cfg.alert_config.high_pagerduty_cfg.integration_key == "placeholder"


def test_optional_values_default_to_empty(tmp_path):
    cfg = load_config(_write_env(tmp_path / "config.env", REQUIRED))

    assert cfg.bootstrap_path == ""
    assert cfg.is_bootstrap() is False
    assert cfg.alert_config.slack_config.url == ""
    assert cfg.alert_config.medium_pagerduty_cfg.alert_events_url == ""


def test_bootstrap_path_enables_bootstrap(tmp_path):
    values = {**REQUIRED, "BOOTSTRAP_PATH": "genesis.json"}
    cfg = load_config(_write_env(tmp_path / "config.env", values))

    assert cfg.bootstrap_path == "genesis.json"
    assert cfg.is_bootstrap() is True


def test_missing_file_uses_process_environment(tmp_path):
    os.environ.update({**REQUIRED, "ENV": "production"})

    cfg = load_config(tmp_path / "absent.env")

    assert cfg.is_production() is True
    assert cfg.l1_rpc_endpoint == REQUIRED["L1_RPC_ENDPOINT"]


def test_process_environment_wins_over_file(tmp_path):
    os.environ["SERVER_HOST"] = "0.0.0.0"
    cfg = load_config(_write_env(tmp_path / "config.env", REQUIRED))

    assert cfg.server_config.host == "0.0.0.0"


def test_missing_required_value_raises(tmp_path):
    values = {k: v for k, v in REQUIRED.items() if k != "L1_RPC_ENDPOINT"}

    with pytest.raises(ConfigError, match="L1_RPC_ENDPOINT"):
        load_config(_write_env(tmp_path / "config.env", values))


@pytest.mark.parametrize("bad", ["ten", "1_000", "1.5", ""])
def test_non_integer_value_raises(tmp_path, bad):
    values = {**REQUIRED, "SERVER_PORT": bad}

    with pytest.raises(ConfigError, match="SERVER_PORT"):
        load_config(_write_env(tmp_path / "config.env", values))


def test_metrics_flag_only_true_for_one(tmp_path):
    values = {**REQUIRED, "ENABLE_METRICS": "true"}
    cfg = load_config(_write_env(tmp_path / "config.env", values))

    assert cfg.metrics_config.enabled is False


def test_unknown_environment_is_kept(tmp_path):
    values = {**REQUIRED, "ENV": "staging"}
    cfg = load_config(_write_env(tmp_path / "config.env", values))

    assert cfg.environment == "staging"
    assert not (cfg.is_production() or cfg.is_development() or cfg.is_local())


def test_local_environment_flag():
    assert Config(environment=Env.LOCAL).is_local() is True
    assert Config().is_bootstrap() is False
# pessimism

Building blocks for monitoring OP Stack and EVM compatible blockchains:
typed identifiers for pipelines and heuristic sessions, per-session alert
policies, an alert manager that delivers alerts to Slack and PagerDuty, a
JSON-RPC Ethereum client, and a small WSGI API for starting heuristic
sessions and checking node health.

## Install

```
pip install .
pip install ".[test]"   # pytest and responses, for the test suite
```

## Contents

- `pessimism.core.types` – enumerations (`Network`, `PipelineType`,
  `ComponentType`, `RegisterType`, `HeuristicType`, `Severity`,
  `AlertDestination`, `Env`, ...), `AlertPolicy` and `Alert`, and the
  `string_to_*` label parsers. Unrecognised labels map to the `UNKNOWN`
  member.
- `pessimism.core.ids` – `ComponentPID`/`CUUID`, `PipelinePID`/`PUUID`,
  `SessionPID`/`SUUID`, built with `make_cuuid`, `make_puuid`,
  `make_suuid`, or zeroed with `nil_cuuid`, `nil_puuid`, `nil_suuid`.
- `pessimism.core.state` – `StateKey` and `make_state_key`; a key can be
  scoped to a pipeline once with `set_puuid` (a second call raises
  `ValueError`).
- `pessimism.core.register` – `DataRegister` and `RegisterDependencyPath`.
- `pessimism.core.transit` – `Address` (20 bytes, printed checksummed),
  `TransitData`/`new_transit_data`, `HeuristicInput`, `EngineInputRelay`,
  `SessionParams`, `Activation`, and the `Subsystem` base class.
- `pessimism.core.configs` – `ClientConfig`, `SessionConfig`,
  `PipelineConfig`.
- `pessimism.common.units` – `wei_to_ether` (returns a `Decimal`) and
  `slice_to_addresses`.
- `pessimism.common.dlq` – bounded `DeadLetterQueue` and `new_transit_dlq`.
- `pessimism.alert` – `AlertPolicyStore`, `CoolDownHandler`, message
  formatting, and `AlertManager`.
- `pessimism.client` – `SlackClient`, `PagerDutyClient`, and
  `JsonRpcEthClient`.
- `pessimism.api` – request/response models, `PessimismService`,
  `PessimismHandler` (WSGI), `injected_logging` middleware, and `Server`.
- `pessimism.config` – `load_config` and the `Config` dataclasses.

## Identifiers

Every heuristic session is identified by an `SUUID`: a three-byte primary id
encoding network, pipeline type and heuristic type, plus a random UUID.

```python
from pessimism.core.ids import make_suuid
from pessimism.core.types import (
    string_to_heuristic_type,
    string_to_network,
    string_to_pipeline_type,
)

suuid = make_suuid(
    string_to_network("layer1"),
    string_to_pipeline_type("live"),
    string_to_heuristic_type("balance_enforcement"),
)
print(suuid.pid)  # layer1:live:balance_enforcement
```

## Alert policies

A policy uses the same keys as the HTTP API: `severity`, `destination`,
`message` and `cooldown_time`.

```python
from pessimism.alert.store import AlertPolicyStore, AlertStoreError
from pessimism.core.types import AlertPolicy

policy = AlertPolicy.from_dict(
    {"severity": "high", "message": "balance too low", "cooldown_time": 60}
)

store = AlertPolicyStore()
store.add_alert_policy(suuid, policy)

try:
    store.add_alert_policy(suuid, policy)
except AlertStoreError:
    pass  # only one policy per session
```

## Alert routing

`AlertManager` takes a Slack client, a PagerDuty client and a second
PagerDuty client for high-severity alerts. Alerts are put on its
`transit()` queue and processed by `event_loop()`, which runs until
`shutdown()` is called.

```python
import threading

from pessimism.alert.manager import AlertManager
from pessimism.client.pagerduty import PagerDutyClient, PagerDutyConfig
from pessimism.client.slack import SlackClient, SlackConfig
from pessimism.core.types import Alert

manager = AlertManager(
    SlackClient(SlackConfig(channel="alerts", url="http://localhost:9000/")),
    PagerDutyClient(PagerDutyConfig(alert_events_url="http://localhost:9001/")),
    PagerDutyClient(PagerDutyConfig(alert_events_url="http://localhost:9002/")),
)
manager.add_session(suuid, policy)

worker = threading.Thread(target=manager.event_loop)
worker.start()
manager.transit().put(Alert(suuid=suuid, content="balance: 2.5 ETH"))
manager.shutdown()
worker.join()
```

Routing rules:

- A policy with a severity is routed by severity: `low` goes to Slack,
  `medium` and `high` to PagerDuty and Slack. `high` alerts are sent to both
  PagerDuty clients, `medium` only to the first.
- Without a severity, the policy's `destination` (`slack`, `pager_duty`)
  decides. `third_party` and unknown destinations are logged as errors.
- Alerts for a session with no policy are logged and dropped.
- A positive `cooldown_time` suppresses further alerts for that session for
  that many seconds.
- Delivery failures are logged; they do not stop the loop.

Message text comes from `interpolate_slack_message(suuid, content, message)`
and `interpolate_pagerduty_message(suuid, message)` in
`pessimism.alert.interpolator`.

## Dead letter queue

```python
from pessimism.common.dlq import DLQEmptyError, DLQFullError, new_transit_dlq

dlq = new_transit_dlq(5)
# dlq.add(entry) raises DLQFullError once five entries are held;
# dlq.pop() returns the oldest (DLQEmptyError when empty);
# dlq.pop_all() drains the queue; len(dlq) and dlq.empty() report its size.
```

## Ethereum client

`JsonRpcEthClient(url)` implements `EthClient` and `GethClient` over HTTP
JSON-RPC: `header_by_number`, `block_by_number`, `balance_at`, `code_at`,
`call_contract`, `filter_logs` and `get_proof`. A block number of `None`
means `latest`. Failures raise `ClientError`.

`Dependencies` holds the layer 1 and layer 2 clients (and an optional geth
client); `eth_client_from(deps, network)` picks the layer 2 client for
`Network.LAYER2` and the layer 1 client otherwise.

## Configuration

`load_config(file_name="config.env")` loads the env file if it exists
(without overriding variables already set; a missing file is only logged)
and builds a `Config`. A missing required variable, or a non-integer where
an integer is expected, raises `ConfigError`.

Required variables:

- `ENV` (`development`, `production` or `local`)
- `L1_RPC_ENDPOINT`, `L2_RPC_ENDPOINT`
- `MAX_PIPELINE_COUNT`, `L1_POLL_INTERVAL`, `L2_POLL_INTERVAL`
- `METRICS_HOST`, `METRICS_PORT`, `ENABLE_METRICS` (`1` for on),
  `METRICS_READ_HEADER_TIMEOUT`
- `SERVER_HOST`, `SERVER_PORT`, `SERVER_KEEP_ALIVE_TIME`,
  `SERVER_READ_TIMEOUT`, `SERVER_WRITE_TIMEOUT`

Optional variables: `BOOTSTRAP_PATH`, `SLACK_CHANNEL`, `SLACK_URL`, and for
the high (`P0_`) and medium (`P1_`) PagerDuty services
`..._PAGERDUTY_ALERT_EVENTS_URL`, `..._PAGERDUTY_CHANGE_EVENTS_URL` and
`..._PAGERDUTY_INTEGRATION_KEY`.

`Config` offers `is_production()`, `is_development()`, `is_local()` and
`is_bootstrap()` (true when `BOOTSTRAP_PATH` is set).

## HTTP API

`PessimismHandler(service)` is a WSGI application, wrapped in the
`injected_logging` middleware, serving:

- `GET /health` – `200` with the health of the L1 and L2 RPC connections
  (each is healthy when a latest-header query succeeds).
- `POST /v0/heuristic` – body `{"method": "run", "params": {...}}` with
  `network`, `pipeline_type`, `type`, `start_height`, `end_height`,
  `heuristic_params` and `alerting_params`. Answers `202` with the new
  session id under `result.suuid`, `400` when the body cannot be decoded,
  and `500` when processing fails.

Other paths answer `404`, wrong methods `405`.

`PessimismService(deps, manager)` needs a `SubsystemManager`, an abstract
class with `build_pipeline_cfg`, `build_deploy_cfg` and `run_session`.

```python
from pessimism.api.handlers import PessimismHandler
from pessimism.api.server import Server, ServerConfig
from pessimism.api.service import PessimismService
from pessimism.client.eth import Dependencies, JsonRpcEthClient

deps = Dependencies(
    l1_client=JsonRpcEthClient("http://localhost:8545"),
    l2_client=JsonRpcEthClient("http://localhost:9545"),
)
service = PessimismService(deps, my_subsystem_manager)
server = Server(ServerConfig(host="localhost", port=8080), PessimismHandler(service))
server.start()
# ...
server.shutdown()
```

## What this package does not do

- It has no ETL pipelines, risk engine or heuristic implementations, and no
  concrete `SubsystemManager`; you supply one to deploy sessions.
- It has no command-line program and does not read bootstrap files;
  `Config.is_bootstrap()` only reports whether a path is configured.
- It has no metrics server; `MetricsConfig` is read from the environment
  but nothing uses it.
- State is kept in memory only; nothing is persisted.
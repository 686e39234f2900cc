import pytest

from pessimism.alert.store import AlertPolicyStore, AlertStoreError
from pessimism.core.ids import make_suuid
from pessimism.core.types import (
    AlertDestination,
    AlertPolicy,
    HeuristicType,
    Network,
    PipelineType,
)


def _suuid():
    return make_suuid(Network.LAYER1, PipelineType.LIVE, HeuristicType.BALANCE_ENFORCEMENT)


def test_get_alert_policy_success():
    store = AlertPolicyStore()
    suuid = _suuid()
    policy = AlertPolicy(message="test message", destination=str(AlertDestination.SLACK))

    store.add_alert_policy(suuid, policy)
    assert store.get_alert_policy(suuid) == policy


def test_add_alert_policy_twice_fails():
    store = AlertPolicyStore()
    suuid = _suuid()
    policy = AlertPolicy(destination=str(AlertDestination.SLACK))

    store.add_alert_policy(suuid, policy)
    with pytest.raises(AlertStoreError, match="already exists"):
        store.add_alert_policy(suuid, policy)


def test_get_missing_policy_fails():
    with pytest.raises(AlertStoreError, match="does not exist"):
        AlertPolicyStore().get_alert_policy(_suuid())


def test_policies_are_per_session():
    store = AlertPolicyStore()
    first, second = _suuid(), _suuid()
    store.add_alert_policy(first, AlertPolicy(message="one"))
    store.add_alert_policy(second, AlertPolicy(message="two"))
    assert store.get_alert_policy(first).message == "one"
    assert store.get_alert_policy(second).message == "two"
from uuid import UUID

import pytest

from pessimism.core.ids import (
    CUUID,
    PUUID,
    SUUID,
    ComponentPID,
    PipelinePID,
    SessionPID,
    make_cuuid,
    make_puuid,
    make_suuid,
    nil_cuuid,
    nil_puuid,
    nil_suuid,
    short_string,
)
from pessimism.core.types import (
    ComponentType,
    HeuristicType,
    Network,
    PipelineType,
    RegisterType,
)


def test_component_id():
    expected_pid = ComponentPID([1, 1, 1, 1])
    actual = make_cuuid(1, 1, 1, 1)
    assert actual.pid == expected_pid
    assert str(actual.pid) == "layer1:backtest:oracle:account_balance"


def test_pipeline_id():
    expected_pid = PipelinePID([1] * 9)
    actual = make_puuid(1, make_cuuid(1, 1, 1, 1), make_cuuid(1, 1, 1, 1))
    assert actual.pid == expected_pid
    assert str(actual.pid) == (
        "backtest::layer1:backtest:oracle:account_balance::layer1:backtest:oracle:account_balance"
    )


def test_heuristic_session_id():
    expected_pid = SessionPID([1, 2, 1])
    actual = make_suuid(1, 2, 1)
    assert actual.pid == expected_pid
    assert str(actual.pid) == "layer1:live:balance_enforcement"


def test_nil_suuid_string():
    assert str(nil_suuid()) == "unknown:unknown:unknown::000000000"


def test_nil_identifiers_are_zeroed():
    assert bytes(nil_cuuid().pid) == bytes(4)
    assert bytes(nil_puuid().pid) == bytes(9)
    assert bytes(nil_suuid().pid) == bytes(3)
    assert nil_puuid() == nil_puuid()
    assert nil_cuuid().uuid.int == 0


def test_short_string_repeats_third_byte():
    uid = UUID(bytes=bytes(range(16)))
    assert short_string(uid) == "012234567"


def test_component_type_accessor():
    cuuid = make_cuuid(PipelineType.LIVE, ComponentType.PIPE, RegisterType.GETH_BLOCK, Network.LAYER2)
    assert cuuid.component_type() is ComponentType.PIPE
    assert cuuid.pid == ComponentPID([2, 2, 2, 2])


def test_pipeline_accessors():
    first = make_cuuid(PipelineType.LIVE, ComponentType.ORACLE, RegisterType.GETH_BLOCK, Network.LAYER2)
    puuid = make_puuid(PipelineType.LIVE, first, first)
    assert puuid.pipeline_type() is PipelineType.LIVE
    assert puuid.network_type() is Network.LAYER2


def test_session_pid_accessors():
    suuid = make_suuid(Network.LAYER1, PipelineType.LIVE, HeuristicType.FAULT_DETECTOR)
    assert suuid.pid.network() is Network.LAYER1
    assert suuid.pid.heuristic_type() is HeuristicType.FAULT_DETECTOR


def test_strings_end_with_short_uuid():
    cuuid = make_cuuid(1, 1, 1, 1)
    puuid = make_puuid(1, cuuid, cuuid)
    suuid = make_suuid(1, 1, 1)
    assert str(cuuid) == f"{cuuid.pid}::{short_string(cuuid.uuid)}"
    assert str(puuid) == f"{puuid.pid}:::{short_string(puuid.uuid)}"
    assert str(suuid) == f"{suuid.pid}::{short_string(suuid.uuid)}"


def test_generated_uuids_differ():
    generated = [make_suuid(1, 1, 1) for _ in range(5)]
    assert len({suuid.uuid for suuid in generated}) == 5
    assert {suuid.pid for suuid in generated} == {SessionPID([1, 1, 1])}


def test_identifiers_are_hashable_keys():
    suuid = make_suuid(1, 2, 1)
    table = {suuid: "policy"}
    assert table[SUUID(SessionPID([1, 2, 1]), suuid.uuid)] == "policy"


def test_constructor_coerces_raw_bytes():
    cuuid = CUUID(b"\x01\x02\x01\x03", UUID(int=0))
    assert isinstance(cuuid.pid, ComponentPID)
    assert str(cuuid.pid) == "layer1:live:oracle:event_log"
    assert isinstance(PUUID(bytes(9), UUID(int=0)).pid, PipelinePID)


def test_unknown_codes_render_unknown():
    assert str(ComponentPID([9, 9, 9, 9])) == "unknown:unknown:unknown:unknown"


@pytest.mark.parametrize(
    "cls,data",
    [(ComponentPID, [1, 2, 3]), (PipelinePID, [0] * 8), (SessionPID, [0] * 4)],
)
def test_wrong_length_rejected(cls, data):
    with pytest.raises(ValueError):
        cls(data)


def test_int_argument_rejected():
    with pytest.raises(TypeError):
        ComponentPID(4)
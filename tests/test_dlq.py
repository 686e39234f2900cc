import pytest

from pessimism.common.dlq import (
    DeadLetterQueue,
    DLQEmptyError,
    DLQFullError,
    new_transit_dlq,
)
from pessimism.core.transit import new_transit_data
from pessimism.core.types import RegisterType


def test_dlq_flow():
    dlq = new_transit_dlq(5)

    for _ in range(5):
        dlq.add(new_transit_data(RegisterType(0), None))
    assert len(dlq) == 5

    with pytest.raises(DLQFullError, match="full with 5 elements"):
        dlq.add(new_transit_data(RegisterType(0), None))

    elem = dlq.pop()
    assert elem.register_type == RegisterType(0)

    entries = dlq.pop_all()
    assert len(entries) == 4
    assert dlq.empty() is True


def test_pop_empty_raises():
    dlq = DeadLetterQueue(1)
    with pytest.raises(DLQEmptyError, match="the dead letter queue is empty"):
        dlq.pop()


def test_fifo_order():
    dlq = DeadLetterQueue(3)
    for item in ("a", "b", "c"):
        dlq.add(item)
    assert dlq.pop() == "a"
    assert dlq.pop_all() == ["b", "c"]
    assert len(dlq) == 0


def test_pop_all_frees_capacity():
    dlq = DeadLetterQueue(1)
    dlq.add("x")
    dlq.pop_all()
    dlq.add("y")
    assert dlq.pop() == "y"
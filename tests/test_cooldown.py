from pessimism.alert.cooldown import CoolDownHandler
from pessimism.core.ids import make_suuid, nil_suuid


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_session_in_cool_down_until_expiry():
    clock = FakeClock()
    handler = CoolDownHandler(clock)
    suuid = nil_suuid()

    handler.add(suuid, 60)
    assert handler.is_cool_down(suuid) is True

    clock.now = 61
    assert handler.is_cool_down(suuid) is False


def test_unknown_session_not_in_cool_down():
    handler = CoolDownHandler(FakeClock())
    assert handler.is_cool_down(make_suuid(1, 1, 1)) is False


def test_update_removes_expired_sessions_only():
    clock = FakeClock()
    handler = CoolDownHandler(clock)
    short, long_ = make_suuid(1, 2, 1), make_suuid(2, 2, 1)

    handler.add(short, 5)
    handler.add(long_, 100)
    clock.now = 10
    handler.update()

    assert len(handler) == 1
    assert handler.is_cool_down(long_) is True
    assert handler.is_cool_down(short) is False


def test_zero_cool_down_is_not_active():
    handler = CoolDownHandler(FakeClock())
    suuid = nil_suuid()
    handler.add(suuid, 0)
    assert handler.is_cool_down(suuid) is False
import pytest

from dstargate.timer import Timer


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def test_elapsed_follows_clock():
    clock = FakeClock()
    timer = Timer(clock=clock)
    assert timer.elapsed() == 0.0
    clock.now += 2.5
    assert timer.elapsed() == pytest.approx(2.5)


def test_start_resets():
    clock = FakeClock()
    timer = Timer(clock=clock)
    clock.now += 10
    timer.start()
    clock.now += 1
    assert timer.elapsed() == pytest.approx(1.0)


def test_real_clock_is_non_negative_and_grows():
    timer = Timer()
    first = timer.elapsed()
    second = timer.elapsed()
    assert 0 <= first <= second
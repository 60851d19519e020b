import pytest

from snakecore.frame_timing import FrameTiming


def fake_clock(values):
    it = iter(values)
    return lambda: next(it)


def test_initial_state():
    timing = FrameTiming(fake_clock([10.0]))
    assert timing.frame_count() == 0
    assert timing.time_step() == 0.0
    assert timing.total_elapsed_time() == 0.0


def test_step_in_milliseconds():
    timing = FrameTiming(fake_clock([0.0, 0.5]))
    timing.update()
    assert timing.time_step() == pytest.approx(500.0)
    assert timing.frame_count() == 1


def test_total_is_sum_of_steps():
    timing = FrameTiming(fake_clock([2.0, 2.1, 2.35, 3.0, 3.016]))
    steps = []
    for _ in range(4):
        timing.update()
        steps.append(timing.time_step())
    assert timing.frame_count() == 4
    assert timing.total_elapsed_time() == pytest.approx(sum(steps))
    assert all(step >= 0 for step in steps)


def test_microsecond_truncation():
    timing = FrameTiming(fake_clock([0.0, 0.0000015]))
    timing.update()
    assert timing.time_step() == pytest.approx(0.001)


def test_real_clock_monotonic():
    timing = FrameTiming()
    timing.update()
    first_total = timing.total_elapsed_time()
    timing.update()
    assert timing.total_elapsed_time() >= first_total
    assert timing.frame_count() == 2
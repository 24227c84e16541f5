"""Unit tests for the exponential backoff schedule."""

import random

import pytest

from .backoff import ExponentialBackOff


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def describe_ExponentialBackOff():
    @pytest.fixture
    def clock():
        return FakeClock()

    def it_grows_by_the_multiplier(clock):
        b = ExponentialBackOff(initial_interval=1, multiplier=2, max_interval=100, randomization_factor=0, clock=clock)

        assert [b.next_backoff() for _ in range(4)] == [1, 2, 4, 8]

    def it_caps_at_max_interval(clock):
        b = ExponentialBackOff(initial_interval=1, multiplier=3, max_interval=5, randomization_factor=0, clock=clock)

        assert [b.next_backoff() for _ in range(4)] == [1, 3, 5, 5]

    def it_jitters_within_the_randomization_factor(clock):
        b = ExponentialBackOff(initial_interval=10, randomization_factor=0.5, clock=clock, rng=random.Random(1))

        for _ in range(20):
            b.reset()
            assert 5 <= b.next_backoff() <= 15

    def it_stops_once_elapsed_budget_is_spent(clock):
        b = ExponentialBackOff(max_elapsed_time=10, randomization_factor=0, clock=clock)
        clock.advance(10.5)

        assert b.next_backoff() is None

    def it_checks_whether_a_delay_fits_the_budget(clock):
        b = ExponentialBackOff(max_elapsed_time=10, clock=clock)
        clock.advance(7)

        assert b.fits_budget(3)
        assert not b.fits_budget(3.5)

    def it_has_no_budget_when_max_elapsed_is_zero(clock):
        b = ExponentialBackOff(max_elapsed_time=0, clock=clock)
        clock.advance(1_000_000)

        assert b.fits_budget(1_000)
        assert b.next_backoff() is not None

    def it_restarts_on_reset(clock):
        b = ExponentialBackOff(initial_interval=1, multiplier=2, randomization_factor=0, clock=clock)
        b.next_backoff()
        b.next_backoff()
        clock.advance(5)

        b.reset()

        assert b.elapsed() == 0
        assert b.next_backoff() == 1

    def it_rejects_shrinking_multiplier():
        with pytest.raises(ValueError, match="multiplier"):
            ExponentialBackOff(multiplier=0.5)

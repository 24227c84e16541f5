"""Exponential backoff schedule with an elapsed-time budget."""

import random
import time
from collections.abc import Callable

# Defaults mirror the usual exponential backoff schedule: start at 0.5s,
# grow by 1.5x with +/-50% jitter, cap at 60s, give up after 15 minutes.
DEFAULT_INITIAL_INTERVAL = 0.5
DEFAULT_MULTIPLIER = 1.5
DEFAULT_MAX_INTERVAL = 60.0
DEFAULT_MAX_ELAPSED_TIME = 900.0
DEFAULT_RANDOMIZATION_FACTOR = 0.5


class ExponentialBackOff:
    """Produces growing wait intervals until the elapsed budget is spent.

    ``max_elapsed_time`` of 0 means no budget. The clock starts on
    construction and again on ``reset()``.
    """

    def __init__(
        self,
        initial_interval: float = DEFAULT_INITIAL_INTERVAL,
        multiplier: float = DEFAULT_MULTIPLIER,
        max_interval: float = DEFAULT_MAX_INTERVAL,
        max_elapsed_time: float = DEFAULT_MAX_ELAPSED_TIME,
        randomization_factor: float = DEFAULT_RANDOMIZATION_FACTOR,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ):
        if multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {multiplier}")
        if not 0 <= randomization_factor < 1:
            raise ValueError(f"randomization_factor must be in [0, 1), got {randomization_factor}")
        self.initial_interval = initial_interval
        self.multiplier = multiplier
        self.max_interval = max_interval
        self.max_elapsed_time = max_elapsed_time
        self.randomization_factor = randomization_factor
        self._clock = clock
        self._rng = rng or random.Random()
        self.reset()

    def reset(self) -> None:
        self._current = self.initial_interval
        self._started = self._clock()

    def elapsed(self) -> float:
        """Seconds since the schedule was (re)started."""
        return self._clock() - self._started

    def fits_budget(self, delay: float) -> bool:
        """Whether waiting ``delay`` more seconds stays within the budget."""
        if self.max_elapsed_time <= 0:
            return True
        return self.elapsed() + delay <= self.max_elapsed_time

    def next_backoff(self) -> float | None:
        """Next wait in seconds, or None once the budget is spent."""
        if self.max_elapsed_time > 0 and self.elapsed() > self.max_elapsed_time:
            return None
        interval = self._randomize(self._current)
        if self._current >= self.max_interval / self.multiplier:
            self._current = self.max_interval
        else:
            self._current *= self.multiplier
        return interval

    def _randomize(self, interval: float) -> float:
        if self.randomization_factor == 0:
            return interval
        delta = self.randomization_factor * interval
        return self._rng.uniform(interval - delta, interval + delta)

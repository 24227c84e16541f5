"""Attempt loop driving a request until it succeeds, fails for good, or runs out of time."""

import logging
import threading
import time
from collections.abc import Callable

import httpx

from .backoff import ExponentialBackOff
from .errors import FetchCancelledError, FetchError, RetryExhaustedError
from .outcome import FatalFailure, Outcome, RateLimited, Success, TransientFailure

logger = logging.getLogger(__name__)


def close_response(response: httpx.Response) -> None:
    """Release the connection behind ``response``; failures are only logged."""
    try:
        response.close()
    except (httpx.HTTPError, OSError) as e:
        logger.warning("Error closing response body: %s", e)


def _wait(delay: float, cancel: threading.Event | None) -> None:
    """Sleep for ``delay`` seconds, returning early if ``cancel`` is set."""
    if cancel is None:
        time.sleep(delay)
        return
    if cancel.wait(delay):
        raise FetchCancelledError(f"cancelled while waiting {delay:.2f}s to retry")


def retry(
    attempt: Callable[[], Outcome],
    backoff: ExponentialBackOff,
    *,
    cancel: threading.Event | None = None,
) -> httpx.Response:
    """Call ``attempt`` until it returns ``Success`` and hand back the response.

    ``FatalFailure`` errors are raised straight away. ``RateLimited`` waits
    exactly the server's delay; ``TransientFailure`` waits the next backoff
    interval. Both waits share the backoff's elapsed-time budget: a wait that
    would overrun it raises ``RetryExhaustedError`` instead.
    """
    backoff.reset()
    attempts = 0
    last_error: FetchError | None = None

    while True:
        if cancel is not None and cancel.is_set():
            raise FetchCancelledError(f"cancelled after {attempts} attempts")

        attempts += 1
        outcome = attempt()

        # Cancelled while the request was in flight: its result is discarded
        if cancel is not None and cancel.is_set():
            if isinstance(outcome, Success):
                close_response(outcome.response)
            raise FetchCancelledError(f"cancelled during attempt {attempts}")

        if isinstance(outcome, Success):
            return outcome.response
        elif isinstance(outcome, FatalFailure):
            raise outcome.error
        elif isinstance(outcome, RateLimited):
            last_error = outcome.error
            delay = outcome.delay
        elif isinstance(outcome, TransientFailure):
            last_error = outcome.error
            delay = backoff.next_backoff()
        else:
            raise TypeError(f"unknown outcome: {outcome!r}")

        if delay is None or not backoff.fits_budget(delay):
            raise RetryExhaustedError(last_error, attempts) from last_error

        logger.info("Attempt %d failed (%s), retrying in %.2fs", attempts, last_error, delay)
        _wait(delay, cancel)

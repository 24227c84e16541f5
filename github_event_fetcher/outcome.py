"""Classify the result of one HTTP attempt.

Every attempt ends in exactly one of four outcomes:

- ``Success``: the response can be decoded.
- ``FatalFailure``: retrying cannot help, stop now.
- ``RateLimited``: GitHub told us how long to wait (``Retry-After``).
- ``TransientFailure``: worth another try after the next backoff interval.
"""

import logging
from dataclasses import dataclass

import httpx

from .errors import FetchError, HTTPStatusError, RateLimitedError, TransportError

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = 429


@dataclass(frozen=True)
class Success:
    response: httpx.Response


@dataclass(frozen=True)
class FatalFailure:
    error: FetchError


@dataclass(frozen=True)
class RateLimited:
    delay: float
    error: FetchError


@dataclass(frozen=True)
class TransientFailure:
    error: FetchError


Outcome = Success | FatalFailure | RateLimited | TransientFailure


@dataclass(frozen=True)
class ClassificationPolicy:
    """Which failure classes are retried.

    Server errors and raw transport errors are fatal by default. Either can
    be switched to transient here without touching the retry loop.
    """

    retry_server_errors: bool = False
    retry_transport_errors: bool = False


DEFAULT_POLICY = ClassificationPolicy()


def parse_retry_after(response: httpx.Response) -> int | None:
    """Return ``Retry-After`` as whole seconds, or None if missing/invalid."""
    val = response.headers.get("retry-after")
    if val is None:
        return None
    try:
        seconds = int(val.strip())
    except ValueError:
        return None
    if seconds < 0:
        return None
    return seconds


def classify(response: httpx.Response, policy: ClassificationPolicy = DEFAULT_POLICY) -> Outcome:
    """Map a completed response to an outcome."""
    status = response.status_code

    if status >= 500:
        error = HTTPStatusError(status, response.reason_phrase)
        if policy.retry_server_errors:
            return TransientFailure(error)
        logger.debug("Fatal server error %s for %s", status, response.request.url)
        return FatalFailure(error)

    if status == TOO_MANY_REQUESTS:
        seconds = parse_retry_after(response)
        if seconds is not None:
            return RateLimited(
                delay=float(seconds),
                error=RateLimitedError(f"retry after {seconds}s", retry_after=float(seconds)),
            )
        # No usable hint: fall back to the exponential schedule
        return TransientFailure(RateLimitedError("no valid Retry-After header"))

    if status >= 400:
        logger.debug("Fatal client error %s for %s", status, response.request.url)
        return FatalFailure(HTTPStatusError(status, response.reason_phrase))

    return Success(response)


def classify_transport_error(
    exc: httpx.TransportError, policy: ClassificationPolicy = DEFAULT_POLICY
) -> Outcome:
    """Map a connection-level failure to an outcome."""
    error = TransportError(str(exc) or type(exc).__name__)
    error.__cause__ = exc
    if policy.retry_transport_errors:
        return TransientFailure(error)
    return FatalFailure(error)

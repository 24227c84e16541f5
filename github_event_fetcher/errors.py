"""Errors raised while fetching an event.

Each message starts with a short prefix naming the stage that failed, so the
caller can tell a bad request from a dropped connection or a bad body.
"""


class FetchError(Exception):
    """Base class for all fetch failures."""

    prefix = "fetch error"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class RequestError(FetchError):
    """The request could not be built (e.g. an invalid URL)."""

    prefix = "request error"


class TransportError(FetchError):
    """Connection-level failure: DNS, refused connection, timeout."""

    prefix = "transport error"


class HTTPStatusError(FetchError):
    """GitHub answered with a status that is not worth retrying."""

    def __init__(self, status_code: int, reason: str):
        self.status_code = status_code
        self.reason = reason
        self.prefix = "GitHub API server error" if status_code >= 500 else "GitHub API client error"
        super().__init__(f'"{status_code} {reason}"' if reason else f'"{status_code}"')


class RateLimitedError(FetchError):
    """GitHub asked us to slow down (HTTP 429)."""

    prefix = "rate limited"

    def __init__(self, detail: str, retry_after: float | None = None):
        self.retry_after = retry_after
        super().__init__(detail)


class RetryExhaustedError(FetchError):
    """The retry budget ran out before a final answer."""

    prefix = "retry exhausted"

    def __init__(self, last_error: Exception, attempts: int):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"gave up after {attempts} attempts: {last_error}")


class DecodeError(FetchError):
    """The response body is not a complete, valid event."""

    prefix = "decode response"


class FetchCancelledError(FetchError):
    prefix = "fetch cancelled"

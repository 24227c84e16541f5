"""GitHub event client using httpx with retry and rate-limit handling."""

import threading
from collections.abc import Callable
from functools import partial

import httpx
import pydantic

from .backoff import ExponentialBackOff
from .errors import DecodeError, RequestError
from .models import Event
from .outcome import (
    DEFAULT_POLICY,
    ClassificationPolicy,
    FatalFailure,
    Outcome,
    Success,
    classify,
    classify_transport_error,
)
from .retry import close_response, retry
from .settings import Settings, get_settings

DEFAULT_TIMEOUT = 10.0


class GitHubEventClient:
    """Fetches single GitHub events, retrying transient failures.

    The httpx client is reused across attempts. Pass ``http_client`` to share
    a connection pool; the caller then owns it and must close it.
    """

    def __init__(
        self,
        token: str,
        *,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        backoff_factory: Callable[[], ExponentialBackOff] = ExponentialBackOff,
        policy: ClassificationPolicy = DEFAULT_POLICY,
    ):
        self.token = token
        self.method = "GET"
        self.policy = policy
        self._backoff_factory = backoff_factory
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)
        self._url: str | None = None
        # Guards the set_url() write and its read-back in fetch()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "GitHubEventClient":
        if not settings.github_token:
            raise RuntimeError("GITHUB_TOKEN is not set")
        backoff_factory = partial(
            ExponentialBackOff,
            initial_interval=settings.backoff_initial_interval,
            multiplier=settings.backoff_multiplier,
            max_interval=settings.backoff_max_interval,
            max_elapsed_time=settings.backoff_max_elapsed_time,
        )
        kwargs.setdefault("timeout", settings.http_timeout)
        kwargs.setdefault("backoff_factory", backoff_factory)
        kwargs.setdefault("policy", ClassificationPolicy(retry_server_errors=settings.retry_server_errors))
        return cls(settings.github_token, **kwargs)

    @property
    def url(self) -> str | None:
        return self._url

    def set_url(self, url: str) -> None:
        self._url = url

    def build_request(self, url: str | None = None) -> httpx.Request:
        """Build the GET request for ``url``, or the current URL if not given."""
        url = url if url is not None else self._url
        if url is None:
            raise RequestError("no URL set")
        try:
            request = self._client.build_request(
                self.method,
                url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.InvalidURL as e:
            raise RequestError(str(e)) from e
        if request.url.scheme not in ("http", "https"):
            raise RequestError(f"URL must be http or https: {url!r}")
        return request

    def _attempt(self, url: str) -> Outcome:
        """Make one request and classify it.

        Only a ``Success`` leaves its response open, for decoding.
        """
        try:
            request = self.build_request(url)
        except RequestError as e:
            return FatalFailure(e)

        try:
            response = self._client.send(request, stream=True)
        except httpx.TransportError as e:
            return classify_transport_error(e, self.policy)
        except httpx.HTTPError as e:
            # e.g. TooManyRedirects from a client that follows redirects
            error = RequestError(str(e) or type(e).__name__)
            error.__cause__ = e
            return FatalFailure(error)

        outcome = None
        try:
            outcome = classify(response, self.policy)
            return outcome
        finally:
            if not isinstance(outcome, Success):
                close_response(response)

    def _decode(self, response: httpx.Response) -> Event:
        try:
            body = response.read()
            return Event.model_validate_json(body)
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise DecodeError(f"reading body: {e}") from e
        except pydantic.ValidationError as e:
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
            )
            raise DecodeError(reasons) from e
        finally:
            close_response(response)

    def fetch(self, url: str, *, cancel: threading.Event | None = None) -> Event:
        """Fetch and decode the event at ``url``.

        Args:
            url: Full API URL of the event resource
            cancel: Set this event to abort the fetch

        Returns:
            The decoded Event. Any failure raises a FetchError subclass.
        """
        with self._lock:
            self.set_url(url)
            url = self._url
        response = retry(partial(self._attempt, url), self._backoff_factory(), cancel=cancel)
        return self._decode(response)

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "GitHubEventClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def fetch_event(
    client: GitHubEventClient, url: str, *, cancel: threading.Event | None = None
) -> Event:
    """Fetch a single event from the GitHub API."""
    return client.fetch(url, cancel=cancel)


# Singleton client built from settings
_client: GitHubEventClient | None = None


def get_client() -> GitHubEventClient:
    """Get or create the GitHub event client configured from settings."""
    global _client
    if _client is None:
        _client = GitHubEventClient.from_settings(get_settings())
    return _client

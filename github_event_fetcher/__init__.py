"""Fetch single GitHub activity events.

Retries transient failures on an exponential backoff schedule and honours
``Retry-After`` on rate-limited responses.
"""

from .cli import main
from .client import GitHubEventClient, fetch_event, get_client
from .errors import FetchError
from .models import Event

__all__ = ["main", "GitHubEventClient", "fetch_event", "get_client", "FetchError", "Event"]

if __name__ == "__main__":
    main()

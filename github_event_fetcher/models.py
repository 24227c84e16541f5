"""Data models for GitHub activity events."""

from datetime import datetime

import pydantic


class _Record(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore", frozen=True)


class Actor(_Record):
    """User who triggered the event."""

    id: int
    login: str
    display_login: str
    url: str


class Repo(_Record):
    """Repository the event happened in."""

    id: int
    name: str
    url: str


class Author(_Record):
    email: str
    name: str


class Commit(_Record):
    """A commit in a push event."""

    sha: str
    author: Author
    message: str
    distinct: bool
    url: str


class Payload(_Record):
    """Event-type specific data.

    Every field is optional: a missing field is not applicable to the event
    type, so it is left out again when the event is encoded.
    """

    action: str | None = None
    push_id: int | None = None
    size: int | None = None
    distinct_size: int | None = None
    ref: str | None = None
    head: str | None = None
    before: str | None = None
    commits: list[Commit] | None = None


class Event(_Record):
    """A single GitHub activity event."""

    id: str
    type: str
    actor: Actor
    repo: Repo
    payload: Payload = Payload()
    public: bool
    created_at: datetime

    def to_dict(self) -> dict:
        """JSON-compatible dict, omitting payload fields that were absent."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(indent=indent, exclude_none=True)

"""Pydantic models for the Miniflux REST API."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

# Entry statuses understood by Miniflux
ENTRY_STATUS_UNREAD = "unread"
ENTRY_STATUS_READ = "read"

EntryStatus = Literal["unread", "read", "removed"]

# Listing page size; there is no pagination beyond this
DEFAULT_PAGE_SIZE = 100

# =============================================================================
# User Models
# =============================================================================


class User(BaseModel):
    """Authenticated Miniflux user, returned by /v1/me."""

    id: int
    username: str


# =============================================================================
# Category & Feed Models
# =============================================================================


class Category(BaseModel):
    """Feed category."""

    id: int
    title: str


class Feed(BaseModel):
    """Subscribed feed. Always belongs to one category."""

    id: int
    title: str
    site_url: str = ""
    feed_url: str = ""
    category: Category


# =============================================================================
# Entry Models
# =============================================================================


class Entry(BaseModel):
    """Single article belonging to a feed."""

    id: int
    feed_id: int
    title: str
    url: str = ""
    content: str = ""
    author: str = ""
    status: EntryStatus = ENTRY_STATUS_UNREAD
    published_at: datetime
    feed: Feed | None = None


class EntryResultSet(BaseModel):
    """Response from the entries endpoints.

    ``total`` is the number of matching entries upstream, which can be larger
    than ``len(entries)`` when the filter caps the page.
    """

    total: int
    entries: list[Entry] = Field(default_factory=list)


class EntryFilter(BaseModel):
    """Query filter for the entries endpoints."""

    status: EntryStatus | None = None
    limit: int | None = None
    order: str | None = None
    direction: Literal["asc", "desc"] | None = None

    @classmethod
    def unread(cls, limit: int = DEFAULT_PAGE_SIZE) -> "EntryFilter":
        """Unread entries, newest first, capped at one page."""
        return cls(
            status=ENTRY_STATUS_UNREAD,
            limit=limit,
            order="published_at",
            direction="desc",
        )

    def to_params(self) -> dict[str, str | int]:
        """Convert to query parameters, omitting unset fields."""
        return {key: value for key, value in self.model_dump().items() if value is not None}

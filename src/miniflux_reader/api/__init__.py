"""Miniflux API client and data models."""

from miniflux_reader.api.client import MinifluxClient
from miniflux_reader.api.models import (
    ENTRY_STATUS_READ,
    ENTRY_STATUS_UNREAD,
    Category,
    Entry,
    EntryFilter,
    EntryResultSet,
    Feed,
    User,
)

__all__ = [
    "ENTRY_STATUS_READ",
    "ENTRY_STATUS_UNREAD",
    "Category",
    "Entry",
    "EntryFilter",
    "EntryResultSet",
    "Feed",
    "MinifluxClient",
    "User",
]

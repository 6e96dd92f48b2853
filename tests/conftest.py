"""Shared fixtures: an in-memory Miniflux client and a test app."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from miniflux_reader.api.models import (
    Category,
    Entry,
    EntryFilter,
    EntryResultSet,
    Feed,
    User,
)
from miniflux_reader.config import clear_settings_cache
from miniflux_reader.exceptions import APIError, NotFoundError
from miniflux_reader.server import create_app

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def make_categories() -> list[Category]:
    return [
        Category(id=1, title="Tech"),
        Category(id=2, title="News"),
        Category(id=3, title="Empty"),
    ]


def make_feeds() -> list[Feed]:
    tech, news = Category(id=1, title="Tech"), Category(id=2, title="News")
    return [
        Feed(id=7, title="Hacker News", site_url="https://news.ycombinator.com", category=tech),
        Feed(id=8, title="LWN", site_url="https://lwn.net", category=tech),
        Feed(id=9, title="BBC", site_url="https://bbc.co.uk", category=news),
    ]


def make_entries() -> list[Entry]:
    feeds = {feed.id: feed for feed in make_feeds()}
    return [
        Entry(
            id=123,
            feed_id=7,
            title="Newest story",
            url="https://example.com/newest",
            content="<p>Newest <b>body</b></p>",
            author="alice",
            published_at=NOW - timedelta(minutes=5),
            feed=feeds[7],
        ),
        Entry(
            id=122,
            feed_id=9,
            title="Older story",
            url="https://example.com/older",
            content="<p>Older body</p>",
            published_at=NOW - timedelta(days=2),
            feed=feeds[9],
        ),
    ]


class FakeMinifluxClient:
    """In-memory stand-in for MinifluxClient that records every call."""

    def __init__(self, total: int = 250) -> None:
        self.categories = make_categories()
        self.feeds = make_feeds()
        self.entries = make_entries()
        self.total = total
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise APIError(f"{name} exploded", 502)

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def me(self) -> User:
        self._record("me")
        return User(id=1, username="reader")

    async def get_categories(self) -> list[Category]:
        self._record("get_categories")
        return self.categories

    async def get_feeds(self) -> list[Feed]:
        self._record("get_feeds")
        return self.feeds

    def _page(self) -> EntryResultSet:
        return EntryResultSet(total=self.total, entries=self.entries)

    async def get_entries(self, entry_filter: EntryFilter | None = None) -> EntryResultSet:
        self._record("get_entries", entry_filter)
        return self._page()

    async def get_feed_entries(
        self, feed_id: int, entry_filter: EntryFilter | None = None
    ) -> EntryResultSet:
        self._record("get_feed_entries", feed_id, entry_filter)
        return self._page()

    async def get_category_entries(
        self, category_id: int, entry_filter: EntryFilter | None = None
    ) -> EntryResultSet:
        self._record("get_category_entries", category_id, entry_filter)
        return self._page()

    async def get_entry(self, entry_id: int) -> Entry:
        self._record("get_entry", entry_id)
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise NotFoundError("entry", entry_id)

    async def update_entries(self, entry_ids: list[int], status: str = "read") -> None:
        self._record("update_entries", list(entry_ids), status)


@pytest.fixture(autouse=True)
def _clear_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def fake_client() -> FakeMinifluxClient:
    return FakeMinifluxClient()


@pytest.fixture
def app(fake_client):
    return create_app(client=fake_client)


@pytest.fixture
def http(app) -> TestClient:
    return TestClient(app, follow_redirects=False)

"""Miniflux REST API client."""

import logging
from types import TracebackType
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from miniflux_reader.api.models import (
    ENTRY_STATUS_READ,
    Category,
    Entry,
    EntryFilter,
    EntryResultSet,
    EntryStatus,
    Feed,
    User,
)
from miniflux_reader.exceptions import APIError, AuthenticationError, NotFoundError

logger = logging.getLogger(__name__)

AUTH_HEADER = "X-Auth-Token"

T = TypeVar("T")

_USER = TypeAdapter(User)
_CATEGORIES = TypeAdapter(list[Category])
_FEEDS = TypeAdapter(list[Feed])
_ENTRY = TypeAdapter(Entry)
_ENTRY_PAGE = TypeAdapter(EntryResultSet)


class MinifluxClient:
    """Async client for the Miniflux v1 REST API."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Miniflux client.

        Args:
            api_url: Base URL of the Miniflux instance (e.g., https://reader.example.com)
            api_key: Miniflux API key
            timeout: Request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        api_url = api_url.rstrip("/")
        if api_url.endswith("/v1"):
            api_url = api_url[: -len("/v1")]
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "MinifluxClient":
        """Async context manager entry."""
        self._get_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client, creating if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.api_url}/v1",
                timeout=self.timeout,
                headers={AUTH_HEADER: self.api_key, "Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str | int] | None = None,
        json: dict[str, Any] | None = None,
        resource: str | None = None,
        resource_id: int | None = None,
    ) -> httpx.Response:
        """Send a request and map failures onto the exception hierarchy.

        Raises:
            AuthenticationError: On 401/403.
            NotFoundError: On 404.
            APIError: On any other non-2xx status or a transport failure.
        """
        client = self._get_client()

        try:
            response = await client.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                raise AuthenticationError(f"Authentication failed: {status}") from e
            if status == 404:
                raise NotFoundError(resource or "resource", resource_id) from e
            raise APIError(
                f"{method} {path} failed: {status}{_error_message(e.response)}", status
            ) from e
        except httpx.RequestError as e:
            raise APIError(f"{method} {path} request failed: {e}") from e

        return response

    # =========================================================================
    # User
    # =========================================================================

    async def me(self) -> User:
        """Get the user the API key belongs to.

        Used as a connectivity and credentials check at startup.

        Raises:
            AuthenticationError: If the API key is rejected.
            APIError: If the request fails.
        """
        response = await self._request("GET", "/me")
        return _parse(response, _USER)

    # =========================================================================
    # Categories & Feeds
    # =========================================================================

    async def get_categories(self) -> list[Category]:
        """Get all categories.

        Raises:
            APIError: If request fails.
        """
        response = await self._request("GET", "/categories")
        return _parse(response, _CATEGORIES)

    async def get_feeds(self) -> list[Feed]:
        """Get all subscribed feeds.

        Raises:
            APIError: If request fails.
        """
        response = await self._request("GET", "/feeds")
        return _parse(response, _FEEDS)

    # =========================================================================
    # Entries
    # =========================================================================

    async def get_entries(self, entry_filter: EntryFilter | None = None) -> EntryResultSet:
        """Get entries across all feeds.

        Args:
            entry_filter: Status/limit/order filter

        Returns:
            EntryResultSet with the upstream total and the returned page.

        Raises:
            APIError: If request fails.
        """
        return await self._get_entry_page("/entries", entry_filter)

    async def get_feed_entries(
        self, feed_id: int, entry_filter: EntryFilter | None = None
    ) -> EntryResultSet:
        """Get entries of a single feed.

        Raises:
            NotFoundError: If the feed does not exist.
            APIError: If request fails.
        """
        return await self._get_entry_page(
            f"/feeds/{feed_id}/entries", entry_filter, resource="feed", resource_id=feed_id
        )

    async def get_category_entries(
        self, category_id: int, entry_filter: EntryFilter | None = None
    ) -> EntryResultSet:
        """Get entries of every feed in a category.

        Raises:
            NotFoundError: If the category does not exist.
            APIError: If request fails.
        """
        return await self._get_entry_page(
            f"/categories/{category_id}/entries",
            entry_filter,
            resource="category",
            resource_id=category_id,
        )

    async def _get_entry_page(
        self,
        path: str,
        entry_filter: EntryFilter | None,
        resource: str | None = None,
        resource_id: int | None = None,
    ) -> EntryResultSet:
        params = entry_filter.to_params() if entry_filter else None
        response = await self._request(
            "GET", path, params=params, resource=resource, resource_id=resource_id
        )
        return _parse(response, _ENTRY_PAGE)

    async def get_entry(self, entry_id: int) -> Entry:
        """Get a single entry.

        Args:
            entry_id: Entry identifier

        Raises:
            NotFoundError: If the entry does not exist.
            APIError: If request fails.
        """
        response = await self._request(
            "GET", f"/entries/{entry_id}", resource="entry", resource_id=entry_id
        )
        return _parse(response, _ENTRY)

    # =========================================================================
    # State Management
    # =========================================================================

    async def update_entries(
        self, entry_ids: list[int], status: EntryStatus = ENTRY_STATUS_READ
    ) -> None:
        """Change the status of entries.

        Args:
            entry_ids: Entries to update
            status: New status ("read", "unread" or "removed")

        Raises:
            APIError: If request fails.
        """
        if not entry_ids:
            return

        await self._request(
            "PUT",
            "/entries",
            json={"entry_ids": list(entry_ids), "status": status},
        )
        logger.debug("Set %d entries to %s", len(entry_ids), status)


def _parse(response: httpx.Response, adapter: TypeAdapter[T]) -> T:
    """Decode and validate a successful response body.

    Raises:
        APIError: If the body is not JSON or does not match the expected shape,
            e.g. a login page served by a proxy in front of Miniflux.
    """
    try:
        return adapter.validate_json(response.content)
    except ValidationError as e:
        request = response.request
        raise APIError(
            f"{request.method} {request.url.path}: invalid response ({e.error_count()} errors)",
            response.status_code,
        ) from e


def _error_message(response: httpx.Response) -> str:
    """Extract Miniflux's error_message from an error response, if any."""
    try:
        data = response.json()
    except ValueError:
        return ""
    if isinstance(data, dict) and data.get("error_message"):
        return f" ({data['error_message']})"
    return ""

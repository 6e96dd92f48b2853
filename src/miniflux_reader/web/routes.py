"""HTTP routes of the reader.

Each request runs a fixed fetch-then-render sequence against the Miniflux
client. Nothing is cached between requests.
"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Cookie, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from miniflux_reader.api.client import MinifluxClient
from miniflux_reader.api.models import (
    ENTRY_STATUS_READ,
    Category,
    EntryFilter,
    EntryResultSet,
    Feed,
)
from miniflux_reader.exceptions import MinifluxError
from miniflux_reader.web.templating import INDEX_TEMPLATE
from miniflux_reader.web.view_state import (
    PageData,
    ViewState,
    get_density,
    parse_id,
    parse_id_lenient,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_client(request: Request) -> MinifluxClient:
    """Dependency returning the shared Miniflux client."""
    return request.app.state.client


def get_templates(request: Request) -> Jinja2Templates:
    """Dependency returning the shared template set."""
    return request.app.state.templates


def _parse_or_400(value: str | None, what: str) -> int:
    try:
        return parse_id(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {what} ID") from None


def _parse_entry_id(value: str) -> int:
    # The path segment is mandatory, unlike the optional filters
    if value == "":
        raise HTTPException(status_code=400, detail="Invalid entry ID")
    return _parse_or_400(value, "entry")


async def load_listing(
    client: MinifluxClient, category_id: int, feed_id: int
) -> tuple[list[Category], list[Feed], EntryResultSet]:
    """Fetch navigation data and the unread entry page for the current filter.

    Raises:
        HTTPException: 500 if any upstream call fails.
    """
    try:
        categories = await client.get_categories()
    except MinifluxError as e:
        logger.error("Error fetching categories: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch categories") from e

    try:
        feeds = await client.get_feeds()
    except MinifluxError as e:
        logger.error("Error fetching feeds: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch feeds") from e

    entry_filter = EntryFilter.unread()
    try:
        if feed_id > 0:
            result = await client.get_feed_entries(feed_id, entry_filter)
        elif category_id > 0:
            result = await client.get_category_entries(category_id, entry_filter)
        else:
            result = await client.get_entries(entry_filter)
    except MinifluxError as e:
        logger.error("Error fetching entries: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch entries") from e

    return categories, feeds, result


def render_page(request: Request, templates: Jinja2Templates, page: PageData) -> Response:
    """Render the index template, mapping template failures to a 500."""
    try:
        return templates.TemplateResponse(request, INDEX_TEMPLATE, page.template_context())
    except TemplateError as e:
        logger.error("Error rendering template: %s", e)
        raise HTTPException(status_code=500, detail="Failed to render template") from e


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    category: str | None = Query(default=None),
    feed: str | None = Query(default=None),
    density: str | None = Cookie(default=None),
    client: MinifluxClient = Depends(get_client),
    templates: Jinja2Templates = Depends(get_templates),
) -> Response:
    """List unread entries, optionally filtered by feed or category."""
    category_id = _parse_or_400(category, "category")
    feed_id = _parse_or_400(feed, "feed")

    categories, feeds, result = await load_listing(client, category_id, feed_id)

    page = PageData(
        categories=categories,
        feeds=feeds,
        entries=result.entries,
        entries_count=result.total,
        density=get_density(density),
        view=ViewState.build(categories, feeds, category_id=category_id, feed_id=feed_id),
    )
    return render_page(request, templates, page)


@router.get("/entry/{entry_id:path}", response_class=HTMLResponse)
async def entry_detail(
    request: Request,
    entry_id: str,
    category: str | None = Query(default=None),
    feed: str | None = Query(default=None),
    density: str | None = Cookie(default=None),
    client: MinifluxClient = Depends(get_client),
    templates: Jinja2Templates = Depends(get_templates),
) -> Response:
    """Show one entry in the reading pane next to the current listing."""
    parsed_entry_id = _parse_entry_id(entry_id)

    # Filters only carry the listing context here, so bad values are dropped
    category_id = parse_id_lenient(category)
    feed_id = parse_id_lenient(feed)

    categories, feeds, result = await load_listing(client, category_id, feed_id)

    try:
        entry = await client.get_entry(parsed_entry_id)
    except MinifluxError as e:
        logger.error("Error fetching entry %d: %s", parsed_entry_id, e)
        raise HTTPException(status_code=500, detail="Failed to fetch entry") from e

    page = PageData(
        categories=categories,
        feeds=feeds,
        entries=result.entries,
        entries_count=result.total,
        selected_entry=entry,
        density=get_density(density),
        view=ViewState.build(categories, feeds, category_id=category_id, feed_id=feed_id),
    )
    return render_page(request, templates, page)


@router.post("/mark-read/{entry_id:path}")
async def mark_read(
    request: Request,
    entry_id: str,
    client: MinifluxClient = Depends(get_client),
) -> RedirectResponse:
    """Mark one entry read and go back to the listing it came from."""
    parsed_entry_id = _parse_entry_id(entry_id)

    try:
        await client.update_entries([parsed_entry_id], ENTRY_STATUS_READ)
    except MinifluxError as e:
        logger.error("Error marking entry %d as read: %s", parsed_entry_id, e)
        raise HTTPException(status_code=500, detail="Failed to mark entry as read") from e

    return RedirectResponse(url=listing_url(request), status_code=303)


def listing_url(request: Request) -> str:
    """URL of the listing, keeping the feed or category filter if present."""
    feed = request.query_params.get("feed")
    category = request.query_params.get("category")

    if feed:
        return "/?" + urlencode({"feed": feed})
    if category:
        return "/?" + urlencode({"category": category})
    return "/"

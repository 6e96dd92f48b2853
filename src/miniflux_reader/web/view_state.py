"""Request-scoped view state for the reader page.

Nothing here is persisted: the selection, the navigation title and the set of
expanded categories are derived again from the query string on every request.
"""

import re

from pydantic import BaseModel, Field

from miniflux_reader.api.models import Category, Entry, Feed

ALL_ITEMS_TITLE = "All Items"
DEFAULT_DENSITY = "1"

_DECIMAL_ID = re.compile(r"[+-]?[0-9]+")

# Ids are signed 64-bit integers upstream
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1


def parse_id(value: str | None) -> int:
    """Parse an optional decimal identifier.

    Args:
        value: Raw query or path value

    Returns:
        The parsed integer, or 0 when ``value`` is missing or empty.

    Raises:
        ValueError: If ``value`` is not a decimal integer or does not fit
            in a signed 64-bit integer.
    """
    if value is None or value == "":
        return 0
    if not _DECIMAL_ID.fullmatch(value):
        raise ValueError(f"not a decimal integer: {value!r}")
    parsed = int(value)
    if not MIN_ID <= parsed <= MAX_ID:
        raise ValueError(f"id out of range: {value!r}")
    return parsed


def parse_id_lenient(value: str | None) -> int:
    """Like :func:`parse_id`, but returns 0 for malformed values."""
    try:
        return parse_id(value)
    except ValueError:
        return 0


def get_density(cookie_value: str | None) -> str:
    """Display density from the ``density`` cookie; ``"1"`` when unset."""
    if not cookie_value:
        return DEFAULT_DENSITY
    return cookie_value


class ViewState(BaseModel):
    """Derived selection and navigation state for one request."""

    selected_category_id: int = 0
    selected_feed_id: int = 0
    active_title: str = ALL_ITEMS_TITLE
    open_categories: set[int] = Field(default_factory=set)

    @classmethod
    def build(
        cls,
        categories: list[Category],
        feeds: list[Feed],
        category_id: int = 0,
        feed_id: int = 0,
    ) -> "ViewState":
        """Work out the active title and expanded categories.

        A feed filter wins over a category filter. Ids that match nothing
        keep the "All Items" title and expand nothing.
        """
        state = cls(selected_category_id=category_id, selected_feed_id=feed_id)

        if feed_id > 0:
            for feed in feeds:
                if feed.id == feed_id:
                    state.active_title = feed.title
                    state.open_categories.add(feed.category.id)
                    break
        elif category_id > 0:
            for category in categories:
                if category.id == category_id:
                    state.active_title = category.title
                    state.open_categories.add(category_id)
                    break
        else:
            state.open_categories.update(category.id for category in categories)

        return state


class PageData(BaseModel):
    """Everything the index template renders."""

    categories: list[Category]
    feeds: list[Feed]
    entries: list[Entry]
    entries_count: int
    selected_entry: Entry | None = None
    density: str = DEFAULT_DENSITY
    view: ViewState

    def template_context(self) -> dict[str, object]:
        """Flatten into a template context, keeping model instances intact."""
        context: dict[str, object] = dict(self)
        del context["view"]
        context.update(dict(self.view))
        return context

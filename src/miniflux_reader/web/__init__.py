"""Web layer: routes, templates and per-request view state."""

from miniflux_reader.web.routes import router
from miniflux_reader.web.templating import create_templates, format_date
from miniflux_reader.web.view_state import PageData, ViewState, get_density, parse_id

__all__ = [
    "PageData",
    "ViewState",
    "create_templates",
    "format_date",
    "get_density",
    "parse_id",
    "router",
]

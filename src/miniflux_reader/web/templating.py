"""Jinja2 template set and filters."""

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from miniflux_reader.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
INDEX_TEMPLATE = "index.html"


def _ago(count: int, unit: str) -> str:
    if count == 1:
        return f"1 {unit} ago"
    return f"{count} {unit}s ago"


def format_date(value: datetime, now: datetime | None = None) -> str:
    """Format a timestamp relative to now.

    Recent times read as "5 minutes ago", "3 hours ago" or "2 days ago";
    anything a week or older is shown as a date, e.g. "Jan 2, 2006".

    Args:
        value: Timestamp to format
        now: Reference time, defaults to the current time

    Returns:
        Human readable string.
    """
    if now is None:
        now = datetime.now(UTC) if value.tzinfo else datetime.now()
    diff = now - value

    if diff < timedelta(minutes=1):
        return "Just now"
    if diff < timedelta(hours=1):
        return _ago(int(diff.total_seconds() // 60), "minute")
    if diff < timedelta(days=1):
        return _ago(int(diff.total_seconds() // 3600), "hour")
    if diff < timedelta(days=7):
        return _ago(diff.days, "day")
    return f"{value:%b} {value.day}, {value.year}"


def create_templates(directory: str | Path | None = None) -> Jinja2Templates:
    """Build the template set and load the page template up front.

    Args:
        directory: Template directory, defaults to the bundled templates

    Returns:
        Configured Jinja2Templates instance.

    Raises:
        ConfigurationError: If the page template is missing or fails to parse.
    """
    directory = Path(directory) if directory else TEMPLATES_DIR
    templates = Jinja2Templates(directory=str(directory))
    templates.env.filters["format_date"] = format_date

    try:
        templates.get_template(INDEX_TEMPLATE)
    except TemplateError as e:
        raise ConfigurationError(f"Failed to parse templates in {directory}: {e}") from e

    logger.debug("Loaded templates from %s", directory)
    return templates

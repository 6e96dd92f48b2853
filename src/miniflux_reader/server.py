"""Miniflux Reader - Main entry point."""

import argparse
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from miniflux_reader import __version__
from miniflux_reader.api.client import MinifluxClient
from miniflux_reader.config import Settings, get_settings
from miniflux_reader.exceptions import ConfigurationError, MinifluxError
from miniflux_reader.web.routes import router
from miniflux_reader.web.templating import create_templates

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("miniflux-reader")

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the Miniflux client and verify connectivity before serving.

    A client injected through :func:`create_app` is used as-is and left open.
    """
    owned: MinifluxClient | None = None

    if app.state.client is None:
        settings = app.state.settings or get_settings()
        owned = MinifluxClient(
            api_url=settings.miniflux_api_url,
            api_key=settings.miniflux_api_key,
            timeout=settings.request_timeout,
        )
        try:
            user = await owned.me()
        except MinifluxError as e:
            await owned.close()
            logger.error("Failed to connect to Miniflux API: %s", e)
            logger.error("API URL: %s", settings.miniflux_api_url)
            raise ConfigurationError(
                "Please verify your MINIFLUX_API_URL and MINIFLUX_API_KEY"
            ) from e

        logger.info("Successfully connected to Miniflux API as %s", user.username)
        app.state.client = owned

    yield

    if owned is not None:
        await owned.close()
        app.state.client = None


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """Render HTTP errors as short plain-text messages."""
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def create_app(
    settings: Settings | None = None,
    client: MinifluxClient | None = None,
    templates_dir: str | Path | None = None,
) -> FastAPI:
    """Create and configure the web application.

    Args:
        settings: Settings to build the client from; read from the environment
            at startup when omitted
        client: Pre-built client, skips client creation and the connectivity check
        templates_dir: Template directory, defaults to the bundled templates

    Returns:
        Configured FastAPI application.

    Raises:
        ConfigurationError: If the templates fail to parse.
    """
    app = FastAPI(
        title="Miniflux Reader",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.client = client
    app.state.templates = create_templates(templates_dir)

    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(router)

    return app


# =============================================================================
# Entry Point
# =============================================================================


def parse_args(settings: Settings, argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    CLI arguments override environment variable settings.
    """
    parser = argparse.ArgumentParser(
        description="Miniflux Reader - A minimal web front-end for Miniflux",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"miniflux-reader {__version__}",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind HTTP server (default: {settings.host}, env: HOST)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port for HTTP server (default: {settings.port}, env: PORT)",
    )
    return parser.parse_args(argv)


def main() -> None:
    """Run the Miniflux Reader web server."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error("Invalid configuration: %s", e)
        logger.error("MINIFLUX_API_URL and MINIFLUX_API_KEY environment variables must be set")
        sys.exit(1)

    args = parse_args(settings)
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info("Starting Miniflux Reader v%s", __version__)
    app = create_app(settings=settings)

    logger.info("Server starting on http://%s:%d", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

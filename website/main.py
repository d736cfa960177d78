"""FastAPI application entry point."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from website.api.pages import router as pages_router
from website.config import Settings
from website.exceptions import ConfigurationError
from website.filesystem.config_store import ConfigProvider, FileConfigStore
from website.rendering.renderer import RenderError, TemplateRenderer
from website.services.alert_service import NotFoundNotifier

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool, log_file: Path | None = None) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=handlers,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosmtplib").setLevel(logging.INFO if debug else logging.WARNING)


def check_site(
    settings: Settings, config_provider: ConfigProvider, renderer: TemplateRenderer
) -> None:
    """Validate the site before serving any request.

    Raises:
        ConfigurationError: If the configuration does not load, or the
            template directory or not-found template is missing.
    """
    config = config_provider.current()
    logger.info("Loaded %d top-level pages from %s", len(config.pages), settings.config_path)

    templates_path = settings.templates_path
    if not templates_path.is_dir():
        msg = f"Template directory does not exist: {templates_path}"
        raise ConfigurationError(msg)
    if not renderer.has_template(settings.not_found_template):
        msg = f"Not-found template {settings.not_found_template!r} missing from {templates_path}"
        raise ConfigurationError(msg)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan: startup checks."""
    settings: Settings = app.state.settings
    _configure_logging(settings.debug, settings.log_file)
    logger.info("Starting %s (debug=%s, base=%s)", settings.name, settings.debug, settings.base_dir)

    try:
        check_site(settings, app.state.config_provider, app.state.renderer)
    except ConfigurationError as exc:
        logger.critical("Invalid site configuration: %s", exc)
        raise

    yield

    logger.info("%s stopped", settings.name)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title=settings.name,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.config_provider = FileConfigStore(config_path=settings.config_path)
    app.state.renderer = TemplateRenderer(settings.templates_path)
    app.state.notifier = NotFoundNotifier.from_settings(settings)

    app.include_router(pages_router)

    # Global exception handlers

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> PlainTextResponse:
        logger.error(
            "ConfigurationError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
        return PlainTextResponse("Internal server error", status_code=500)

    @app.exception_handler(RenderError)
    async def render_error_handler(request: Request, exc: RenderError) -> PlainTextResponse:
        logger.error(
            "RenderError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
        return PlainTextResponse("Internal server error", status_code=500)

    @app.exception_handler(OSError)
    async def os_error_handler(request: Request, exc: OSError) -> PlainTextResponse:
        if isinstance(exc, (ConnectionError, TimeoutError)):
            raise exc
        logger.error("OSError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return PlainTextResponse("Internal server error", status_code=500)

    return app


app = create_app()


def cli_entry() -> None:
    """CLI entry point for running the server in the foreground."""
    import uvicorn

    settings: Settings = app.state.settings
    if settings.socket_path is not None:
        uvicorn.run("website.main:app", uds=str(settings.socket_path), workers=settings.workers)
    else:
        uvicorn.run(
            "website.main:app",
            host=settings.host,
            port=settings.port,
            reload=settings.debug,
        )

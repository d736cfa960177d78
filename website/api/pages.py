"""Page endpoints: the sitemap and the catch-all page route."""

from __future__ import annotations

import dataclasses
import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import HTMLResponse, Response

from website.api.deps import get_config_provider, get_notifier, get_renderer, get_settings
from website.config import Settings
from website.filesystem.config_store import ConfigProvider
from website.rendering.renderer import TemplateRenderer
from website.services.alert_service import NotFoundNotifier
from website.services.resolver import resolve
from website.services.response_service import (
    RequestContext,
    StatusClass,
    assemble,
    find_content_template,
)
from website.services.sitemap_service import build_sitemap, render_sitemap_xml

logger = logging.getLogger(__name__)

SITEMAP_PATH = "/sitemap.xml"

router = APIRouter(tags=["pages"])


def _base_url(request: Request, settings: Settings) -> str:
    if settings.site_url:
        return settings.site_url
    return f"{request.url.scheme}://{request.url.netloc}"


@router.api_route(SITEMAP_PATH, methods=["GET", "HEAD"])
def sitemap(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    config_provider: Annotated[ConfigProvider, Depends(get_config_provider)],
) -> Response:
    """Sitemap of every configured page."""
    config = config_provider.current()
    urls = build_sitemap(config.pages, _base_url(request, settings))
    return Response(
        content=render_sitemap_xml(urls),
        media_type="application/xml; charset=utf-8",
    )


@router.api_route("/{full_path:path}", methods=["GET", "HEAD"], response_class=HTMLResponse)
def page(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Annotated[Settings, Depends(get_settings)],
    config_provider: Annotated[ConfigProvider, Depends(get_config_provider)],
    renderer: Annotated[TemplateRenderer, Depends(get_renderer)],
    notifier: Annotated[NotFoundNotifier, Depends(get_notifier)],
) -> HTMLResponse:
    """Render the configured page for the request path, or the not-found page."""
    # request.url.path is re-split at a decoded "?" or "#"; the scope path is not.
    request_context = RequestContext(path=request.scope["path"], request=request)
    logger.debug("Requested path: %s", request_context.path)

    config = config_provider.current()

    def schedule_alert(ctx: RequestContext) -> None:
        background_tasks.add_task(notifier.notify, config, ctx)

    render_context, status = assemble(
        resolve(config.pages, request_context.path),
        request_context,
        config,
        not_found_template=settings.not_found_template,
        on_not_found=schedule_alert,
    )
    if status is StatusClass.SUCCESS:
        content = find_content_template(
            renderer, request_context.path, settings.content_template_suffix
        )
        render_context = dataclasses.replace(render_context, content=content)

    body = renderer.render(
        render_context.page.template,
        render_context.as_template_vars(
            website={
                "name": settings.name,
                "debug": settings.debug,
                "base": str(settings.base_dir),
                "templates": str(settings.templates_path),
            }
        ),
    )
    logger.debug("Took %.5f seconds", request_context.elapsed())
    return HTMLResponse(content=body, status_code=int(status))

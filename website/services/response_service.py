"""Response assembly: turn a resolved route into a render context and status."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from website.schemas.site import PageNode
from website.services.resolver import Found

if TYPE_CHECKING:
    from collections.abc import Callable

    from starlette.requests import Request

    from website.rendering.renderer import TemplateRenderer
    from website.schemas.site import SiteConfig
    from website.services.resolver import ResolvedRoute

logger = logging.getLogger(__name__)


class StatusClass(IntEnum):
    """The two terminal outcomes of a page request."""

    SUCCESS = 200
    NOT_FOUND = 404


@dataclass(frozen=True)
class RequestContext:
    """Per-request metadata made available to templates."""

    path: str
    request: Request | None = None
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    started: float = field(default_factory=time.perf_counter)

    def elapsed(self) -> float:
        """Seconds since the request started."""
        return time.perf_counter() - self.started


@dataclass(frozen=True)
class RenderContext:
    """Everything a page template is rendered with."""

    page: PageNode
    parents: tuple[PageNode, ...]
    config: SiteConfig
    request_context: RequestContext
    content: str | None = None

    def as_template_vars(self, **extra: Any) -> dict[str, Any]:
        ctx = self.request_context
        return {
            "page": self.page,
            "parents": list(self.parents),
            "config": self.config,
            "req": ctx.request,
            "path": ctx.path,
            "now": ctx.now,
            "started": ctx.started,
            "took": ctx.elapsed,
            "content": self.content,
            **extra,
        }


def assemble(
    route: ResolvedRoute,
    request_context: RequestContext,
    config: SiteConfig,
    *,
    not_found_template: str,
    on_not_found: Callable[[RequestContext], None] | None = None,
) -> tuple[RenderContext, StatusClass]:
    """Build the render context for ``route`` and classify the response.

    An unmatched route renders a synthetic page using ``not_found_template``
    and invokes ``on_not_found`` once.
    """
    if isinstance(route, Found):
        logger.debug("Matching page found in config: %s", route.page.path)
        context = RenderContext(
            page=route.page,
            parents=route.ancestors,
            config=config,
            request_context=request_context,
        )
        return context, StatusClass.SUCCESS

    logger.info("No page configured for %s", request_context.path)
    page = PageNode(path=request_context.path, template=not_found_template)
    if on_not_found is not None:
        on_not_found(request_context)
    context = RenderContext(
        page=page,
        parents=(),
        config=config,
        request_context=request_context,
    )
    return context, StatusClass.NOT_FOUND


def content_template_candidates(path: str, suffix: str) -> list[str]:
    """Template names tried, in order, for a page's optional content block."""
    index_dir = path if path.endswith("/") else f"{path}/"
    return [f"content{path}{suffix}", f"content{index_dir}index{suffix}"]


def find_content_template(renderer: TemplateRenderer, path: str, suffix: str) -> str | None:
    """First existing content template for ``path``, or ``None``."""
    for name in content_template_candidates(path, suffix):
        logger.debug("Trying content template: %s", name)
        if renderer.has_template(name):
            return name
    logger.debug("No content template for %s", path)
    return None

"""Sitemap generation from the page tree."""

from __future__ import annotations

from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from website.services.resolver import walk_tree

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from website.schemas.site import PageNode

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
_SCHEMA_LOCATION = f"{SITEMAP_NAMESPACE} {SITEMAP_NAMESPACE}/sitemap.xsd"


def build_sitemap(tree: Sequence[PageNode], base_url: str) -> list[str]:
    """Absolute URLs for every page, in the same order pages are resolved."""
    base = base_url.rstrip("/")
    return [f"{base}{node.path}" for node, _ancestors in walk_tree(tree)]


def render_sitemap_xml(urls: Iterable[str]) -> str:
    """Render a sitemap 0.9 ``urlset`` document."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        f'xsi:schemaLocation="{_SCHEMA_LOCATION}">',
    ]
    lines.extend(f"<url><loc>{escape(url)}</loc></url>" for url in urls)
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"

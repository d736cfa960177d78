"""Shared test fixtures for the website server."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient

from website.config import Settings
from website.main import check_site, create_app

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

    from fastapi import FastAPI

SITE_CONFIG: dict[str, Any] = {
    "title": "Test Site",
    "pages": [
        {"path": "/", "template": "index.html", "label": "Home"},
        {
            "path": "/about",
            "template": "about.html",
            "label": "About",
            "pages": [
                {"path": "/about/team", "template": "team.html", "label": "Team"},
            ],
        },
    ],
}

TEMPLATES: dict[str, str] = {
    "404.html": "not found: {{ page.path }} ({{ config.title }})",
    "index.html": "home: {{ page.label }}",
    "about.html": "about: {{ page.label }}{% if content %} [{% include content %}]{% endif %}",
    "team.html": (
        "team: {% for parent in parents %}{{ parent.label }} &gt; {% endfor %}{{ page.label }}"
    ),
    "content/about.html": "about content",
}


def write_site(base_dir: Path, config: dict[str, Any], templates: dict[str, str]) -> None:
    """Write a site configuration and its templates under ``base_dir``."""
    (base_dir / "website.json").write_text(json.dumps(config), encoding="utf-8")
    templates_dir = base_dir / "templates"
    for name, source in templates.items():
        target = templates_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf-8")


@asynccontextmanager
async def create_test_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an HTTP test client for ``app``.

    Runs the startup checks of the application lifespan manually because
    ASGITransport does not trigger it.
    """
    check_site(app.state.settings, app.state.config_provider, app.state.renderer)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create a temporary site with the default page tree and templates."""
    base = tmp_path / "site"
    base.mkdir()
    write_site(base, SITE_CONFIG, TEMPLATES)
    return base


@pytest.fixture
def test_settings(site_dir: Path) -> Settings:
    """Create test settings pointing at the temporary site."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        base_dir=site_dir,
        debug=True,
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with create_test_client(app) as ac:
        yield ac

"""Shared API dependencies: settings, configuration provider, renderer, notifier."""

from __future__ import annotations

from fastapi import Request

from website.config import Settings
from website.filesystem.config_store import ConfigProvider
from website.rendering.renderer import TemplateRenderer
from website.services.alert_service import NotFoundNotifier


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_config_provider(request: Request) -> ConfigProvider:
    """Get the per-request configuration provider from app state."""
    provider: ConfigProvider = request.app.state.config_provider
    return provider


def get_renderer(request: Request) -> TemplateRenderer:
    """Get the template renderer from app state."""
    renderer: TemplateRenderer = request.app.state.renderer
    return renderer


def get_notifier(request: Request) -> NotFoundNotifier:
    """Get the 404 alert notifier from app state."""
    notifier: NotFoundNotifier = request.app.state.notifier
    return notifier

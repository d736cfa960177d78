"""Jinja2-based page template renderer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    Undefined,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)


class RenderError(RuntimeError):
    """Raised when a template cannot be loaded or fails while rendering."""


class TemplateRenderer:
    """Renders templates from a single template directory.

    Args:
        templates_dir: Directory searched for template names.
        strict: Raise on undefined template variables instead of rendering
            them as empty strings.
    """

    def __init__(self, templates_dir: Path, *, strict: bool = False) -> None:
        self._templates_dir = templates_dir
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir), encoding="utf-8"),
            autoescape=True,
            undefined=StrictUndefined if strict else Undefined,
            keep_trailing_newline=True,
        )

    @property
    def templates_dir(self) -> Path:
        return self._templates_dir

    def has_template(self, name: str) -> bool:
        """Whether ``name`` can be loaded from the template directory."""
        try:
            self._env.get_template(name)
        except TemplateNotFound:
            return False
        except TemplateError:
            # Exists but does not compile; rendering will report it.
            return True
        return True

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        """Render template ``name`` with ``context``.

        Raises:
            RenderError: If the template is missing or raises while rendering.
        """
        logger.debug("Processing template: %s/%s", self._templates_dir, name)
        try:
            template = self._env.get_template(name)
            return template.render(context)
        except TemplateNotFound as exc:
            raise RenderError(f"Template not found: {exc.name}") from exc
        except TemplateError as exc:
            raise RenderError(f"Failed to render template {name}: {exc}") from exc

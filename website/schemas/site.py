"""Schemas for the JSON site configuration document."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class PageNode(BaseModel):
    """One routable page.

    Keys other than ``path``, ``template`` and ``pages`` are kept verbatim
    and are readable as attributes (``page.title`` in a template).  Only the
    ``pages`` key nests child pages; a ``children`` key is a plain attribute.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    path: str = Field(min_length=1, validation_alias=AliasChoices("path", "url"))
    template: str = Field(min_length=1)
    children: tuple[PageNode, ...] = Field(default=(), validation_alias="pages")

    @property
    def attributes(self) -> dict[str, Any]:
        """Free-form fields of the page object."""
        return dict(self.model_extra or {})

    @property
    def pages(self) -> tuple[PageNode, ...]:
        """Child pages under the document key they were loaded from."""
        return self.children


def _iter_paths(pages: Iterable[PageNode]) -> Iterator[str]:
    for page in pages:
        yield page.path
        yield from _iter_paths(page.children)


class SiteConfig(BaseModel):
    """Top-level configuration: the page tree plus site-wide settings."""

    model_config = ConfigDict(extra="allow", frozen=True)

    pages: tuple[PageNode, ...]
    send_alerts_from: str | None = None
    send_404_alerts_to: str | None = None

    @model_validator(mode="after")
    def _check_unique_paths(self) -> SiteConfig:
        counts = Counter(_iter_paths(self.pages))
        duplicates = sorted(path for path, count in counts.items() if count > 1)
        if duplicates:
            msg = f"Duplicate page paths in configuration: {', '.join(duplicates)}"
            raise ValueError(msg)
        return self

    @property
    def site_settings(self) -> dict[str, Any]:
        """Free-form site-wide fields (title, etc.)."""
        return dict(self.model_extra or {})

"""JSON site configuration reader and per-request configuration providers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from pydantic import ValidationError

from website.exceptions import ConfigurationError, ConfigurationParseError
from website.schemas.site import SiteConfig

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        problems.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(problems)


def parse_site_config(text: str, source: str = "<string>") -> SiteConfig:
    """Parse and validate a JSON configuration document.

    Raises:
        ConfigurationParseError: If ``text`` is not valid JSON.
        ConfigurationError: If the document does not describe a valid page tree.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Malformed JSON in {source}: {exc}"
        raise ConfigurationParseError(msg) from exc

    try:
        return SiteConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid site configuration in {source}: {_describe_validation_error(exc)}"
        raise ConfigurationError(msg) from exc


def load_site_config(config_path: Path) -> SiteConfig:
    """Read and validate the configuration file at ``config_path``."""
    logger.debug("Opening config file: %s", config_path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"Configuration file {config_path} is not valid UTF-8"
        raise ConfigurationParseError(msg) from exc
    except OSError as exc:
        msg = f"Cannot read configuration file {config_path}: {exc}"
        raise ConfigurationError(msg) from exc
    return parse_site_config(text, source=str(config_path))


class ConfigProvider(Protocol):
    """Source of the configuration snapshot used by a single request."""

    def current(self) -> SiteConfig: ...


@dataclass(frozen=True)
class StaticConfigProvider:
    """Serves a fixed configuration snapshot."""

    config: SiteConfig

    def current(self) -> SiteConfig:
        return self.config


@dataclass
class FileConfigStore:
    """Re-reads the configuration file on every call.

    Edits take effect without a restart. When a later edit breaks the file,
    the last configuration that loaded successfully keeps being served; if
    nothing has loaded yet the error propagates and the request fails.
    """

    config_path: Path
    _last_good: SiteConfig | None = field(default=None, repr=False)

    @property
    def last_good(self) -> SiteConfig | None:
        return self._last_good

    def current(self) -> SiteConfig:
        try:
            config = load_site_config(self.config_path)
        except ConfigurationError as exc:
            fallback = self._last_good
            if fallback is None:
                raise
            logger.warning("Serving previous configuration: %s", exc)
            return fallback
        self._last_good = config
        return config

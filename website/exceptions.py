"""Application-level exception types.

Convention:
- ``ConfigurationError``: the page configuration or template directory is
  unusable.  Fatal at startup; during a request the global handler logs the
  full message at ERROR and returns a generic "Internal server error" (500),
  unless a previously loaded configuration can be served instead.
- ``RenderError`` (``website/rendering/renderer.py``): a template failed to
  load or render.  Also a generic 500; never an empty page.

A request path with no matching page is not an error: it resolves to
``NotFound`` and renders the not-found template with status 404.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when the site configuration is missing, malformed or invalid."""


class ConfigurationParseError(ConfigurationError):
    """Raised when the configuration file is not valid JSON."""

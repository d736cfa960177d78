"""Process settings loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Website server settings."""

    model_config = SettingsConfigDict(
        env_prefix="WEBSITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    name: str = "Website"
    debug: bool = False

    # Paths
    base_dir: Path = Path(".")
    config_file: str = "website.json"
    templates_dir: Path | None = None
    not_found_template: str = "404.html"
    content_template_suffix: str = ".html"

    # Sitemap
    site_url: str | None = None

    # Server
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    workers: int = Field(default=5, ge=1)
    socket_path: Path | None = None
    pid_file: Path | None = None
    log_file: Path | None = None

    # 404 alerts
    smtp_host: str = "localhost"
    smtp_port: int = Field(default=25, ge=1, le=65535)
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_start_tls: bool = False
    smtp_timeout: float = Field(default=30.0, gt=0)

    @property
    def config_path(self) -> Path:
        """Location of the JSON page configuration."""
        return self.base_dir / self.config_file

    @property
    def templates_path(self) -> Path:
        """Directory holding the Jinja2 templates."""
        if self.templates_dir is not None:
            return self.templates_dir
        return self.base_dir / "templates"

    @property
    def pid_path(self) -> Path:
        """PID file guarding the detached server."""
        if self.pid_file is not None:
            return self.pid_file
        return self.base_dir / "website.pid"

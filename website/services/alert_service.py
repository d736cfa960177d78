"""Email alerts for requests that match no configured page."""

from __future__ import annotations

import logging
from email.message import EmailMessage
from email.utils import formatdate
from typing import TYPE_CHECKING

import aiosmtplib

if TYPE_CHECKING:
    from website.config import Settings
    from website.schemas.site import SiteConfig
    from website.services.response_service import RequestContext

logger = logging.getLogger(__name__)

REDACTED_HEADERS = frozenset({"authorization", "cookie"})


def should_alert(config: SiteConfig) -> bool:
    """Alerts need both a sender and a recipient address."""
    return bool(config.send_alerts_from) and bool(config.send_404_alerts_to)


def describe_request(request_context: RequestContext) -> str:
    """Plain-text dump of the request for the alert body."""
    request = request_context.request
    if request is None:
        return f"Path: {request_context.path}"

    client = f"{request.client.host}:{request.client.port}" if request.client else "unknown"
    lines = [
        f"Method: {request.method}",
        f"URL: {request.url}",
        f"Client: {client}",
        f"Time: {request_context.now.isoformat()}",
        "",
        "Headers:",
    ]
    lines.extend(
        f"  {name}: {'[redacted]' if name.lower() in REDACTED_HEADERS else value}"
        for name, value in request.headers.items()
    )
    return "\n".join(lines)


def build_alert_message(
    sender: str,
    recipient: str,
    path: str,
    referrer: str | None,
    details: str,
) -> EmailMessage:
    """Build the 404 alert email."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = f"404 - {path}"
    message["Date"] = formatdate(localtime=True)
    message.set_content(f"404 - {path}\n\nReferrer: {referrer or 'None'}\n\n{details}\n")
    return message


class NotFoundNotifier:
    """Sends 404 alerts through an SMTP relay."""

    def __init__(
        self,
        hostname: str = "localhost",
        port: int = 25,
        username: str | None = None,
        password: str | None = None,
        start_tls: bool = False,
        timeout: float = 30.0,
    ) -> None:
        self.hostname = hostname
        self.port = port
        self.username = username
        self.password = password
        self.start_tls = start_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> NotFoundNotifier:
        return cls(
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            start_tls=settings.smtp_start_tls,
            timeout=settings.smtp_timeout,
        )

    async def send(self, message: EmailMessage) -> None:
        """Deliver ``message``; SMTP and network failures propagate."""
        await aiosmtplib.send(
            message,
            hostname=self.hostname,
            port=self.port,
            username=self.username,
            password=self.password,
            start_tls=self.start_tls,
            timeout=self.timeout,
        )

    async def notify(self, config: SiteConfig, request_context: RequestContext) -> bool:
        """Send a 404 alert if the site configures one.

        Returns whether an alert was delivered. Delivery failures are logged;
        the 404 response has already been produced by the time this runs.
        """
        if not should_alert(config):
            logger.debug("404 alerts not configured, skipping %s", request_context.path)
            return False

        request = request_context.request
        referrer = request.headers.get("referer") if request is not None else None
        message = build_alert_message(
            sender=config.send_alerts_from or "",
            recipient=config.send_404_alerts_to or "",
            path=request_context.path,
            referrer=referrer,
            details=describe_request(request_context),
        )
        try:
            await self.send(message)
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send 404 alert for %s: %s", request_context.path, exc)
            return False
        logger.info("Sent 404 alert for %s to %s", request_context.path, config.send_404_alerts_to)
        return True

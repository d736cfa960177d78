"""Tests for 404 alert emails."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import aiosmtplib
import pytest

from website.config import Settings
from website.schemas.site import SiteConfig
from website.services.alert_service import (
    NotFoundNotifier,
    build_alert_message,
    describe_request,
    should_alert,
)
from website.services.response_service import RequestContext


def _config(**fields: str) -> SiteConfig:
    return SiteConfig.model_validate({"pages": [], **fields})


class TestShouldAlert:
    def test_requires_both_addresses(self) -> None:
        assert should_alert(_config(send_alerts_from="a@x", send_404_alerts_to="b@x"))
        assert not should_alert(_config(send_alerts_from="a@x"))
        assert not should_alert(_config(send_404_alerts_to="b@x"))
        assert not should_alert(_config())

    def test_empty_address_disables_alerts(self) -> None:
        assert not should_alert(_config(send_alerts_from="", send_404_alerts_to="b@x"))


class TestBuildAlertMessage:
    def test_subject_and_body(self) -> None:
        message = build_alert_message(
            sender="web@example.com",
            recipient="ops@example.com",
            path="/missing",
            referrer="https://example.com/",
            details="Method: GET",
        )
        assert message["From"] == "web@example.com"
        assert message["To"] == "ops@example.com"
        assert message["Subject"] == "404 - /missing"
        body = message.get_content()
        assert body.startswith("404 - /missing\n\nReferrer: https://example.com/\n\n")
        assert "Method: GET" in body

    def test_missing_referrer_reads_none(self) -> None:
        message = build_alert_message("a@x", "b@x", "/p", None, "")
        assert "Referrer: None" in message.get_content()


class TestDescribeRequest:
    def test_without_request_reports_path(self) -> None:
        assert describe_request(RequestContext(path="/p")) == "Path: /p"

    def test_includes_method_url_and_headers(self) -> None:
        request = MagicMock()
        request.method = "GET"
        request.url = "http://test/p"
        request.client.host = "10.0.0.1"
        request.client.port = 4321
        request.headers = {"user-agent": "pytest"}

        text = describe_request(RequestContext(path="/p", request=request))

        assert "Method: GET" in text
        assert "URL: http://test/p" in text
        assert "Client: 10.0.0.1:4321" in text
        assert "user-agent: pytest" in text

    def test_credentials_headers_are_redacted(self) -> None:
        request = MagicMock()
        request.client = None
        request.headers = {
            "Authorization": "Bearer s3cret",
            "cookie": "session=abc123",
            "referer": "http://example.com/",
        }

        text = describe_request(RequestContext(path="/p", request=request))

        assert "s3cret" not in text
        assert "abc123" not in text
        assert "Authorization: [redacted]" in text
        assert "cookie: [redacted]" in text
        assert "referer: http://example.com/" in text
        assert "Client: unknown" in text


class TestNotFoundNotifier:
    @pytest.mark.asyncio
    async def test_skips_when_alerts_not_configured(self) -> None:
        notifier = NotFoundNotifier()
        with patch("website.services.alert_service.aiosmtplib.send", new_callable=AsyncMock) as send:
            sent = await notifier.notify(_config(), RequestContext(path="/missing"))
        assert sent is False
        send.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_through_configured_relay(self) -> None:
        notifier = NotFoundNotifier(hostname="smtp.example.com", port=587, start_tls=True)
        config = _config(send_alerts_from="web@example.com", send_404_alerts_to="ops@example.com")
        with patch("website.services.alert_service.aiosmtplib.send", new_callable=AsyncMock) as send:
            sent = await notifier.notify(config, RequestContext(path="/missing"))

        assert sent is True
        send.assert_awaited_once()
        message = send.await_args.args[0]
        assert message["Subject"] == "404 - /missing"
        assert message["To"] == "ops@example.com"
        assert send.await_args.kwargs["hostname"] == "smtp.example.com"
        assert send.await_args.kwargs["port"] == 587
        assert send.await_args.kwargs["start_tls"] is True

    @pytest.mark.asyncio
    async def test_delivery_failure_is_logged_not_raised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        notifier = NotFoundNotifier()
        config = _config(send_alerts_from="a@x", send_404_alerts_to="b@x")
        with patch(
            "website.services.alert_service.aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=aiosmtplib.SMTPConnectError("connection refused"),
        ):
            sent = await notifier.notify(config, RequestContext(path="/missing"))

        assert sent is False
        assert "Failed to send 404 alert for /missing" in caplog.text

    def test_from_settings(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            smtp_host="mail.local",
            smtp_port=2525,
            smtp_username="user",
            smtp_password="pw",
        )
        notifier = NotFoundNotifier.from_settings(settings)
        assert notifier.hostname == "mail.local"
        assert notifier.port == 2525
        assert notifier.username == "user"
        assert notifier.password == "pw"

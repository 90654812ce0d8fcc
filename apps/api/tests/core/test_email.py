"""
Unit tests for the SMTP email core.

These tests cover:
- Transport construction from settings
- verify / send / close against a mocked aiosmtplib client
- Transport release when the body of ``open_smtp_transport`` fails
- MIME message layout
- HTML rendering of the application notification
"""

from unittest.mock import AsyncMock, MagicMock, patch

import aiosmtplib
import pytest

from app.core.config import Settings
from app.core.email import (
    EmailAttachment,
    InlineImage,
    SMTPTransport,
    build_message,
    open_smtp_transport,
    render_application_email,
)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        smtp_host="smtp.test.local",
        smtp_port=465,
        smtp_secure=True,
        smtp_user="careers@test.com",
        smtp_pass="app-password",
        smtp_timeout=5,
    )


@pytest.fixture
def mock_smtp_client():
    """Patch aiosmtplib.SMTP and return the client instance it produces."""
    client = MagicMock()
    client.connect = AsyncMock()
    client.login = AsyncMock()
    client.send_message = AsyncMock(return_value=({}, "250 OK queued"))
    client.quit = AsyncMock()
    client.close = MagicMock()
    client.is_connected = True
    with patch("app.core.email.aiosmtplib.SMTP", return_value=client) as smtp_cls:
        client.factory = smtp_cls
        yield client


def _simple_message():
    return build_message(
        sender="careers@test.com",
        recipient="recruiting@test.com",
        subject="Subject",
        html_content="<p>Hi</p>",
    )


class TestSMTPTransport:
    """Tests for SMTPTransport."""

    def test_from_settings_configures_client(self, settings, mock_smtp_client):
        transport = SMTPTransport.from_settings(settings)

        assert transport.host == "smtp.test.local"
        assert transport.port == 465
        assert transport.username == "careers@test.com"
        mock_smtp_client.factory.assert_called_once_with(
            hostname="smtp.test.local",
            port=465,
            use_tls=True,
            timeout=5,
        )

    @pytest.mark.asyncio
    async def test_verify_connects_and_logs_in(self, settings, mock_smtp_client):
        transport = SMTPTransport.from_settings(settings)

        await transport.verify()

        mock_smtp_client.connect.assert_awaited_once()
        mock_smtp_client.login.assert_awaited_once_with("careers@test.com", "app-password")

    @pytest.mark.asyncio
    async def test_verify_propagates_login_failure(self, settings, mock_smtp_client):
        mock_smtp_client.login.side_effect = aiosmtplib.SMTPAuthenticationError(
            535, "Bad credentials"
        )
        transport = SMTPTransport.from_settings(settings)

        with pytest.raises(aiosmtplib.SMTPAuthenticationError):
            await transport.verify()

    @pytest.mark.asyncio
    async def test_send_returns_message_id(self, settings, mock_smtp_client):
        transport = SMTPTransport.from_settings(settings)
        message = _simple_message()

        message_id = await transport.send(message)

        assert message_id == message["Message-ID"]
        mock_smtp_client.send_message.assert_awaited_once_with(message)

    @pytest.mark.asyncio
    async def test_close_quits_connected_client(self, settings, mock_smtp_client):
        transport = SMTPTransport.from_settings(settings)

        await transport.close()

        mock_smtp_client.quit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_tolerates_quit_failure(self, settings, mock_smtp_client):
        mock_smtp_client.quit.side_effect = aiosmtplib.SMTPServerDisconnected("gone")
        transport = SMTPTransport.from_settings(settings)

        await transport.close()

        mock_smtp_client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_skips_disconnected_client(self, settings, mock_smtp_client):
        mock_smtp_client.is_connected = False
        transport = SMTPTransport.from_settings(settings)

        await transport.close()

        mock_smtp_client.quit.assert_not_called()


class TestOpenSMTPTransport:
    """Tests for the open_smtp_transport context manager."""

    @pytest.mark.asyncio
    async def test_releases_transport_on_success(self, settings, mock_smtp_client):
        async with open_smtp_transport(settings) as transport:
            await transport.verify()

        mock_smtp_client.quit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_releases_transport_on_send_failure(self, settings, mock_smtp_client):
        mock_smtp_client.send_message.side_effect = aiosmtplib.SMTPDataError(554, "Rejected")

        with pytest.raises(aiosmtplib.SMTPDataError):
            async with open_smtp_transport(settings) as transport:
                await transport.verify()
                await transport.send(_simple_message())

        mock_smtp_client.quit.assert_awaited_once()


class TestBuildMessage:
    """Tests for build_message."""

    def test_headers(self):
        message = _simple_message()

        assert message["From"] == "careers@test.com"
        assert message["To"] == "recruiting@test.com"
        assert message["Subject"] == "Subject"
        assert message["Message-ID"]
        assert message["Date"]
        assert message.get_content_type() == "multipart/mixed"

    def test_header_values_are_flattened_to_one_line(self):
        message = build_message(
            sender="careers@test.com",
            recipient="recruiting@test.com",
            subject="New application from Jane\r\nBcc: someone@test.com\n\tDoe",
            html_content="<p>Hi</p>",
        )

        assert message["Subject"] == "New application from Jane Bcc: someone@test.com Doe"
        assert message["Bcc"] is None

    def test_inline_images_live_in_related_part(self):
        message = build_message(
            sender="a@test.com",
            recipient="b@test.com",
            subject="S",
            html_content='<img src="cid:logo">',
            inline_images=[InlineImage(cid="logo", filename="logo.png", content=b"png")],
        )

        related = message.get_payload()[0]
        assert related.get_content_type() == "multipart/related"
        html_part, image_part = related.get_payload()
        assert html_part.get_content_type() == "text/html"
        assert image_part.get_content_type() == "image/png"
        assert image_part["Content-ID"] == "<logo>"
        assert image_part.get_content_disposition() == "inline"

    def test_attachments_are_base64_with_filename(self):
        message = build_message(
            sender="a@test.com",
            recipient="b@test.com",
            subject="S",
            html_content="<p>x</p>",
            attachments=[
                EmailAttachment(filename="cv.doc", content=b"DOC", content_type="application/msword")
            ],
        )

        parts = message.get_payload()
        assert len(parts) == 2
        attachment = parts[1]
        assert attachment.get_content_type() == "application/msword"
        assert attachment.get_filename() == "cv.doc"
        assert attachment["Content-Transfer-Encoding"] == "base64"
        assert attachment.get_payload(decode=True) == b"DOC"


class TestRenderApplicationEmail:
    """Tests for render_application_email."""

    def _render(self, **overrides) -> str:
        data = {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@x.com",
            "phone": "+12345",
            "message": "Hello\nWorld",
            "logo_src": "cid:intellectus-logo",
            "received_at": "Monday, March 2, 2026 at 03:07 PM UTC",
        }
        data.update(overrides)
        return render_application_email(**data)

    def test_contains_submitted_fields(self):
        html = self._render()

        assert "Jane Doe" in html
        assert "jane@x.com" in html
        assert "+12345" in html
        assert "Hello\nWorld" in html
        assert 'src="cid:intellectus-logo"' in html
        assert "Received: Monday, March 2, 2026 at 03:07 PM UTC" in html

    def test_file_block_only_with_attachment(self):
        assert "Attached File" not in self._render()
        assert "Attached File: cv.pdf" in self._render(attachment_name="cv.pdf")

    def test_escapes_user_input(self):
        html = self._render(last_name="<img src=x onerror=alert(1)>", attachment_name='"a".pdf')

        assert "<img src=x" not in html
        assert "&lt;img src=x onerror=alert(1)&gt;" in html
        assert "&quot;a&quot;.pdf" in html

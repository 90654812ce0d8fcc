"""
Fixtures for internship applications tests.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core.config import Settings
from app.modules.internship_applications.schemas import ApplicationSubmission, Attachment

PDF_TYPE = "application/pdf"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def smtp_settings(tmp_path):
    """Settings with SMTP credentials and no logo file on disk."""
    return Settings(
        _env_file=None,
        smtp_host="smtp.test.local",
        smtp_port=587,
        smtp_secure=False,
        smtp_user="careers@test.com",
        smtp_pass="app-password",
        recipient_email="recruiting@test.com",
        logo_path=tmp_path / "missing-logo.png",
    )


@pytest.fixture
def smtp_settings_with_logo(smtp_settings, tmp_path):
    """Settings whose logo path points at a real PNG file."""
    logo = tmp_path / "logo.png"
    logo.write_bytes(PNG_BYTES)
    return smtp_settings.model_copy(update={"logo_path": logo})


@pytest.fixture
def unconfigured_settings(tmp_path):
    """Settings without SMTP credentials."""
    return Settings(
        _env_file=None,
        smtp_user=None,
        smtp_pass=None,
        logo_path=tmp_path / "missing-logo.png",
    )


@pytest.fixture
def sample_submission():
    """A valid application without an attachment."""
    return ApplicationSubmission(
        first_name="Jane",
        last_name="Doe",
        email="jane@x.com",
        phone="+12345",
        message="Hello",
    )


@pytest.fixture
def sample_attachment():
    """A small PDF attachment."""
    return Attachment(
        filename="cv.pdf",
        content_type=PDF_TYPE,
        content=b"%PDF-1.4 test document",
    )


@pytest.fixture
def mock_transport():
    """Create a mock SMTP transport."""
    transport = MagicMock()
    transport.verify = AsyncMock()
    transport.send = AsyncMock(return_value="<message-1@test.local>")
    transport.close = AsyncMock()
    return transport


@pytest.fixture
def patched_transport(mock_transport):
    """Route the service's SMTP transport to ``mock_transport``."""

    @asynccontextmanager
    async def _open(_settings):
        try:
            yield mock_transport
        finally:
            await mock_transport.close()

    with patch("app.modules.internship_applications.service.open_smtp_transport", _open):
        yield mock_transport


class SentMail:
    """Read-only view over the MIME message handed to ``transport.send``."""

    def __init__(self, message):
        self.message = message

    @property
    def subject(self) -> str:
        return self.message["Subject"]

    @property
    def html(self) -> str:
        for part in self.message.walk():
            if part.get_content_type() == "text/html":
                return part.get_payload(decode=True).decode("utf-8")
        raise AssertionError("message has no text/html part")

    @property
    def inline_images(self) -> list:
        return [part for part in self.message.walk() if part.get("Content-ID")]

    @property
    def attachments(self) -> list:
        return [
            part
            for part in self.message.walk()
            if (part.get("Content-Disposition") or "").startswith("attachment")
        ]


@pytest.fixture
def sent_mail(mock_transport):
    """Return a callable that reads the single message sent through the mock transport."""

    def _read() -> SentMail:
        mock_transport.send.assert_awaited_once()
        return SentMail(mock_transport.send.await_args.args[0])

    return _read

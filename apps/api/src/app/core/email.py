"""
Email Service using an SMTP relay

Handles building and delivering the internship application notification.

The relay interaction is two sequential fallible steps over one transport:
``verify`` (connect + authenticate) and ``send``. ``open_smtp_transport``
scopes the transport so it is released on every exit path.
"""

import contextlib
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from email import encoders
from email.mime.base import MIMEBase
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid
from html import escape

import aiosmtplib

from app.core.config import Settings

logger = logging.getLogger(__name__)

BRAND_NAME = "Intellectus Capital"
BRAND_TAGLINE = "Investment Banking & Corporate Advisory"


def single_line(value: str) -> str:
    """Collapse every whitespace run, line breaks included, into one space."""
    return " ".join(value.split())


@dataclass(frozen=True)
class InlineImage:
    """Image referenced from the HTML body through ``cid:<cid>``."""

    cid: str
    filename: str
    content: bytes
    content_type: str = "image/png"


@dataclass(frozen=True)
class EmailAttachment:
    """Downloadable attachment carried in the outbound message."""

    filename: str
    content: bytes
    content_type: str


class SMTPTransport:
    """Thin wrapper over ``aiosmtplib.SMTP`` exposing verify/send/close."""

    def __init__(
        self,
        host: str,
        port: int,
        secure: bool,
        username: str,
        password: str,
        timeout: float | None = None,
    ):
        self.host = host
        self.port = port
        self.username = username
        self._password = password
        # secure=True means implicit TLS (e.g. port 465); otherwise the
        # client upgrades with STARTTLS when the server offers it.
        self._client = aiosmtplib.SMTP(
            hostname=host,
            port=port,
            use_tls=secure,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SMTPTransport":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            secure=settings.smtp_secure,
            username=settings.smtp_user or "",
            password=settings.smtp_pass or "",
            timeout=settings.smtp_timeout,
        )

    async def verify(self) -> None:
        """Connect and authenticate. Raises on any failure."""
        await self._client.connect()
        await self._client.login(self.username, self._password)
        logger.info(f"SMTP connection verified: {self.host}:{self.port}")

    async def send(self, message: MIMEMultipart) -> str:
        """
        Send a prepared message over the verified connection.

        Returns:
            The Message-ID header of the delivered message
        """
        errors, response = await self._client.send_message(message)
        if errors:
            logger.warning(f"SMTP relay refused some recipients: {list(errors)}")
        logger.debug(f"SMTP relay response: {response}")
        return message["Message-ID"]

    async def close(self) -> None:
        if not self._client.is_connected:
            return
        with contextlib.suppress(aiosmtplib.SMTPException, OSError):
            await self._client.quit()
        if self._client.is_connected:
            self._client.close()


@contextlib.asynccontextmanager
async def open_smtp_transport(settings: Settings) -> AsyncIterator[SMTPTransport]:
    """
    Acquire an SMTP transport for a single request.

    Usage:
        async with open_smtp_transport(settings) as transport:
            await transport.verify()
            await transport.send(message)
    """
    transport = SMTPTransport.from_settings(settings)
    try:
        yield transport
    finally:
        await transport.close()


def build_message(
    sender: str,
    recipient: str,
    subject: str,
    html_content: str,
    inline_images: list[InlineImage] | None = None,
    attachments: list[EmailAttachment] | None = None,
) -> MIMEMultipart:
    """
    Assemble a MIME message.

    Layout:
        multipart/mixed
          multipart/related
            text/html
            image/* (one per inline image, Content-ID referenced)
          <attachment> (one per document)
    """
    msg = MIMEMultipart("mixed")
    msg["Subject"] = single_line(subject)
    msg["From"] = single_line(sender)
    msg["To"] = single_line(recipient)
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = make_msgid()

    related = MIMEMultipart("related")
    related.attach(MIMEText(html_content, "html", "utf-8"))

    for image in inline_images or []:
        _, subtype = image.content_type.split("/", 1)
        part = MIMEImage(image.content, _subtype=subtype)
        part.add_header("Content-ID", f"<{image.cid}>")
        part.add_header("Content-Disposition", "inline", filename=image.filename)
        related.attach(part)

    msg.attach(related)

    for attachment in attachments or []:
        maintype, _, subtype = attachment.content_type.partition("/")
        part = MIMEBase(maintype or "application", subtype or "octet-stream")
        part.set_payload(attachment.content)
        encoders.encode_base64(part)
        part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
        msg.attach(part)

    return msg


def render_application_email(
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    message: str,
    logo_src: str,
    received_at: str,
    attachment_name: str | None = None,
) -> str:
    """Render the HTML notification for a new internship application."""
    # Escape user inputs to prevent XSS in the recipient's mail client
    safe_name = escape(f"{first_name} {last_name}")
    safe_email = escape(email)
    safe_phone = escape(phone)
    safe_message = escape(message)

    file_block = ""
    if attachment_name:
        file_block = (
            '<div class="file-info"><span class="file-name">'
            f"&#128206; Attached File: {escape(attachment_name)}</span></div>"
        )

    return f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>New Internship Application</title>
        <style>
            body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f8f9fa; }}
            .container {{ background-color: #ffffff; border-radius: 8px; box-shadow: 0 2px 10px rgba(0, 0, 0, 0.1); overflow: hidden; }}
            .header {{ background: linear-gradient(135deg, #1a1a1a 0%, #2a2a2a 100%); color: white; padding: 30px; text-align: center; }}
            .logo {{ margin-bottom: 15px; }}
            .logo img {{ max-width: 220px; height: auto; display: block; margin: 0 auto; border-radius: 6px; background-color: #1e1e1e; padding: 10px; }}
            .subtitle {{ font-size: 16px; opacity: 0.9; margin: 0; }}
            .content {{ padding: 30px; }}
            .title {{ color: #1a1a1a; font-size: 24px; margin-bottom: 25px; border-bottom: 2px solid #4285f4; padding-bottom: 10px; }}
            .info-section {{ background-color: #f8f9fa; border-radius: 6px; padding: 20px; margin-bottom: 20px; }}
            .info-row {{ display: flex; margin-bottom: 12px; align-items: flex-start; }}
            .label {{ font-weight: 600; color: #555; min-width: 120px; margin-right: 15px; }}
            .value {{ color: #333; flex: 1; }}
            .message-section {{ background-color: #ffffff; border: 1px solid #e1e5e9; border-radius: 6px; padding: 20px; margin-top: 20px; }}
            .message-label {{ font-weight: 600; color: #555; margin-bottom: 10px; display: block; }}
            .message-content {{ color: #333; white-space: pre-wrap; line-height: 1.6; }}
            .file-info {{ background-color: #e3f2fd; border-left: 4px solid #4285f4; padding: 15px; margin-top: 20px; border-radius: 0 6px 6px 0; }}
            .file-name {{ font-weight: 600; color: #1976d2; }}
            .footer {{ background-color: #f8f9fa; padding: 20px 30px; text-align: center; color: #666; font-size: 14px; border-top: 1px solid #e1e5e9; }}
            .timestamp {{ color: #888; font-size: 12px; margin-top: 10px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <div class="logo">
                    <img src="{logo_src}" alt="{BRAND_NAME}" style="max-width: 220px; height: auto;">
                </div>
                <p class="subtitle">{escape(BRAND_TAGLINE)}</p>
            </div>

            <div class="content">
                <h1 class="title">New Internship Application</h1>

                <div class="info-section">
                    <div class="info-row"><span class="label">Name:</span><span class="value">{safe_name}</span></div>
                    <div class="info-row"><span class="label">Email:</span><span class="value">{safe_email}</span></div>
                    <div class="info-row"><span class="label">Phone:</span><span class="value">{safe_phone}</span></div>
                </div>

                <div class="message-section">
                    <span class="message-label">Cover Letter / Message:</span>
                    <div class="message-content">{safe_message}</div>
                </div>

                {file_block}
            </div>

            <div class="footer">
                <p>This application was submitted through the {BRAND_NAME} careers portal.</p>
                <div class="timestamp">Received: {escape(received_at)}</div>
            </div>
        </div>
    </body>
    </html>
    """

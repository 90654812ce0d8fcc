"""
Internship Applications Shared Helpers

Logo resolution, timestamp formatting, and upload conversion used by the
submission service and router.
"""

import asyncio
import base64
import logging
from datetime import datetime
from pathlib import Path

from fastapi import UploadFile

from app.core.email import InlineImage
from app.modules.internship_applications.schemas import Attachment

logger = logging.getLogger(__name__)

LOGO_CID = "intellectus-logo"
LOGO_FILENAME = "logo.png"

PLACEHOLDER_LOGO_SVG = """
<svg width="200" height="60" viewBox="0 0 200 60" xmlns="http://www.w3.org/2000/svg">
  <defs>
    <linearGradient id="logoGradient" x1="0%" y1="0%" x2="100%" y2="0%">
      <stop offset="0%" style="stop-color:#1a1a1a;stop-opacity:1" />
      <stop offset="100%" style="stop-color:#2a2a2a;stop-opacity:1" />
    </linearGradient>
  </defs>
  <rect width="200" height="60" fill="url(#logoGradient)" rx="8"/>
  <rect x="20" y="15" width="8" height="30" fill="#4285f4"/>
  <rect x="16" y="15" width="16" height="4" fill="#4285f4"/>
  <rect x="16" y="41" width="16" height="4" fill="#4285f4"/>
  <rect x="40" y="15" width="6" height="30" fill="white"/>
  <rect x="40" y="15" width="20" height="6" fill="white"/>
  <rect x="54" y="15" width="6" height="30" fill="white"/>
  <rect x="70" y="15" width="20" height="6" fill="white"/>
  <rect x="78" y="15" width="6" height="30" fill="white"/>
  <rect x="100" y="15" width="6" height="30" fill="white"/>
  <rect x="100" y="15" width="16" height="6" fill="white"/>
  <rect x="100" y="27" width="12" height="6" fill="white"/>
  <rect x="100" y="39" width="16" height="6" fill="white"/>
  <rect x="125" y="15" width="6" height="30" fill="white"/>
  <rect x="125" y="39" width="16" height="6" fill="white"/>
  <rect x="150" y="15" width="6" height="30" fill="white"/>
  <rect x="150" y="39" width="16" height="6" fill="white"/>
  <text x="100" y="55" font-family="Arial, sans-serif" font-size="8" fill="#cccccc" text-anchor="middle">CAPITAL</text>
</svg>
"""


def placeholder_logo_data_uri() -> str:
    """Return the placeholder logo as a base64 SVG data URI."""
    encoded = base64.b64encode(PLACEHOLDER_LOGO_SVG.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


async def resolve_logo(logo_path: Path) -> tuple[str, InlineImage | None]:
    """
    Resolve the logo used in the email header.

    If the logo file exists it is attached inline and referenced by
    Content-ID. Otherwise the placeholder SVG is embedded as a data URI
    and no attachment is needed.

    Args:
        logo_path: Location of the branding image

    Returns:
        Tuple of (img src value, inline image or None)
    """
    try:
        content = await asyncio.to_thread(logo_path.read_bytes)
    except FileNotFoundError:
        return placeholder_logo_data_uri(), None
    except OSError as e:
        logger.warning(f"Logo at {logo_path} could not be read, using placeholder: {e}")
        return placeholder_logo_data_uri(), None

    image = InlineImage(
        cid=LOGO_CID,
        filename=LOGO_FILENAME,
        content=content,
        content_type="image/png",
    )
    return f"cid:{LOGO_CID}", image


def format_received_at(moment: datetime | None = None) -> str:
    """
    Format a timestamp for the email footer.

    Example: "Monday, October 19, 2026 at 02:25 PM UTC"
    """
    if moment is None:
        moment = datetime.now().astimezone()
    elif moment.tzinfo is None:
        moment = moment.astimezone()
    return f"{moment:%A, %B} {moment.day}, {moment.year} at {moment:%I:%M %p %Z}".rstrip()


async def attachment_from_upload(upload: UploadFile | str | None) -> Attachment | None:
    """
    Read an uploaded file into memory.

    An absent upload, a plain text field sent under the file name, or an
    empty file part is treated as no attachment.
    """
    if upload is None or isinstance(upload, str):
        return None

    content = await upload.read()
    if not content:
        return None

    return Attachment(
        filename=upload.filename or "attachment",
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )

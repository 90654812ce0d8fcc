"""
Core module - Configuration and email delivery.
"""

from app.core.config import Settings, get_settings, settings
from app.core.email import (
    EmailAttachment,
    InlineImage,
    SMTPTransport,
    build_message,
    open_smtp_transport,
)

__all__ = [
    # Config
    "Settings",
    "settings",
    "get_settings",
    # Email
    "SMTPTransport",
    "open_smtp_transport",
    "build_message",
    "InlineImage",
    "EmailAttachment",
]

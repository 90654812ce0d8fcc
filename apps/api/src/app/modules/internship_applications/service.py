"""
Internship Applications Service Layer

Business logic for relaying an internship application to the recruiting
mailbox.

Submission pipeline (the first failing gate determines the response):
1. Validation:
   - All five text fields present and non-blank
   - Email and phone shape
   - Attachment size (<= 10 MiB) and type (PDF / Word)
2. Configuration:
   - SMTP credentials must be present; nothing touches the network otherwise
3. Delivery:
   - Open one SMTP transport, verify (connect + authenticate), then send
   - The transport is released on every exit path

Security considerations:
- Server-side validation is authoritative; client checks are advisory
- User input is HTML-escaped before it is placed in the email body
- Message bodies and credentials are never logged
"""

import logging

from app.core.config import Settings
from app.core.email import (
    EmailAttachment,
    build_message,
    open_smtp_transport,
    render_application_email,
    single_line,
)
from app.modules.internship_applications import validators
from app.modules.internship_applications.helpers import format_received_at, resolve_logo
from app.modules.internship_applications.schemas import (
    ApplicationSubmission,
    SubmitFormResponse,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to submit application. Please try again."


class ApplicationServiceError(Exception):
    """Base exception for application service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class MissingFieldsError(ApplicationServiceError):
    """Raised when one or more required text fields are blank."""

    def __init__(self, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(
            message=validators.ALL_FIELDS_REQUIRED,
            error_code="MISSING_FIELDS",
        )


class InvalidEmailFormatError(ApplicationServiceError):
    """Raised when the email does not look like user@domain.tld."""

    def __init__(self):
        super().__init__(
            message=validators.INVALID_EMAIL_SERVER,
            error_code="INVALID_EMAIL",
        )


class InvalidPhoneFormatError(ApplicationServiceError):
    """Raised when the phone number fails the shape check."""

    def __init__(self):
        super().__init__(
            message=validators.INVALID_PHONE,
            error_code="INVALID_PHONE",
        )


class AttachmentTooLargeError(ApplicationServiceError):
    """Raised when the uploaded document exceeds 10 MiB."""

    def __init__(self):
        super().__init__(
            message=validators.FILE_TOO_LARGE,
            error_code="FILE_TOO_LARGE",
        )


class AttachmentTypeNotAllowedError(ApplicationServiceError):
    """Raised when the uploaded document is not a PDF or Word file."""

    def __init__(self, content_type: str | None = None):
        self.content_type = content_type
        super().__init__(
            message=validators.FILE_TYPE_NOT_ALLOWED,
            error_code="FILE_TYPE_NOT_ALLOWED",
        )


class EmailNotConfiguredError(ApplicationServiceError):
    """Raised when SMTP credentials are missing from the environment."""

    def __init__(self):
        super().__init__(
            message="Email service not configured. Missing SMTP_USER/SMTP_PASS.",
            error_code="EMAIL_NOT_CONFIGURED",
            status_code=500,
        )


class EmailConnectionError(ApplicationServiceError):
    """Raised when the SMTP relay cannot be reached or rejects the login."""

    def __init__(self, reason: str | None = None):
        self.reason = reason or "Unknown SMTP error"
        super().__init__(
            message=f"Email service connection failed: {self.reason}",
            error_code="EMAIL_CONNECTION_FAILED",
            status_code=500,
        )


class EmailDeliveryError(ApplicationServiceError):
    """Raised when the relay accepted the login but the send failed."""

    def __init__(self, reason: str | None = None):
        super().__init__(
            message=reason or GENERIC_FAILURE_MESSAGE,
            error_code="EMAIL_DELIVERY_FAILED",
            status_code=500,
        )


def validate_submission(submission: ApplicationSubmission) -> None:
    """
    Run the server-side validation gates.

    Args:
        submission: The parsed application

    Raises:
        MissingFieldsError: If any required text field is blank
        InvalidEmailFormatError: If the email shape is wrong
        InvalidPhoneFormatError: If the phone shape is wrong
        AttachmentTooLargeError: If the attachment exceeds 10 MiB
        AttachmentTypeNotAllowedError: If the attachment is not PDF/Word
    """
    missing = validators.missing_fields(submission.form_values())
    if missing:
        raise MissingFieldsError(missing)

    if not validators.is_valid_email(submission.email):
        raise InvalidEmailFormatError()

    if not validators.is_valid_phone(submission.phone):
        raise InvalidPhoneFormatError()

    attachment = submission.attachment
    if attachment is not None and attachment.size > 0:
        if not validators.is_allowed_attachment_size(attachment.size):
            raise AttachmentTooLargeError()
        if not validators.is_allowed_attachment_type(attachment.content_type):
            raise AttachmentTypeNotAllowedError(attachment.content_type)


async def submit_application(
    submission: ApplicationSubmission,
    settings: Settings,
) -> SubmitFormResponse:
    """
    Validate an application and email it to the recruiting mailbox.

    Args:
        submission: The parsed application, attachment included
        settings: Configuration read for this request

    Returns:
        Success response body

    Raises:
        ApplicationServiceError: Any validation, configuration or delivery failure
    """
    validate_submission(submission)

    if not settings.smtp_configured:
        logger.error("SMTP_USER/SMTP_PASS not set - cannot deliver application")
        raise EmailNotConfiguredError()

    async with open_smtp_transport(settings) as transport:
        try:
            await transport.verify()
        except Exception as e:
            logger.error(f"SMTP verification failed for {settings.smtp_host}: {e}")
            raise EmailConnectionError(str(e) or None) from e

        logo_src, logo_image = await resolve_logo(settings.logo_path)
        attachment = submission.attachment

        html_content = render_application_email(
            first_name=submission.first_name,
            last_name=submission.last_name,
            email=submission.email,
            phone=submission.phone,
            message=submission.message,
            logo_src=logo_src,
            received_at=format_received_at(),
            attachment_name=attachment.filename if attachment else None,
        )

        attachments = []
        if attachment is not None and attachment.size > 0:
            attachments.append(
                EmailAttachment(
                    filename=attachment.filename,
                    content=attachment.content,
                    content_type=attachment.content_type,
                )
            )

        message = build_message(
            sender=settings.smtp_user,
            recipient=settings.effective_recipient,
            subject=f"New Internship Application from {single_line(submission.full_name)}",
            html_content=html_content,
            inline_images=[logo_image] if logo_image else None,
            attachments=attachments,
        )

        try:
            message_id = await transport.send(message)
        except Exception as e:
            logger.error(f"Failed to send application email: {e}")
            raise EmailDeliveryError(str(e) or None) from e

    logger.info(
        f"Application email sent: id={message_id}, has_attachment={bool(attachments)}"
    )
    return SubmitFormResponse()

"""
Internship Application Validation Rules

Field patterns and attachment limits shared by the submission handler
and the form client, so both sides accept and reject the same input.
"""

import re

# Error messages shown to the applicant
ALL_FIELDS_REQUIRED = "All fields are required"
INVALID_EMAIL_CLIENT = "Please enter a valid email address"
INVALID_EMAIL_SERVER = "Invalid email format"
INVALID_PHONE = "Please enter a valid phone number"
FILE_TOO_LARGE = "File size must be less than 10MB"
FILE_TYPE_NOT_ALLOWED = "Only PDF and Word documents are allowed"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[1-9][0-9]{0,15}$")
_WHITESPACE = re.compile(r"\s")

MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024  # 10 MiB, inclusive

ALLOWED_ATTACHMENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)

# Wire (multipart) names of the required text fields, in form order
REQUIRED_FORM_FIELDS = ("firstName", "lastName", "email", "phone", "message")


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def normalize_phone(value: str) -> str:
    """Remove every whitespace character from a phone number."""
    return _WHITESPACE.sub("", value)


def is_valid_phone(value: str) -> bool:
    return PHONE_PATTERN.fullmatch(normalize_phone(value)) is not None


def is_allowed_attachment_size(size: int) -> bool:
    return size <= MAX_ATTACHMENT_BYTES


def is_allowed_attachment_type(content_type: str | None) -> bool:
    return content_type in ALLOWED_ATTACHMENT_TYPES


def missing_fields(values: dict[str, str | None]) -> list[str]:
    """
    Return the required fields that are absent or blank.

    Args:
        values: Mapping of wire field name to submitted value

    Returns:
        Field names, in form order, whose value is empty after trimming
    """
    return [name for name in REQUIRED_FORM_FIELDS if not (values.get(name) or "").strip()]

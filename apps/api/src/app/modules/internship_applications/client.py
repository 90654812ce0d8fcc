"""
Internship Application Form Client

Client-side counterpart of POST /api/submit-form. Holds the form state,
runs the advisory checks before any request is made, posts the multipart
payload, and records the outcome.

Usage:
    form = ApplicationFormClient(base_url="http://localhost:8000")
    form.set_field("firstName", "Jane")
    ...
    form.select_file(LocalFile.from_path("cv.pdf"))
    state = await form.submit()
    if state.status is SubmitStatus.ERROR:
        print(state.error_message)
"""

import logging
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import httpx

from app.modules.internship_applications import validators

logger = logging.getLogger(__name__)

SUBMIT_ENDPOINT = "/api/submit-form"

GENERIC_ERROR_MESSAGE = "An error occurred"
NETWORK_ERROR_MESSAGE = "Network error. Please try again."


class SubmitStatus(str, Enum):
    IDLE = "idle"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class LocalFile:
    """A document picked by the applicant."""

    filename: str
    content: bytes = field(repr=False)
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str | Path) -> "LocalFile":
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )


def _empty_fields() -> dict[str, str]:
    return {name: "" for name in validators.REQUIRED_FORM_FIELDS}


@dataclass
class FormState:
    """UI-local state of the application form."""

    fields: dict[str, str] = field(default_factory=_empty_fields)
    attachment: LocalFile | None = None
    is_submitting: bool = False
    status: SubmitStatus = SubmitStatus.IDLE
    error_message: str = ""


class ApplicationFormClient:
    """Form controller that submits applications over HTTP."""

    def __init__(
        self,
        base_url: str = "",
        http_client: httpx.AsyncClient | None = None,
        endpoint: str = SUBMIT_ENDPOINT,
    ):
        self.base_url = base_url
        self.endpoint = endpoint
        self._http_client = http_client
        self.state = FormState()

    def set_field(self, name: str, value: str) -> None:
        if name not in self.state.fields:
            raise KeyError(f"Unknown form field: {name}")
        self.state.fields[name] = value

    def select_file(self, file: LocalFile | None) -> None:
        self.state.attachment = file

    def clear_file(self) -> None:
        self.state.attachment = None

    def reset(self) -> None:
        """Clear every field and the selected file."""
        self.state.fields = _empty_fields()
        self.state.attachment = None

    def _fail(self, message: str) -> FormState:
        self.state.status = SubmitStatus.ERROR
        self.state.error_message = message
        return self.state

    def _validate(self, values: dict[str, str]) -> str | None:
        """Return the first advisory validation message, or None."""
        if validators.missing_fields(values):
            return validators.ALL_FIELDS_REQUIRED
        if not validators.is_valid_email(values["email"]):
            return validators.INVALID_EMAIL_CLIENT
        if not validators.is_valid_phone(values["phone"]):
            return validators.INVALID_PHONE
        attachment = self.state.attachment
        if attachment is not None and not validators.is_allowed_attachment_size(attachment.size):
            return validators.FILE_TOO_LARGE
        return None

    def _multipart_payload(self, values: dict[str, str]) -> list[tuple[str, tuple]]:
        # Text fields go in as filename-less parts so the body is always
        # multipart/form-data, with or without a document.
        parts: list[tuple[str, tuple]] = [
            (name, (None, value.encode("utf-8"))) for name, value in values.items()
        ]
        attachment = self.state.attachment
        if attachment is not None:
            parts.append(
                ("file", (attachment.filename, attachment.content, attachment.content_type))
            )
        return parts

    async def _post(self, values: dict[str, str]) -> httpx.Response:
        files = self._multipart_payload(values)

        if self._http_client is not None:
            return await self._http_client.post(self.endpoint, files=files)

        async with httpx.AsyncClient(base_url=self.base_url) as client:
            return await client.post(self.endpoint, files=files)

    async def submit(self) -> FormState:
        """
        Validate the form and submit it.

        Returns:
            The updated form state. ``is_submitting`` is always cleared.
        """
        self.state.is_submitting = True
        self.state.status = SubmitStatus.IDLE
        self.state.error_message = ""

        try:
            values = {name: value.strip() for name, value in self.state.fields.items()}

            problem = self._validate(values)
            if problem:
                return self._fail(problem)

            response = await self._post(values)
            result = response.json()

            if response.is_success:
                self.state.status = SubmitStatus.SUCCESS
                self.reset()
                return self.state

            error = result.get("error") if isinstance(result, dict) else None
            return self._fail(error or GENERIC_ERROR_MESSAGE)

        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Form submission failed: {e}")
            return self._fail(NETWORK_ERROR_MESSAGE)
        finally:
            self.state.is_submitting = False

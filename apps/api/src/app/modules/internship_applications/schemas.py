"""
Internship Applications Schemas

Pydantic schemas for the submission payload and JSON responses.

Field rules are enforced by the service layer rather than by Pydantic so
that every rejection maps to the fixed 400 messages the form displays.
"""

from pydantic import BaseModel, ConfigDict, Field


class Attachment(BaseModel):
    """Uploaded document held in memory for the duration of one request."""

    filename: str
    content_type: str
    content: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


class ApplicationSubmission(BaseModel):
    """A single internship application. Never persisted."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""
    phone: str = ""
    message: str = ""
    attachment: Attachment | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def form_values(self) -> dict[str, str]:
        """Text fields keyed by their multipart names."""
        return self.model_dump(by_alias=True, exclude={"attachment"})


class SubmitFormResponse(BaseModel):
    """Response body for a delivered application."""

    message: str = "Application submitted successfully!"


class ErrorResponse(BaseModel):
    """Response body for any rejected or failed submission."""

    error: str

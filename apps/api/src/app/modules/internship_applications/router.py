"""
Internship Applications Router

Public endpoint backing the careers page application form.
No authentication is required: applicants have no account.

Endpoints:
- POST /submit-form - Validate an application and email it to recruiting

Responses use flat JSON bodies the form renders directly:
- 200 {"message": ...} on success
- 400 {"error": ...} on validation failure
- 500 {"error": ...} on configuration or delivery failure
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.modules.internship_applications import service
from app.modules.internship_applications.helpers import attachment_from_upload
from app.modules.internship_applications.schemas import (
    ApplicationSubmission,
    ErrorResponse,
    SubmitFormResponse,
)
from app.modules.internship_applications.service import (
    GENERIC_FAILURE_MESSAGE,
    ApplicationServiceError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/submit-form",
    response_model=SubmitFormResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit Internship Application",
    description="""
Submit an internship application from the careers page.

The application is validated, rendered as an HTML email and sent to the
recruiting mailbox through the configured SMTP relay. Nothing is stored.

**Form fields (multipart/form-data):**
- firstName, lastName, email, phone, message (required)
- file (optional, PDF/DOC/DOCX, at most 10MB)
""",
    responses={
        200: {
            "description": "Application delivered",
            "model": SubmitFormResponse,
        },
        400: {
            "description": "Validation error",
            "model": ErrorResponse,
            "content": {
                "application/json": {"example": {"error": "All fields are required"}}
            },
        },
        500: {
            "description": "Email service misconfigured or unreachable",
            "model": ErrorResponse,
            "content": {
                "application/json": {
                    "example": {
                        "error": "Email service connection failed: Connection refused"
                    }
                }
            },
        },
    },
)
async def submit_form(
    first_name: str = Form("", alias="firstName"),
    last_name: str = Form("", alias="lastName"),
    email: str = Form(""),
    phone: str = Form(""),
    message: str = Form(""),
    file: UploadFile | str | None = File(None),
    settings: Settings = Depends(get_settings),
) -> SubmitFormResponse | JSONResponse:
    """
    Relay an internship application to the recruiting mailbox.

    Args:
        first_name: Applicant first name
        last_name: Applicant last name
        email: Applicant email address
        phone: Applicant phone number
        message: Cover letter / free text
        file: Optional CV or cover letter document
        settings: Configuration read for this request (injected)

    Returns:
        Success message, or a JSON error body with the matching status code
    """
    try:
        submission = ApplicationSubmission(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            message=message,
            attachment=await attachment_from_upload(file),
        )
        response = await service.submit_application(submission, settings)

        logger.info(
            f"Application submitted: applicant={submission.full_name}, "
            f"attachment={submission.attachment is not None}"
        )

        return response

    except ApplicationServiceError as e:
        if e.status_code >= 500:
            logger.error(f"Application service error: {e.error_code}: {e.message}")
        else:
            logger.warning(f"Application rejected: {e.error_code}")
        return _error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error submitting application: {e}")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(e) or GENERIC_FAILURE_MESSAGE,
        )
    finally:
        if isinstance(file, UploadFile):
            await file.close()

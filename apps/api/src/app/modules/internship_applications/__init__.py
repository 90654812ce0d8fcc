"""
Internship Applications Module

Handles the careers page internship application flow:
1. Server-side validation of the submitted form (fields, email, phone, document)
2. Rendering of the HTML notification with the company logo
3. Delivery to the recruiting mailbox through an SMTP relay
4. A form client that performs the same checks before posting

API Endpoints:
- POST /submit-form - Submit an application (multipart/form-data)

Nothing is persisted: each submission lives only for its request.
"""

from .router import router

__all__ = ["router"]

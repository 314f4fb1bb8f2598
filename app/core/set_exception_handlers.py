"""Map domain errors to HTTP responses"""

import logging

from fastapi import FastAPI, Request, status
from starlette.responses import JSONResponse

from app.utils.exceptions import (
    DuplicateEnrollmentError,
    EnrollmentError,
    EnrollmentValidationError,
    InvalidStateError,
    NotFoundError,
    PolicyViolationError,
    StoreFailureError,
)


logger = logging.getLogger(__name__)

# Most specific classes first; DuplicateLessonError resolves via EnrollmentValidationError
STATUS_CODES: list[tuple[type[EnrollmentError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateEnrollmentError, status.HTTP_409_CONFLICT),
    (PolicyViolationError, status.HTTP_403_FORBIDDEN),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (EnrollmentValidationError, status.HTTP_400_BAD_REQUEST),
    (StoreFailureError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_code_for(exc: EnrollmentError) -> int:
    for error_class, status_code in STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def enrollment_error_handler(request: Request, exc: EnrollmentError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers for the enrollment error hierarchy"""
    app.add_exception_handler(EnrollmentError, enrollment_error_handler)

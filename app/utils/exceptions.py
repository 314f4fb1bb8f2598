"""Domain exceptions for the enrollment lifecycle.

Every failure raised by the services carries a stable ``error_code`` so the
HTTP layer can map it to a response without inspecting the message:

- EnrollmentError: base class
- NotFoundError: student, course or enrollment does not exist
- DuplicateEnrollmentError: the (student, course) pair is already enrolled
- PolicyViolationError: business rule rejection
- InvalidStateError: operation not allowed for the current status
- EnrollmentValidationError: malformed input
- DuplicateLessonError: lesson already recorded for the enrollment
- StoreFailureError: persistence layer failed unexpectedly
"""


class EnrollmentError(Exception):
    """Base exception for all enrollment errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    error_code = "ENROLLMENT_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class NotFoundError(EnrollmentError):
    error_code = "NOT_FOUND"


class DuplicateEnrollmentError(EnrollmentError):
    error_code = "DUPLICATE_ENROLLMENT"


class PolicyViolationError(EnrollmentError):
    error_code = "POLICY_VIOLATION"


class InvalidStateError(EnrollmentError):
    error_code = "INVALID_STATE"


class EnrollmentValidationError(EnrollmentError):
    error_code = "VALIDATION_ERROR"


class DuplicateLessonError(EnrollmentValidationError):
    error_code = "DUPLICATE_LESSON"


class StoreFailureError(EnrollmentError):
    """Raised when the document store is unavailable or rejects a write."""

    error_code = "STORE_FAILURE"

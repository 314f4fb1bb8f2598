from functools import wraps
import logging

from app.utils.exceptions import EnrollmentError, StoreFailureError


logger = logging.getLogger(__name__)


def handle_firestore_exceptions(func):
    """
    Decorator to catch Firestore exceptions and raise StoreFailureError.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except EnrollmentError:
            # re-raise domain errors as-is
            raise
        except Exception as e:
            logger.exception(
                f"Unhandled exception in {func.__name__}: {e}",
                exc_info=True,
            )
            raise StoreFailureError(
                f"Document store failure in {func.__name__}: {str(e)}"
            ) from e

    return wrapper

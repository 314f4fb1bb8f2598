"""Service dependencies for route handlers"""

from fastapi import Depends

from app.core.config import settings
from app.initializers.firestore import get_db
from app.repositories.firestore_enrollment_repository import FirestoreEnrollmentRepository
from app.services.course_service import CourseService
from app.services.enrollment_service import EnrollmentService
from app.services.user_service import UserService


def get_enrollment_service(db=Depends(get_db)) -> EnrollmentService:
    """
    Build the enrollment service for one request.

    Returns:
        EnrollmentService wired to the Firestore repository and lookups
    """
    return EnrollmentService(
        repository=FirestoreEnrollmentRepository(db, settings.ENROLLMENTS_COLLECTION),
        user_service=UserService(db, settings.USERS_COLLECTION),
        course_service=CourseService(db, settings.COURSES_COLLECTION),
        reissue_certificates=settings.REISSUE_CERTIFICATES,
        min_progress_to_rate=settings.MIN_PROGRESS_TO_RATE,
        certificate_base_path=settings.CERTIFICATE_BASE_PATH,
    )

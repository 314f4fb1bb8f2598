from datetime import datetime
import logging
from uuid import uuid4

from app.models.course import Course
from app.models.enrollment import (
    CertificateInfo,
    CompletedLesson,
    CourseEnrollmentStats,
    CourseInfo,
    CourseRating,
    Enrollment,
    EnrollmentStats,
    EnrollmentStatus,
    PaymentInfo,
    PaymentStatus,
    StatusChange,
    StudentInfo,
)
from app.models.user import User
from app.repositories.enrollment_repository import EnrollmentRepository
from app.services.course_service import CourseService
from app.services.progress_tracker import calculate_progress, has_reached_completion
from app.services.user_service import UserService
from app.utils.exceptions import (
    DuplicateEnrollmentError,
    DuplicateLessonError,
    EnrollmentValidationError,
    InvalidStateError,
    PolicyViolationError,
)


logger = logging.getLogger(__name__)


class EnrollmentService:
    """Lifecycle of a student's enrollment in a course.

    Every state change is applied through ``repository.update`` so the
    validation, the change and the write happen as one atomic step on the
    stored record.
    """

    def __init__(
        self,
        repository: EnrollmentRepository,
        user_service: UserService,
        course_service: CourseService,
        reissue_certificates: bool = False,
        min_progress_to_rate: float = 20.0,
        certificate_base_path: str = "/certificates",
    ):
        self.repository = repository
        self.user_service = user_service
        self.course_service = course_service
        self.reissue_certificates = reissue_certificates
        self.min_progress_to_rate = min_progress_to_rate
        self.certificate_base_path = certificate_base_path.rstrip("/")

    # ------------------------------------------------------------------
    # Enrollment
    # ------------------------------------------------------------------

    def enroll(self, student_id: str, course_id: str) -> Enrollment:
        """Enroll a student in a course.

        Free courses start ACTIVE with a pre-filled FREE payment; priced
        courses start PENDING_PAYMENT until ``confirm_payment`` is called.

        Raises:
            NotFoundError: student or course does not exist
            PolicyViolationError: ineligible role, inactive course or self-enrollment
            DuplicateEnrollmentError: the pair is already enrolled
        """
        student = self.user_service.get_user(student_id)
        course = self.course_service.get_course(course_id)

        self._validate_enrollment(student, course)

        if self.repository.exists_by_student_and_course(student_id, course_id):
            logger.warning(
                f"Duplicate enrollment rejected: student '{student_id}' in course '{course_id}'"
            )
            raise DuplicateEnrollmentError(
                "Student is already enrolled in this course.",
                details={"student_id": student_id, "course_id": course_id},
            )

        initial_status = (
            EnrollmentStatus.ACTIVE if course.is_free else EnrollmentStatus.PENDING_PAYMENT
        )
        enrollment = Enrollment(
            student=StudentInfo.from_user(student),
            course=CourseInfo.from_course(course),
            status=initial_status,
            payment=PaymentInfo.free() if course.is_free else None,
            status_history=[StatusChange(to_status=initial_status, reason="enrolled")],
        )

        # The repository enforces uniqueness again for concurrent enrollments
        saved = self.repository.save(enrollment)
        logger.info(
            f"Created enrollment '{saved.id}' for student '{student_id}' "
            f"in course '{course_id}' with status {initial_status.value}"
        )
        return saved

    def _validate_enrollment(self, student: User, course: Course) -> None:
        if not student.role.can_enroll_in_courses:
            logger.warning(f"User '{student.id}' with role {student.role.value} cannot enroll")
            raise PolicyViolationError(
                "User profile is not allowed to enroll in courses.",
                details={"role": student.role.value},
            )

        if not course.is_active:
            logger.warning(f"Enrollment rejected: course '{course.id}' is not active")
            raise PolicyViolationError("Course is not active for enrollments.")

        if course.instructor_id == student.id:
            logger.warning(f"Instructor '{student.id}' tried to enroll in own course '{course.id}'")
            raise PolicyViolationError("Instructors cannot enroll in their own course.")

    def confirm_payment(
        self, enrollment_id: str, transaction_id: str, payment_method: str
    ) -> Enrollment:
        """Attach a PAID payment for the course price snapshot and activate."""

        def mutate(enrollment: Enrollment) -> Enrollment:
            if enrollment.status is not EnrollmentStatus.PENDING_PAYMENT:
                raise InvalidStateError(
                    "Enrollment is not pending payment.",
                    details={"status": enrollment.status.value},
                )
            enrollment.payment = PaymentInfo(
                amount_paid=enrollment.course.price,
                payment_method=payment_method,
                transaction_id=transaction_id,
                status=PaymentStatus.PAID,
            )
            enrollment.change_status(EnrollmentStatus.ACTIVE, reason="payment confirmed")
            return enrollment

        enrollment = self.repository.update(enrollment_id, mutate)
        logger.info(f"Payment '{transaction_id}' confirmed for enrollment '{enrollment_id}'")
        return enrollment

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def complete_lesson(
        self,
        enrollment_id: str,
        module_title: str,
        lesson_title: str,
        lesson_order: int = 1,
        time_spent: int = 0,
    ) -> Enrollment:
        """Record a completed lesson and recompute progress.

        Reaching 100% moves the enrollment to COMPLETED in the same write.
        """

        def mutate(enrollment: Enrollment) -> Enrollment:
            if not enrollment.status.can_study:
                raise InvalidStateError(
                    "Cannot complete lesson: enrollment is not active.",
                    details={"status": enrollment.status.value},
                )
            if enrollment.is_lesson_completed(lesson_title):
                raise DuplicateLessonError(
                    f"Lesson '{lesson_title}' was already completed.",
                    details={"lesson_title": lesson_title},
                )

            now = datetime.today()
            enrollment.completed_lessons.append(
                CompletedLesson(
                    module_title=module_title,
                    lesson_title=lesson_title,
                    lesson_order=lesson_order,
                    completed_at=now,
                    time_spent=time_spent if time_spent > 0 else 0,
                )
            )
            enrollment.last_accessed_at = now
            enrollment.progress_percentage = calculate_progress(
                enrollment.course.total_lessons, enrollment.total_completed_lessons
            )

            if has_reached_completion(enrollment.progress_percentage):
                enrollment.change_status(EnrollmentStatus.COMPLETED, reason="all lessons completed")
                enrollment.completed_at = now
            return enrollment

        enrollment = self.repository.update(enrollment_id, mutate)
        logger.info(
            f"Lesson '{lesson_title}' completed for enrollment '{enrollment_id}' "
            f"(progress {enrollment.progress_percentage:.1f}%)"
        )
        if enrollment.status is EnrollmentStatus.COMPLETED:
            logger.info(f"Enrollment '{enrollment_id}' completed")
        return enrollment

    def complete_course(self, enrollment_id: str, reissue: bool | None = None) -> Enrollment:
        """Issue a completion certificate.

        By default an existing certificate is returned unchanged; with
        ``reissue`` a new certificate replaces it.
        """
        reissue = self.reissue_certificates if reissue is None else reissue

        def mutate(enrollment: Enrollment) -> Enrollment:
            if not enrollment.is_completed():
                raise InvalidStateError(
                    "Course has not been fully completed yet.",
                    details={"progress_percentage": enrollment.progress_percentage},
                )
            if enrollment.certificate is not None and not reissue:
                return enrollment

            certificate_id = self._generate_certificate_id()
            enrollment.certificate = CertificateInfo(
                certificate_id=certificate_id,
                certificate_url=f"{self.certificate_base_path}/{certificate_id}.pdf",
            )
            return enrollment

        enrollment = self.repository.update(enrollment_id, mutate)
        logger.info(
            f"Certificate '{enrollment.certificate.certificate_id}' "
            f"available for enrollment '{enrollment_id}'"
        )
        return enrollment

    def _generate_certificate_id(self) -> str:
        millis = int(datetime.today().timestamp() * 1000)
        return f"CERT-{millis}-{uuid4().hex[:8].upper()}"

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    def rate_course(self, enrollment_id: str, rating: int, comment: str | None = None) -> Enrollment:
        def mutate(enrollment: Enrollment) -> Enrollment:
            if enrollment.progress_percentage < self.min_progress_to_rate:
                raise PolicyViolationError(
                    f"At least {self.min_progress_to_rate:g}% progress is required to rate the course.",
                    details={"progress_percentage": enrollment.progress_percentage},
                )
            if not 1 <= rating <= 5:
                raise EnrollmentValidationError(
                    "Rating must be between 1 and 5 stars.", details={"rating": rating}
                )
            enrollment.rating = CourseRating(rating=rating, comment=comment)
            return enrollment

        enrollment = self.repository.update(enrollment_id, mutate)
        logger.info(f"Enrollment '{enrollment_id}' rated {rating} stars")
        return enrollment

    # ------------------------------------------------------------------
    # Access control
    # ------------------------------------------------------------------

    def update_last_access(self, enrollment_id: str) -> Enrollment:
        def mutate(enrollment: Enrollment) -> Enrollment:
            enrollment.last_accessed_at = datetime.today()
            return enrollment

        return self.repository.update(enrollment_id, mutate)

    def suspend(self, enrollment_id: str, reason: str) -> Enrollment:
        """Suspend regardless of the current status; the reason goes to the audit trail."""

        def mutate(enrollment: Enrollment) -> Enrollment:
            enrollment.change_status(EnrollmentStatus.SUSPENDED, reason=reason)
            return enrollment

        enrollment = self.repository.update(enrollment_id, mutate)
        logger.info(f"Enrollment '{enrollment_id}' suspended: {reason}")
        return enrollment

    def reactivate(self, enrollment_id: str) -> Enrollment:
        """Lift a suspension. Enrollments that are not suspended are left as they are.

        A suspended enrollment normally returns to ACTIVE. The exception is one
        whose progress already reached 100%: it returns to COMPLETED instead, so
        no ACTIVE record ever shows a finished course.
        """

        def mutate(enrollment: Enrollment) -> Enrollment:
            if enrollment.status is not EnrollmentStatus.SUSPENDED:
                return enrollment
            if has_reached_completion(enrollment.progress_percentage):
                enrollment.change_status(EnrollmentStatus.COMPLETED, reason="reactivated")
            else:
                enrollment.change_status(EnrollmentStatus.ACTIVE, reason="reactivated")
            return enrollment

        enrollment = self.repository.update(enrollment_id, mutate)
        logger.info(f"Enrollment '{enrollment_id}' is now {enrollment.status.value}")
        return enrollment

    def cancel(self, enrollment_id: str) -> Enrollment:
        def mutate(enrollment: Enrollment) -> Enrollment:
            enrollment.change_status(EnrollmentStatus.CANCELLED, reason="cancelled")
            return enrollment

        enrollment = self.repository.update(enrollment_id, mutate)
        logger.info(f"Enrollment '{enrollment_id}' cancelled")
        return enrollment

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_enrollment(self, enrollment_id: str) -> Enrollment:
        return self.repository.find_by_id(enrollment_id)

    def find_enrollment(self, student_id: str, course_id: str) -> Enrollment | None:
        return self.repository.find_by_student_and_course(student_id, course_id)

    def is_student_enrolled(self, student_id: str, course_id: str) -> bool:
        return self.repository.exists_by_student_and_course(student_id, course_id)

    def get_enrollments_by_student(
        self, student_id: str, status: EnrollmentStatus | None = None, limit: int = 100
    ) -> list[Enrollment]:
        return self.repository.find_by_student(student_id, status, limit=limit)

    def get_enrollments_by_course(self, course_id: str, limit: int = 100) -> list[Enrollment]:
        return self.repository.find_by_course(course_id, limit=limit)

    def get_stats(self) -> EnrollmentStats:
        return EnrollmentStats(
            total_enrollments=self.repository.count(),
            active_enrollments=self.repository.count(status=EnrollmentStatus.ACTIVE),
            completed_enrollments=self.repository.count(status=EnrollmentStatus.COMPLETED),
            pending_payments=self.repository.count(status=EnrollmentStatus.PENDING_PAYMENT),
        )

    def get_course_stats(self, course_id: str) -> CourseEnrollmentStats:
        return CourseEnrollmentStats(
            course_id=course_id,
            total_enrollments=self.repository.count(course_id=course_id),
            active_enrollments=self.repository.count(
                status=EnrollmentStatus.ACTIVE, course_id=course_id
            ),
        )

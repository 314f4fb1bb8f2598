"""Enrollment endpoints: enrollment, payment, progress, certificates and admin actions."""

from fastapi import APIRouter, Depends, Query, status

from app.dependencies.enrollment import get_enrollment_service
from app.models.enrollment import (
    CourseEnrollmentStats,
    Enrollment,
    EnrollmentCheck,
    EnrollmentCreate,
    EnrollmentStats,
    EnrollmentStatus,
    LessonCompletion,
    PaymentConfirmation,
    RatingCreate,
    SuspensionRequest,
)
from app.services.enrollment_service import EnrollmentService

router = APIRouter()


@router.post("", response_model=Enrollment, status_code=status.HTTP_201_CREATED)
async def enroll_student(
    data: EnrollmentCreate,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """
    Enroll a student in a course.

    Returns:
        The new enrollment, ACTIVE for free courses or PENDING_PAYMENT otherwise

    Raises:
        404: Student or course not found
        403: Role not allowed, course inactive or instructor enrolling in own course
        409: Student already enrolled
    """
    return service.enroll(data.student_id, data.course_id)


@router.get("/check", response_model=EnrollmentCheck)
async def check_enrollment(
    student_id: str,
    course_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return EnrollmentCheck(
        student_id=student_id,
        course_id=course_id,
        is_enrolled=service.is_student_enrolled(student_id, course_id),
    )


@router.get("/stats", response_model=EnrollmentStats)
async def get_enrollment_stats(service: EnrollmentService = Depends(get_enrollment_service)):
    return service.get_stats()


@router.get("/stats/course/{course_id}", response_model=CourseEnrollmentStats)
async def get_course_stats(
    course_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return service.get_course_stats(course_id)


@router.get("/student/{student_id}", response_model=list[Enrollment])
async def get_enrollments_by_student(
    student_id: str,
    status_name: str | None = Query(None, alias="status"),
    limit: int = Query(100, ge=1),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """
    Get all enrollments of a student.

    Args:
        status: Optional status name to filter by (case-insensitive)
        limit: Maximum number of enrollments to return

    Raises:
        400: Unknown status name
    """
    status_filter = EnrollmentStatus.parse(status_name) if status_name else None
    return service.get_enrollments_by_student(student_id, status_filter, limit=limit)


@router.get("/course/{course_id}", response_model=list[Enrollment])
async def get_enrollments_by_course(
    course_id: str,
    limit: int = Query(100, ge=1),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """
    Get the enrollments of a course.

    Args:
        limit: Maximum number of enrollments to return
    """
    return service.get_enrollments_by_course(course_id, limit=limit)


@router.get("/{enrollment_id}", response_model=Enrollment)
async def get_enrollment(
    enrollment_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return service.get_enrollment(enrollment_id)


@router.post("/{enrollment_id}/confirm-payment", response_model=Enrollment)
async def confirm_payment(
    enrollment_id: str,
    data: PaymentConfirmation,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """
    Confirm the payment of a pending enrollment and activate it.

    Raises:
        404: Enrollment not found
        409: Enrollment is not pending payment
    """
    return service.confirm_payment(enrollment_id, data.transaction_id, data.payment_method)


@router.post("/{enrollment_id}/complete-lesson", response_model=Enrollment)
async def complete_lesson(
    enrollment_id: str,
    data: LessonCompletion,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """
    Mark a lesson as completed and recompute progress.

    Raises:
        404: Enrollment not found
        409: Enrollment is not active
        400: Lesson already completed
    """
    return service.complete_lesson(
        enrollment_id,
        data.module_title,
        data.lesson_title,
        data.lesson_order,
        data.time_spent,
    )


@router.post("/{enrollment_id}/complete-course", response_model=Enrollment)
async def complete_course(
    enrollment_id: str,
    reissue: bool | None = None,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """
    Issue the completion certificate.

    Args:
        reissue: Replace an existing certificate instead of returning it

    Raises:
        409: Course not completed yet
    """
    return service.complete_course(enrollment_id, reissue=reissue)


@router.post("/{enrollment_id}/rate", response_model=Enrollment)
async def rate_course(
    enrollment_id: str,
    data: RatingCreate,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """
    Rate the course from 1 to 5 stars.

    Raises:
        403: Not enough progress to rate
        400: Rating out of range
    """
    return service.rate_course(enrollment_id, data.rating, data.comment)


@router.post("/{enrollment_id}/access", response_model=Enrollment)
async def update_last_access(
    enrollment_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return service.update_last_access(enrollment_id)


@router.post("/{enrollment_id}/suspend", response_model=Enrollment)
async def suspend_enrollment(
    enrollment_id: str,
    data: SuspensionRequest,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return service.suspend(enrollment_id, data.reason)


@router.post("/{enrollment_id}/reactivate", response_model=Enrollment)
async def reactivate_enrollment(
    enrollment_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return service.reactivate(enrollment_id)


@router.post("/{enrollment_id}/cancel", response_model=Enrollment)
async def cancel_enrollment(
    enrollment_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return service.cancel(enrollment_id)

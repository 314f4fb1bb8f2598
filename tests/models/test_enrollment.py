"""Unit tests for Enrollment model and its enums."""

from datetime import datetime

from pydantic import ValidationError
import pytest

from app.models.course import Course
from app.models.enrollment import (
    CompletedLesson,
    CourseInfo,
    CourseRating,
    Enrollment,
    EnrollmentStatus,
    PaymentInfo,
    PaymentStatus,
    StudentInfo,
)
from app.models.user import User, UserProfile
from app.utils.exceptions import EnrollmentValidationError


@pytest.fixture
def student_info():
    return StudentInfo(id="student123", name="Ana Souza", email="ana@example.com")


@pytest.fixture
def course_info():
    return CourseInfo(
        id="course456",
        title="Spring Boot Basics",
        instructor_name="Carlos Lima",
        price=100.0,
        total_lessons=4,
    )


@pytest.fixture
def valid_enrollment(student_info, course_info):
    return Enrollment(student=student_info, course=course_info)


def test_enrollment_defaults(valid_enrollment):
    """Should start active with no progress and no optional sections."""
    assert valid_enrollment.id is None
    assert valid_enrollment.status is EnrollmentStatus.ACTIVE
    assert valid_enrollment.progress_percentage == 0.0
    assert valid_enrollment.completed_lessons == []
    assert valid_enrollment.completed_at is None
    assert valid_enrollment.payment is None
    assert valid_enrollment.rating is None
    assert valid_enrollment.certificate is None


def test_enrollment_timestamps_auto_generated(valid_enrollment):
    assert isinstance(valid_enrollment.enrolled_at, datetime)
    assert isinstance(valid_enrollment.last_accessed_at, datetime)
    assert isinstance(valid_enrollment.updated_at, datetime)


@pytest.mark.parametrize("progress_value", [-0.1, 100.1])
def test_enrollment_rejects_progress_out_of_range(student_info, course_info, progress_value):
    with pytest.raises(ValidationError):
        Enrollment(student=student_info, course=course_info, progress_percentage=progress_value)


def test_snapshots_are_frozen(student_info, course_info):
    """Snapshots must not be edited after enrollment."""
    with pytest.raises(ValidationError):
        student_info.name = "Other"
    with pytest.raises(ValidationError):
        course_info.price = 0.0


def test_snapshots_copy_lookup_records():
    user = User(id="u1", name="Ana", email="ana@example.com", role=UserProfile.STUDENT)
    course = Course(
        id="c1",
        title="Python",
        instructor_id="i1",
        instructor_name="Carlos",
        price=49.9,
        total_lessons=10,
    )

    assert StudentInfo.from_user(user) == StudentInfo(id="u1", name="Ana", email="ana@example.com")
    info = CourseInfo.from_course(course)
    assert info.price == 49.9
    assert info.total_lessons == 10
    assert info.instructor_name == "Carlos"


def test_is_completed_by_status_or_progress(valid_enrollment):
    assert valid_enrollment.is_completed() is False

    valid_enrollment.progress_percentage = 100.0
    assert valid_enrollment.is_completed() is True

    valid_enrollment.progress_percentage = 50.0
    valid_enrollment.status = EnrollmentStatus.COMPLETED
    assert valid_enrollment.is_completed() is True


def test_is_lesson_completed_matches_title(valid_enrollment):
    valid_enrollment.completed_lessons.append(
        CompletedLesson(module_title="Module 1", lesson_title="Intro", lesson_order=1)
    )

    assert valid_enrollment.is_lesson_completed("Intro") is True
    assert valid_enrollment.is_lesson_completed("Setup") is False
    assert valid_enrollment.total_completed_lessons == 1


def test_change_status_records_history(valid_enrollment):
    valid_enrollment.change_status(EnrollmentStatus.SUSPENDED, reason="chargeback")

    assert valid_enrollment.status is EnrollmentStatus.SUSPENDED
    entry = valid_enrollment.status_history[-1]
    assert entry.from_status is EnrollmentStatus.ACTIVE
    assert entry.to_status is EnrollmentStatus.SUSPENDED
    assert entry.reason == "chargeback"


def test_to_document_stores_enums_by_name(valid_enrollment):
    valid_enrollment.payment = PaymentInfo.free()

    document = valid_enrollment.to_document()

    assert document["status"] == "ACTIVE"
    assert document["payment"]["status"] == "FREE"
    assert document["student"]["id"] == "student123"


def test_document_loads_back_into_model(valid_enrollment):
    valid_enrollment.id = "student123_course456"

    loaded = Enrollment(**valid_enrollment.to_document())

    assert loaded.id == "student123_course456"
    assert loaded.status is EnrollmentStatus.ACTIVE
    assert loaded.course == valid_enrollment.course


def test_free_payment_is_zero_cost():
    payment = PaymentInfo.free()

    assert payment.amount_paid == 0.0
    assert payment.status is PaymentStatus.FREE
    assert payment.status.is_paid is True


@pytest.mark.parametrize("stars", [0, 6])
def test_rating_rejects_out_of_range_stars(stars):
    with pytest.raises(ValidationError):
        CourseRating(rating=stars)


@pytest.mark.parametrize("raw", ["active", "ACTIVE", " Pending_Payment "])
def test_status_parse_is_case_insensitive(raw):
    assert EnrollmentStatus.parse(raw) in (EnrollmentStatus.ACTIVE, EnrollmentStatus.PENDING_PAYMENT)


def test_status_parse_rejects_unknown_value():
    with pytest.raises(EnrollmentValidationError) as exc:
        EnrollmentStatus.parse("graduated")

    assert "graduated" in exc.value.message
    assert "ACTIVE" in exc.value.details["allowed"]


def test_payment_status_parse():
    assert PaymentStatus.parse("paid") is PaymentStatus.PAID
    with pytest.raises(EnrollmentValidationError):
        PaymentStatus.parse("unknown")


def test_only_active_status_can_study():
    assert [s for s in EnrollmentStatus if s.can_study] == [EnrollmentStatus.ACTIVE]


@pytest.mark.parametrize(
    "profile,allowed",
    [(UserProfile.STUDENT, True), (UserProfile.INSTRUCTOR, True), (UserProfile.ADMIN, False)],
)
def test_profile_enrollment_eligibility(profile, allowed):
    assert profile.can_enroll_in_courses is allowed


def test_profile_parse():
    assert UserProfile.parse("instructor") is UserProfile.INSTRUCTOR
    with pytest.raises(EnrollmentValidationError):
        UserProfile.parse("guest")


def test_only_paid_and_free_payments_count_as_paid():
    assert {s for s in PaymentStatus if s.is_paid} == {PaymentStatus.PAID, PaymentStatus.FREE}

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.course import Course
from app.models.user import User
from app.utils.exceptions import EnrollmentValidationError


class EnrollmentStatus(str, Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    SUSPENDED = "SUSPENDED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    @classmethod
    def parse(cls, value: str) -> "EnrollmentStatus":
        """Case-insensitive lookup by name."""
        for status in cls:
            if status.name == str(value).strip().upper():
                return status
        raise EnrollmentValidationError(
            f"Invalid enrollment status: '{value}'.",
            details={"allowed": [s.name for s in cls]},
        )

    @property
    def can_study(self) -> bool:
        return self is EnrollmentStatus.ACTIVE


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"
    FREE = "FREE"

    @classmethod
    def parse(cls, value: str) -> "PaymentStatus":
        """Case-insensitive lookup by name."""
        for status in cls:
            if status.name == str(value).strip().upper():
                return status
        raise EnrollmentValidationError(
            f"Invalid payment status: '{value}'.",
            details={"allowed": [s.name for s in cls]},
        )

    @property
    def is_paid(self) -> bool:
        return self in (PaymentStatus.PAID, PaymentStatus.FREE)


class StudentInfo(BaseModel):
    """Snapshot of the student taken at enrollment time.

    Later edits to the user are not reflected here.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: EmailStr

    @classmethod
    def from_user(cls, user: User) -> "StudentInfo":
        return cls(id=user.id, name=user.name, email=user.email)


class CourseInfo(BaseModel):
    """Snapshot of the course taken at enrollment time.

    Price and lesson count stay as they were when the student enrolled.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    instructor_name: str
    price: float = Field(default=0.0, ge=0.0)
    total_lessons: int = Field(default=0, ge=0)

    @classmethod
    def from_course(cls, course: Course) -> "CourseInfo":
        return cls(
            id=course.id,
            title=course.title,
            instructor_name=course.instructor_name,
            price=course.price,
            total_lessons=course.total_lessons,
        )


class CompletedLesson(BaseModel):
    module_title: str
    lesson_title: str
    lesson_order: int = 1
    completed_at: datetime = Field(default_factory=datetime.today)
    time_spent: int = Field(default=0, ge=0, description="Time spent on the lesson in seconds")


class PaymentInfo(BaseModel):
    amount_paid: float = Field(..., ge=0.0)
    payment_method: str
    transaction_id: str
    paid_at: datetime = Field(default_factory=datetime.today)
    status: PaymentStatus = PaymentStatus.PAID

    @classmethod
    def free(cls) -> "PaymentInfo":
        return cls(
            amount_paid=0.0,
            payment_method="FREE",
            transaction_id="FREE_COURSE",
            status=PaymentStatus.FREE,
        )


class CourseRating(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Stars from 1 to 5")
    comment: str | None = None
    rated_at: datetime = Field(default_factory=datetime.today)


class CertificateInfo(BaseModel):
    certificate_id: str
    certificate_url: str
    issued_at: datetime = Field(default_factory=datetime.today)


class StatusChange(BaseModel):
    """Audit entry appended whenever the enrollment status changes."""

    from_status: EnrollmentStatus | None = None
    to_status: EnrollmentStatus
    reason: str | None = None
    changed_at: datetime = Field(default_factory=datetime.today)


class Enrollment(BaseModel):
    id: str | None = Field(None, description="Composite key: {student_id}_{course_id}")
    student: StudentInfo
    course: CourseInfo
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    progress_percentage: float = Field(
        default=0.0, ge=0.0, le=100.0, description="Progress percentage (0-100)"
    )
    completed_lessons: list[CompletedLesson] = Field(default_factory=list)
    enrolled_at: datetime = Field(default_factory=datetime.today)
    completed_at: datetime | None = None
    last_accessed_at: datetime = Field(default_factory=datetime.today)
    updated_at: datetime = Field(default_factory=datetime.today)
    payment: PaymentInfo | None = None
    rating: CourseRating | None = None
    certificate: CertificateInfo | None = None
    status_history: list[StatusChange] = Field(default_factory=list)

    @property
    def total_completed_lessons(self) -> int:
        return len(self.completed_lessons)

    def is_completed(self) -> bool:
        return self.status is EnrollmentStatus.COMPLETED or self.progress_percentage >= 100.0

    def is_lesson_completed(self, lesson_title: str) -> bool:
        return any(lesson.lesson_title == lesson_title for lesson in self.completed_lessons)

    def change_status(self, new_status: EnrollmentStatus, reason: str | None = None) -> None:
        """Set the status and record the transition in the audit trail."""
        self.status_history.append(
            StatusChange(from_status=self.status, to_status=new_status, reason=reason)
        )
        self.status = new_status

    def to_document(self) -> dict:
        """Serialize for the document store (enums stored by name)."""
        return self.model_dump(mode="json")


class EnrollmentCreate(BaseModel):
    student_id: str
    course_id: str


class PaymentConfirmation(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1, description="e.g. card, pix, boleto")


class LessonCompletion(BaseModel):
    module_title: str
    lesson_title: str = Field(..., min_length=1)
    lesson_order: int = 1
    time_spent: int = Field(default=0, description="Seconds spent; ignored unless positive")


class RatingCreate(BaseModel):
    # Range is checked by the service so progress rules are applied first
    rating: int
    comment: str | None = None


class SuspensionRequest(BaseModel):
    reason: str = Field(..., min_length=1)


class EnrollmentCheck(BaseModel):
    student_id: str
    course_id: str
    is_enrolled: bool


class EnrollmentStats(BaseModel):
    total_enrollments: int = 0
    active_enrollments: int = 0
    completed_enrollments: int = 0
    pending_payments: int = 0


class CourseEnrollmentStats(BaseModel):
    course_id: str
    total_enrollments: int = 0
    active_enrollments: int = 0

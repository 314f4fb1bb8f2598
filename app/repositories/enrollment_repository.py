from __future__ import annotations

from datetime import datetime
import threading
from typing import Callable, Protocol

from app.models.enrollment import Enrollment, EnrollmentStatus
from app.utils.exceptions import DuplicateEnrollmentError, NotFoundError

EnrollmentMutation = Callable[[Enrollment], Enrollment]


def _escape_key_part(value: str) -> str:
    return value.replace("~", "~0").replace("_", "~1").replace("/", "~2")


def enrollment_key(student_id: str, course_id: str) -> str:
    """Composite key for an enrollment.

    Each id has `~`, `_` and `/` escaped as `~0`, `~1` and `~2` before
    joining, so the only raw `_` is the separator and distinct pairs never
    share a key. Ids without those characters keep the plain
    `{student_id}_{course_id}` form.
    """
    return f"{_escape_key_part(student_id)}_{_escape_key_part(course_id)}"


def belongs_to(enrollment: Enrollment, student_id: str, course_id: str) -> bool:
    return enrollment.student.id == student_id and enrollment.course.id == course_id


class EnrollmentRepository(Protocol):
    def save(self, enrollment: Enrollment) -> Enrollment: ...
    def find_by_id(self, enrollment_id: str) -> Enrollment: ...
    def find_by_student_and_course(self, student_id: str, course_id: str) -> Enrollment | None: ...
    def exists_by_student_and_course(self, student_id: str, course_id: str) -> bool: ...
    def update(self, enrollment_id: str, mutation: EnrollmentMutation) -> Enrollment: ...
    def find_by_student(
        self, student_id: str, status: EnrollmentStatus | None = None, limit: int = 100
    ) -> list[Enrollment]: ...
    def find_by_course(self, course_id: str, limit: int = 100) -> list[Enrollment]: ...
    def count(
        self, status: EnrollmentStatus | None = None, course_id: str | None = None
    ) -> int: ...


class InMemoryEnrollmentRepository:
    """Process-local repository.

    A single lock serialises inserts and read-modify-write updates, which
    gives the same uniqueness and per-record atomicity the document store
    provides.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[str, Enrollment] = {}

    def save(self, enrollment: Enrollment) -> Enrollment:
        with self._lock:
            stored = enrollment.model_copy(deep=True)
            stored.updated_at = datetime.today()
            if stored.id is None:
                stored.id = enrollment_key(stored.student.id, stored.course.id)
                if stored.id in self._by_id:
                    raise DuplicateEnrollmentError(
                        "Student is already enrolled in this course.",
                        details={"student_id": stored.student.id, "course_id": stored.course.id},
                    )
            self._by_id[stored.id] = stored
            return stored.model_copy(deep=True)

    def find_by_id(self, enrollment_id: str) -> Enrollment:
        enrollment = self._by_id.get(enrollment_id)
        if enrollment is None:
            raise NotFoundError(f"Enrollment with ID '{enrollment_id}' not found.")
        return enrollment.model_copy(deep=True)

    def find_by_student_and_course(self, student_id: str, course_id: str) -> Enrollment | None:
        enrollment = self._by_id.get(enrollment_key(student_id, course_id))
        if enrollment is None or not belongs_to(enrollment, student_id, course_id):
            return None
        return enrollment.model_copy(deep=True)

    def exists_by_student_and_course(self, student_id: str, course_id: str) -> bool:
        enrollment = self._by_id.get(enrollment_key(student_id, course_id))
        return enrollment is not None and belongs_to(enrollment, student_id, course_id)

    def update(self, enrollment_id: str, mutation: EnrollmentMutation) -> Enrollment:
        with self._lock:
            current = self._by_id.get(enrollment_id)
            if current is None:
                raise NotFoundError(f"Enrollment with ID '{enrollment_id}' not found.")
            # Mutate a copy so a failing mutation leaves the stored record intact
            updated = mutation(current.model_copy(deep=True))
            updated.updated_at = datetime.today()
            self._by_id[enrollment_id] = updated
            return updated.model_copy(deep=True)

    def find_by_student(
        self, student_id: str, status: EnrollmentStatus | None = None, limit: int = 100
    ) -> list[Enrollment]:
        matches = [
            e
            for e in self._by_id.values()
            if e.student.id == student_id and (status is None or e.status is status)
        ]
        return [e.model_copy(deep=True) for e in matches[:limit]]

    def find_by_course(self, course_id: str, limit: int = 100) -> list[Enrollment]:
        matches = [e for e in self._by_id.values() if e.course.id == course_id]
        return [e.model_copy(deep=True) for e in matches[:limit]]

    def count(self, status: EnrollmentStatus | None = None, course_id: str | None = None) -> int:
        return sum(
            1
            for e in self._by_id.values()
            if (status is None or e.status is status)
            and (course_id is None or e.course.id == course_id)
        )

from datetime import datetime
import logging

from google.api_core.exceptions import AlreadyExists
from google.cloud.firestore import transactional
from google.cloud.firestore_v1.base_query import FieldFilter

from app.models.enrollment import Enrollment, EnrollmentStatus
from app.repositories.enrollment_repository import (
    EnrollmentMutation,
    belongs_to,
    enrollment_key,
)
from app.utils.exceptions import DuplicateEnrollmentError, NotFoundError
from app.utils.firestore_exception import handle_firestore_exceptions


logger = logging.getLogger(__name__)


class FirestoreEnrollmentRepository:
    """Enrollments stored in a Firestore collection.

    Document ids are the composite key from ``enrollment_key``, so the
    document id doubles as the unique index on the pair: ``create()`` fails
    with AlreadyExists for the second of two concurrent inserts.
    """

    def __init__(self, db, collection_name: str = "enrollments"):
        self.db = db
        self.collection = db.collection(collection_name)

    @handle_firestore_exceptions
    def save(self, enrollment: Enrollment) -> Enrollment:
        enrollment = enrollment.model_copy(deep=True)
        enrollment.updated_at = datetime.today()

        if enrollment.id is not None:
            self.collection.document(enrollment.id).set(enrollment.to_document())
            return enrollment

        enrollment.id = enrollment_key(enrollment.student.id, enrollment.course.id)
        try:
            self.collection.document(enrollment.id).create(enrollment.to_document())
        except AlreadyExists as e:
            logger.warning(f"Enrollment '{enrollment.id}' already exists, rejecting insert")
            raise DuplicateEnrollmentError(
                "Student is already enrolled in this course.",
                details={"student_id": enrollment.student.id, "course_id": enrollment.course.id},
            ) from e

        return enrollment

    @handle_firestore_exceptions
    def find_by_id(self, enrollment_id: str) -> Enrollment:
        doc = self.collection.document(enrollment_id).get()
        if not doc.exists:
            raise NotFoundError(f"Enrollment with ID '{enrollment_id}' not found.")
        return self._from_snapshot(doc)

    @handle_firestore_exceptions
    def find_by_student_and_course(self, student_id: str, course_id: str) -> Enrollment | None:
        doc = self.collection.document(enrollment_key(student_id, course_id)).get()
        if not doc.exists:
            return None
        enrollment = self._from_snapshot(doc)
        return enrollment if belongs_to(enrollment, student_id, course_id) else None

    @handle_firestore_exceptions
    def exists_by_student_and_course(self, student_id: str, course_id: str) -> bool:
        return self.find_by_student_and_course(student_id, course_id) is not None

    @handle_firestore_exceptions
    def update(self, enrollment_id: str, mutation: EnrollmentMutation) -> Enrollment:
        """Read, mutate and write one enrollment inside a Firestore transaction.

        Firestore retries the function on contention, so ``mutation`` may run
        more than once and must only touch the enrollment it is given.
        """
        doc_ref = self.collection.document(enrollment_id)

        @transactional
        def apply_mutation(transaction):
            snapshot = doc_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError(f"Enrollment with ID '{enrollment_id}' not found.")

            updated = mutation(self._from_snapshot(snapshot))
            updated.updated_at = datetime.today()
            transaction.set(doc_ref, updated.to_document())
            return updated

        return apply_mutation(self.db.transaction())

    @handle_firestore_exceptions
    def find_by_student(
        self, student_id: str, status: EnrollmentStatus | None = None, limit: int = 100
    ) -> list[Enrollment]:
        query = self.collection.where(filter=FieldFilter("student.id", "==", student_id))
        if status is not None:
            query = query.where(filter=FieldFilter("status", "==", status.value))
        return [self._from_snapshot(doc) for doc in query.limit(limit).get()]

    @handle_firestore_exceptions
    def find_by_course(self, course_id: str, limit: int = 100) -> list[Enrollment]:
        docs = (
            self.collection.where(filter=FieldFilter("course.id", "==", course_id))
            .limit(limit)
            .get()
        )
        return [self._from_snapshot(doc) for doc in docs]

    @handle_firestore_exceptions
    def count(self, status: EnrollmentStatus | None = None, course_id: str | None = None) -> int:
        query = self.collection
        if course_id is not None:
            query = query.where(filter=FieldFilter("course.id", "==", course_id))
        if status is not None:
            query = query.where(filter=FieldFilter("status", "==", status.value))
        results = query.count().get()
        return int(results[0][0].value)

    @staticmethod
    def _from_snapshot(doc) -> Enrollment:
        data = doc.to_dict()
        data["id"] = doc.id
        return Enrollment(**data)

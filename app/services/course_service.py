import logging

from app.models.course import Course
from app.utils.exceptions import NotFoundError
from app.utils.firestore_exception import handle_firestore_exceptions


logger = logging.getLogger(__name__)


class CourseService:
    """Read-only course lookup backed by the ``courses`` collection."""

    def __init__(self, db, collection_name: str = "courses"):
        self.db = db
        self.collection = db.collection(collection_name)

    @handle_firestore_exceptions
    def get_course(self, course_id: str) -> Course:
        doc = self.collection.document(course_id).get()
        if not doc.exists:
            logger.warning(f"Course not found: id={course_id}")
            raise NotFoundError(f"Course with ID '{course_id}' not found.")

        course_data = doc.to_dict()
        course_data["id"] = doc.id
        return Course(**course_data)

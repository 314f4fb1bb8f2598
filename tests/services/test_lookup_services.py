"""Tests for the read-only user and course lookups."""

import pytest

from app.models.user import UserProfile
from app.services.course_service import CourseService
from app.services.user_service import UserService
from app.utils.exceptions import NotFoundError, StoreFailureError
from tests.mocks.firestore import FirestoreMocks


@pytest.fixture
def existing_user_data():
    return {
        "name": "Ana Souza",
        "email": "ana@example.com",
        "role": "INSTRUCTOR",
        "is_active": True,
    }


@pytest.fixture
def existing_course_data():
    return {
        "title": "Spring Boot Pro",
        "instructor_id": "instructor1",
        "instructor_name": "Carlos Lima",
        "price": 100.0,
        "total_lessons": 12,
        "is_active": True,
    }


class TestUserService:
    def test_get_user(self, existing_user_data):
        collection = FirestoreMocks.collection_with_document(
            FirestoreMocks.document_exists("user123", existing_user_data)
        )
        service = UserService(FirestoreMocks.mock_db_with_collection(collection))

        user = service.get_user("user123")

        assert user.id == "user123"
        assert user.role is UserProfile.INSTRUCTOR
        collection.document.assert_called_once_with("user123")

    def test_get_user_not_found(self):
        collection = FirestoreMocks.collection_with_document(FirestoreMocks.document_not_found())
        service = UserService(FirestoreMocks.mock_db_with_collection(collection))

        with pytest.raises(NotFoundError) as exc:
            service.get_user("ghost")

        assert "ghost" in exc.value.message

    def test_get_user_store_error(self, mock_db):
        mock_db.collection.return_value.document.return_value.get.side_effect = ConnectionError(
            "unavailable"
        )
        service = UserService(mock_db)

        with pytest.raises(StoreFailureError):
            service.get_user("user123")

    def test_uses_configured_collection(self, mock_db):
        UserService(mock_db, "people")

        mock_db.collection.assert_called_once_with("people")


class TestCourseService:
    def test_get_course(self, existing_course_data):
        collection = FirestoreMocks.collection_with_document(
            FirestoreMocks.document_exists("course456", existing_course_data)
        )
        service = CourseService(FirestoreMocks.mock_db_with_collection(collection))

        course = service.get_course("course456")

        assert course.id == "course456"
        assert course.price == 100.0
        assert course.total_lessons == 12
        assert course.is_free is False

    def test_get_course_not_found(self):
        collection = FirestoreMocks.collection_with_document(FirestoreMocks.document_not_found())
        service = CourseService(FirestoreMocks.mock_db_with_collection(collection))

        with pytest.raises(NotFoundError):
            service.get_course("missing")

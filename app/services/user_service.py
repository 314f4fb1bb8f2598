import logging

from app.models.user import User
from app.utils.exceptions import NotFoundError
from app.utils.firestore_exception import handle_firestore_exceptions


logger = logging.getLogger(__name__)


class UserService:
    """Read-only user lookup backed by the ``users`` collection."""

    def __init__(self, db, collection_name: str = "users"):
        self.db = db
        self.collection = db.collection(collection_name)

    @handle_firestore_exceptions
    def get_user(self, user_id: str) -> User:
        doc = self.collection.document(user_id).get()
        if not doc.exists:
            logger.warning(f"User not found: id={user_id}")
            raise NotFoundError(f"User with ID '{user_id}' not found.")

        user_data = doc.to_dict()
        user_data["id"] = doc.id
        return User(**user_data)

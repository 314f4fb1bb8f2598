"""Centralized Firestore mock factories."""

from unittest.mock import MagicMock


class FirestoreMocks:
    """Reusable mock factories for Firestore operations."""

    @staticmethod
    def document_exists(doc_id, data):
        """Document that exists with given data."""
        doc = MagicMock()
        doc.exists = True
        doc.id = doc_id
        doc.to_dict.return_value = dict(data)
        return doc

    @staticmethod
    def document_not_found():
        """Document that doesn't exist."""
        doc = MagicMock()
        doc.exists = False
        return doc

    @staticmethod
    def collection_with_document(doc):
        """Collection whose document() returns a reference yielding ``doc``."""
        collection = MagicMock()
        collection.document.return_value.get.return_value = doc
        return collection

    @staticmethod
    def collection_with_items(items):
        """Collection whose filtered queries return the given (doc_id, data) pairs."""
        collection = MagicMock()
        docs = [FirestoreMocks.document_exists(doc_id, data) for doc_id, data in items]

        collection.where.return_value.limit.return_value.get.return_value = docs
        collection.where.return_value.where.return_value.limit.return_value.get.return_value = docs

        return collection

    @staticmethod
    def count_result(value):
        """Result of ``query.count().get()``: a list of aggregation result lists."""
        aggregation = MagicMock()
        aggregation.value = value
        return [[aggregation]]

    @staticmethod
    def mock_db_with_collection(collection):
        """Create mock database with specified collection."""
        db = MagicMock()
        db.collection.return_value = collection
        return db

"""Tests for the Firestore exception decorator."""

import pytest

from app.utils.exceptions import NotFoundError, StoreFailureError
from app.utils.firestore_exception import handle_firestore_exceptions


def test_returns_value_unchanged():
    @handle_firestore_exceptions
    def read():
        return "ok"

    assert read() == "ok"


def test_domain_errors_pass_through():
    @handle_firestore_exceptions
    def read():
        raise NotFoundError("Enrollment with ID 'x' not found.")

    with pytest.raises(NotFoundError):
        read()


def test_other_errors_become_store_failure():
    @handle_firestore_exceptions
    def read():
        raise TimeoutError("deadline exceeded")

    with pytest.raises(StoreFailureError) as exc:
        read()

    assert "read" in exc.value.message
    assert isinstance(exc.value.__cause__, TimeoutError)


def test_preserves_function_name():
    @handle_firestore_exceptions
    def read_enrollment():
        return None

    assert read_enrollment.__name__ == "read_enrollment"

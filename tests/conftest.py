"""Shared pytest fixtures for all tests.

FIXTURE PHILOSOPHY:
- Put INFRASTRUCTURE here (mock_db, repositories, test setup)
- Keep TEST DATA in test files (user_data, course_data, etc.)

This keeps tests self-documenting and easy to read.
"""

from pathlib import Path
import sys
from unittest.mock import MagicMock

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.repositories.enrollment_repository import InMemoryEnrollmentRepository  # noqa: E402


# Configure anyio to only use asyncio (not trio)
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def mock_db():
    """Generic database mock."""
    return MagicMock()


@pytest.fixture
def repository():
    """Fresh in-memory enrollment repository."""
    return InMemoryEnrollmentRepository()

from enum import Enum

from pydantic import BaseModel, EmailStr, Field

from app.utils.exceptions import EnrollmentValidationError


class UserProfile(str, Enum):
    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: str) -> "UserProfile":
        """Case-insensitive lookup by name."""
        for profile in cls:
            if profile.name == str(value).strip().upper():
                return profile
        raise EnrollmentValidationError(
            f"Invalid user profile: '{value}'.",
            details={"allowed": [p.name for p in cls]},
        )

    @property
    def can_enroll_in_courses(self) -> bool:
        # Instructors may study other instructors' courses
        return self in (UserProfile.STUDENT, UserProfile.INSTRUCTOR)


class User(BaseModel):
    """Read-only view of a user as returned by the user lookup."""

    id: str
    name: str
    email: EmailStr
    role: UserProfile = Field(default=UserProfile.STUDENT, description="Profile of the user")
    is_active: bool = True

from pydantic import BaseModel, Field


class Course(BaseModel):
    """Read-only view of a course as returned by the course lookup."""

    id: str
    title: str
    instructor_id: str = Field(..., description="User ID of the course instructor")
    instructor_name: str
    price: float = Field(default=0.0, ge=0.0, description="Price charged for enrollment")
    total_lessons: int = Field(default=0, ge=0, description="Number of lessons in the course")
    is_active: bool = Field(default=True, description="False when the course is disabled")

    @property
    def is_free(self) -> bool:
        return self.price == 0

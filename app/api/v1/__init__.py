from fastapi import APIRouter

from .routes.enrollment import router as enrollment_router

router = APIRouter()

router.include_router(enrollment_router, prefix="/enrollments", tags=["enrollments"])

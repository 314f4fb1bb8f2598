import logging

from fastapi import FastAPI

from app.api import router as api_router


logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def setup_routes(app: FastAPI) -> None:
    """Mount the versioned enrollment API under /api"""
    app.include_router(api_router, prefix=API_PREFIX)
    logger.debug(f"Mounted {len(api_router.routes)} enrollment routes under {API_PREFIX}")

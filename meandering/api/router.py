"""Main API router that aggregates all sub-routers."""

from fastapi import APIRouter

from .files import router as files_router
from .stories import router as stories_router

router = APIRouter(prefix="/api")

router.include_router(stories_router, prefix="/stories", tags=["Stories"])
router.include_router(files_router, prefix="/files", tags=["Files"])

__all__ = ["router"]

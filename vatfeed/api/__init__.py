"""API routers for vatfeed."""

from fastapi import APIRouter

from .feed import router as feed_router
from .health import router as health_router
from .traffic import router as traffic_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(feed_router)
api_router.include_router(traffic_router)

__all__ = ["api_router"]

"""API routers for InnerCompass."""

from innercompass.routers.auth import router as auth_router
from innercompass.routers.progress import router as progress_router
from innercompass.routers.topics import router as topics_router

__all__ = [
    "auth_router",
    "progress_router",
    "topics_router",
]

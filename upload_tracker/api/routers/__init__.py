"""API routers."""

from .batches import router as batches_router
from .health import router as health_router
from .items import router as items_router
from .jobs import router as jobs_router

__all__ = [
    "batches_router",
    "health_router",
    "items_router",
    "jobs_router",
]

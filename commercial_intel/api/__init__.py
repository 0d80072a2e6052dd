"""API module - FastAPI routers."""

from commercial_intel.api.routes import (
    router,
    proposals_router,
    projects_router,
    jobs_router,
    health_router,
)

__all__ = [
    "router",
    "proposals_router",
    "projects_router",
    "jobs_router",
    "health_router",
]

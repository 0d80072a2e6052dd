"""
Commercial Intelligence Service - FastAPI Application Entry Point.

Backend handlers for a multi-tenant consulting practice:
- Access-gated acknowledgement and approval actions
- Proposal snapshots with content checksums
- Project risk signals
- Monthly cross-project commercial pattern detection

Run with:
    uvicorn commercial_intel.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from commercial_intel.core.config import get_settings
from commercial_intel.core.errors import ServiceError
from commercial_intel.core.logs import setup_logging
from commercial_intel.api.routes import (
    router as actions_router,
    proposals_router,
    projects_router,
    jobs_router,
    health_router,
)


# ===========================================
# Logging Configuration
# ===========================================

logger = setup_logging(__name__)


# ===========================================
# Application Lifespan
# ===========================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    logger.info("=" * 50)
    logger.info("Commercial Intelligence Service Starting Up")
    logger.info("=" * 50)
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Weak margin threshold: {settings.WEAK_MARGIN_PERCENT}%")
    logger.info(f"Scope creep ratio: {settings.SCOPE_CREEP_RATIO}")

    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.warning("Supabase credentials not configured!")

    if not settings.SCHEDULER_TOKEN:
        logger.warning("Scheduler token not configured - job endpoints will reject calls")

    logger.info("Startup complete")

    yield

    logger.info("Commercial Intelligence Service shutting down...")


# ===========================================
# FastAPI Application
# ===========================================

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Commercial Intelligence Service",
        description="""
        Commercial and delivery intelligence for consulting engagements.

        ## Actions

        - `POST /actions/{action}` - Acknowledge or review a tenant document

        ## Proposals

        - `POST /orgs/{orgId}/proposals/{proposalId}/snapshots` - Freeze and send
        - `GET /orgs/{orgId}/proposals/{proposalId}/snapshots/latest` - Latest snapshot
        - `GET /orgs/{orgId}/proposals/{proposalId}/snapshots/latest/verify` - Checksum check

        ## Projects

        - `GET /orgs/{orgId}/projects/{projectId}/risk-signals` - Risk signals

        ## Jobs

        - `POST /jobs/identify-cross-project-patterns` - Monthly pattern detection
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.include_router(actions_router)
    app.include_router(proposals_router)
    app.include_router(projects_router)
    app.include_router(jobs_router)
    app.include_router(health_router)

    register_exception_handlers(app)

    return app


# ===========================================
# Error Handlers
# ===========================================

def register_exception_handlers(app: FastAPI) -> None:
    """Map service errors and unhandled failures to JSON responses."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": exc.message}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if get_settings().DEBUG else "An error occurred"
            }
        )


# Create app instance
app = create_app()


# ===========================================
# Root Endpoint
# ===========================================

@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return JSONResponse({
        "service": "Commercial Intelligence Service",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "actions": "POST /actions/{action}",
            "proposals": {
                "create_snapshot": "POST /orgs/{org_id}/proposals/{proposal_id}/snapshots",
                "latest_snapshot": "GET /orgs/{org_id}/proposals/{proposal_id}/snapshots/latest",
                "verify_snapshot": "GET /orgs/{org_id}/proposals/{proposal_id}/snapshots/latest/verify"
            },
            "projects": {
                "risk_signals": "GET /orgs/{org_id}/projects/{project_id}/risk-signals"
            },
            "jobs": {
                "patterns": "POST /jobs/identify-cross-project-patterns"
            },
            "health": "GET /health",
            "docs": "GET /docs"
        }
    })


# ===========================================
# Main Entry Point
# ===========================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "commercial_intel.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )

"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import uvicorn

from influencer_hub import __version__
from influencer_hub.config import settings
from influencer_hub.database import Base

# Import models to register them with SQLAlchemy
from influencer_hub.models import SourceProfile, UnifiedIdentity  # noqa: F401

from influencer_hub.routers import scoring_routes, unification_routes
from influencer_hub.scheduler import start_scheduler, stop_scheduler

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Influencer Hub API",
    description="Cross-platform creator unification and campaign scoring",
    version=__version__,
    redirect_slashes=False
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================
# ROUTER REGISTRATION
# ============================================

app.include_router(unification_routes.router)
app.include_router(scoring_routes.router)


# ============================================
# HEALTH & ROOT ENDPOINTS
# ============================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "registered_tables": len(Base.metadata.tables),
        "tables": list(Base.metadata.tables.keys()),
        "features": [
            "identity_unification",
            "attribute_backfill",
            "campaign_scoring",
        ],
        "scheduled_unification": settings.ENABLE_SCHEDULED_UNIFICATION
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Influencer Hub API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# ============================================
# STARTUP & SHUTDOWN
# ============================================

@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info("Starting Influencer Hub API...")
    logger.info("=" * 50)
    logger.info(f"Registered {len(Base.metadata.tables)} SQLAlchemy tables:")
    for table_name in sorted(Base.metadata.tables.keys()):
        logger.info(f"  ✓ {table_name}")
    logger.info("=" * 50)

    if settings.ENABLE_SCHEDULED_UNIFICATION:
        start_scheduler()
    else:
        logger.info("Scheduled unification disabled")

    logger.info("Application started successfully!")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info("Shutting down Influencer Hub API...")
    stop_scheduler()


def run():
    """Serve the API with uvicorn (``influencer-hub`` console script)."""
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()

"""
Metrix Draft API - Main Application

FastAPI application serving rating-weighted draft wheels.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from metrix_draft import __version__
from metrix_draft.api.dependencies import ClientManager
from metrix_draft.api.routes import drafts
from metrix_draft.config import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    settings = get_settings()
    print(f"🥏 Starting Metrix Draft API v{__version__}")
    print(f"   Debug mode: {settings.debug}")
    print(f"   Metrix: {settings.metrix_base_url}")

    yield

    # Shutdown
    print("👋 Shutting down Metrix Draft API")
    await ClientManager.close_client()


def create_app() -> FastAPI:
    """Application factory to create the FastAPI app."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.api_title,
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "create_draft": "POST /api/drafts/",
                "draft": "GET|DELETE /api/drafts/{draft_id}",
                "override_participant": "PATCH /api/drafts/{draft_id}/participants/{participant_id}",
                "spin": "POST /api/drafts/{draft_id}/spin",
                "restart": "POST /api/drafts/{draft_id}/restart",
                "charts": "GET /api/drafts/{draft_id}/{wheel|tickets|winners}",
            },
            "max_drafts": settings.max_drafts,
        }

    # Register API routes
    app.include_router(drafts.router, prefix="/api/drafts", tags=["Drafts"])

    return app


# Create the application instance
app = create_app()


def run():
    """Run the application (used by the CLI entry point)."""
    settings = get_settings()
    uvicorn.run(
        "metrix_draft.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run()

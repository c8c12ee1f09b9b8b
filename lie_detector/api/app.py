"""FastAPI application for the LieDetector service."""

import contextlib
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..infrastructure.dependencies import ServiceContainer
from .endpoints import cache, health, verify

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        container: Service container to use; built from the environment at
            startup when omitted

    Returns:
        Configured application
    """

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the service container on startup and tear it down on shutdown."""
        app.state.container = container or ServiceContainer()
        logging.getLogger().setLevel(app.state.container.settings.log_level)
        await app.state.container.startup()
        logger.info("🚀 LieDetector API started")

        yield  # Application runs here

        await app.state.container.shutdown()
        logger.info("👋 LieDetector API stopped")

    app = FastAPI(
        title="LieDetector API",
        description="Claim verification against fact-checkers, PubMed, Wikipedia and an LLM fallback",
        version=API_VERSION,
        lifespan=lifespan,
    )

    # The browser extension calls from arbitrary page origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(verify.router)
    app.include_router(health.router)
    app.include_router(cache.router)

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Describe the service."""
        return {
            "name": "LieDetector API",
            "version": API_VERSION,
            "endpoints": {
                "verify": "POST /api/verify",
                "health": "GET /api/health",
                "cache_stats": "GET /api/cache/stats",
                "cache_clear": "POST /api/cache/clear",
            },
        }

    return app


app = create_app()

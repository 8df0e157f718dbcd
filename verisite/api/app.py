"""FastAPI application for the verification service."""

import contextlib
import logging
import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..infrastructure.dependencies import get_service_container
from .endpoints import health, verify

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Build services on startup and release their clients on shutdown."""
    container = get_service_container()
    try:
        await container.initialize()
    except Exception as e:
        logger.error(f"❌ Failed to initialize services: {e}")

    yield  # Application runs here

    await container.shutdown()


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title="Verisite API",
        description="Content verification with claim extraction and multi-source cross-referencing",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(verify.router)
    return app


app = create_app()


def serve() -> None:
    """Run the API with uvicorn."""
    uvicorn.run(
        "verisite.api.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    serve()

"""
Main FastAPI application for the movement engine.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from movement_engine.api import api_router
from movement_engine.config import get_settings
from movement_engine.tick_engine import SimulationEngine, get_engine, set_engine

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Builds the simulation and runs its tick loop.
    """
    settings = get_settings()

    logger.info("Building facility layout...")
    engine = SimulationEngine(settings)
    set_engine(engine)

    logger.info(f"Starting tick engine (rate: {settings.tick_rate_ms}ms)...")
    await engine.start()

    logger.info("Movement engine started successfully!")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await engine.stop()
    set_engine(None)
    logger.info("Movement engine stopped.")


# Create FastAPI application
app = FastAPI(
    title="Movement Engine",
    description="Movement hierarchy engine for data-center hardware logistics",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # The browser front end is served separately
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    engine = get_engine()

    return {
        "status": "healthy",
        "tick_engine_running": engine is not None and engine.is_running,
        "tick_number": engine.tick_number if engine else 0,
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "movement_engine.main:app",
        host=settings.host,
        port=settings.port,
    )

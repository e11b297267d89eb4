"""
wgmesh Master FastAPI Application.

This module provides the main entry point for the master server, the
central orchestration component of the mesh.

Responsibilities:
    - Worker enrollment and overlay address allocation
    - Durable worker registry
    - Mesh fan-out to worker agents
    - Status proxying to worker agents
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from wgmesh import __version__
from wgmesh.db.base import close_database, initialize_database
from wgmesh.master.config import config
from wgmesh.master.endpoints import workers
from wgmesh.models.enums import LogLevel
from wgmesh.utils.http import install_error_handlers
from wgmesh.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


# =============================================================================
# Lifecycle Events
# =============================================================================


async def startup_event():
    """Validate configuration and open the registry."""
    logger.info("Master server starting up")

    network = config.get_overlay_network()
    logger.info(
        f"Overlay pool {network} ({network.num_addresses - 2} assignable hosts), "
        f"interface {config.WG_INTERFACE}, listen port {config.WG_LISTEN_PORT}"
    )

    initialize_database(config.DB_FILE)
    logger.info(f"Web UI root (not served): {config.WEB_ROOT}")


async def shutdown_event():
    """Close the registry on shutdown."""
    logger.info("Master server shutting down")
    close_database()
    logger.info("Master server shut down complete")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_event()
    try:
        yield
    finally:
        await shutdown_event()


# =============================================================================
# Application Setup
# =============================================================================

# FastAPI application instance
app = FastAPI(
    title="wgmesh Master",
    description="WireGuard mesh control plane",
    version=__version__,
    lifespan=lifespan,
)

# Include API routers (all under /api prefix)
app.include_router(workers.router, prefix="/api", tags=["Workers"])

install_error_handlers(app)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "master"}




# =============================================================================
# Server Entry Points
# =============================================================================


def run():
    """Run the master server using uvicorn."""
    import uvicorn

    # Configure logging before starting uvicorn
    configure_logging(config.LOG_LEVEL, config.LOG_FILE)

    # Map log levels to uvicorn levels
    uvicorn_level_map = {
        LogLevel.FULL: "debug",
        LogLevel.DEBUG: "debug",
        LogLevel.INFO: "info",
        LogLevel.WARNING: "warning",
    }
    uvicorn_level = uvicorn_level_map.get(config.LOG_LEVEL, "info")

    logger.info(f"Master listening on {config.BIND_IP}:{config.PORT}")

    uvicorn.run(
        app,
        host=config.BIND_IP,
        port=config.PORT,
        log_level=uvicorn_level,
        log_config=None,  # Keep uvicorn on the loguru sinks
    )


def main():
    """Entry point for the master server."""
    run()


if __name__ == "__main__":
    main()

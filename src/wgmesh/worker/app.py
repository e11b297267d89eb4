"""
wgmesh Worker FastAPI Application.

Main entry point for the worker agent.
"""

import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from wgmesh import __version__
from wgmesh.models.enums import LogLevel
from wgmesh.utils.http import install_error_handlers
from wgmesh.utils.logger import configure_logging, get_logger
from wgmesh.worker.config import config
from wgmesh.worker.endpoints import wg

logger = get_logger(__name__)


def ensure_conf_dir() -> None:
    """Create the WireGuard config directory with mode 0700 if missing."""
    os.makedirs(config.CONF_DIR, mode=0o700, exist_ok=True)


async def startup_event():
    """Refuse to start without a shared secret, then prepare the config directory."""
    logger.info(
        f"Worker starting: CONF_DIR={config.CONF_DIR} "
        f"WORKER_API_KEY_PRESENT={bool(config.API_KEY)}"
    )
    if not config.API_KEY:
        logger.critical("WORKER_API_KEY not set")
        raise RuntimeError("WORKER_API_KEY not set")
    ensure_conf_dir()


async def shutdown_event():
    """Clean shutdown."""
    logger.info("Worker shutting down.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_event()
    try:
        yield
    finally:
        await shutdown_event()


# FastAPI app
app = FastAPI(
    title="wgmesh Worker",
    description="WireGuard mesh worker agent",
    version=__version__,
    lifespan=lifespan,
)

# Include routers (all under /api prefix)
app.include_router(wg.router, prefix="/api", tags=["WireGuard"])

install_error_handlers(app)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "worker"}


def run():
    """Run the worker agent using uvicorn."""
    import uvicorn

    log_level = config.LOG_LEVEL

    # Configure logging (must be called before uvicorn.run)
    configure_logging(log_level, config.LOG_FILE)

    if not config.API_KEY:
        logger.critical("WORKER_API_KEY not set")
        sys.exit(1)

    try:
        ensure_conf_dir()
    except OSError as e:
        logger.critical(f"Cannot create conf dir '{config.CONF_DIR}': {e}")
        sys.exit(1)

    match log_level:
        case LogLevel.FULL:
            uvicorn_level = "debug"
        case LogLevel.DEBUG:
            uvicorn_level = "debug"
        case LogLevel.INFO:
            uvicorn_level = "info"
        case LogLevel.WARNING:
            uvicorn_level = "warning"

    logger.info(f"Worker listening on {config.BIND_IP}:{config.PORT}")

    uvicorn.run(
        app,
        host=config.BIND_IP,
        port=config.PORT,
        log_level=uvicorn_level,
        log_config=None,
    )


def main():
    """Entry point for the worker agent."""
    run()


if __name__ == "__main__":
    main()

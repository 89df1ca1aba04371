from contextlib import asynccontextmanager
import logging
import signal
import sys

from fastapi import FastAPI
from filestage.routes import health, uploads
from filestage.staging import ensure_directory
import uvicorn
import asyncio
from filestage.configs.config import get_config

logger = logging.getLogger(__name__)

def handle_shutdown_signal(signum, frame):
    """Handle shutdown signals"""
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    sys.exit(0)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure the staging root exists before the first request
    config = get_config()
    if ensure_directory(config.base_upload_dir, config.directory_mode):
        logger.info(f"Staging directory ensured: {config.base_upload_dir}")
    else:
        logger.error(f"Could not create staging directory: {config.base_upload_dir}")
    yield

app = FastAPI(
    title="filestage API",
    description="Stages uploaded files locally and forwards them to an object store",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(uploads.router)

async def main():
    """
    Main entry point for the FastAPI application.
    """
    logger.info("Starting filestage API...")
    signal.signal(signal.SIGINT, handle_shutdown_signal)
    signal.signal(signal.SIGTERM, handle_shutdown_signal)

    if hasattr(signal, "SIGHUP"):
        signal.signal(signal.SIGHUP, handle_shutdown_signal)

    config = uvicorn.Config(
        app,
        host=get_config().fastapi_host,
        port=get_config().fastapi_port,
        log_level=get_config().filestage_log_level.value,
        use_colors=True,
        access_log=True,
    )
    server = uvicorn.Server(config)

    try:
        await server.serve()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.error(f"Server error: {str(e)}")
        raise


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()

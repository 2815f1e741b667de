"""Swing Trade Engine entry point.

Starts the FastAPI server.
"""

import logging
import sys

import uvicorn

from swing_engine.config.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)
logger = logging.getLogger(__name__)


def main():
    """Start the API server."""
    logger.info("Starting Swing Trade Engine")
    logger.info(f"API Server: {settings.api_host}:{settings.api_port}")
    logger.info(f"Benchmark: {settings.benchmark_symbol}")

    uvicorn.run(
        "swing_engine.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

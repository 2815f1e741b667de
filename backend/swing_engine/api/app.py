"""FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swing_engine.config.settings import settings
from swing_engine.api.routes import analysis

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Swing Trade Engine API server...")
    if not settings.alpha_vantage_api_key:
        logger.warning("ALPHA_VANTAGE_API_KEY is not set; analysis requests will fail")
    yield
    logger.info("Shutting down Swing Trade Engine API server...")


app = FastAPI(
    title="Swing Trade Engine API",
    description="Multi-factor swing trade scoring for a single instrument",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "Swing Trade Engine API"}

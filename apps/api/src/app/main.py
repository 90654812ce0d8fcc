"""
Internship Application API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import api_router
from app.core.config import Settings, get_settings, settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Reports the environment and whether the SMTP relay is configured.
    Configuration is re-read per request, so nothing is opened here.
    """
    logger.info(f"Starting Internship Application API in {settings.python_env} mode...")

    current = get_settings()
    if current.smtp_configured:
        logger.info(
            f"[OK] SMTP relay configured: {current.smtp_host}:{current.smtp_port} "
            f"(secure={current.smtp_secure})"
        )
    else:
        logger.warning("[WARN] SMTP_USER/SMTP_PASS not set - submissions will fail with 500")

    yield  # Application runs here

    logger.info("Shutting down Internship Application API...")


app = FastAPI(
    title="Internship Application API",
    description="Careers page internship application relay",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to the Internship Application API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check(current: Settings = Depends(get_settings)) -> dict[str, str]:
    """Readiness check endpoint. Ready only when SMTP credentials are present."""
    if not current.smtp_configured:
        return {"status": "not_ready", "reason": "smtp_not_configured"}
    return {"status": "ready"}

"""
Assessment Engine — Main Application Entry Point
==================================================
This is the FastAPI application factory. It:
  1. Creates the FastAPI app instance with metadata
  2. Registers the assessment routers
  3. Configures CORS middleware for the evaluation wizard front-end
  4. Provides a health check endpoint

The API is stateless: it holds no database and stores nothing. Client
records and evaluation history belong to the practice-management backend.

To run locally:
  uvicorn anthropometry.main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from anthropometry.core.config import settings
from anthropometry.routers import assessment, functional

# Configure logging so we can see what's happening in the console
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================
# APPLICATION LIFESPAN (Startup / Shutdown)
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Logs startup and shutdown. There are no resources to open or close."""
    logger.info(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    yield
    logger.info(f"🛑 Shutting down {settings.APP_NAME}...")


# ============================================================
# CREATE THE FASTAPI APPLICATION
# ============================================================
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Anthropometric assessment engine for personal trainers. "
        "Converts skinfolds, perimeters, weight and height into body composition, "
        "metabolic estimates and risk classifications."
    ),
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# CORS MIDDLEWARE
# ============================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# REGISTER ROUTERS
# ============================================================
app.include_router(assessment.router)   # /assessment/*
app.include_router(functional.router)   # /functional/*


# ============================================================
# ROOT / HEALTH CHECK ENDPOINT
# ============================================================
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint — serves as a health check.
    Returns basic app info to confirm the API is running.
    """
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for container health probes."""
    return {"status": "ok"}

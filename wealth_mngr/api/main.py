"""
FastAPI application for Wealth Manager.

Provides REST API endpoints for:
- Single-instrument calculators
- Multi-instrument corpus simulation and purchasing power
- Capital-gains indexation
- Reference data (rates, CII, cities, inflation defaults)
- Saved calculations and preferences
"""

import os
import logging
import time
import traceback
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wealth_mngr import __version__
from wealth_mngr.db.connection import get_engine, init_database, get_db_session
from wealth_mngr.api.routes import reference, indexation, calculators, corpus, saved_calculations, preferences

logger = logging.getLogger("wealth_mngr")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("Initializing database...")
    init_database()
    yield
    logger.info("Shutting down...")
    get_engine().dispose()


# Create FastAPI application
app = FastAPI(
    title="Wealth Manager API",
    description="Indian savings and investment calculators, corpus simulation and purchasing power",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS configuration for the web frontend
_default_origins = "http://localhost:3000,http://localhost:5173"
_cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", _default_origins).split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    logger.error(traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        },
    )


# Health check endpoint
@app.get("/health")
async def health_check() -> Dict[str, str]:
    """API health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "service": "wealth-mngr-api",
    }


@app.get("/health/db")
def health_check_db(db: Session = Depends(get_db_session)):
    """Check database connection health and latency."""
    start = time.time()
    try:
        db.execute(text("SELECT 1"))
        latency_ms = (time.time() - start) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(latency_ms, 2),
            "database": db.get_bind().dialect.name,
        }
    except SQLAlchemyError as e:
        latency_ms = (time.time() - start) * 1000
        return {
            "status": "unhealthy",
            "latency_ms": round(latency_ms, 2),
            "error": str(e),
        }


# Include routers
app.include_router(reference.router, prefix="/api/reference", tags=["Reference"])
app.include_router(indexation.router, prefix="/api/indexation", tags=["Indexation"])
app.include_router(calculators.router, prefix="/api/calculators", tags=["Calculators"])
app.include_router(corpus.router, prefix="/api/corpus", tags=["Corpus"])
app.include_router(corpus.purchasing_power_router, prefix="/api/purchasing-power", tags=["Purchasing Power"])
app.include_router(saved_calculations.router, prefix="/api/saved-calculations", tags=["Saved Calculations"])
app.include_router(preferences.router, prefix="/api/preferences", tags=["Preferences"])


# Root endpoint
@app.get("/")
async def root() -> Dict[str, Any]:
    """API root endpoint with service information."""
    return {
        "service": "Wealth Manager API",
        "version": __version__,
        "docs": "/api/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wealth_mngr.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )

"""
Seating Designer - version store API
Main application entry point
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from seatplan.core.config import settings
from seatplan.core.db import engine, Base
from seatplan.api import routes_public, routes_versions
from seatplan.services.repositories import use_sql

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if use_sql():
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    else:
        Path(settings.VERSIONS_DIR).mkdir(parents=True, exist_ok=True)
        logger.info(f"Storing versions in {settings.VERSIONS_DIR}")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Seating Designer",
    description="Version store for seating floor plans",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Include routers
app.include_router(routes_public.router, prefix="/api", tags=["public"])
app.include_router(routes_versions.router, prefix="/api", tags=["versions"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )

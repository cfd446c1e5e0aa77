"""
NestScore API - FastAPI Entry Point

Property scoring and comparison for house and flat hunting: record viewings,
answer the question catalogue, and compare weighted 0-100 scores.

Run with: uvicorn nestscore.main:app --reload
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nestscore.config import settings
from nestscore.database import init_db
from nestscore.api import catalogue, compare, export, postcodes, properties, share
from nestscore.api import settings as settings_api
from nestscore.services.scoring_service import get_catalogue

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle manager."""
    await init_db()

    # Fail at startup, not on the first request, if the catalogue is broken
    question_catalogue = get_catalogue()
    logger.info(
        f"Catalogue loaded: {len(question_catalogue)} categories, "
        f"{question_catalogue.total_questions} questions"
    )

    yield


app = FastAPI(
    title="NestScore API",
    description="Property scoring and comparison engine",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(properties.router, prefix="/api/properties", tags=["Properties"])
app.include_router(compare.router, prefix="/api/compare", tags=["Compare"])
app.include_router(settings_api.router, prefix="/api/settings", tags=["Settings"])
app.include_router(catalogue.router, prefix="/api/catalogue", tags=["Catalogue"])
app.include_router(postcodes.router, prefix="/api/postcodes", tags=["Postcodes"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])
app.include_router(share.router, prefix="/api/share", tags=["Share"])


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "status": "ok",
        "app": "NestScore API",
        "version": APP_VERSION,
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "database": "connected",
        "catalogue_questions": get_catalogue().total_questions,
    }

"""
CareerCraft AI - Main Application

FastAPI backend with:
- MongoDB as the only data store
- JWT sessions in an httpOnly cookie
- OpenAI-compatible AI endpoint for resume review, question generation and career roadmaps
- Resume storage on S3-compatible object storage or local disk

Run: uvicorn careercraft.main:app --reload
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from careercraft import __version__
from careercraft.api import api_router
from careercraft.core.config import get_settings
from careercraft.core.exceptions import register_exception_handlers
from careercraft.core.log_config import configure_logging
from careercraft.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="CareerCraft AI",
    description="""
    A job board with AI-assisted career tools.

    ## Features
    - **Authentication**: cookie-based JWT sessions for seekers and recruiters, password reset
    - **Jobs**: recruiters post and manage jobs; anyone can search open jobs
    - **Applications**: seekers apply with their resume; recruiters review and re-status
    - **Mock Tests**: timed multiple-choice tests with scored, reviewable attempts
    - **AI**: resume feedback, question generation, career roadmap chat
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (cookies need an explicit origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api/v1")

# Locally stored resumes
if settings.storage_backend.lower() != "s3":
    app.mount("/uploads", StaticFiles(directory=settings.local_upload_dir, check_dir=False), name="uploads")


# Startup event
@app.on_event("startup")
def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
def root():
    return {"status": "healthy", "app": "CareerCraft AI", "message": "API is running."}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected",
    }

"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from careercraft.api.routes.auth_routes import router as auth_router
from careercraft.api.routes.profile_routes import router as profile_router
from careercraft.api.routes.job_routes import router as job_router
from careercraft.api.routes.application_routes import router as application_router
from careercraft.api.routes.mock_test_routes import router as mock_test_router
from careercraft.api.routes.ai_routes import router as ai_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(mock_test_router)
api_router.include_router(ai_router)

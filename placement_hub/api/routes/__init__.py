"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_hub.api.routes.ai_routes import router as ai_router
from placement_hub.api.routes.application_routes import router as application_router
from placement_hub.api.routes.auth_routes import router as auth_router
from placement_hub.api.routes.dashboard_routes import router as dashboard_router
from placement_hub.api.routes.job_routes import router as job_router
from placement_hub.api.routes.student_routes import router as student_router
from placement_hub.api.routes.student_routes import skills_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(student_router)
api_router.include_router(skills_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(ai_router)
api_router.include_router(dashboard_router)

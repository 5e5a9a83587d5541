"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from portal.api.routes.auth_routes import router as auth_router
from portal.api.routes.navigation_routes import router as navigation_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(navigation_router)

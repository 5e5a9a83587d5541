"""
API module - FastAPI routers exposing the session core.

Usage:
    from portal.api.routes import api_router
    app.include_router(api_router, prefix="/api")
"""

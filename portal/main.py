"""
Placement Portal - Session API

FastAPI backend with:
- Session lifecycle (sign in / create account / sign out)
- One persisted identity slot (SQLite via SQLAlchemy)
- Navigation history with a back shortcut and role-branched views

Run: uvicorn portal.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.api.routes import api_router
from portal.core.config import Settings, get_settings
from portal.core.errors import NotAuthenticatedError
from portal.db.database import check_database_connection
from portal.services.portal_context import build_portal
from portal.services.session_service import Sleep

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None, sleep: Optional[Sleep] = None) -> FastAPI:
    """Build the API around a fresh portal context."""
    settings = settings or get_settings()
    configure_logging(settings)
    portal = build_portal(settings, sleep=sleep)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        portal.start()
        try:
            yield
        finally:
            portal.close()

    app = FastAPI(
        title="Placement Portal Session API",
        description="""
        Session core of the placement-coordination portal.

        ## Features
        - **Authentication**: simulated sign in / sign up, identity inferred from email
        - **Session**: one persisted identity restored on startup
        - **Navigation**: history stack, back action and Alt+Left shortcut
        """,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.portal = portal

    # CORS middleware (allow all for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
        return JSONResponse(status_code=401, content={"detail": exc.message})

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness plus session store connectivity."""
        return {
            "status": "healthy",
            "session_store": "connected" if check_database_connection(portal.store.session_factory) else "disconnected",
            "session": portal.session.state.status.value
        }

    return app


app = create_app()

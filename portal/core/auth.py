"""
Request dependencies - resolve the portal context and the signed-in identity.

Provides:
- get_portal: the PortalContext owned by the running app
- get_current_identity: FastAPI dependency for routes that need a session
"""

from fastapi import Depends, HTTPException, Request, status

from portal.schemas.schemas import Identity
from portal.services.portal_context import PortalContext


def get_portal(request: Request) -> PortalContext:
    """FastAPI dependency - the portal context created at app startup."""
    return request.app.state.portal


async def get_current_identity(portal: PortalContext = Depends(get_portal)) -> Identity:
    """
    FastAPI dependency - Get the signed-in identity.

    Usage:
        @router.get("/protected")
        async def route(identity: Identity = Depends(get_current_identity)):
            return identity
    """
    identity = portal.session.identity
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )
    return identity

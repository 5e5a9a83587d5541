"""
Navigation Routes

GET /navigation - Current view and history
POST /navigation/navigate - Open a view
POST /navigation/back - Go back one view
POST /navigation/keydown - Forward a key event (back shortcut)
GET /navigation/view - Role-specific view for the current section
"""

from fastapi import APIRouter, Depends

from portal.core.auth import get_current_identity, get_portal
from portal.schemas.schemas import (
    Identity, KeyEventRequest, KeyEventResponse, NavigateRequest, NavigationResponse, ViewResponse
)
from portal.services.navigation_service import KeyEvent, ViewRouter
from portal.services.portal_context import PortalContext

router = APIRouter(prefix="/navigation", tags=["Navigation"])


def _snapshot(view_router: ViewRouter) -> NavigationResponse:
    return NavigationResponse(
        current_view=view_router.current_view,
        can_go_back=view_router.can_go_back,
        history_depth=view_router.history_depth,
        history=list(view_router.history),
    )


@router.get("", response_model=NavigationResponse)
async def get_navigation(
    identity: Identity = Depends(get_current_identity),
    portal: PortalContext = Depends(get_portal)
):
    return _snapshot(portal.router)


@router.post("/navigate", response_model=NavigationResponse)
async def navigate(
    request: NavigateRequest,
    identity: Identity = Depends(get_current_identity),
    portal: PortalContext = Depends(get_portal)
):
    """Open a view. Opening the view that is already current does nothing."""
    portal.router.navigate(request.view)
    return _snapshot(portal.router)


@router.post("/back", response_model=NavigationResponse)
async def go_back(
    identity: Identity = Depends(get_current_identity),
    portal: PortalContext = Depends(get_portal)
):
    """Return to the previous view; stays put on the first one."""
    portal.router.go_back()
    return _snapshot(portal.router)


@router.post("/keydown", response_model=KeyEventResponse)
async def keydown(
    request: KeyEventRequest,
    identity: Identity = Depends(get_current_identity),
    portal: PortalContext = Depends(get_portal)
):
    """
    Deliver a key press to the global listeners.

    `handled` is True when a listener suppressed the default action
    (the back shortcut did navigate).
    """
    event = portal.keyboard.dispatch(KeyEvent(
        key=request.key,
        alt=request.alt,
        ctrl=request.ctrl,
        shift=request.shift,
        meta=request.meta,
    ))
    return KeyEventResponse(handled=event.default_prevented, navigation=_snapshot(portal.router))


@router.get("/view", response_model=ViewResponse)
async def current_view(
    identity: Identity = Depends(get_current_identity),
    portal: PortalContext = Depends(get_portal)
):
    return portal.router.render(identity)

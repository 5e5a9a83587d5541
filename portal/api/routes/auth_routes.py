"""
Authentication Routes

GET /auth/session - Current session snapshot
POST /auth/login - Sign in (identity derived from the email)
POST /auth/signup - Create account and sign in
POST /auth/logout - Sign out
POST /auth/clear-error - Dismiss the last sign-in error
"""

from fastapi import APIRouter, HTTPException, Depends, status

from portal.core.auth import get_portal
from portal.schemas.schemas import (
    AuthResult, LoginRequest, SignupRequest, SignupData, SessionResponse, MessageResponse
)
from portal.services.portal_context import PortalContext

router = APIRouter(prefix="/auth", tags=["Authentication"])

# error_code -> HTTP status
ERROR_STATUS = {
    "missing_fields": status.HTTP_400_BAD_REQUEST,
    "weak_password": status.HTTP_400_BAD_REQUEST,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
}


def _raise_for_result(result: AuthResult) -> None:
    if result.superseded:
        raise HTTPException(status_code=409, detail="A newer sign-in attempt replaced this one")
    if not result.success:
        raise HTTPException(
            status_code=ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
            detail=result.error
        )


@router.get("/session", response_model=SessionResponse)
async def get_session(portal: PortalContext = Depends(get_portal)):
    """Current session state, including any sign-in error."""
    return SessionResponse.from_state(portal.session.state)


@router.post("/login", response_model=SessionResponse)
async def login(request: LoginRequest, portal: PortalContext = Depends(get_portal)):
    """
    Sign in with email and password.

    Name, role and department/company are inferred from the email address.
    """
    result = await portal.session.login(request.email, request.password)
    _raise_for_result(result)
    return SessionResponse.from_state(portal.session.state)


@router.post("/signup", response_model=SessionResponse, status_code=201)
async def signup(request: SignupRequest, portal: PortalContext = Depends(get_portal)):
    """Create an account with the supplied details and sign in."""
    data = SignupData(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
        department=request.department,
        company=request.company,
        phone=request.phone,
    )
    result = await portal.session.signup(data)
    _raise_for_result(result)
    return SessionResponse.from_state(portal.session.state)


@router.post("/logout", response_model=MessageResponse)
async def logout(portal: PortalContext = Depends(get_portal)):
    """Sign out and discard navigation history."""
    portal.session.logout()
    return MessageResponse(message="Signed out")


@router.post("/clear-error", response_model=SessionResponse)
async def clear_error(portal: PortalContext = Depends(get_portal)):
    portal.session.clear_error()
    return SessionResponse.from_state(portal.session.state)

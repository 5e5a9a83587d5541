"""
Pydantic Schemas - Session, Identity and API contracts

All session-core models and API request/response schemas in one file for simplicity.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    student = "student"
    employer = "employer"
    placement_officer = "placement-officer"


class SessionStatus(str, Enum):
    loading = "loading"
    anonymous = "anonymous"
    authenticating = "authenticating"
    authenticated = "authenticated"
    error = "error"


# ============================================================
# IDENTITY
# ============================================================

class Identity(BaseModel):
    """
    The authenticated user record.

    Persisted as a flat record with `createdAt` as an ISO-8601 string.
    Frozen so collaborating views can only read it.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str
    role: UserRole
    department: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")

    def to_record(self) -> dict:
        """Flat JSON-ready record; optional fields are left out when unset."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SignupData(BaseModel):
    """What the create-account form submits. Checked by the session lifecycle."""
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    role: UserRole = UserRole.student
    department: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None


# ============================================================
# SESSION STATE
# ============================================================

class SessionState(BaseModel):
    """
    Tagged session state.

    identity is only ever present while authenticated and error only
    while in the error state; anything else is rejected on construction.
    """
    model_config = ConfigDict(frozen=True)

    status: SessionStatus
    identity: Optional[Identity] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_variant(self):
        if self.status == SessionStatus.authenticated:
            if self.identity is None:
                raise ValueError("authenticated state requires an identity")
        elif self.identity is not None:
            raise ValueError(f"{self.status.value} state cannot carry an identity")

        if self.status == SessionStatus.error:
            if not self.error:
                raise ValueError("error state requires a message")
        elif self.error is not None:
            raise ValueError(f"{self.status.value} state cannot carry an error")
        return self

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(status=SessionStatus.loading)

    @classmethod
    def anonymous(cls) -> "SessionState":
        return cls(status=SessionStatus.anonymous)

    @classmethod
    def authenticating(cls) -> "SessionState":
        return cls(status=SessionStatus.authenticating)

    @classmethod
    def authenticated(cls, identity: Identity) -> "SessionState":
        return cls(status=SessionStatus.authenticated, identity=identity)

    @classmethod
    def failed(cls, message: str) -> "SessionState":
        return cls(status=SessionStatus.error, error=message)

    @property
    def is_loading(self) -> bool:
        return self.status in (SessionStatus.loading, SessionStatus.authenticating)

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.authenticated


class AuthResult(BaseModel):
    """Outcome of one login/signup attempt."""
    success: bool
    superseded: bool = False
    identity: Optional[Identity] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


# ============================================================
# API SCHEMAS
# ============================================================

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignupRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    role: UserRole = UserRole.student
    department: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None


class SessionResponse(BaseModel):
    status: SessionStatus
    identity: Optional[Identity] = None
    is_loading: bool
    error: Optional[str] = None
    is_authenticated: bool

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionResponse":
        return cls(
            status=state.status,
            identity=state.identity,
            is_loading=state.is_loading,
            error=state.error,
            is_authenticated=state.is_authenticated,
        )


class NavigateRequest(BaseModel):
    view: str = Field(..., min_length=1)


class KeyEventRequest(BaseModel):
    key: str
    alt: bool = False
    ctrl: bool = False
    shift: bool = False
    meta: bool = False


class NavigationResponse(BaseModel):
    current_view: str
    can_go_back: bool
    history_depth: int
    history: List[str]


class KeyEventResponse(BaseModel):
    handled: bool
    navigation: NavigationResponse


class ViewResponse(BaseModel):
    section: str
    title: str
    description: str
    component: str
    role: UserRole


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

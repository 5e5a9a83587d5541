"""
Schemas module - session-core models and API contracts.

Difference from services:
- Schemas: data shapes (identity, session state, request/response bodies)
- Services: the behaviour operating on them
"""
from portal.schemas.schemas import (
    UserRole, SessionStatus, Identity, SignupData, SessionState, AuthResult
)

__all__ = ["UserRole", "SessionStatus", "Identity", "SignupData", "SessionState", "AuthResult"]

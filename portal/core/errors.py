"""
Error types for the session core.

Validation errors carry a user-facing message and end up in the
Anonymous+Error session state. Corrupt stored sessions never leave the
session store.
"""


class PortalError(Exception):
    """Base class for every error raised by the portal core."""


# ============================================================
# AUTH VALIDATION (user-visible)
# ============================================================

class AuthValidationError(PortalError):
    """A sign-in or sign-up submission was rejected before any side effect."""

    code = "auth_failed"
    default_message = "Authentication failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFieldsError(AuthValidationError):
    code = "missing_fields"
    default_message = "Please fill in all required fields"


class InvalidCredentialsError(AuthValidationError):
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class WeakPasswordError(AuthValidationError):
    code = "weak_password"
    default_message = "Password must be at least 6 characters long"


# ============================================================
# PERSISTENCE / NAVIGATION
# ============================================================

class SessionCorruptedError(PortalError):
    """The stored session record could not be decoded."""


class NotAuthenticatedError(PortalError):
    """Navigation was requested while no authenticated view is mounted."""

    def __init__(self, message: str = "Sign in to use navigation"):
        self.message = message
        super().__init__(message)

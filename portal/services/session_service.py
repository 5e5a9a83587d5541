"""
Session Lifecycle Service

States:
    loading -> anonymous | authenticated           (initialize)
    anonymous/error -> authenticating               (login / signup)
    authenticated -> authenticating                 (re-login; stored session cleared)
    authenticating -> authenticated | error         (attempt completes)
    any -> anonymous                                (logout)
    error -> anonymous                              (clear_error)

Sign-in derives the whole identity from the email address; sign-up takes
the values the user typed. Both wait a simulated backend delay first.

OVERLAPPING ATTEMPTS:
Every attempt takes a sequence number when it starts. When its delay is
over it only applies its result if no newer attempt (or logout) has
started in the meantime, so the most recently requested attempt wins.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from portal.core.config import Settings
from portal.core.errors import (
    AuthValidationError, InvalidCredentialsError, MissingFieldsError, WeakPasswordError
)
from portal.schemas.schemas import AuthResult, Identity, SessionState, SessionStatus, SignupData
from portal.services.identity_service import derive_identity_attributes
from portal.services.session_store import SessionStore

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionState], None]
Sleep = Callable[[float], Awaitable[None]]


def new_identity_id() -> str:
    return uuid.uuid4().hex


class AuthSession:
    """
    Owns the session state for one portal instance.

    Usage:
        session = AuthSession(store, settings)
        session.initialize()
        result = await session.login("priya.sharma@tcs.com", "secret123")
    """

    def __init__(self, store: SessionStore, settings: Settings, sleep: Sleep = asyncio.sleep):
        self.store = store
        self.settings = settings
        self._sleep = sleep
        self._state = SessionState.loading()
        self._initialized = False
        self._attempt_seq = 0
        self._listeners: List[SessionListener] = []

    # ------------------------------------------------------------
    # State access
    # ------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> Optional[Identity]:
        return self._state.identity

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call `listener` with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: SessionState) -> None:
        previous = self._state.status
        self._state = state
        if previous != state.status:
            logger.debug("Session %s -> %s", previous.value, state.status.value)
        for listener in list(self._listeners):
            listener(state)

    # ------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------

    def initialize(self) -> SessionState:
        """Restore the stored session. Runs once per process."""
        if self._initialized:
            raise RuntimeError("Session already initialized")
        self._initialized = True

        identity = self.store.load()
        if identity is None:
            self._set_state(SessionState.anonymous())
        else:
            logger.info("Restored session for %s (%s)", identity.email, identity.role.value)
            self._set_state(SessionState.authenticated(identity))
        return self._state

    async def login(self, email: str, password: str) -> AuthResult:
        """Sign in with an email and password; the identity is derived from the email."""
        seq = self._begin_attempt()
        await self._sleep(self.settings.login_delay_seconds)
        if not self._is_current(seq):
            logger.info("Discarding superseded login attempt for %s", email)
            return AuthResult(success=False, superseded=True)

        try:
            if not email or not password:
                raise MissingFieldsError("Please enter both email and password")
            if len(password) < self.settings.min_password_length:
                raise InvalidCredentialsError()
        except AuthValidationError as e:
            return self._fail(e)

        attributes = derive_identity_attributes(email)
        identity = Identity(
            id=new_identity_id(),
            name=attributes.name,
            email=email,
            role=attributes.role,
            department=attributes.department,
            company=attributes.company,
            created_at=datetime.now(timezone.utc),
        )
        return self._succeed(identity)

    async def signup(self, data: SignupData) -> AuthResult:
        """Create an account from the values the user entered."""
        seq = self._begin_attempt()
        await self._sleep(self.settings.signup_delay_seconds)
        if not self._is_current(seq):
            logger.info("Discarding superseded signup attempt for %s", data.email)
            return AuthResult(success=False, superseded=True)

        try:
            if not data.name or not data.email or not data.password:
                raise MissingFieldsError()
            if len(data.password) < self.settings.min_password_length:
                raise WeakPasswordError(
                    f"Password must be at least {self.settings.min_password_length} characters long"
                )
        except AuthValidationError as e:
            return self._fail(e)

        identity = Identity(
            id=new_identity_id(),
            name=data.name,
            email=data.email,
            role=data.role,
            department=data.department or None,
            company=data.company or None,
            phone=data.phone or None,
            created_at=datetime.now(timezone.utc),
        )
        return self._succeed(identity)

    def logout(self) -> None:
        """Forget the session. Attempts still waiting on their delay are dropped."""
        self._attempt_seq += 1
        self.store.clear()
        if self.identity is not None:
            logger.info("Signed out %s", self.identity.email)
        self._set_state(SessionState.anonymous())

    def clear_error(self) -> None:
        if self._state.status == SessionStatus.error:
            self._set_state(SessionState.anonymous())

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _begin_attempt(self) -> int:
        self._attempt_seq += 1
        if self._state.is_authenticated:
            # A new attempt replaces the current session, stored copy included
            self.store.clear()
        self._set_state(SessionState.authenticating())
        return self._attempt_seq

    def _is_current(self, seq: int) -> bool:
        return seq == self._attempt_seq

    def _succeed(self, identity: Identity) -> AuthResult:
        self.store.save(identity)
        logger.info("Signed in %s as %s", identity.email, identity.role.value)
        self._set_state(SessionState.authenticated(identity))
        return AuthResult(success=True, identity=identity)

    def _fail(self, error: AuthValidationError) -> AuthResult:
        logger.info("Authentication rejected: %s", error.message)
        self._set_state(SessionState.failed(error.message))
        return AuthResult(success=False, error=error.message, error_code=error.code)

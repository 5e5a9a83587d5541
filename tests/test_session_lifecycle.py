from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from portal.core.config import Settings
from portal.schemas.schemas import SessionState, SessionStatus, SignupData, UserRole
from portal.services.session_service import AuthSession
from portal.services.session_store import SessionStore

from .conftest import ManualClock, no_delay


def test_initialize_without_stored_session_is_anonymous(store: SessionStore, settings: Settings) -> None:
    session = AuthSession(store, settings, sleep=no_delay)
    assert session.state.status == SessionStatus.loading
    assert session.is_loading

    state = session.initialize()

    assert state.status == SessionStatus.anonymous
    assert not session.is_loading
    assert session.identity is None


@pytest.mark.anyio
async def test_initialize_restores_stored_session(store: SessionStore, settings: Settings) -> None:
    first = AuthSession(store, settings, sleep=no_delay)
    first.initialize()
    result = await first.login("priya.sharma@tcs.com", "secret123")

    restarted = AuthSession(store, settings, sleep=no_delay)
    restarted.initialize()

    assert restarted.is_authenticated
    assert restarted.identity == result.identity


def test_initialize_with_corrupt_record_is_anonymous_and_clears_it(store: SessionStore, settings: Settings) -> None:
    store.write_raw('{"id": 42, "role": []}')
    session = AuthSession(store, settings, sleep=no_delay)

    assert session.initialize().status == SessionStatus.anonymous
    assert store.load() is None
    assert store.read_raw() is None


def test_initialize_runs_once(auth_session: AuthSession) -> None:
    with pytest.raises(RuntimeError):
        auth_session.initialize()


@pytest.mark.anyio
async def test_login_derives_identity_and_persists(auth_session: AuthSession, store: SessionStore) -> None:
    before = datetime.now(timezone.utc)
    result = await auth_session.login("priya.sharma@tcs.com", "secret123")

    assert result.success
    identity = result.identity
    assert identity.name == "Priya Sharma"
    assert identity.email == "priya.sharma@tcs.com"
    assert identity.role == UserRole.employer
    assert identity.company == "Tata Consultancy Services"
    assert identity.department is None
    assert identity.created_at >= before
    assert identity.id

    assert auth_session.state == SessionState.authenticated(identity)
    assert auth_session.error is None
    assert store.load() == identity


@pytest.mark.anyio
async def test_login_always_re_derives(auth_session: AuthSession, store: SessionStore) -> None:
    first = (await auth_session.login("asha@cs.university.edu", "secret123")).identity
    second = (await auth_session.login("asha@cs.university.edu", "secret123")).identity

    assert first.id != second.id
    assert store.load().id == second.id


@pytest.mark.anyio
@pytest.mark.parametrize("email, password", [("", "secret123"), ("bob@x.com", ""), ("", "")])
async def test_login_missing_fields(auth_session: AuthSession, store: SessionStore, email: str, password: str) -> None:
    result = await auth_session.login(email, password)

    assert not result.success
    assert result.error == "Please enter both email and password"
    assert result.error_code == "missing_fields"
    assert auth_session.state.status == SessionStatus.error
    assert auth_session.identity is None
    assert store.load() is None


@pytest.mark.anyio
@pytest.mark.parametrize("email", ["bob@x.com", "not-an-email", "@", "admin@admin.admin"])
@pytest.mark.parametrize("password", ["a", "12345", "     "])
async def test_short_password_always_gives_invalid_credentials(auth_session: AuthSession, email: str, password: str) -> None:
    result = await auth_session.login(email, password)

    assert result.error == "Invalid credentials"
    assert result.error_code == "invalid_credentials"
    assert auth_session.error == "Invalid credentials"
    assert auth_session.identity is None


@pytest.mark.anyio
async def test_failed_login_after_success_drops_identity(auth_session: AuthSession, store: SessionStore) -> None:
    await auth_session.login("bob@x.com", "secret123")
    await auth_session.login("bob@x.com", "123")

    assert auth_session.identity is None
    assert auth_session.state.status == SessionStatus.error
    # The new attempt replaced the old session in storage as well
    assert store.load() is None
    assert store.read_raw() is None


@pytest.mark.anyio
async def test_failed_login_after_success_stays_signed_out_after_restart(store: SessionStore, settings: Settings) -> None:
    first = AuthSession(store, settings, sleep=no_delay)
    first.initialize()
    await first.login("bob@x.com", "secret123")
    await first.login("bob@x.com", "123")

    restarted = AuthSession(store, settings, sleep=no_delay)

    assert restarted.initialize() == SessionState.anonymous()
    assert restarted.identity is None


@pytest.mark.anyio
async def test_login_passes_through_authenticating(store: SessionStore, settings: Settings) -> None:
    clock = ManualClock()
    session = AuthSession(store, settings, sleep=clock.sleep)
    session.initialize()

    task = asyncio.create_task(session.login("bob@x.com", "secret123"))
    await asyncio.sleep(0)
    assert session.state.status == SessionStatus.authenticating
    assert session.is_loading

    clock.release(0)
    result = await task

    assert result.success
    assert not session.is_loading


@pytest.mark.anyio
async def test_login_clears_previous_error(auth_session: AuthSession) -> None:
    await auth_session.login("bob@x.com", "1")
    assert auth_session.error is not None

    await auth_session.login("bob@x.com", "secret123")

    assert auth_session.error is None
    assert auth_session.is_authenticated


@pytest.mark.anyio
async def test_signup_uses_supplied_fields(auth_session: AuthSession, store: SessionStore) -> None:
    data = SignupData(
        name="Admin Person",
        email="careers@tcs.com",
        password="secret123",
        confirm_password="secret123",
        role=UserRole.student,
        department="Mechanical",
        phone="555-0100",
    )

    result = await auth_session.signup(data)

    assert result.success
    identity = result.identity
    # No derivation: the email would otherwise suggest placement-officer
    assert identity.role == UserRole.student
    assert identity.name == "Admin Person"
    assert identity.department == "Mechanical"
    assert identity.company is None
    assert identity.phone == "555-0100"
    assert store.load() == identity


@pytest.mark.anyio
@pytest.mark.parametrize(
    "data",
    [
        SignupData(name="", email="a@b.com", password="secret123"),
        SignupData(name="A", email="", password="secret123"),
        SignupData(name="A", email="a@b.com", password=""),
    ],
)
async def test_signup_missing_fields(auth_session: AuthSession, data: SignupData) -> None:
    result = await auth_session.signup(data)

    assert result.error == "Please fill in all required fields"
    assert auth_session.state.status == SessionStatus.error


@pytest.mark.anyio
async def test_signup_short_password(auth_session: AuthSession, store: SessionStore) -> None:
    result = await auth_session.signup(SignupData(name="A", email="a@b.com", password="12345"))

    assert result.error == "Password must be at least 6 characters long"
    assert result.error_code == "weak_password"
    assert store.load() is None


@pytest.mark.anyio
async def test_signup_ids_are_unique(auth_session: AuthSession) -> None:
    data = SignupData(name="A", email="a@b.com", password="secret123")
    ids = {(await auth_session.signup(data)).identity.id for _ in range(20)}

    assert len(ids) == 20


@pytest.mark.anyio
async def test_clear_error_only_acts_on_error_state(auth_session: AuthSession) -> None:
    auth_session.clear_error()
    assert auth_session.state.status == SessionStatus.anonymous

    await auth_session.login("bob@x.com", "1")
    auth_session.clear_error()
    assert auth_session.state == SessionState.anonymous()

    await auth_session.login("bob@x.com", "secret123")
    auth_session.clear_error()
    assert auth_session.is_authenticated


@pytest.mark.anyio
async def test_logout_clears_state_and_storage(auth_session: AuthSession, store: SessionStore) -> None:
    await auth_session.login("bob@x.com", "secret123")

    auth_session.logout()

    assert auth_session.state == SessionState.anonymous()
    assert store.load() is None

    auth_session.logout()
    assert auth_session.state == SessionState.anonymous()


@pytest.mark.anyio
async def test_listeners_receive_every_state(auth_session: AuthSession) -> None:
    seen = []
    unsubscribe = auth_session.subscribe(lambda state: seen.append(state.status))

    await auth_session.login("bob@x.com", "secret123")
    auth_session.logout()
    unsubscribe()
    await auth_session.login("bob@x.com", "secret123")

    assert seen == [SessionStatus.authenticating, SessionStatus.authenticated, SessionStatus.anonymous]


@pytest.mark.anyio
async def test_latest_requested_login_wins_even_if_it_resolves_first(store: SessionStore, settings: Settings) -> None:
    clock = ManualClock()
    session = AuthSession(store, settings, sleep=clock.sleep)
    session.initialize()

    task_a = asyncio.create_task(session.login("alice@infosys.com", "secret123"))
    await asyncio.sleep(0)
    task_b = asyncio.create_task(session.login("bob@wipro.com", "secret123"))
    await asyncio.sleep(0)

    clock.release(1)
    result_b = await task_b
    clock.release(0)
    result_a = await task_a

    assert result_b.success
    assert result_a.superseded and not result_a.success
    assert session.identity.email == "bob@wipro.com"
    assert store.load().email == "bob@wipro.com"


@pytest.mark.anyio
async def test_superseded_attempt_does_not_overwrite_when_it_resolves_last(store: SessionStore, settings: Settings) -> None:
    clock = ManualClock()
    session = AuthSession(store, settings, sleep=clock.sleep)
    session.initialize()

    task_a = asyncio.create_task(session.login("alice@infosys.com", "secret123"))
    await asyncio.sleep(0)
    task_b = asyncio.create_task(session.login("bob@wipro.com", "1"))
    await asyncio.sleep(0)

    clock.release(0)
    result_a = await task_a
    assert session.state.status == SessionStatus.authenticating
    clock.release(1)
    result_b = await task_b

    assert result_a.superseded
    assert result_b.error == "Invalid credentials"
    assert session.identity is None
    assert store.load() is None


@pytest.mark.anyio
async def test_logout_cancels_attempt_in_flight(store: SessionStore, settings: Settings) -> None:
    clock = ManualClock()
    session = AuthSession(store, settings, sleep=clock.sleep)
    session.initialize()

    task = asyncio.create_task(session.login("bob@x.com", "secret123"))
    await asyncio.sleep(0)
    session.logout()
    clock.release(0)
    result = await task

    assert result.superseded
    assert session.state == SessionState.anonymous()
    assert store.load() is None


@pytest.mark.anyio
async def test_sessions_are_independent(tmp_path) -> None:
    from portal.db.database import build_engine, build_session_factory

    def make(name: str) -> AuthSession:
        settings = Settings(session_db_url=f"sqlite:///{tmp_path / name}")
        engine = build_engine(settings.session_db_url)
        store = SessionStore(build_session_factory(engine), settings.session_storage_key)
        store.init_schema()
        session = AuthSession(store, settings, sleep=no_delay)
        session.initialize()
        return session

    one, two = make("one.sqlite3"), make("two.sqlite3")
    await one.login("bob@x.com", "secret123")

    assert one.is_authenticated
    assert not two.is_authenticated

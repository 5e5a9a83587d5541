from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portal.core.config import Settings
from portal.db.database import build_engine, build_session_factory
from portal.services.session_service import AuthSession
from portal.services.session_store import SessionStore


class ManualClock:
    """Sleep replacement whose delays only finish when a test releases them."""

    def __init__(self) -> None:
        self.pending: List[asyncio.Future] = []

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        await future

    def release(self, index: int) -> None:
        self.pending[index].set_result(None)


async def no_delay(seconds: float) -> None:
    await asyncio.sleep(0)


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        session_db_url=f"sqlite:///{tmp_path / 'session.sqlite3'}",
        login_delay_seconds=0,
        signup_delay_seconds=0,
    )


@pytest.fixture()
def store(settings: Settings) -> SessionStore:
    engine = build_engine(settings.session_db_url)
    session_store = SessionStore(build_session_factory(engine), settings.session_storage_key)
    session_store.init_schema()
    yield session_store
    engine.dispose()


@pytest.fixture()
def auth_session(store: SessionStore, settings: Settings) -> AuthSession:
    session = AuthSession(store, settings, sleep=no_delay)
    session.initialize()
    return session

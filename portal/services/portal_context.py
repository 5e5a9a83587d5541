"""
Portal Context - one session, one router, one keyboard, wired together.

Each FastAPI app (and each test) builds its own context, so independent
portals never share session state.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from portal.core.config import Settings
from portal.db.database import build_engine, build_session_factory
from portal.services.navigation_service import KeyboardDispatcher, ViewRouter
from portal.services.session_service import AuthSession, Sleep
from portal.services.session_store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class PortalContext:
    settings: Settings
    engine: Engine
    store: SessionStore
    session: AuthSession
    keyboard: KeyboardDispatcher
    router: ViewRouter

    def start(self):
        """Create the slot table and restore any stored session."""
        self.store.init_schema()
        state = self.session.initialize()
        logger.info("Portal session ready (%s)", state.status.value)
        return state

    def close(self) -> None:
        self.router.unmount()
        self.engine.dispose()


def build_portal(settings: Settings, sleep: Optional[Sleep] = None) -> PortalContext:
    engine = build_engine(settings.session_db_url, echo=settings.debug)
    store = SessionStore(build_session_factory(engine), settings.session_storage_key)
    session = AuthSession(store, settings, sleep=sleep or asyncio.sleep)
    keyboard = KeyboardDispatcher()
    router = ViewRouter(
        keyboard,
        default_view=settings.default_view,
        back_shortcut=settings.back_shortcut,
    )
    # Router follows the session: mounted while signed in, discarded on logout
    session.subscribe(router.on_session_change)

    return PortalContext(
        settings=settings,
        engine=engine,
        store=store,
        session=session,
        keyboard=keyboard,
        router=router,
    )

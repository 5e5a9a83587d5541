from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create the engine backing the session store.

    SQLite connections are shared with the ASGI test client thread,
    so same-thread checking is turned off for them.
    """
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker:
    # Session factory
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_session(session_factory: sessionmaker):
    """
    Context manager for database sessions.
    Usage:
        with get_db_session(factory) as db:
            db.execute(text("SELECT * FROM session_slots"))
    """
    session: Session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def check_database_connection(session_factory: sessionmaker) -> bool:
    """
    Test if the session database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session(session_factory) as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning("Session database connection failed: %s", e)
        return False

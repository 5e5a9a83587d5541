"""
Database module - SQLAlchemy engine and session helpers for the session store.
"""
from portal.db.database import build_engine, build_session_factory, get_db_session, check_database_connection

__all__ = [
    "build_engine",
    "build_session_factory",
    "get_db_session",
    "check_database_connection"
]

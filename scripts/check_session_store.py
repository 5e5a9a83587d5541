#!/usr/bin/env python3
"""
Session Store Check Script

Run this to verify the session database is reachable and see what the
persisted slot currently holds. A corrupt record is reported and removed
(the same thing the app does on startup).

Usage: python scripts/check_session_store.py [--clear]
"""
import sys
sys.path.insert(0, '.')

from portal.core.config import get_settings
from portal.db.database import build_engine, build_session_factory, check_database_connection
from portal.services.session_store import SessionStore


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACEMENT PORTAL - SESSION STORE CHECK")
    print("=" * 50)

    engine = build_engine(settings.session_db_url)
    factory = build_session_factory(engine)
    store = SessionStore(factory, settings.session_storage_key)

    # Test database
    print("\n[1] Testing session database...")
    print(f"    URL: {settings.session_db_url}")
    if not check_database_connection(factory):
        print("    ❌ Session database: FAILED")
        return 1
    print("    ✅ Session database: CONNECTED")
    store.init_schema()

    # Inspect slot
    print("\n[2] Reading session slot...")
    print(f"    Key: {settings.session_storage_key}")
    raw = store.read_raw()
    if raw is None:
        print("    ⚠️  Slot is empty (nobody signed in)")
    else:
        identity = store.load()
        if identity is None:
            print("    ❌ Stored record was corrupt and has been removed")
        else:
            print(f"    ✅ {identity.name} <{identity.email}> as {identity.role.value}")
            print(f"       Created: {identity.created_at.isoformat()}")

    if "--clear" in sys.argv[1:]:
        print("\n[3] Clearing session slot...")
        store.clear()
        print("    ✅ Cleared")

    print("\n" + "=" * 50)
    print("Session store check complete!")
    print("=" * 50)
    engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())

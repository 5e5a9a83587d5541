"""
Session Store - one persisted identity slot.

Table in the session database:
    session_slots(slot_key, payload, updated_at)

Only one row is ever used, keyed by the configured storage key. The payload
is the flat identity record serialized as JSON:
    {id, name, email, role, department?, company?, phone?, createdAt}

A payload that cannot be decoded is treated as "no session" and deleted,
so a corrupt record never breaks more than one startup.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from portal.core.errors import SessionCorruptedError
from portal.db.database import get_db_session
from portal.schemas.schemas import Identity

logger = logging.getLogger(__name__)


# ============================================================
# CODEC
# ============================================================

def encode_identity(identity: Identity) -> str:
    """Serialize an identity to the persisted JSON record."""
    return json.dumps(identity.to_record())


def decode_identity(payload: str) -> Identity:
    """
    Parse a persisted record back into an Identity.

    Raises SessionCorruptedError on anything that is not a valid record.
    """
    try:
        record = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise SessionCorruptedError(f"Stored session is not JSON: {exc}") from exc

    if not isinstance(record, dict):
        raise SessionCorruptedError("Stored session is not an object")

    try:
        identity = Identity.model_validate(record)
    except ValidationError as exc:
        raise SessionCorruptedError(f"Stored session is invalid: {exc}") from exc

    if identity.created_at.tzinfo is None:
        identity = identity.model_copy(update={"created_at": identity.created_at.replace(tzinfo=timezone.utc)})
    return identity


# ============================================================
# STORE
# ============================================================

class SessionStore:
    """
    Durable single-slot persistence for the signed-in identity.
    """

    def __init__(self, session_factory: sessionmaker, storage_key: str):
        self.session_factory = session_factory
        self.storage_key = storage_key

    def init_schema(self) -> None:
        """Create the slot table if it does not exist yet."""
        with get_db_session(self.session_factory) as db:
            db.execute(text("""
                CREATE TABLE IF NOT EXISTS session_slots (
                    slot_key VARCHAR(200) PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at VARCHAR(40) NOT NULL
                )
            """))

    def save(self, identity: Identity) -> None:
        """Replace the slot with `identity`."""
        self.write_raw(encode_identity(identity))
        logger.debug("Saved session for %s under %s", identity.email, self.storage_key)

    def write_raw(self, payload: str) -> None:
        """Put an arbitrary payload in the slot (used by save and by tooling)."""
        with get_db_session(self.session_factory) as db:
            db.execute(
                text("DELETE FROM session_slots WHERE slot_key = :key"),
                {"key": self.storage_key}
            )
            db.execute(
                text("""
                    INSERT INTO session_slots (slot_key, payload, updated_at)
                    VALUES (:key, :payload, :updated_at)
                """),
                {
                    "key": self.storage_key,
                    "payload": payload,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                }
            )

    def read_raw(self) -> Optional[str]:
        with get_db_session(self.session_factory) as db:
            result = db.execute(
                text("SELECT payload FROM session_slots WHERE slot_key = :key"),
                {"key": self.storage_key}
            )
            row = result.fetchone()
        return row[0] if row else None

    def load(self) -> Optional[Identity]:
        """
        Return the stored identity, or None when the slot is empty.

        Corrupt payloads are logged, removed, and reported as None.
        """
        payload = self.read_raw()
        if payload is None:
            return None

        try:
            return decode_identity(payload)
        except SessionCorruptedError as e:
            logger.warning("Discarding stored session %s: %s", self.storage_key, e)
            self.clear()
            return None

    def clear(self) -> None:
        """Empty the slot. Safe to call when it is already empty."""
        with get_db_session(self.session_factory) as db:
            db.execute(
                text("DELETE FROM session_slots WHERE slot_key = :key"),
                {"key": self.storage_key}
            )

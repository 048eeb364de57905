from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from poker_control.domain import GameState
from poker_control.storage.document import decode_state, encode_state
from poker_control.storage.models import StoredDocument


class StateRepository:
    """Stores the whole game state as one JSON document under a fixed key."""

    def __init__(self, session_factory: sessionmaker[Session], storage_key: str) -> None:
        self._session_factory = session_factory
        self.storage_key = storage_key

    def load_payload(self) -> str | None:
        with self._session_factory() as db:
            row = db.get(StoredDocument, self.storage_key)
            return row.payload if row is not None else None

    def load(self) -> GameState | None:
        """Return the stored state, ``None`` when nothing is stored.

        Raises ``PersistenceCorrupt`` when the stored document is unreadable.
        """
        payload = self.load_payload()
        if payload is None:
            return None
        return decode_state(payload)

    def save(self, state: GameState) -> None:
        payload = encode_state(state)
        with self._session_factory() as db:
            row = db.get(StoredDocument, self.storage_key)
            if row is None:
                db.add(StoredDocument(key=self.storage_key, payload=payload))
            else:
                row.payload = payload
            db.commit()

    def clear(self) -> None:
        with self._session_factory() as db:
            db.query(StoredDocument).filter(StoredDocument.key == self.storage_key).delete(
                synchronize_session=False
            )
            db.commit()

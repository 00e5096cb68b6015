"""Session store adapters.

The engine only needs ``get(key)`` and ``put(key, data)`` over serialized
records. Both adapters also expose a version number per key so the engine can
optionally run a compare-and-swap loop (``get_versioned`` / ``put_if_version``).
"""

import logging
import threading
from typing import Dict, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cleaning_party.errors import StoreError

logger = logging.getLogger(__name__)


class MemorySessionStore:
    """Process-local store, guarded by a re-entrant lock."""

    def __init__(self):
        self._records: Dict[str, Tuple[str, int]] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        return self.get_versioned(key)[0]

    def get_versioned(self, key: str) -> Tuple[Optional[str], Optional[int]]:
        with self._lock:
            entry = self._records.get(key)
            if entry is None:
                return None, None
            return entry

    def put(self, key: str, data: str) -> None:
        with self._lock:
            _, version = self._records.get(key, (None, 0))
            self._records[key] = (data, version + 1)

    def put_if_version(self, key: str, data: str, expected_version: Optional[int]) -> bool:
        with self._lock:
            current = self._records.get(key)
            current_version = current[1] if current else None
            if current_version != expected_version:
                return False
            self._records[key] = (data, (expected_version or 0) + 1)
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._records.pop(key, None) is not None


class SqlSessionStore:
    """Store backed by the ``game_record`` table. Needs an app context."""

    def __init__(self, db):
        self.db = db

    def _model(self):
        from cleaning_party.models import GameRecord
        return GameRecord

    def get(self, key: str) -> Optional[str]:
        return self.get_versioned(key)[0]

    def get_versioned(self, key: str) -> Tuple[Optional[str], Optional[int]]:
        try:
            record = self.db.session.get(self._model(), key, populate_existing=True)
        except SQLAlchemyError as exc:
            self._fail('get', key, exc)
        if record is None:
            return None, None
        return record.data, record.version

    def put(self, key: str, data: str) -> None:
        GameRecord = self._model()
        try:
            record = self.db.session.get(GameRecord, key, populate_existing=True)
            if record is None:
                self.db.session.add(GameRecord(key=key, data=data, version=1))
            else:
                record.data = data
                record.version = (record.version or 0) + 1
            self.db.session.commit()
        except IntegrityError:
            # Someone inserted the same key first; last write still wins.
            self.db.session.rollback()
            self._overwrite(key, data)
        except SQLAlchemyError as exc:
            self._fail('put', key, exc)

    def _overwrite(self, key, data):
        GameRecord = self._model()
        try:
            self.db.session.execute(
                update(GameRecord)
                .where(GameRecord.key == key)
                .values(data=data, version=GameRecord.version + 1)
            )
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self._fail('put', key, exc)

    def put_if_version(self, key: str, data: str, expected_version: Optional[int]) -> bool:
        GameRecord = self._model()
        try:
            if expected_version is None:
                self.db.session.add(GameRecord(key=key, data=data, version=1))
                self.db.session.commit()
                return True
            result = self.db.session.execute(
                update(GameRecord)
                .where(GameRecord.key == key, GameRecord.version == expected_version)
                .values(data=data, version=expected_version + 1)
            )
            self.db.session.commit()
            return result.rowcount == 1
        except IntegrityError:
            self.db.session.rollback()
            return False
        except SQLAlchemyError as exc:
            self._fail('put', key, exc)

    def delete(self, key: str) -> bool:
        try:
            record = self.db.session.get(self._model(), key)
            if record is None:
                return False
            self.db.session.delete(record)
            self.db.session.commit()
            return True
        except SQLAlchemyError as exc:
            self._fail('delete', key, exc)

    def _fail(self, op, key, exc):
        self.db.session.rollback()
        logger.error(f"[store-error] op={op} key={key} error={exc}")
        raise StoreError('Session store unavailable') from exc

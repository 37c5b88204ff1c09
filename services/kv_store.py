from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from db_models.kv_entry import KVEntry
from typing import Any, Optional

class KVStore:
    """Key-value persistence over the kv_store table; values are JSON documents"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None"""
        entry = self.db.query(KVEntry).filter(KVEntry.key == key).first()
        if entry is None:
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any existing value"""
        self.db.merge(KVEntry(key=key, value=value))
        try:
            self.db.commit()
        except IntegrityError:
            # Another writer inserted the key first; overwrite its row
            self.db.rollback()
            self.db.merge(KVEntry(key=key, value=value))
            self.db.commit()

    def delete(self, key: str) -> bool:
        """Remove key; returns whether something was deleted"""
        deleted = self.db.query(KVEntry).filter(KVEntry.key == key).delete()
        self.db.commit()
        return deleted > 0

    def count(self, prefix: str = "") -> int:
        """Number of stored keys, optionally restricted to a prefix"""
        query = self.db.query(KVEntry)
        if prefix:
            query = query.filter(KVEntry.key.startswith(prefix))
        return query.count()

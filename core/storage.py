# core/storage.py
import os
import sqlite3
import datetime
import pytz
from typing import Optional, Protocol

from .logger import get_logger

logger = get_logger(__name__)

DB_PATH = os.getenv("DB_PATH", "./data/cart_state.sqlite3")


def now_utc_iso() -> str:
    return datetime.datetime.now(tz=pytz.UTC).isoformat()


class KeyValueStorage(Protocol):
    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, value: str) -> None: ...


class SQLiteStorage:
    """
    Durable key-value storage backed by a single SQLite file.
    Each write replaces the whole value stored under the key.
    """

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self.ensure_db()

    def _connect(self):
        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def ensure_db(self):
        with self._connect() as con:
            cur = con.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT
                )
            """
            )
            con.commit()

    def read(self, key: str) -> Optional[str]:
        with self._connect() as con:
            cur = con.cursor()
            cur.execute("SELECT value FROM kv WHERE key=?", (key,))
            row = cur.fetchone()
        return row[0] if row else None

    def read_updated_at(self, key: str) -> Optional[str]:
        with self._connect() as con:
            cur = con.cursor()
            cur.execute("SELECT updated_at FROM kv WHERE key=?", (key,))
            row = cur.fetchone()
        return row[0] if row else None

    def write(self, key: str, value: str) -> None:
        with self._connect() as con:
            cur = con.cursor()
            cur.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?,?,?)
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at=excluded.updated_at
            """,
                (key, value, now_utc_iso()),
            )
            con.commit()
        logger.debug("Stored %d bytes under %s", len(value), key)

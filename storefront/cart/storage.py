from __future__ import annotations

import os
import sqlite3
from typing import Dict, Optional, Protocol


class CartStorage(Protocol):
    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, value: str) -> None: ...


class MemoryCartStorage:
    def __init__(self) -> None:
        self.data: Dict[str, str] = {}

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, value: str) -> None:
        self.data[key] = value


class SqliteCartStorage:
    """Key/value file on the client side, one row per storage key."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        dirname = os.path.dirname(self.db_path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def _init_db(self) -> None:
        conn = self._connect()
        try:
            conn.execute("CREATE TABLE IF NOT EXISTS storage(key TEXT PRIMARY KEY, value TEXT NOT NULL)")
            conn.commit()
        finally:
            conn.close()

    def load(self, key: str) -> Optional[str]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def save(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            conn.execute(
                "INSERT INTO storage(key, value) VALUES(?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

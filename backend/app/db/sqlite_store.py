# backend/app/db/sqlite_store.py

import sqlite3
import json
import time
import uuid
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from app.core.config_loader import settings
from app.core.logger import logger


# Retry configuration
MAX_RETRIES = 5
RETRY_DELAY = 0.1  # 100ms


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteStore:
    """Users and saved trips. Every write touches a single row."""

    def __init__(self, db_path: Optional[str] = None):
        path = Path(db_path or settings.DB_PATH)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = str(path)

        self.conn = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            timeout=30.0
        )
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA synchronous=NORMAL")
        self.conn.execute("PRAGMA busy_timeout=30000")
        self._init_tables()

    def _execute_with_retry(self, operation, *args, **kwargs):
        """Execute database operation with retry logic for handling locked database"""
        for attempt in range(MAX_RETRIES):
            try:
                return operation(*args, **kwargs)
            except sqlite3.OperationalError as e:
                if "locked" in str(e).lower() and attempt < MAX_RETRIES - 1:
                    logger.warning(f"Database locked, retry {attempt + 1}/{MAX_RETRIES}")
                    time.sleep(RETRY_DELAY * (attempt + 1))
                    continue
                raise

    # ----------------------------------------------------------------------
    # CREATE TABLES
    # ----------------------------------------------------------------------
    def _init_tables(self):
        cur = self.conn.cursor()

        cur.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT UNIQUE,
            full_name TEXT,
            hashed_password TEXT,
            created_at TEXT
        );
        """)

        cur.execute("""
        CREATE TABLE IF NOT EXISTS trips (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            destination TEXT NOT NULL,
            title TEXT NOT NULL,
            itinerary_json TEXT NOT NULL,
            is_public INTEGER NOT NULL DEFAULT 0,
            created_at TEXT
        );
        """)

        cur.execute("CREATE INDEX IF NOT EXISTS idx_trips_user ON trips(user_id);")

        self.conn.commit()

    def clear(self):
        """Drop every row; used by tests and local resets."""
        cur = self.conn.cursor()
        cur.execute("DELETE FROM trips")
        cur.execute("DELETE FROM users")
        self.conn.commit()

    # ----------------------------------------------------------------------
    # USERS
    # ----------------------------------------------------------------------
    def create_user(self, email: str, full_name: str, hashed_password: str) -> str:
        user_id = str(uuid.uuid4())

        def _create_user():
            cur = self.conn.cursor()
            cur.execute("""
            INSERT INTO users (id, email, full_name, hashed_password, created_at)
            VALUES (?, ?, ?, ?, ?)
            """, (user_id, email, full_name, hashed_password, _utcnow()))
            self.conn.commit()
            return user_id

        return self._execute_with_retry(_create_user)

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM users WHERE email = ?", (email,))
        row = cur.fetchone()
        return dict(row) if row else None

    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        row = cur.fetchone()
        return dict(row) if row else None

    # ----------------------------------------------------------------------
    # TRIPS
    # ----------------------------------------------------------------------
    @staticmethod
    def _trip_from_row(row: sqlite3.Row) -> Dict[str, Any]:
        return {
            "id": row["id"],
            "user_id": row["user_id"],
            "destination": row["destination"],
            "title": row["title"],
            "itinerary": json.loads(row["itinerary_json"]),
            "is_public": bool(row["is_public"]),
            "created_at": row["created_at"],
        }

    def create_trip(self, user_id: str, destination: str, title: str,
                    itinerary: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a trip. New trips always start private."""
        trip_id = str(uuid.uuid4())

        def _create_trip():
            cur = self.conn.cursor()
            cur.execute("""
            INSERT INTO trips (id, user_id, destination, title, itinerary_json, is_public, created_at)
            VALUES (?, ?, ?, ?, ?, 0, ?)
            """, (trip_id, user_id, destination, title, json.dumps(itinerary), _utcnow()))
            self.conn.commit()

        self._execute_with_retry(_create_trip)
        return self.get_trip(trip_id)

    def get_trip(self, trip_id: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM trips WHERE id = ?", (trip_id,))
        row = cur.fetchone()
        return self._trip_from_row(row) if row else None

    def list_trips(self, user_id: str) -> List[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("""
        SELECT * FROM trips
        WHERE user_id = ?
        ORDER BY created_at DESC, rowid DESC
        """, (user_id,))
        return [self._trip_from_row(r) for r in cur.fetchall()]

    def count_trips(self, user_id: str) -> int:
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*) AS count FROM trips WHERE user_id = ?", (user_id,))
        return cur.fetchone()["count"]

    def set_trip_public(self, trip_id: str, user_id: str, is_public: bool) -> Optional[Dict[str, Any]]:
        def _set_public():
            cur = self.conn.cursor()
            cur.execute("""
            UPDATE trips SET is_public = ?
            WHERE id = ? AND user_id = ?
            """, (1 if is_public else 0, trip_id, user_id))
            self.conn.commit()
            return cur.rowcount

        if not self._execute_with_retry(_set_public):
            return None
        return self.get_trip(trip_id)

    def delete_trip(self, trip_id: str, user_id: str) -> int:
        """Delete by id *and* owner; a foreign id simply matches nothing."""
        def _delete_trip():
            cur = self.conn.cursor()
            cur.execute("DELETE FROM trips WHERE id = ? AND user_id = ?", (trip_id, user_id))
            self.conn.commit()
            return cur.rowcount

        return self._execute_with_retry(_delete_trip)


_store: Optional[SQLiteStore] = None


def get_store() -> SQLiteStore:
    global _store
    if _store is None:
        _store = SQLiteStore()
    return _store
